"""
Catalogo mercati derivati dalla griglia risultati.

Ogni mercato e' una voce dichiarativa (label, categoria, funzione di probabilita', parametri);
`generate_markets` scorre il catalogo una volta e prezza ogni voce (quota equa, quota
bookmaker, value). Le funzioni di probabilita' restituiscono percentuali 0-100.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from quantum_poisson.core.probabilities import outcome_split, poisson_pmf, total_goals
from quantum_poisson.models.schemas import MarketResult, MatchContext

FAIR_ODD_SENTINEL = 999.0
HIGH_PROB_THRESHOLD = 68.0

OU_THRESHOLDS = (0.5, 1.5, 2.5, 3.5, 4.5, 5.5, 6.5)
MULTIGOAL_RANGES = (
    (1, 2), (1, 3), (1, 4), (1, 5),
    (2, 3), (2, 4), (2, 5), (2, 6),
    (3, 4), (3, 5), (3, 6),
    (4, 5), (4, 6),
    (5, 6),
)
CORRECT_SCORE_MAX_GOALS = 5
CORRECT_SCORE_TOP = 25


@dataclass(frozen=True)
class MarketInputs:
    grid: np.ndarray
    lam_h: float
    lam_a: float
    p_home: float
    p_draw: float
    p_away: float

    def lam(self, side: str) -> float:
        return self.lam_h if side == "home" else self.lam_a

    def outcome(self, key: str) -> float:
        return {"1": self.p_home, "X": self.p_draw, "2": self.p_away}[key]

    def cell(self, i: int, j: int) -> float:
        n = self.grid.shape[0]
        if i >= n or j >= n:
            return 0.0
        return float(self.grid[i, j])


@dataclass(frozen=True)
class MarketSpec:
    label: str
    category: str
    prob: Callable[..., float]
    params: Tuple = ()

    def probability(self, m: MarketInputs) -> float:
        return float(self.prob(m, *self.params))


# --- funzioni di probabilita' (percentuali) ---

def _outcomes(m: MarketInputs, keys: str) -> float:
    return sum(m.outcome(k) for k in keys) * 100


def _draw_no_bet(m: MarketInputs, key: str) -> float:
    no_draw = m.p_home + m.p_away
    if no_draw <= 0:
        return 0.0
    return m.outcome(key) / no_draw * 100


def _under(m: MarketInputs, threshold: float) -> float:
    totals = total_goals(m.grid.shape[0])
    return float(m.grid[totals < threshold].sum()) * 100


def _over(m: MarketInputs, threshold: float) -> float:
    return 100 - _under(m, threshold)


def _btts_yes(m: MarketInputs) -> float:
    return (1 - poisson_pmf(m.lam_h, 0)) * (1 - poisson_pmf(m.lam_a, 0)) * 100


def _btts_no(m: MarketInputs) -> float:
    return 100 - _btts_yes(m)


def _multigoal(m: MarketInputs, lo: int, hi: int) -> float:
    totals = total_goals(m.grid.shape[0])
    return float(m.grid[(totals >= lo) & (totals <= hi)].sum()) * 100


def _correct_score(m: MarketInputs, i: int, j: int) -> float:
    return m.cell(i, j) * 100


def _handicap(m: MarketInputs, keys: str, cells: Sequence[Tuple[int, int]], sign: int, scale: float) -> float:
    # coefficienti empirici (85 / 95) per le linee -1.5 / +1.5
    base = sum(m.outcome(k) for k in keys)
    adj = sum(m.cell(i, j) for i, j in cells)
    return (base + sign * adj) * scale


def _win_to_nil(m: MarketInputs, side: str) -> float:
    if side == "home":
        return m.p_home * poisson_pmf(m.lam_a, 0) * 100
    return m.p_away * poisson_pmf(m.lam_h, 0) * 100


def _scores_both_halves(m: MarketInputs, side: str) -> float:
    return (1 - poisson_pmf(m.lam(side) / 2, 0)) ** 2 * 100


def _clean_sheet(m: MarketInputs, side: str) -> float:
    opponent = "away" if side == "home" else "home"
    return poisson_pmf(m.lam(opponent), 0) * 100


def _fixed(m: MarketInputs, pct: float) -> float:
    return pct


def _two_plus_goals(m: MarketInputs, side: str) -> float:
    lam = m.lam(side)
    return (1 - poisson_pmf(lam, 0) - poisson_pmf(lam, 1)) * 100


# --- catalogo ---

def _head_specs() -> List[MarketSpec]:
    specs = [
        MarketSpec("1", "Main", _outcomes, ("1",)),
        MarketSpec("X", "Main", _outcomes, ("X",)),
        MarketSpec("2", "Main", _outcomes, ("2",)),
        MarketSpec("1X", "DC", _outcomes, ("1X",)),
        MarketSpec("X2", "DC", _outcomes, ("X2",)),
        MarketSpec("12", "DC", _outcomes, ("12",)),
        MarketSpec("DNB 1", "DNB", _draw_no_bet, ("1",)),
        MarketSpec("DNB 2", "DNB", _draw_no_bet, ("2",)),
    ]
    for t in OU_THRESHOLDS:
        specs.append(MarketSpec(f"Under {t}", "Over/Under", _under, (t,)))
        specs.append(MarketSpec(f"Over {t}", "Over/Under", _over, (t,)))
    specs += [
        MarketSpec("BTTS Yes", "Goal/No Goal", _btts_yes),
        MarketSpec("BTTS No", "Goal/No Goal", _btts_no),
    ]
    for lo, hi in MULTIGOAL_RANGES:
        specs.append(MarketSpec(f"MG {lo}-{hi}", "Multigoal", _multigoal, (lo, hi)))
    return specs


def _tail_specs() -> List[MarketSpec]:
    return [
        MarketSpec("H. -1.5", "Asian Handicap", _handicap, ("1", ((1, 0), (2, 1), (3, 2)), -1, 85)),
        MarketSpec("H. -0.5", "Asian Handicap", _outcomes, ("1",)),
        MarketSpec("A. -1.5", "Asian Handicap", _handicap, ("2", ((0, 1), (1, 2), (2, 3)), -1, 85)),
        MarketSpec("A. -0.5", "Asian Handicap", _outcomes, ("2",)),
        MarketSpec("H. +0.5", "Asian Handicap", _outcomes, ("1X",)),
        MarketSpec("A. +0.5", "Asian Handicap", _outcomes, ("X2",)),
        MarketSpec("H. +1.5", "Asian Handicap", _handicap, ("1X", ((0, 1),), 1, 95)),
        MarketSpec("A. +1.5", "Asian Handicap", _handicap, ("X2", ((1, 0),), 1, 95)),
        MarketSpec("Win Nil H", "Specials", _win_to_nil, ("home",)),
        MarketSpec("Win Nil A", "Specials", _win_to_nil, ("away",)),
        MarketSpec("Score Both H", "Specials", _scores_both_halves, ("home",)),
        MarketSpec("Score Both A", "Specials", _scores_both_halves, ("away",)),
        MarketSpec("Clean Sheet H", "Specials", _clean_sheet, ("home",)),
        MarketSpec("Clean Sheet A", "Specials", _clean_sheet, ("away",)),
        # TODO: derivare Pari/Dispari dalla griglia (somma celle con i+j pari/dispari)
        MarketSpec("Pari", "Specials", _fixed, (50.0,)),
        MarketSpec("Dispari", "Specials", _fixed, (50.0,)),
        MarketSpec("H 1.5+ Goals", "Specials", _two_plus_goals, ("home",)),
        MarketSpec("A 1.5+ Goals", "Specials", _two_plus_goals, ("away",)),
    ]


HEAD_SPECS = _head_specs()
TAIL_SPECS = _tail_specs()


def correct_score_specs(grid: np.ndarray, max_goals: int = CORRECT_SCORE_MAX_GOALS,
                        top: int = CORRECT_SCORE_TOP) -> List[MarketSpec]:
    n = min(grid.shape[0], max_goals + 1)
    cells = [(i, j, float(grid[i, j])) for i in range(n) for j in range(n)]
    cells.sort(key=lambda c: c[2], reverse=True)
    return [MarketSpec(f"{i}-{j}", "Risultati Esatti", _correct_score, (i, j)) for i, j, _ in cells[:top]]


def market_catalog(grid: np.ndarray) -> List[MarketSpec]:
    return HEAD_SPECS + correct_score_specs(grid) + TAIL_SPECS


# --- pricing ---

def fair_odd(probability: float) -> float:
    return 100 / probability if probability > 0 else FAIR_ODD_SENTINEL


def _valid_odd(odd: object) -> Optional[float]:
    if odd is None:
        return None
    try:
        o = float(odd)
    except (TypeError, ValueError):
        return None
    if math.isnan(o) or o <= 0:
        return None
    return o


def price_market(
    label: str,
    category: str,
    probability: float,
    market_odds: Optional[Mapping[str, Optional[float]]] = None,
    high_prob_threshold: float = HIGH_PROB_THRESHOLD,
) -> MarketResult:
    bookie_odd = _valid_odd((market_odds or {}).get(label))
    value = (probability * bookie_odd) / 100 if bookie_odd is not None else None
    return MarketResult(
        label=label,
        category=category,
        probability=probability,
        fair_odd=fair_odd(probability),
        bookie_odd=bookie_odd,
        value=value,
        is_high_prob=probability > high_prob_threshold,
    )


def generate_markets(
    lam_h: float,
    lam_a: float,
    grid: np.ndarray,
    ctx: MatchContext,
    high_prob_threshold: float = HIGH_PROB_THRESHOLD,
) -> List[MarketResult]:
    p_home, p_draw, p_away = outcome_split(grid)
    m = MarketInputs(grid=grid, lam_h=lam_h, lam_a=lam_a, p_home=p_home, p_draw=p_draw, p_away=p_away)

    out: List[MarketResult] = []
    for spec in market_catalog(grid):
        out.append(price_market(spec.label, spec.category, spec.probability(m), ctx.market_odds, high_prob_threshold))
    return out


def markets_by_label(markets: List[MarketResult]) -> Dict[str, MarketResult]:
    return {mk.label: mk for mk in markets}
