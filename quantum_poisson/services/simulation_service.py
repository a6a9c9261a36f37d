from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from quantum_poisson.core.config import settings
from quantum_poisson.core.dc_params import get_rho
from quantum_poisson.core.errors import EngineInputError
from quantum_poisson.core.markets import generate_markets
from quantum_poisson.core.montecarlo import simulate
from quantum_poisson.core.probabilities import build_score_grid, build_half_time_grid, outcome_split, poisson_pmf
from quantum_poisson.core.rates import estimate
from quantum_poisson.models.schemas import (
    MatchContext,
    MonteCarloResult,
    OutcomeSplit,
    ScoringIntensities,
    SimulationSummary,
    TeamStats,
)
from quantum_poisson.services.input_service import apply_basic_mode

log = logging.getLogger(__name__)


def _split_pct(grid) -> OutcomeSplit:
    p_home, p_draw, p_away = outcome_split(grid)
    return OutcomeSplit(home_win=p_home * 100, draw=p_draw * 100, away_win=p_away * 100)


def estimate_rates(home: TeamStats, away: TeamStats, ctx: MatchContext) -> ScoringIntensities:
    rates = estimate(home, away, ctx)
    log.debug(
        "lambda %s=%.4f %s=%.4f",
        ctx.home_team, rates.home_lambda, ctx.away_team, rates.away_lambda,
    )
    return rates


def build_simulation(intensities: ScoringIntensities, ctx: MatchContext, rho: Optional[float] = None) -> SimulationSummary:
    lam_h = intensities.home_lambda
    lam_a = intensities.away_lambda
    if rho is None:
        rho = get_rho(settings.dc_params_path, settings.dc_rho)

    grid = build_score_grid(lam_h, lam_a, rho=rho, size=settings.grid_size)
    ht_grid = build_half_time_grid(
        lam_h,
        lam_a,
        rho=settings.ht_dc_rho,
        factor=settings.ht_lambda_factor,
        size=settings.ht_grid_size,
    )

    markets = generate_markets(lam_h, lam_a, grid, ctx, high_prob_threshold=settings.high_prob_threshold)
    log.debug("simulazione: %d mercati (rho=%.3f)", len(markets), rho)

    return SimulationSummary(
        home_lambda=lam_h,
        away_lambda=lam_a,
        full_time=_split_pct(grid),
        half_time=_split_pct(ht_grid),
        markets=markets,
    )


def single_poisson_probability(k: int, lam: float) -> float:
    if lam < 0:
        raise EngineInputError(f"lambda negativa non ammessa: {lam}")
    return poisson_pmf(lam, k)


def run_monte_carlo(lam_h: float, lam_a: float, trials: Optional[int] = None, seed: Optional[int] = None) -> MonteCarloResult:
    n = settings.mc_trials if trials is None else trials
    res = simulate(lam_h, lam_a, trials=n, seed=seed)
    log.info(
        "monte carlo %d trials: 1=%.2f X=%.2f 2=%.2f",
        res["trials"], res["home_win"], res["draw"], res["away_win"],
    )
    return MonteCarloResult(**res)


def compare_with_closed_form(summary: SimulationSummary, mc: MonteCarloResult) -> Dict[str, float]:
    """Scarto assoluto (punti percentuali) tra Monte Carlo e griglia analitica."""
    return {
        "home_win": abs(mc.home_win - summary.full_time.home_win),
        "draw": abs(mc.draw - summary.full_time.draw),
        "away_win": abs(mc.away_win - summary.full_time.away_win),
    }


def run_match_simulation(home: TeamStats, away: TeamStats, ctx: MatchContext, basic_mode: bool = False) -> SimulationSummary:
    if basic_mode:
        home, away, ctx = apply_basic_mode(home, away, ctx)
    rates = estimate_rates(home, away, ctx)
    return build_simulation(rates, ctx)


def update_bookmaker_odd(
    home: TeamStats,
    away: TeamStats,
    ctx: MatchContext,
    label: str,
    odd: Optional[float],
    basic_mode: bool = False,
) -> Tuple[MatchContext, SimulationSummary]:
    """Aggiorna una singola quota e ricalcola l'intero riepilogo (nessun ricalcolo parziale)."""
    odds = dict(ctx.market_odds)
    odds[label] = odd
    new_ctx = ctx.model_copy(update={"market_odds": odds})
    log.info("quota aggiornata %s=%s", label, odd)
    return new_ctx, run_match_simulation(home, away, new_ctx, basic_mode=basic_mode)
