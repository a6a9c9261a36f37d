"""Test the market catalog and pricing."""

import math

import numpy as np
import pytest

from quantum_poisson.core.markets import (
    FAIR_ODD_SENTINEL,
    correct_score_specs,
    fair_odd,
    generate_markets,
    market_catalog,
    markets_by_label,
    price_market,
)
from quantum_poisson.core.probabilities import build_score_grid, outcome_split
from quantum_poisson.models.schemas import MatchContext

LAM_H = 1.5
LAM_A = 1.0


@pytest.fixture
def grid():
    return build_score_grid(LAM_H, LAM_A)


@pytest.fixture
def markets(grid):
    return markets_by_label(generate_markets(LAM_H, LAM_A, grid, MatchContext()))


def test_catalog_size_and_unique_labels(grid):
    results = generate_markets(LAM_H, LAM_A, grid, MatchContext())
    labels = [m.label for m in results]
    assert len(results) == 81
    assert len(set(labels)) == len(labels)


def test_catalog_order_is_stable(grid):
    first = [m.label for m in generate_markets(LAM_H, LAM_A, grid, MatchContext())]
    second = [s.label for s in market_catalog(grid)]
    assert first == second
    assert first[:8] == ["1", "X", "2", "1X", "X2", "12", "DNB 1", "DNB 2"]
    assert first[-2:] == ["H 1.5+ Goals", "A 1.5+ Goals"]


def test_main_and_double_chance(markets, grid):
    p1, px, p2 = outcome_split(grid)
    assert markets["1"].probability == pytest.approx(p1 * 100)
    assert markets["X"].probability == pytest.approx(px * 100)
    assert markets["2"].probability == pytest.approx(p2 * 100)
    assert markets["1X"].probability == pytest.approx((p1 + px) * 100)
    assert markets["X2"].probability == pytest.approx((px + p2) * 100)
    assert markets["12"].probability == pytest.approx((p1 + p2) * 100)


def test_draw_no_bet_is_renormalised(markets, grid):
    p1, _, p2 = outcome_split(grid)
    assert markets["DNB 1"].probability == pytest.approx(p1 / (p1 + p2) * 100)
    assert markets["DNB 1"].probability + markets["DNB 2"].probability == pytest.approx(100)


@pytest.mark.parametrize("t", [0.5, 1.5, 2.5, 3.5, 4.5, 5.5, 6.5])
def test_over_under_complementary(markets, t):
    assert markets[f"Under {t}"].probability + markets[f"Over {t}"].probability == pytest.approx(100)


def test_under_uses_grid_totals(markets, grid):
    assert markets["Under 0.5"].probability == pytest.approx(grid[0, 0] * 100)
    expected = (grid[0, 0] + grid[0, 1] + grid[1, 0]) * 100
    assert markets["Under 1.5"].probability == pytest.approx(expected)


def test_btts_closed_form(markets):
    expected = (1 - math.exp(-LAM_H)) * (1 - math.exp(-LAM_A)) * 100
    assert markets["BTTS Yes"].probability == pytest.approx(expected)
    assert markets["BTTS No"].probability == pytest.approx(100 - expected)


def test_multigoal_band(markets, grid):
    expected = sum(grid[i, j] for i in range(10) for j in range(10) if 2 <= i + j <= 4) * 100
    assert markets["MG 2-4"].probability == pytest.approx(expected)
    assert len([lbl for lbl in markets if lbl.startswith("MG ")]) == 14


def test_correct_scores_top_25_sorted(grid):
    results = generate_markets(LAM_H, LAM_A, grid, MatchContext())
    scores = [m for m in results if m.category == "Risultati Esatti"]
    assert len(scores) == 25
    probs = [m.probability for m in scores]
    assert probs == sorted(probs, reverse=True)
    for m in scores:
        i, j = (int(x) for x in m.label.split("-"))
        assert i <= 5 and j <= 5
        assert m.probability == pytest.approx(grid[i, j] * 100)
    # 1-1 e' il piu' probabile anche grazie alla correzione Dixon-Coles
    assert scores[0].label == "1-1"


def test_correct_score_specs_keep_highest_cells(grid):
    specs = correct_score_specs(grid)
    kept = {s.label for s in specs}
    dropped = [(i, j) for i in range(6) for j in range(6) if f"{i}-{j}" not in kept]
    assert len(dropped) == 11
    lowest_kept = min(grid[s.params[0], s.params[1]] for s in specs)
    assert all(grid[i, j] <= lowest_kept for i, j in dropped)


def test_asian_handicap_formulas(markets, grid):
    p1, px, p2 = outcome_split(grid)
    assert markets["H. -1.5"].probability == pytest.approx((p1 - grid[1, 0] - grid[2, 1] - grid[3, 2]) * 85)
    assert markets["A. -1.5"].probability == pytest.approx((p2 - grid[0, 1] - grid[1, 2] - grid[2, 3]) * 85)
    assert markets["H. -0.5"].probability == pytest.approx(p1 * 100)
    assert markets["A. -0.5"].probability == pytest.approx(p2 * 100)
    assert markets["H. +0.5"].probability == pytest.approx((p1 + px) * 100)
    assert markets["A. +0.5"].probability == pytest.approx((p2 + px) * 100)
    assert markets["H. +1.5"].probability == pytest.approx((p1 + px + grid[0, 1]) * 95)
    assert markets["A. +1.5"].probability == pytest.approx((p2 + px + grid[1, 0]) * 95)


def test_specials(markets, grid):
    p1, _, p2 = outcome_split(grid)
    assert markets["Win Nil H"].probability == pytest.approx(p1 * math.exp(-LAM_A) * 100)
    assert markets["Win Nil A"].probability == pytest.approx(p2 * math.exp(-LAM_H) * 100)
    assert markets["Score Both H"].probability == pytest.approx((1 - math.exp(-LAM_H / 2)) ** 2 * 100)
    assert markets["Clean Sheet H"].probability == pytest.approx(math.exp(-LAM_A) * 100)
    assert markets["Clean Sheet A"].probability == pytest.approx(math.exp(-LAM_H) * 100)
    assert markets["H 1.5+ Goals"].probability == pytest.approx((1 - math.exp(-LAM_H) * (1 + LAM_H)) * 100)


def test_odd_even_placeholder(markets):
    assert markets["Pari"].probability == 50
    assert markets["Dispari"].probability == 50
    assert markets["Pari"].fair_odd == pytest.approx(2.0)


def test_high_probability_flag(markets):
    for m in markets.values():
        assert m.is_high_prob == (m.probability > 68)
    assert markets["Over 0.5"].is_high_prob


def test_fair_odd_round_trip(markets):
    for m in markets.values():
        if m.probability > 0:
            assert m.fair_odd == pytest.approx(100 / m.probability)
    assert fair_odd(25.0) == pytest.approx(4.0)
    assert fair_odd(0.0) == FAIR_ODD_SENTINEL


def test_value_computation():
    m = price_market("1", "Main", 60.0, {"1": 2.0})
    assert m.bookie_odd == 2.0
    assert m.value == pytest.approx(1.2)


def test_missing_or_invalid_odd_leaves_value_undefined():
    assert price_market("1", "Main", 60.0, {}).value is None
    assert price_market("1", "Main", 60.0, None).value is None
    nan = price_market("1", "Main", 60.0, {"1": float("nan")})
    assert nan.value is None
    assert nan.bookie_odd is None
    assert price_market("1", "Main", 60.0, {"1": None}).value is None
    assert price_market("1", "Main", 60.0, {"1": 0}).value is None


def test_context_odds_flow_into_markets(grid):
    ctx = MatchContext(market_odds={"Over 2.5": 2.1, "BTTS Yes": float("nan")})
    results = markets_by_label(generate_markets(LAM_H, LAM_A, grid, ctx))
    over = results["Over 2.5"]
    assert over.bookie_odd == 2.1
    assert over.value == pytest.approx(over.probability * 2.1 / 100)
    assert results["BTTS Yes"].value is None
    assert results["1"].value is None


def test_empty_grid_degrades_gracefully():
    """A zero grid yields zero probabilities and sentinel odds instead of errors."""
    results = markets_by_label(generate_markets(0.0, 0.0, np.zeros((10, 10)), MatchContext()))
    assert results["DNB 1"].probability == 0.0
    assert results["DNB 1"].fair_odd == FAIR_ODD_SENTINEL
    assert results["1"].fair_odd == FAIR_ODD_SENTINEL
