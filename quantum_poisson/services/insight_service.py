from __future__ import annotations

from typing import Any, Dict, List, Optional

from quantum_poisson.core.probabilities import poisson_pmf
from quantum_poisson.models.schemas import MarketResult, ScoreCell
from quantum_poisson.services.signal_rules_service import get_signal_rules


def list_categories(markets: List[MarketResult]) -> List[str]:
    seen: Dict[str, None] = {}
    for m in markets:
        seen.setdefault(m.category, None)
    return list(seen)


def sort_markets(markets: List[MarketResult], category: Optional[str] = None, by: str = "probability") -> List[MarketResult]:
    if by not in ("probability", "value"):
        raise ValueError(f"ordinamento non supportato: {by}")
    items = [m for m in markets if category is None or m.category == category]
    if by == "value":
        return sorted(items, key=lambda m: m.value or 0.0, reverse=True)
    return sorted(items, key=lambda m: m.probability, reverse=True)


def edge_pct(market: MarketResult) -> Optional[float]:
    if market.value is None:
        return None
    return (market.value - 1.0) * 100


def top_signals(markets: List[MarketResult], rules: Dict[str, Any] | None = None) -> List[MarketResult]:
    """Mercati ad alta probabilita' o con value sopra soglia, ordinati per value."""
    r = rules or get_signal_rules()
    min_prob = float(r.get("min_probability", 65.0))
    min_value = float(r.get("min_value", 1.10))
    limit = int(r.get("max_signals", 3))

    picked = [
        m for m in markets
        if m.probability > min_prob or (m.value is not None and m.value > min_value)
    ]
    picked.sort(key=lambda m: m.value or 0.0, reverse=True)
    return picked[:limit]


def score_matrix(lam_h: float, lam_a: float, size: int = 6) -> List[ScoreCell]:
    # solo display: Poisson indipendente, senza correzione Dixon-Coles
    return [
        ScoreCell(home_goals=i, away_goals=j, probability=poisson_pmf(lam_h, i) * poisson_pmf(lam_a, j) * 100)
        for i in range(size)
        for j in range(size)
    ]
