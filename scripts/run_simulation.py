from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from quantum_poisson.core.logging_config import setup_logging
from quantum_poisson.models.schemas import MatchContext, TeamStats
from quantum_poisson.services.input_service import baseline_away_stats, baseline_home_stats, default_context
from quantum_poisson.services.insight_service import list_categories, sort_markets, top_signals
from quantum_poisson.services.simulation_service import (
    compare_with_closed_form,
    run_match_simulation,
    run_monte_carlo,
)


def _load_inputs(path: Optional[str]) -> tuple[TeamStats, TeamStats, MatchContext]:
    if not path:
        return baseline_home_stats(), baseline_away_stats(), default_context()
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    home = TeamStats(**data["home"]) if "home" in data else baseline_home_stats()
    away = TeamStats(**data["away"]) if "away" in data else baseline_away_stats()
    ctx = MatchContext(**data["context"]) if "context" in data else default_context()
    return home, away, ctx


def build_payload(args: argparse.Namespace) -> Dict[str, Any]:
    home, away, ctx = _load_inputs(args.input)
    summary = run_match_simulation(home, away, ctx, basic_mode=args.basic)

    markets = summary.markets
    if args.category:
        markets = [m for m in markets if m.category == args.category]
    if args.sort != "catalog":
        markets = sort_markets(markets, by=args.sort)

    payload: Dict[str, Any] = {
        "home_team": ctx.home_team,
        "away_team": ctx.away_team,
        "mode": "base" if args.basic else "quantum",
        "summary": summary.model_dump(exclude={"markets"}),
        "categories": list_categories(summary.markets),
        "markets": [m.model_dump() for m in markets],
        "signals": [m.model_dump() for m in top_signals(summary.markets)],
    }

    if args.monte_carlo:
        mc = run_monte_carlo(summary.home_lambda, summary.away_lambda, trials=args.trials, seed=args.seed)
        payload["monte_carlo"] = mc.model_dump()
        payload["monte_carlo_gap"] = compare_with_closed_form(summary, mc)

    return payload


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Simula una partita: lambda, griglia Dixon-Coles e mercati")
    ap.add_argument("--input", default=None, help="JSON con chiavi home/away/context (default: statistiche base)")
    ap.add_argument("--basic", action="store_true", help="Modalita' base: solo gol reali, nessun contesto")
    ap.add_argument("--monte-carlo", action="store_true")
    ap.add_argument("--trials", type=int, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--category", default=None, help="Filtra i mercati per categoria (es. 'Over/Under')")
    ap.add_argument("--sort", choices=["catalog", "probability", "value"], default="catalog")
    ap.add_argument("--out", default=None)
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args(argv)

    setup_logging(level=args.log_level)
    payload = build_payload(args)

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=True, indent=2)
        print(f"OK: wrote simulation to {args.out}")
    else:
        print(json.dumps(payload, ensure_ascii=True, indent=2))


if __name__ == "__main__":
    main()
