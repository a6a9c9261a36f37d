from __future__ import annotations

from typing import Tuple

from quantum_poisson.models.schemas import TeamStats, MatchContext


def baseline_home_stats() -> TeamStats:
    return TeamStats(
        played=20,
        home_games_played=10,
        goals_scored=35,
        goals_conceded=22,
        xg_scored=1.75,
        xg_conceded=1.10,
        home_goals_scored=18,
        home_goals_conceded=8,
        home_xg_scored=18.5,
        home_xg_conceded=9.5,
    )


def baseline_away_stats() -> TeamStats:
    return TeamStats(
        played=20,
        away_games_played=10,
        goals_scored=28,
        goals_conceded=30,
        xg_scored=1.45,
        xg_conceded=1.40,
        away_goals_scored=12,
        away_goals_conceded=15,
        away_xg_scored=13.0,
        away_xg_conceded=15.5,
    )


def default_context() -> MatchContext:
    return MatchContext()


def _goals_as_xg(stats: TeamStats) -> TeamStats:
    return stats.model_copy(update={
        "xg_scored": stats.goals_scored,
        "xg_conceded": stats.goals_conceded,
        "home_xg_scored": stats.home_goals_scored,
        "home_xg_conceded": stats.home_goals_conceded,
        "away_xg_scored": stats.away_goals_scored,
        "away_xg_conceded": stats.away_goals_conceded,
    })


def neutral_context(ctx: MatchContext) -> MatchContext:
    # mantiene squadre e quote bookmaker, azzera i fattori ambientali
    return ctx.model_copy(update={
        "weather": "normal",
        "home_midweek_cup": False,
        "away_midweek_cup": False,
        "home_key_absences": 0,
        "away_key_absences": 0,
        "home_advantage": 0.0,
    })


def apply_basic_mode(home: TeamStats, away: TeamStats, ctx: MatchContext) -> Tuple[TeamStats, TeamStats, MatchContext]:
    """Modalita' base: xG forzati ai gol reali e contesto neutro.

    Lo stimatore resta indifferente alla modalita': la trasformazione avviene qui, prima.
    """
    return _goals_as_xg(home), _goals_as_xg(away), neutral_context(ctx)
