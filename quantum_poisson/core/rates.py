from __future__ import annotations

from typing import Optional, Tuple

from quantum_poisson.models.schemas import TeamStats, MatchContext, ScoringIntensities

WEATHER_FACTORS = {
    "normal": 1.0,
    "rain": 0.94,
    "extreme": 0.80,
}
MIDWEEK_FACTOR = 0.85
ABSENCE_PENALTY = 0.06


def _venue_games(stats: TeamStats, venue: str) -> float:
    return getattr(stats, f"{venue}_games_played") or (stats.played / 2) or 1


def _per_game(venue_value: Optional[float], venue_games: float, total_value: Optional[float], played: int) -> float:
    # split casa/trasferta se presente, altrimenti aggregato / partite giocate
    if venue_value:
        return venue_value / venue_games
    return (total_value or 0.0) / (played or 1)


def side_powers(stats: TeamStats, venue: str) -> Tuple[float, float]:
    """(attack_power, defense_power) di una squadra per la sede indicata ("home"/"away").

    Ogni potenza e' la media tra gol/partita e xG/partita; se mancano gli xG si usano i gol.
    """
    games = _venue_games(stats, venue)

    att_goals = _per_game(getattr(stats, f"{venue}_goals_scored"), games, stats.goals_scored, stats.played)
    att_xg = _per_game(getattr(stats, f"{venue}_xg_scored"), games, stats.xg_scored or stats.goals_scored, stats.played)

    def_goals = _per_game(getattr(stats, f"{venue}_goals_conceded"), games, stats.goals_conceded, stats.played)
    def_xg = _per_game(getattr(stats, f"{venue}_xg_conceded"), games, stats.xg_conceded or stats.goals_conceded, stats.played)

    return (att_goals + att_xg) / 2, (def_goals + def_xg) / 2


def context_multipliers(ctx: MatchContext) -> Tuple[float, float]:
    h = 1.0 + (ctx.home_advantage / 100)
    a = 1.0

    weather = WEATHER_FACTORS.get(ctx.weather, 1.0)
    h *= weather
    a *= weather

    if ctx.home_midweek_cup:
        h *= MIDWEEK_FACTOR
    if ctx.away_midweek_cup:
        a *= MIDWEEK_FACTOR

    h *= 1.0 - (ctx.home_key_absences * ABSENCE_PENALTY)
    a *= 1.0 - (ctx.away_key_absences * ABSENCE_PENALTY)
    return h, a


def estimate(home: TeamStats, away: TeamStats, ctx: MatchContext) -> ScoringIntensities:
    home_att, home_def = side_powers(home, "home")
    away_att, away_def = side_powers(away, "away")

    lam_h = (home_att + away_def) / 2
    lam_a = (away_att + home_def) / 2

    mult_h, mult_a = context_multipliers(ctx)
    return ScoringIntensities(home_lambda=lam_h * mult_h, away_lambda=lam_a * mult_a)
