from __future__ import annotations
from typing import List, Optional, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field, conint, confloat, field_validator

Weather = Literal["normal", "rain", "extreme"]


class TeamStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    # aggregato stagione
    played: conint(ge=0) = 0
    goals_scored: confloat(ge=0.0) = 0.0
    goals_conceded: confloat(ge=0.0) = 0.0
    xg_scored: Optional[confloat(ge=0.0)] = None
    xg_conceded: Optional[confloat(ge=0.0)] = None

    # split casa/trasferta
    home_games_played: Optional[conint(ge=0)] = None
    away_games_played: Optional[conint(ge=0)] = None
    home_goals_scored: Optional[confloat(ge=0.0)] = None
    home_goals_conceded: Optional[confloat(ge=0.0)] = None
    away_goals_scored: Optional[confloat(ge=0.0)] = None
    away_goals_conceded: Optional[confloat(ge=0.0)] = None
    home_xg_scored: Optional[confloat(ge=0.0)] = None
    home_xg_conceded: Optional[confloat(ge=0.0)] = None
    away_xg_scored: Optional[confloat(ge=0.0)] = None
    away_xg_conceded: Optional[confloat(ge=0.0)] = None


class MatchContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_team: str = "Squadra Casa"
    away_team: str = "Squadra Ospite"
    weather: Weather = "normal"
    home_midweek_cup: bool = False
    away_midweek_cup: bool = False
    home_key_absences: conint(ge=0, le=5) = 0
    away_key_absences: conint(ge=0, le=5) = 0
    home_advantage: confloat(ge=0.0, le=100.0) = 12.0
    market_odds: Dict[str, Optional[float]] = Field(default_factory=dict)

    @field_validator("weather", mode="before")
    @classmethod
    def _legacy_weather(cls, v):
        # "good" e' il vecchio nome di "normal"
        if isinstance(v, str) and v.lower() == "good":
            return "normal"
        return v


class ScoringIntensities(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_lambda: confloat(ge=0.0)
    away_lambda: confloat(ge=0.0)


class OutcomeSplit(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_win: float
    draw: float
    away_win: float


class MarketResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    category: str
    probability: float          # percentuale 0-100
    fair_odd: float             # 100 / probability, 999 se probability == 0
    bookie_odd: Optional[float] = None
    value: Optional[float] = None   # probability * bookie_odd / 100 (>1 = edge positivo)
    is_high_prob: bool = False


class SimulationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_lambda: float
    away_lambda: float
    full_time: OutcomeSplit
    half_time: OutcomeSplit
    markets: List[MarketResult] = Field(default_factory=list)


class MonteCarloResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_win: float
    draw: float
    away_win: float
    trials: conint(gt=0)
    seed: Optional[int] = None
    convergence_delta: Optional[float] = None


class ScoreCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    home_goals: int
    away_goals: int
    probability: float
