from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    service_version: str = "0.1.0"
    dc_rho: float = Field(default=-0.05)
    dc_params_path: str = Field(default="data/calibration/dc_params.json")
    grid_size: int = Field(default=10, gt=0)
    ht_grid_size: int = Field(default=6, gt=0)
    ht_lambda_factor: float = Field(default=0.45)
    ht_dc_rho: float = Field(default=0.0)
    mc_trials: int = Field(default=10000, gt=0)
    high_prob_threshold: float = Field(default=68.0)
    signal_rules_path: str = Field(default="data/config/signal_rules.json")
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None)

settings = Settings()
