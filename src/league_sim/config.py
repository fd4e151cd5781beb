"""Static simulation configuration constants and runtime settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

STRENGTH_WEIGHTS: dict[str, float] = {
    "attack_power": 0.3,
    "defense_power": 0.3,
    "morale": 0.2,
    "stamina": 0.2,
}

HOME_ADVANTAGE = 1.05
DRAW_CHANCE = 0.2
DRAW_GOAL_CHOICES = 3  # 0, 1 or 2 goals each
WINNER_GOALS_MIN = 1
WINNER_GOALS_MAX = 5

ATTRIBUTE_MIN = 70.0
ATTRIBUTE_MAX = 100.0
CLAMP_LOW = 0.0
CLAMP_HIGH = 100.0
STAMINA_COST = 5.0
MORALE_SWING = 5.0

POINTS_WIN = 3
POINTS_DRAW = 1

WEIGHT_POINTS = 0.4
WEIGHT_STRENGTH = 0.6

# Upper bound on teams per league accepted over HTTP.
MAX_TEAMS = 64

BYE_TEAM_NAME = "BYE"
DRAW_MARKER = "draw"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="LEAGUE_SIM_", extra="ignore")

    state_path: str = "league_state.json"
    log_level: str = "INFO"
    weight_points: float = Field(default=WEIGHT_POINTS, ge=0.0)
    weight_strength: float = Field(default=WEIGHT_STRENGTH, ge=0.0)
    max_teams: int = Field(default=MAX_TEAMS, ge=0)
    seed: int | None = None
    cors_origins: list[str] = ["*"]


def get_settings() -> Settings:
    return Settings()
