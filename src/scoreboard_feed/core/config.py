from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scoreboard_feed.providers.base.types import NO_SORT_INDEX

DEFAULT_LEAGUE_ORDER = [
    "NFL",
    "MLB",
    "NBA",
    "NHL",
    "WNBA",
    "MLS",
    "EPL",
    "NCAAF",
    "NCAAM",
    "NCAAW",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")

    # espn
    espn_base_url: str = "https://site.api.espn.com/apis/site/v2/sports"
    http_timeout_s: float = 15.0
    http_connect_timeout_s: float = 5.0

    # search
    max_day_offset: int = 20
    default_provider: str = "ESPN"
    league_order: list[str] = Field(default_factory=lambda: list(DEFAULT_LEAGUE_ORDER))

    @field_validator("max_day_offset")
    @classmethod
    def _non_negative_offset(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_day_offset must be >= 0")
        return value

    # -----------------------------
    # Helpers
    # -----------------------------

    def sort_index_for(self, league: str) -> int:
        """Position of `league` in the configured display order (NO_SORT_INDEX when unknown)."""
        try:
            return self.league_order.index(league.upper())
        except ValueError:
            return NO_SORT_INDEX


settings = Settings()
