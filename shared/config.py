"""Application configuration with startup validation.

All config is validated at import time via pydantic-settings.
Inconsistent bounds cause an immediate, clear error.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings

TICKER_MODES = {"asyncio", "manual"}


class Settings(BaseSettings):
    model_config = {"env_prefix": "IF_", "env_file": ".env"}

    # Fasting-hours input
    default_fasting_hours: float = 16
    min_fasting_hours: float = 12
    max_fasting_hours: float = 16
    fasting_hours_step: float = 1

    # Ticking source: "asyncio" or "manual"
    ticker_mode: str = "asyncio"
    tick_interval_seconds: float = 1.0

    # API
    api_version: str = "v1"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_bounds(self) -> "Settings":
        """Fail fast at startup if the fasting-hours bounds or ticker settings are unusable."""
        problems = []
        if not (
            0
            < self.min_fasting_hours
            <= self.default_fasting_hours
            <= self.max_fasting_hours
            <= 24
        ):
            problems.append(
                "expected 0 < IF_MIN_FASTING_HOURS <= IF_DEFAULT_FASTING_HOURS "
                "<= IF_MAX_FASTING_HOURS <= 24"
            )
        if self.fasting_hours_step <= 0:
            problems.append("IF_FASTING_HOURS_STEP must be positive")
        if self.tick_interval_seconds <= 0:
            problems.append("IF_TICK_INTERVAL_SECONDS must be positive")
        if self.ticker_mode not in TICKER_MODES:
            problems.append(
                f"IF_TICKER_MODE must be one of: {', '.join(sorted(TICKER_MODES))}"
            )
        if problems:
            raise ValueError("; ".join(problems))
        return self


settings = Settings()
