"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables (TREASURY_*)"""

    model_config = SettingsConfigDict(
        env_prefix="TREASURY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = "treasury-engine"
    log_level: str = "INFO"

    # Money split (percentages of the net / post-commission amount)
    tax_rate_percent: int = Field(default=22, ge=0)
    partner_share_percents: List[int] = Field(default_factory=lambda: [10, 20])

    # Record defaults when the due day is missing
    default_expense_day: int = Field(default=1, ge=1, le=31)
    default_income_day: int = Field(default=20, ge=1, le=31)

    # Cash projection
    default_horizon_days: int = Field(default=30, ge=0)
    defense_window_days: int = 30
    stabilization_threshold_cents: int = 100_000  # 1000.00
    upcoming_window_days: int = 7
    upcoming_limit: int = 10


settings = Settings()
