"""Configuration management using Pydantic Settings"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "agency-ledger"
    log_level: str = "INFO"

    # Reports
    share_scope: Literal["global", "talent"] = "global"
    breakdown_top_n: Optional[int] = None  # None keeps every label
    recent_expenses_limit: int = 10
    recent_payments_limit: int = 15
    recent_incomes_limit: int = 10

    # Payroll
    payroll_history_months: int = 12


settings = Settings()
