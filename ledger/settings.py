"""Configuration for the ledger package."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ledger settings, overridable through ``LEDGER_*`` environment variables."""

    monthly_income: float = 5000.0
    initial_balance: float = 0.0
    log_level: str = "INFO"
    seed_path: str = "data/seed.json"

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def get_settings() -> "Settings":
    """Return an instance of the ledger settings."""
    return Settings()
