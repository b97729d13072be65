"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "orderdesk.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms
    journal_mode: Literal["WAL", "DELETE", "TRUNCATE", "MEMORY"] = "WAL"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class PricingSettings(BaseSettings):
    """Proforma computation defaults."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    rounding_enabled: bool = False
    round_rule: Literal["NEAREST", "UP", "DOWN"] = "NEAREST"

    # Allowed drift between a stored breakdown and a server recomputation
    verify_tolerance: float = 0.01


class LedgerSettings(BaseSettings):
    """Dual ledger propagation and reconciliation."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    reconcile_batch_size: int = 100
    max_attempts: int = 10


class InvoiceSettings(BaseSettings):
    """Invoice materialization configuration."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_")

    number_prefix: str = "INV-"
    backfill_batch_size: int = 200


class LookupSettings(BaseSettings):
    """Postal code lookup collaborator."""

    model_config = SettingsConfigDict(env_prefix="LOOKUP_")

    enabled: bool = True
    base_url: str = "https://api.postalpincode.in"
    timeout: float = 10.0


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "OrderDesk"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    invoice: InvoiceSettings = Field(default_factory=InvoiceSettings)
    lookup: LookupSettings = Field(default_factory=LookupSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
