"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - fee_rate / fee_scale_factor fixed for the process lifetime
    - fee_scale_factor > 0 and 0 <= fee_rate <= fee_scale_factor
    - fee_recipient and custody_account are distinct accounts
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults reproduce the reference deployment: 1/100 platform fee
    - Invalid fee configuration fails at startup, never on the operation path
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crowdfund.core.errors import ConfigurationError
from crowdfund.core.fee_engine import FeeConfig, validate_fee_config


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str = (
        "postgresql+asyncpg://crowdfund:crowdfund@db:5432/crowdfund"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_auto_create: bool = False

    # Fees
    fee_rate: int = 1
    fee_scale_factor: int = 100

    # Accounts
    fee_recipient: str = "platform"
    custody_account: str = "crowdfund-custody"

    # Notifications: True reproduces the legacy ProjectFunded(id, caller, 0)
    # payload on withdrawal instead of FundsWithdrawn with the real amount
    withdrawal_event_compat: bool = False

    # In-process token adapter seeding (first start only)
    initial_balances: dict[str, int] = {}

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @model_validator(mode="after")
    def check_ledger_config(self):
        try:
            validate_fee_config(self.fee_rate, self.fee_scale_factor)
        except ConfigurationError as e:
            raise ValueError(e.message)
        if self.fee_recipient == self.custody_account:
            raise ValueError("fee_recipient must differ from custody_account")
        return self

    @property
    def fee_config(self) -> FeeConfig:
        return FeeConfig(self.fee_rate, self.fee_scale_factor)


@lru_cache
def get_settings() -> Settings:
    return Settings()
