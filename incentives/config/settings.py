"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from incentives.config.business_constants import (
    DEFAULT_REFEREE_REWARD,
    DEFAULT_REFERRER_REWARD,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_SYMBOL,
    REWARD_RATE,
    REWARD_RATE_DENOMINATOR,
    SECONDS_PER_YEAR,
)
from incentives.utils.exceptions import InvalidAddress
from incentives.utils.validation import normalize_address


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./incentives.db"
    database_echo: bool = False

    # Roles (bootstrap values; persisted state wins once bootstrapped)
    owner_address: str | None = None
    authorized_backend_address: str | None = None

    # Reward accrual
    reward_rate: int = Field(
        default=REWARD_RATE, ge=0,
        description="Yearly reward numerator"
    )
    reward_rate_denominator: int = Field(
        default=REWARD_RATE_DENOMINATOR, gt=0,
        description="Yearly reward denominator"
    )
    seconds_per_year: int = Field(
        default=SECONDS_PER_YEAR, gt=0,
        description="Length of the accrual year in seconds"
    )

    # Referral bounties (base units)
    default_referrer_reward: int = Field(default=DEFAULT_REFERRER_REWARD, ge=0)
    default_referee_reward: int = Field(default=DEFAULT_REFEREE_REWARD, ge=0)

    # Representational token metadata
    token_name: str = DEFAULT_TOKEN_NAME
    token_symbol: str = DEFAULT_TOKEN_SYMBOL

    # Application
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("owner_address", "authorized_backend_address")
    @classmethod
    def validate_role_address(cls, v: str | None) -> str | None:
        """Normalize role addresses to checksum format."""
        if v is None or not v.strip():
            return None
        try:
            return normalize_address(v)
        except InvalidAddress as exc:
            raise ValueError(exc.message) from exc

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL uses a supported async driver."""
        if not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            raise ValueError(
                "DATABASE_URL must start with postgresql+asyncpg:// "
                "or sqlite+aiosqlite://"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if not self.owner_address:
                raise ValueError(
                    "OWNER_ADDRESS is required in production. "
                    "Set the administrative owner address in .env file."
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production. "
                    "Use PostgreSQL for concurrent deployments."
                )
        return self


# Global settings instance
settings = Settings()
