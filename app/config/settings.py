"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Security
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/api.log"
    api_host: str = "0.0.0.0"
    api_port: int = Field(
        default=8080, ge=1, le=65535, description="HTTP API server port"
    )

    # Conversion rates
    conversion_rate_cache_ttl: int = Field(
        default=300,
        ge=0,
        description="Conversion rate cache lifetime in seconds"
    )
    price_oracle_url: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price",
        description="Batch price quote endpoint (CoinGecko simple/price compatible)"
    )
    price_oracle_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for a single price oracle request (seconds)"
    )
    rate_refresh_enabled: bool = Field(
        default=True,
        description="Run the scheduled conversion rate refresh job"
    )
    rate_refresh_interval_minutes: int = Field(
        default=5,
        ge=1,
        description="Interval between scheduled conversion rate refreshes"
    )

    # Reward distribution
    distribution_fallback_rate: Decimal | None = Field(
        default=None,
        ge=0,
        description=(
            "Rate applied by the level distribution when a network has no "
            "conversion rate. Unset means such networks distribute nothing."
        )
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            # DEBUG must be False in production
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            if not self.jwt_secret or len(self.jwt_secret) < 32:
                raise ValueError(
                    'JWT_SECRET must be at least 32 characters in '
                    'production. Generate one with: openssl rand -hex 32'
                )

            if self.distribution_fallback_rate is not None:
                logger.warning(
                    'DISTRIBUTION_FALLBACK_RATE is set to '
                    f'{self.distribution_fallback_rate}. Networks without a '
                    'conversion rate will be priced with it.'
                )

        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v

    @field_validator('price_oracle_url')
    @classmethod
    def validate_price_oracle_url(cls, v: str) -> str:
        """Validate price oracle URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('PRICE_ORACLE_URL must be an http(s) URL')
        return v.rstrip("/")


# Global settings instance
settings = Settings()
