"""Service configuration.

Settings are read once from the environment at startup and never change
afterwards. Stripe secrets can be given directly or as the name of an SSM
parameter holding them.

Environment variables:
    PORT                                  HTTP port (default 3003)
    BROKER_URLS                           Comma-separated AMQP URLs (required)
    BROKER_EXCHANGE                       Topic exchange name (default "payments")
    STRIPE_SECRET                         Stripe secret API key
    STRIPE_SECRET_SSM_PARAMETER           SSM parameter holding STRIPE_SECRET
    STRIPE_ENDPOINT_SECRET                Webhook signing secret (whsec_...)
    STRIPE_ENDPOINT_SECRET_SSM_PARAMETER  SSM parameter holding STRIPE_ENDPOINT_SECRET
    STRIPE_SUCCESS_URL                    Checkout success redirect (required)
    STRIPE_CANCEL_URL                     Checkout cancel redirect (required)
    STRIPE_WEBHOOK_TOLERANCE              Max signature age in seconds (default 300)
    LOG_LEVEL                             Logging level (default INFO)
"""

import logging
import os
from collections.abc import Mapping
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from payments.services.ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3003
DEFAULT_EXCHANGE = "payments"
DEFAULT_WEBHOOK_TOLERANCE = 300


class ConfigError(Exception):
    """Raised when the service configuration is missing or invalid."""


class Settings(BaseModel):
    """Immutable service configuration."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    broker_urls: tuple[str, ...] = Field(..., min_length=1)
    broker_exchange: str = Field(default=DEFAULT_EXCHANGE, min_length=1)
    stripe_secret: str = Field(..., min_length=1, repr=False)
    stripe_endpoint_secret: str = Field(..., min_length=1, repr=False)
    stripe_success_url: str = Field(..., min_length=1)
    stripe_cancel_url: str = Field(..., min_length=1)
    stripe_webhook_tolerance: int = Field(default=DEFAULT_WEBHOOK_TOLERANCE, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        ssm: SSMService | None = None,
    ) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Variables to read (defaults to os.environ)
            ssm: SSM service used for *_SSM_PARAMETER lookups

        Returns:
            Validated settings.

        Raises:
            ConfigError: If a required variable is missing or a value is invalid.
        """
        env = os.environ if environ is None else environ

        missing = [
            name
            for name in ("BROKER_URLS", "STRIPE_SUCCESS_URL", "STRIPE_CANCEL_URL")
            if not env.get(name)
        ]

        stripe_secret = _resolve_secret(env, "STRIPE_SECRET", ssm)
        endpoint_secret = _resolve_secret(env, "STRIPE_ENDPOINT_SECRET", ssm)
        if stripe_secret is None:
            missing.append("STRIPE_SECRET")
        if endpoint_secret is None:
            missing.append("STRIPE_ENDPOINT_SECRET")

        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        values: dict[str, object] = {
            "broker_urls": tuple(
                url.strip() for url in env["BROKER_URLS"].split(",") if url.strip()
            ),
            "stripe_secret": stripe_secret,
            "stripe_endpoint_secret": endpoint_secret,
            "stripe_success_url": env["STRIPE_SUCCESS_URL"],
            "stripe_cancel_url": env["STRIPE_CANCEL_URL"],
        }
        optional = {
            "PORT": "port",
            "BROKER_EXCHANGE": "broker_exchange",
            "STRIPE_WEBHOOK_TOLERANCE": "stripe_webhook_tolerance",
            "LOG_LEVEL": "log_level",
        }
        for env_name, field_name in optional.items():
            if env.get(env_name):
                values[field_name] = env[env_name]

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ConfigError(f"Invalid configuration ({fields}): {e}") from e


def _resolve_secret(
    env: Mapping[str, str],
    name: str,
    ssm: SSMService | None,
) -> str | None:
    """Read a secret from the environment or from the SSM parameter it names."""
    value = env.get(name)
    if value:
        return value

    parameter = env.get(f"{name}_SSM_PARAMETER")
    if not parameter:
        return None

    try:
        return (ssm or get_ssm_service()).get_parameter(parameter)
    except SSMServiceError as e:
        raise ConfigError(f"Failed to resolve {name} from SSM: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    settings = Settings.from_env()
    logger.info(
        "Configuration loaded: port=%d exchange=%s brokers=%d",
        settings.port,
        settings.broker_exchange,
        len(settings.broker_urls),
    )
    return settings
