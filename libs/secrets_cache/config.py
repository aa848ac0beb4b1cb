"""
Secrets cache configuration loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation. Every
field can be overridden via an environment variable with the
``SECRETS_CACHE_`` prefix or via a .env file.

Environment Variables:
    SECRETS_CACHE_MAX_CACHE_SIZE (int):
        Maximum number of secrets kept in the top-level pool (default: 1024)
    SECRETS_CACHE_SECRET_REFRESH_INTERVAL (int):
        Maximum age of a cached stage map or value, in milliseconds
        (default: 3600000, i.e. 1 hour)
    SECRETS_CACHE_DEFAULT_VERSION_STAGE (str):
        Stage resolved when a lookup names neither a version id nor a stage
        (default: "AWSCURRENT")
"""

from typing import Any, Final

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.secrets_cache.exceptions import SecretsCacheConfigError

AWSCURRENT: Final[str] = "AWSCURRENT"
AWSPENDING: Final[str] = "AWSPENDING"
AWSPREVIOUS: Final[str] = "AWSPREVIOUS"

DEFAULT_MAX_CACHE_SIZE: Final[int] = 1024
DEFAULT_SECRET_REFRESH_INTERVAL_MS: Final[int] = 60 * 60 * 1000


class SecretCacheConfig(BaseSettings):
    """
    Configuration shared by every layer of a SecretsCache.

    Instances are immutable: one config object is shared by the top-level
    cache, all of its secret caches and all of their version caches.
    """

    model_config = SettingsConfigDict(
        env_prefix="SECRETS_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    max_cache_size: int = Field(
        default=DEFAULT_MAX_CACHE_SIZE,
        ge=1,
        description="Maximum number of secrets held in the top-level LRU pool",
    )
    secret_refresh_interval: int = Field(
        default=DEFAULT_SECRET_REFRESH_INTERVAL_MS,
        ge=0,
        description="Maximum age (ms) of cached stage maps and values before a re-fetch",
    )
    default_version_stage: str = Field(
        default=AWSCURRENT,
        min_length=1,
        description="Version stage used when a lookup names neither version id nor stage",
    )


def load_config(**overrides: Any) -> SecretCacheConfig:
    """
    Build a SecretCacheConfig from the environment plus explicit overrides.

    Explicit keyword overrides win over environment variables.

    Raises:
        SecretsCacheConfigError: If any value fails validation.

    Example:
        >>> config = load_config(secret_refresh_interval=5 * 60 * 1000)
        >>> config.secret_refresh_interval
        300000
    """
    try:
        return SecretCacheConfig(**overrides)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise SecretsCacheConfigError(
            f"Invalid secrets cache configuration: {fields or 'unknown field'}"
        ) from e


__all__ = [
    "AWSCURRENT",
    "AWSPENDING",
    "AWSPREVIOUS",
    "DEFAULT_MAX_CACHE_SIZE",
    "DEFAULT_SECRET_REFRESH_INTERVAL_MS",
    "SecretCacheConfig",
    "load_config",
]
