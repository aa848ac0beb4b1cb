"""
Factory for building a SecretsCache from environment configuration.

Environment Variables:
    SECRETS_CACHE_* (see libs/secrets_cache/config.py):
        Cache size, refresh interval and default version stage
    AWS_REGION (str, optional):
        AWS region for the default boto3 client (e.g., "us-west-2")
        Falls back to AWS_DEFAULT_REGION, then "us-east-1" if not set

Example Usage:
    >>> import os
    >>> os.environ["SECRETS_CACHE_SECRET_REFRESH_INTERVAL"] = "300000"
    >>> cache = create_secrets_cache()
    >>> cache.config.secret_refresh_interval
    300000
"""

import logging
import os
from typing import Any

from libs.secrets_cache.cache import SecretsCache
from libs.secrets_cache.client import DEFAULT_REGION, SecretsManagerClient, create_default_client
from libs.secrets_cache.config import load_config

logger = logging.getLogger(__name__)


def _resolve_region() -> str:
    # Priority: AWS_REGION > AWS_DEFAULT_REGION > us-east-1
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION


def create_secrets_cache(
    client: SecretsManagerClient | None = None,
    **config_overrides: Any,
) -> SecretsCache:
    """
    Create a SecretsCache configured from the environment.

    Args:
        client: Remote client to use. If None, a boto3 Secrets Manager client
                is created for the resolved region.
        **config_overrides: Explicit SecretCacheConfig values that win over
                            SECRETS_CACHE_* environment variables.

    Returns:
        SecretsCache: A new, empty cache (no remote calls made yet).

    Raises:
        SecretsCacheConfigError: If the configuration fails validation.
    """
    config = load_config(**config_overrides)

    if client is None:
        region_name = _resolve_region()
        logger.info(
            "Creating SecretsCache with default AWS client",
            extra={"region": region_name, "backend": "aws"},
        )
        client = create_default_client(region_name=region_name)

    return SecretsCache(client=client, config=config)


__all__ = ["create_secrets_cache"]
