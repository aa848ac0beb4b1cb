"""
Client-side secrets cache for AWS Secrets Manager.

This package provides a read-through, multi-tier cache that shields callers
from the latency and throttling cost of repeated DescribeSecret and
GetSecretValue calls while keeping values fresh as secrets rotate.

Architecture (leaves first):
    - choose_jittered_ttl: randomized refresh deadlines (ttl.py)
    - CachedSecretVersion: one version's GetSecretValue response (version_cache.py)
    - CachedSecret: stage → version id map + LRU pool of versions (secret_cache.py)
    - SecretsCache: LRU pool of secrets, the public entry point (cache.py)
    - create_secrets_cache(): builds a SecretsCache from the environment (factory.py)

Quick Start:
    >>> from libs.secrets_cache import create_secrets_cache
    >>> cache = create_secrets_cache()
    >>> db_password = cache.get_secret_string("prod/database/password")
    >>> previous = cache.get_secret_value("prod/database/password", version_stage="AWSPREVIOUS")

Error Semantics:
    - Remote errors (botocore ClientError/BotoCoreError) propagate unchanged
    - Unknown stages and secrets without versions return None
"""

from libs.secrets_cache.cache import SecretsCache
from libs.secrets_cache.client import SecretsManagerClient, create_default_client
from libs.secrets_cache.config import (
    AWSCURRENT,
    AWSPENDING,
    AWSPREVIOUS,
    SecretCacheConfig,
    load_config,
)
from libs.secrets_cache.exceptions import (
    SecretsCacheConfigError,
    SecretsCacheError,
    SecretValueTypeError,
)
from libs.secrets_cache.factory import create_secrets_cache
from libs.secrets_cache.secret_cache import MAX_VERSIONS_CACHE, CachedSecret
from libs.secrets_cache.ttl import choose_jittered_ttl
from libs.secrets_cache.version_cache import CachedSecretVersion

__all__ = [
    # Entry points
    "SecretsCache",
    "create_secrets_cache",
    # Layers (for custom composition)
    "CachedSecret",
    "CachedSecretVersion",
    "MAX_VERSIONS_CACHE",
    "choose_jittered_ttl",
    # Remote client seam
    "SecretsManagerClient",
    "create_default_client",
    # Configuration
    "SecretCacheConfig",
    "load_config",
    "AWSCURRENT",
    "AWSPENDING",
    "AWSPREVIOUS",
    # Exceptions
    "SecretsCacheError",
    "SecretsCacheConfigError",
    "SecretValueTypeError",
]
