"""
Read-only, multi-tier cache in front of AWS Secrets Manager.

Call Flow:
    1. find or create a CachedSecret for the secret id (no remote call)
    2. DescribeSecret to map version stages to version ids (or use the cache)
    3. find or create the CachedSecretVersion for the resolved version id
    4. GetSecretValue for that version id (or use the cache)

Caches:
    1. SecretsCache holds up to config.max_cache_size CachedSecret objects (LRU)
    2. CachedSecret holds the last DescribeSecret stage map (jittered TTL)
    3. CachedSecret holds up to 10 CachedSecretVersion objects (LRU)
    4. CachedSecretVersion holds the last GetSecretValue response (jittered TTL)

Pools evict only under capacity pressure; TTLs govern freshness of content,
never whether an entry exists. All refresh work happens lazily on the calling
thread; there are no background timers.

Usage Example:
    >>> from libs.secrets_cache import SecretsCache
    >>> cache = SecretsCache()  # boto3 client from the default credential chain
    >>> response = cache.get_secret_value("prod/database/password")
    >>> response["SecretString"]
    >>> cache.get_secret_string("prod/database/password", version_stage="AWSPREVIOUS")

Security:
    - Secret values are NEVER logged (only secret ids, version ids, stages)
    - In-memory only, nothing is persisted to disk
"""

import asyncio
import logging
from types import TracebackType
from typing import Any

from libs.secrets_cache.client import SecretsManagerClient, create_default_client
from libs.secrets_cache.config import SecretCacheConfig
from libs.secrets_cache.exceptions import SecretValueTypeError
from libs.secrets_cache.lru import LRUPool
from libs.secrets_cache.secret_cache import CachedSecret

logger = logging.getLogger(__name__)


def _validate_id(value: object, field: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string, got {type(value).__name__}")
    if not value:
        raise ValueError(f"{field} must be a non-empty string")


class SecretsCache:
    """
    Public entry point: LRU pool of CachedSecret objects keyed by secret id.

    Args:
        client: Object exposing ``describe_secret`` and ``get_secret_value``
                (a boto3 ``secretsmanager`` client). Defaults to
                create_default_client().
        config: Shared configuration. Defaults to SecretCacheConfig(), which
                reads SECRETS_CACHE_* environment variables.

    Thread Safety:
        The pool lock is held only to find or create a CachedSecret, never
        while a remote call is in flight. Concurrent lookups of different
        secrets proceed in parallel.
    """

    def __init__(
        self,
        client: SecretsManagerClient | None = None,
        config: SecretCacheConfig | None = None,
    ) -> None:
        self._config = config if config is not None else SecretCacheConfig()
        self._client = client if client is not None else create_default_client()
        self._secrets: LRUPool[str, CachedSecret] = LRUPool(
            capacity=self._config.max_cache_size,
            name="secrets",
        )
        logger.info(
            "SecretsCache initialized",
            extra={
                "max_cache_size": self._config.max_cache_size,
                "secret_refresh_interval_ms": self._config.secret_refresh_interval,
                "default_version_stage": self._config.default_version_stage,
            },
        )

    @property
    def config(self) -> SecretCacheConfig:
        return self._config

    def get_secret_value(
        self,
        secret_id: str,
        *,
        version_id: str | None = None,
        version_stage: str | None = None,
        force: bool = False,
    ) -> dict[str, Any] | None:
        """
        Return the cached GetSecretValue response for a secret.

        Args:
            secret_id: Name or ARN of the secret, as accepted by GetSecretValue.
            version_id: Explicit version id. Takes precedence over version_stage.
            version_stage: Stage label. Defaults to config.default_version_stage.
            force: Reserved for a future cache bypass. Accepted but currently
                   served from the cache like any other lookup.

        Returns:
            A copy of the GetSecretValue response dict (SecretString or
            SecretBinary, VersionId, VersionStages, ...), or None when the
            stage is not attached to any version.

        Raises:
            TypeError / ValueError: secret_id or version_id is not a non-empty
                string.
            botocore.exceptions.ClientError / BotoCoreError (or the injected
                client's errors): propagated unchanged, no local retry.
        """
        _validate_id(secret_id, "secret_id")
        if version_id is not None:
            _validate_id(version_id, "version_id")
        if force:
            logger.debug(
                "force=True requested; cache bypass is not implemented, serving from cache",
                extra={"secret_id": secret_id},
            )

        secret = self._secrets.get_or_create(
            secret_id,
            lambda: CachedSecret(client=self._client, config=self._config, secret_id=secret_id),
        )
        return secret.get_secret_value(version_id=version_id, version_stage=version_stage)

    async def aget_secret_value(
        self,
        secret_id: str,
        *,
        version_id: str | None = None,
        version_stage: str | None = None,
        force: bool = False,
    ) -> dict[str, Any] | None:
        """Async variant of get_secret_value; the blocking lookup runs in a worker thread."""
        return await asyncio.to_thread(
            self.get_secret_value,
            secret_id,
            version_id=version_id,
            version_stage=version_stage,
            force=force,
        )

    def get_secret_string(
        self,
        secret_id: str,
        *,
        version_id: str | None = None,
        version_stage: str | None = None,
    ) -> str | None:
        """
        Return the SecretString of the resolved version.

        Returns:
            The string value, or None when the stage is not attached to any
            version.

        Raises:
            SecretValueTypeError: The version is stored as SecretBinary.
        """
        response = self.get_secret_value(
            secret_id, version_id=version_id, version_stage=version_stage
        )
        if response is None:
            return None
        if "SecretString" not in response:
            raise SecretValueTypeError(secret_id=secret_id, expected="SecretString")
        value: str = response["SecretString"]
        return value

    def get_secret_binary(
        self,
        secret_id: str,
        *,
        version_id: str | None = None,
        version_stage: str | None = None,
    ) -> bytes | None:
        """
        Return the SecretBinary of the resolved version.

        Raises:
            SecretValueTypeError: The version is stored as SecretString.
        """
        response = self.get_secret_value(
            secret_id, version_id=version_id, version_stage=version_stage
        )
        if response is None:
            return None
        if "SecretBinary" not in response:
            raise SecretValueTypeError(secret_id=secret_id, expected="SecretBinary")
        value: bytes = response["SecretBinary"]
        return value

    def clear(self) -> None:
        """Drop every cached secret; the next lookup of each re-fetches."""
        self._secrets.clear()
        logger.info("SecretsCache cleared")

    def close(self) -> None:
        """Clear the cache. Boto3 clients need no explicit close."""
        self.clear()

    def __enter__(self) -> "SecretsCache":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __contains__(self, secret_id: object) -> bool:
        return secret_id in self._secrets

    def __len__(self) -> int:
        return len(self._secrets)


__all__ = ["SecretsCache"]
