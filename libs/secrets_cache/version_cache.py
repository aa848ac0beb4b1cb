"""
Cache for a single version of a secret.

A version id names one immutable GetSecretValue payload. Only its stage labels
ever change, so once fetched the payload is served from memory until its
jittered refresh deadline passes, then re-fetched in place.
"""

import logging
import threading
from typing import Any

from libs.secrets_cache.client import SecretsManagerClient
from libs.secrets_cache.config import SecretCacheConfig
from libs.secrets_cache.ttl import choose_jittered_ttl, monotonic_ms

logger = logging.getLogger(__name__)


class CachedSecretVersion:
    """
    Read-through cache of one (secret id, version id) GetSecretValue response.

    The refresh deadline starts in the past, so the first read always fetches.
    A failed fetch propagates to the caller and leaves both the previous value
    and the expired deadline untouched: the next read retries the remote call.

    Thread Safety:
        The read-or-refresh transition runs under a threading.Lock, including
        the remote call.
    """

    def __init__(
        self,
        client: SecretsManagerClient,
        config: SecretCacheConfig,
        secret_id: str,
        version_id: str,
    ) -> None:
        self._client = client
        self._config = config
        self._secret_id = secret_id
        self._version_id = version_id

        self._secret_value: dict[str, Any] | None = None
        self._next_refresh_time = monotonic_ms() - 1
        self._lock = threading.Lock()

    @property
    def secret_id(self) -> str:
        return self._secret_id

    @property
    def version_id(self) -> str:
        return self._version_id

    def is_expired(self) -> bool:
        return monotonic_ms() > self._next_refresh_time

    def get_secret_value(self) -> dict[str, Any] | None:
        """
        Return a copy of the cached GetSecretValue response, refreshing if stale.

        Returns:
            A shallow copy of the response dict, or None if no fetch has ever
            succeeded.

        Raises:
            Whatever the remote client raises (e.g. botocore ClientError),
            unchanged.
        """
        with self._lock:
            if self.is_expired():
                self._refresh_secret_value()
            else:
                logger.debug(
                    "Secret version cache hit",
                    extra={"secret_id": self._secret_id, "version_id": self._version_id},
                )

            if self._secret_value is None:
                return None
            return dict(self._secret_value)

    def _refresh_secret_value(self) -> None:
        try:
            response = self._client.get_secret_value(
                SecretId=self._secret_id,
                VersionId=self._version_id,
            )
        except Exception:
            logger.warning(
                "GetSecretValue failed, cached version left stale",
                extra={"secret_id": self._secret_id, "version_id": self._version_id},
            )
            raise

        self._secret_value = dict(response)
        self._reset_refresh_time()
        logger.debug(
            "Secret version refreshed",
            extra={"secret_id": self._secret_id, "version_id": self._version_id},
        )

    def _reset_refresh_time(self) -> None:
        ttl = choose_jittered_ttl(self._config.secret_refresh_interval)
        self._next_refresh_time = monotonic_ms() + ttl


__all__ = ["CachedSecretVersion"]
