"""
Cache for a single secret id: stage resolution plus a pool of version caches.

Rules of the remote store this module relies on:
    - A secret has many versions
    - A secret has many stages (AWSCURRENT, AWSPREVIOUS, AWSPENDING, ...)
    - A stage maps to exactly one version
    - A version can carry many stages (or none)

DescribeSecret returns version id → stage labels. CachedSecret inverts that to
stage → version id, caches the inverted map with a jittered TTL, and delegates
value lookups to a bounded LRU pool of CachedSecretVersion objects.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any, Final

from libs.secrets_cache.client import SecretsManagerClient
from libs.secrets_cache.config import SecretCacheConfig
from libs.secrets_cache.lru import LRUPool
from libs.secrets_cache.ttl import choose_jittered_ttl, monotonic_ms
from libs.secrets_cache.version_cache import CachedSecretVersion

logger = logging.getLogger(__name__)

MAX_VERSIONS_CACHE: Final[int] = 10


def build_version_ids_by_stage(
    version_ids_to_stages: Mapping[str, list[str] | None],
) -> dict[str, str]:
    """
    Invert a DescribeSecret ``VersionIdsToStages`` mapping.

    Versions with no stage labels are skipped. If two versions claim the same
    stage, the one iterated last wins.

    Example:
        >>> build_version_ids_by_stage({"v1": ["AWSCURRENT", "LATEST"], "v0": ["AWSPREVIOUS"]})
        {'AWSCURRENT': 'v1', 'LATEST': 'v1', 'AWSPREVIOUS': 'v0'}
    """
    version_ids_by_stage: dict[str, str] = {}
    for version_id, stages in version_ids_to_stages.items():
        if not stages:
            continue
        for stage in stages:
            version_ids_by_stage[stage] = version_id
    return version_ids_by_stage


class CachedSecret:
    """
    Read-through cache for one secret id in AWS Secrets Manager.

    State:
        - stage → version id map from the last successful DescribeSecret
        - refresh deadline for that map (starts expired)
        - LRU pool of up to MAX_VERSIONS_CACHE CachedSecretVersion objects

    Thread Safety:
        The stage map is checked, refreshed and replaced under a
        threading.Lock, so readers never observe a partially built map. The
        version pool has its own lock (see LRUPool).

    Example:
        >>> cached = CachedSecret(client=boto3.client("secretsmanager"),
        ...                       config=SecretCacheConfig(), secret_id="prod/db")
        >>> cached.get_secret_value()                         # AWSCURRENT
        >>> cached.get_secret_value(version_stage="AWSPREVIOUS")
        >>> cached.get_secret_value(version_id="a1b2c3...")
    """

    def __init__(
        self,
        client: SecretsManagerClient,
        config: SecretCacheConfig,
        secret_id: str,
    ) -> None:
        self._client = client
        self._config = config
        self._secret_id = secret_id

        self._version_ids_by_stage: dict[str, str] = {}
        self._next_refresh_time = monotonic_ms() - 1
        self._stage_lock = threading.Lock()

        self._versions: LRUPool[str, CachedSecretVersion] = LRUPool(
            capacity=MAX_VERSIONS_CACHE,
            name=f"versions:{secret_id}",
        )

    @property
    def secret_id(self) -> str:
        return self._secret_id

    def get_secret_value(
        self,
        version_id: str | None = None,
        version_stage: str | None = None,
    ) -> dict[str, Any] | None:
        """
        Return the cached GetSecretValue response for a version id or stage.

        Args:
            version_id: Explicit version id. Takes precedence over version_stage.
            version_stage: Stage label; defaults to config.default_version_stage.

        Returns:
            A copy of the response dict, or None when the stage is not attached
            to any version (including secrets with no versions at all).

        Raises:
            Whatever the remote client raises, unchanged.
        """
        if version_id:
            return self._get_version_by_id(version_id).get_secret_value()

        stage = version_stage or self._config.default_version_stage
        resolved_version_id = self._get_version_id_for_stage(stage)
        if resolved_version_id is None:
            logger.debug(
                "Version stage not attached to any version",
                extra={"secret_id": self._secret_id, "version_stage": stage},
            )
            return None

        return self._get_version_by_id(resolved_version_id).get_secret_value()

    def version_ids_by_stage(self) -> dict[str, str]:
        """Copy of the stage map as of the last refresh (no remote call)."""
        with self._stage_lock:
            return dict(self._version_ids_by_stage)

    def cached_version_ids(self) -> list[str]:
        """Version ids currently held in the pool, least recently used first."""
        return self._versions.keys()

    def _get_version_by_id(self, version_id: str) -> CachedSecretVersion:
        # An unseen version id usually means a rotation is in progress; it
        # gets its own entry and first-time fetch.
        return self._versions.get_or_create(
            version_id,
            lambda: CachedSecretVersion(
                client=self._client,
                config=self._config,
                secret_id=self._secret_id,
                version_id=version_id,
            ),
        )

    def _get_version_id_for_stage(self, version_stage: str) -> str | None:
        with self._stage_lock:
            if monotonic_ms() > self._next_refresh_time:
                self._refresh_versions()
            return self._version_ids_by_stage.get(version_stage)

    def _refresh_versions(self) -> None:
        try:
            response = self._client.describe_secret(SecretId=self._secret_id)
        except Exception:
            logger.warning(
                "DescribeSecret failed, stage map left stale",
                extra={"secret_id": self._secret_id},
            )
            raise

        version_ids_to_stages = response.get("VersionIdsToStages")
        if not version_ids_to_stages:
            # No versions attached: empty map, deadline stays expired
            self._version_ids_by_stage = {}
            logger.debug(
                "Secret has no versions",
                extra={"secret_id": self._secret_id},
            )
            return

        self._version_ids_by_stage = build_version_ids_by_stage(version_ids_to_stages)
        self._reset_refresh_time()
        logger.debug(
            "Secret stage map refreshed",
            extra={
                "secret_id": self._secret_id,
                "stages": sorted(self._version_ids_by_stage),
            },
        )

    def _reset_refresh_time(self) -> None:
        ttl = choose_jittered_ttl(self._config.secret_refresh_interval)
        self._next_refresh_time = monotonic_ms() + ttl


__all__ = ["MAX_VERSIONS_CACHE", "CachedSecret", "build_version_ids_by_stage"]
