"""Shared fixtures for libs/secrets_cache tests.

The remote client is always a MagicMock shaped like a boto3
``secretsmanager`` client, so describe/get call counts are directly
observable through ``call_count`` and ``call_args_list``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from libs.secrets_cache.config import SecretCacheConfig

EXAMPLE_SECRET_ID = "prod/database/password"
EXAMPLE_VERSION_ID = "01234567890123456789012345678901"
EXAMPLE_VERSIONS = {EXAMPLE_VERSION_ID: ["AWSCURRENT"]}
EXAMPLE_RESPONSE = {"SecretString": "test"}


def _make_client(
    versions: dict[str, list[str]] | None = None,
    response: dict[str, Any] | None = None,
) -> MagicMock:
    """Build a mock client returning ``versions`` from DescribeSecret and
    ``response`` from every GetSecretValue call."""
    client = MagicMock()
    describe: dict[str, Any] = {"Name": EXAMPLE_SECRET_ID}
    if versions is not None:
        describe["VersionIdsToStages"] = versions
    client.describe_secret.return_value = describe
    client.get_secret_value.return_value = dict(response or EXAMPLE_RESPONSE)
    return client


def _make_versioned_client(versions: dict[str, list[str]]) -> MagicMock:
    """Mock client whose GetSecretValue echoes the requested ids back, so
    tests can tell which version a value came from."""
    client = MagicMock()
    client.describe_secret.return_value = {"VersionIdsToStages": versions}

    def _get_secret_value(**kwargs: Any) -> dict[str, Any]:
        return {
            "Name": kwargs["SecretId"],
            "VersionId": kwargs.get("VersionId"),
            "SecretString": f"value-{kwargs['SecretId']}-{kwargs.get('VersionId')}",
        }

    client.get_secret_value.side_effect = _get_secret_value
    return client


@pytest.fixture()
def config() -> SecretCacheConfig:
    """Default configuration (1 hour refresh, AWSCURRENT, 1024 secrets)."""
    return SecretCacheConfig(
        max_cache_size=1024,
        secret_refresh_interval=60 * 60 * 1000,
        default_version_stage="AWSCURRENT",
    )


@pytest.fixture()
def short_ttl_config() -> SecretCacheConfig:
    """Configuration with a 1 ms refresh interval (every spaced read refreshes)."""
    return SecretCacheConfig(secret_refresh_interval=1)


@pytest.fixture()
def make_client() -> Callable[..., MagicMock]:
    """Factory fixture for mock clients with fixed describe/get responses."""
    return _make_client


@pytest.fixture()
def make_versioned_client() -> Callable[[dict[str, list[str]]], MagicMock]:
    """Factory fixture for mock clients that echo the requested version id."""
    return _make_versioned_client


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture()
def fake_clock() -> Iterator[FakeClock]:
    """Replace monotonic_ms() in both caching layers with a FakeClock."""
    clock = FakeClock()
    with (
        patch("libs.secrets_cache.version_cache.monotonic_ms", clock),
        patch("libs.secrets_cache.secret_cache.monotonic_ms", clock),
    ):
        yield clock
