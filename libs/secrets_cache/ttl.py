"""Jittered refresh deadlines for cached secrets.

Many processes usually start at the same time and cache the same secrets. If
every one of them refreshed exactly ``secret_refresh_interval`` after its first
fetch, the remote service would see synchronized bursts of DescribeSecret and
GetSecretValue calls. Each refresh therefore picks a random TTL in the latter
half of the configured interval.
"""

from __future__ import annotations

import math
import random
import time


def choose_jittered_ttl(max_ttl: float) -> float:
    """Return a randomized TTL in milliseconds within ``[max_ttl / 2, max_ttl)``.

    Args:
        max_ttl: Upper bound in milliseconds. Must be non-negative.

    Returns:
        A TTL no smaller than half of ``max_ttl`` and strictly smaller than
        ``max_ttl``. A ``max_ttl`` of 0 yields 0 (refresh on every read).

    Raises:
        ValueError: If ``max_ttl`` is negative.

    Example:
        >>> ttl = choose_jittered_ttl(3_600_000)
        >>> 1_800_000 <= ttl < 3_600_000
        True
    """
    if max_ttl < 0:
        raise ValueError(f"max_ttl must be non-negative, got {max_ttl}")

    if max_ttl == 0:
        return 0.0

    half = max_ttl / 2
    ttl = half + random.random() * half
    # half + r * half can round up to max_ttl for r close to 1.0
    return min(ttl, math.nextafter(max_ttl, 0))


def monotonic_ms() -> float:
    """Current monotonic clock reading in milliseconds."""
    return time.monotonic() * 1000


__all__ = ["choose_jittered_ttl", "monotonic_ms"]
