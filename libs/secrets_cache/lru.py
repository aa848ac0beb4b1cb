"""
Fixed-capacity least-recently-used pool.

Both pool layers of the secrets cache (secret caches keyed by secret id, and
version caches keyed by version id) use this container. Entries are created
lazily through ``get_or_create`` and leave the pool only under capacity
pressure; there is no TTL here, freshness is tracked by the entries
themselves.

Thread Safety:
    All operations are guarded by a threading.Lock. The factory passed to
    ``get_or_create`` runs under the lock, so it must be cheap and must not
    call back into the pool (entry constructors in this package never perform
    remote calls).
"""

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUPool(Generic[K, V]):
    """
    OrderedDict-backed map with access-order eviction.

    The most recently used key sits at the end of the OrderedDict; when an
    insert would exceed ``capacity`` the first (oldest) key is evicted.

    Example:
        >>> pool: LRUPool[str, int] = LRUPool(capacity=2)
        >>> pool.get_or_create("a", lambda: 1)
        1
        >>> pool.get_or_create("b", lambda: 2)
        2
        >>> pool.get_or_create("a", lambda: 99)  # hit, "a" becomes most recently used
        1
        >>> pool.get_or_create("c", lambda: 3)  # evicts "b"
        3
        >>> "b" in pool
        False
    """

    def __init__(self, capacity: int, name: str = "pool") -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._name = name
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get_or_create(self, key: K, factory: Callable[[], V]) -> V:
        """
        Return the entry for ``key``, creating it with ``factory`` on a miss.

        Either way the entry ends up most recently used. Creating a new entry
        in a full pool evicts the least recently used one first.
        """
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return self._entries[key]

            if len(self._entries) >= self._capacity:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug(
                    "Evicted least recently used entry",
                    extra={"pool": self._name, "key": evicted_key},
                )

            value = factory()
            self._entries[key] = value
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[K]:
        """Snapshot of keys, least recently used first."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership checks do not count as use
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["LRUPool"]
