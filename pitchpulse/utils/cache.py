"""Simple TTL caches for catalog lookups.

Usage:
    _cache = SimpleCache(ttl=30)

    # Read
    hit, data = _cache.get(params=("today", "2024-05-01"))
    if hit:
        return data

    # Write
    data = await load_catalog()
    _cache.set(data, params=("today", "2024-05-01"))

    # One slot per view, so switching views does not evict the others
    catalogs = KeyedCache(ttl=30)
    hit, data = catalogs.get("live", params="2024-05-01")
"""

import time


_UNSET = object()


class SimpleCache:
    """TTL-based single-value cache with optional param-aware invalidation."""

    __slots__ = ("ttl", "data", "timestamp", "params")

    def __init__(self, ttl: float):
        self.ttl = ttl
        self.data = None
        self.timestamp: float = 0.0
        self.params = None

    def get(self, *, params=_UNSET) -> tuple[bool, object]:
        """Return (hit, data). Check TTL and optional params match."""
        if self.data is None:
            return False, None
        if time.time() - self.timestamp >= self.ttl:
            return False, None
        if params is not _UNSET and self.params != params:
            return False, None
        return True, self.data

    def set(self, data: object, *, params=None) -> None:
        """Store data with current timestamp."""
        self.data = data
        self.timestamp = time.time()
        if params is not None:
            self.params = params

    def invalidate(self) -> None:
        """Clear cached data."""
        self.data = None
        self.timestamp = 0.0
        self.params = None


class KeyedCache:
    """A SimpleCache per key, created lazily with a shared TTL."""

    def __init__(self, ttl: float):
        self.ttl = ttl
        self._slots: dict[object, SimpleCache] = {}

    def get(self, key, *, params=_UNSET) -> tuple[bool, object]:
        slot = self._slots.get(key)
        if slot is None:
            return False, None
        return slot.get(params=params)

    def set(self, key, data: object, *, params=None) -> None:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = SimpleCache(self.ttl)
        slot.set(data, params=params)

    def invalidate(self, key=_UNSET) -> None:
        """Clear one key, or everything when no key is given."""
        if key is _UNSET:
            self._slots.clear()
            return
        slot = self._slots.pop(key, None)
        if slot is not None:
            slot.invalidate()
