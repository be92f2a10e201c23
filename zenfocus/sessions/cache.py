"""A small time-to-live cache keyed by session id."""

from __future__ import annotations

import logging
from typing import Generic, Hashable, TypeVar

from ..clock import Clock, SYSTEM_CLOCK

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_TTL_SECONDS = 5 * 60


class TTLCache(Generic[K, V]):
    """Entries expire *ttl* seconds after they were put.

    Expiry is checked on ``get``, and every ``put`` sweeps out all expired
    entries so keys that are never read again don't pile up.
    ``invalidate`` drops an entry immediately.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Clock | None = None,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock: Clock = clock or SYSTEM_CLOCK
        self._entries: dict[K, tuple[V, float]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, inserted_at = entry
        if self._clock.monotonic() - inserted_at > self._ttl:
            del self._entries[key]
            logger.debug("Cache entry %s expired", key)
            return None
        return value

    def put(self, key: K, value: V) -> None:
        self.purge_expired()
        self._entries[key] = (value, self._clock.monotonic())

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were dropped."""
        now = self._clock.monotonic()
        expired = [
            k for k, (_, inserted_at) in self._entries.items()
            if now - inserted_at > self._ttl
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %s expired cache entries", len(expired))
        return len(expired)

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)
