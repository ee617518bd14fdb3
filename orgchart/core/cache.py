"""In-process TTL cache shared by the org, teams and auth layers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class TTLCache:
    """Key/value cache with per-entry expiry and prefix invalidation.

    Expired entries stay in place until they are overwritten or invalidated so
    callers can fall back to a stale value when a refresh fails.
    """

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return value

    def get_stale(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        return entry[0] if entry is not None else None

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        self._entries[key] = (value, self._clock() + ttl)

    def invalidate(self, key_prefix: str) -> int:
        keys = [k for k in self._entries if k.startswith(key_prefix)]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.debug("Invalidated %d cache entries for prefix %r", len(keys), key_prefix)
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
