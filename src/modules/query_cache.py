"""Keyed cache for list queries with explicit invalidation.

Each key maps to a ``CacheEntry`` holding the last fetched value and a
validity flag. ``invalidate`` is a plain write to that flag, so the next
``get`` refetches from the source. Subscribers are told which key was
invalidated so that live views can re-render.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


@dataclass(slots=True)
class CacheEntry:
    value: Any = None
    valid: bool = False
    has_value: bool = False
    # Bumped on every invalidation so a fetch started earlier can't revalidate
    version: int = 0
    inflight: Optional[asyncio.Future] = None


class QueryCache:
    """Cache map from query key to its last result, as a Quart extension."""

    def __init__(self, app=None):
        self.entries: Dict[str, CacheEntry] = {}
        self._listeners: List[Listener] = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.entries.clear()
        self._listeners.clear()
        app.extensions["query_cache"] = self

    def _entry(self, key: str) -> CacheEntry:
        entry = self.entries.get(key)
        if entry is None:
            entry = self.entries[key] = CacheEntry()
        return entry

    async def get(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key``, fetching it when stale.

        Concurrent callers for a stale key share a single fetch. Fetch
        errors propagate to every waiting caller and leave the entry stale.
        """
        entry = self._entry(key)
        if entry.valid:
            return entry.value

        if entry.inflight is not None and not entry.inflight.done():
            return await asyncio.shield(entry.inflight)

        version = entry.version
        future = asyncio.get_running_loop().create_future()
        entry.inflight = future
        try:
            value = await fetcher()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so a future nobody else awaited doesn't warn
            future.exception()
            raise
        finally:
            if entry.inflight is future:
                entry.inflight = None

        if entry.version == version:
            entry.value = value
            entry.has_value = True
            entry.valid = True
        else:
            # A newer fetch owns the entry now, only seed it if still empty
            if not entry.has_value:
                entry.value = value
                entry.has_value = True
            logger.debug(f"Discarding stale fetch for {key}")
        future.set_result(value)
        return value

    def peek(self, key: str) -> Any:
        """Return the last fetched value for ``key`` without fetching."""
        entry = self.entries.get(key)
        if entry is None or not entry.has_value:
            return None
        return entry.value

    def is_valid(self, key: str) -> bool:
        entry = self.entries.get(key)
        return entry is not None and entry.valid

    def invalidate(self, key: str):
        """Mark ``key`` stale and notify subscribers."""
        entry = self._entry(key)
        entry.valid = False
        entry.version += 1
        # Readers arriving from now on must not join a fetch that started earlier
        entry.inflight = None
        logger.debug(f"Invalidated query cache key {key}")
        for listener in list(self._listeners):
            try:
                listener(key)
            except Exception:
                logger.exception(f"Query cache listener failed for key {key}")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for invalidations; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
