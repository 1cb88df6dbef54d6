"""
Query Cache - Keyed store for backend reads.

Passed explicitly to the services that use it; there is no module-level
instance.
"""
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class QueryCache:
    """
    Cache of fetched resources keyed by their API path.

    ``invalidate`` drops every key under a path prefix, so a submit to
    /api/quotations also drops /api/quotations/12.
    """

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: str, value: Any):
        self._entries[key] = value

    def fetch(self, key: str, loader: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, loading it on a miss."""
        if key in self._entries:
            return self._entries[key]
        value = loader()
        self._entries[key] = value
        return value

    def invalidate(self, prefix: str) -> int:
        """Drop ``prefix`` and every key below it. Returns the number dropped."""
        prefix = prefix.rstrip('/')
        stale = [k for k in self._entries if k == prefix or k.startswith(prefix + '/')]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("cache_invalidated", prefix=prefix, keys=len(stale))
        return len(stale)

    def clear(self):
        self._entries.clear()
