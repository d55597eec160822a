"""
Resolution cache

Memoizes resolved templates per (template prefix, industry, project name)
for the lifetime of the process. Entries are never evicted.
"""
import threading
from typing import Any, Dict, Optional, Tuple

from config import CACHE_KEY_TEMPLATE_PREFIX


CacheKey = Tuple[str, str, str]


def make_cache_key(template: str, industry: Optional[str], project_name: Optional[str]) -> CacheKey:
    return (template[:CACHE_KEY_TEMPLATE_PREFIX], industry or '', project_name or '')


class ResolutionCache:
    """Interface for the resolver cache: get returns None on a miss."""

    def get(self, key: CacheKey) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: CacheKey, value: Any) -> None:
        raise NotImplementedError


class InMemoryResolutionCache(ResolutionCache):
    def __init__(self):
        self._entries: Dict[CacheKey, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[Any]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullResolutionCache(ResolutionCache):
    """Never stores anything; every lookup is a miss."""

    def get(self, key: CacheKey) -> Optional[Any]:
        return None

    def set(self, key: CacheKey, value: Any) -> None:
        return None
