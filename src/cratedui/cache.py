"""
TTL cache in front of the runtime API.

Entries expire per resource type (matched by key prefix); write actions
invalidate the keys they affect.

Architecture:
- CacheManager: key -> CacheEntry map guarded by an RLock
- cached: decorator keyed on a prefix plus the first positional argument
"""

import time
import threading
from typing import Dict, Any, Optional
from dataclasses import dataclass
from functools import wraps
import logging

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    timestamp: float
    ttl: float

    def is_expired(self) -> bool:
        return time.time() - self.timestamp > self.ttl


class CacheManager:
    """Thread-safe cache manager with per-resource TTLs."""

    DEFAULT_TTL = 2.0

    def __init__(self):
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._stats = {'hits': 0, 'misses': 0, 'evictions': 0}

        # seconds, matched by key prefix
        self.ttl_config = {
            'containers': 1.0,
            'networks': 10.0,
            'container_stats': 2.0,
            'disk_usage': 10.0,
        }

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats['misses'] += 1
                return None

            if entry.is_expired():
                del self._cache[key]
                self._stats['misses'] += 1
                self._stats['evictions'] += 1
                return None

            self._stats['hits'] += 1
            return entry.value

    def set(self, key: str, value: Any, ttl_override: Optional[float] = None) -> None:
        with self._lock:
            ttl = ttl_override
            if ttl is None:
                for resource_type, default_ttl in self.ttl_config.items():
                    if key.startswith(resource_type):
                        ttl = default_ttl
                        break
                else:
                    ttl = self.DEFAULT_TTL
            self._cache[key] = CacheEntry(value, time.time(), ttl)

    def invalidate(self, pattern: Optional[str] = None) -> None:
        """Drop every entry, or only those whose key starts with `pattern`."""
        with self._lock:
            if pattern is None:
                self._cache.clear()
                logger.debug("Cache completely cleared")
                return
            keys_to_remove = [k for k in self._cache if k.startswith(pattern)]
            for key in keys_to_remove:
                del self._cache[key]
            logger.debug(f"Invalidated {len(keys_to_remove)} cache entries for pattern: {pattern}")

    def cleanup_expired(self) -> int:
        with self._lock:
            expired = [k for k, entry in self._cache.items() if entry.is_expired()]
            for key in expired:
                del self._cache[key]
            if expired:
                self._stats['evictions'] += len(expired)
                logger.debug(f"Cleaned up {len(expired)} expired cache entries")
            return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {**self._stats, 'cache_size': len(self._cache)}


# Global cache instance
cache_manager = CacheManager()


def cached(ttl_override: Optional[float] = None, key_prefix: Optional[str] = None):
    """Cache a backend method's result.

    Args:
        ttl_override: Override default TTL for this function
        key_prefix: Cache key prefix (defaults to function name)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            prefix = key_prefix or func.__name__
            cache_key = f"{prefix}:{args[0] if args else ''}"

            cached_result = cache_manager.get(cache_key)
            if cached_result is not None:
                return cached_result

            result = func(self, *args, **kwargs)
            cache_manager.set(cache_key, result, ttl_override)
            return result

        return wrapper
    return decorator
