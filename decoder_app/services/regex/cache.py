"""Bounded cache of compiled regular expressions.

When the cache is full the whole map is cleared before the next insert
(a full reset, not LRU).
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Pattern

from decoder_app.services.errors import PatternCompileError

logger = logging.getLogger(__name__)


@dataclass
class CacheState:
    size: int
    limit: int
    capacity: int

    def to_dict(self):
        return {'size': self.size, 'limit': self.limit, 'capacity': self.capacity}


def compile_pattern(pattern: str) -> Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompileError(pattern, str(e)) from e


class PatternCache:
    """Not thread-safe; see SharedPatternCache."""

    def __init__(self, capacity: int = 0, limit: int = 0):
        if capacity < 0 or limit < 0:
            raise ValueError("capacity 与 limit 不能为负数")
        # capacity 只是预估容量，dict 无需预分配
        self.capacity = capacity
        self._limit = limit
        self._patterns: Dict[str, Pattern] = {}

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern: str) -> bool:
        return pattern in self._patterns

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def is_limited(self) -> bool:
        return self._limit > 0

    @property
    def reached_limit(self) -> bool:
        return self.is_limited and len(self._patterns) >= self._limit

    def lookup(self, pattern: str):
        return self._patterns.get(pattern)

    def insert(self, pattern: str, compiled: Pattern) -> Pattern:
        if self.reached_limit:
            logger.info(f"正则缓存已达上限 {self._limit}，清空缓存")
            self._patterns.clear()
        self._patterns[pattern] = compiled
        return compiled

    def get(self, pattern: str) -> Pattern:
        compiled = self._patterns.get(pattern)
        if compiled is not None:
            return compiled
        return self.insert(pattern, compile_pattern(pattern))

    def clear(self):
        self._patterns.clear()

    def state(self) -> CacheState:
        return CacheState(size=len(self._patterns), limit=self._limit, capacity=self.capacity)


class SharedPatternCache:
    """PatternCache shared between request threads.

    Hits are served without taking the lock (a single dict read). Misses take
    the lock, look again so concurrent misses on one pattern compile it once,
    then clear-if-full and insert in the same critical section.
    """

    def __init__(self, capacity: int = 0, limit: int = 0):
        self._cache = PatternCache(capacity=capacity, limit=limit)
        self._lock = threading.Lock()
        self.compiles = 0

    def get(self, pattern: str) -> Pattern:
        compiled = self._cache.lookup(pattern)
        if compiled is not None:
            return compiled
        with self._lock:
            compiled = self._cache.lookup(pattern)
            if compiled is not None:
                return compiled
            compiled = compile_pattern(pattern)
            self.compiles += 1
            return self._cache.insert(pattern, compiled)

    def clear(self):
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def limit(self) -> int:
        return self._cache.limit

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    @property
    def is_limited(self) -> bool:
        return self._cache.is_limited

    @property
    def reached_limit(self) -> bool:
        return self._cache.reached_limit

    def state(self) -> CacheState:
        with self._lock:
            return self._cache.state()


__all__ = ['CacheState', 'PatternCache', 'SharedPatternCache', 'compile_pattern']
