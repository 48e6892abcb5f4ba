from .cache import CacheState, PatternCache, SharedPatternCache, compile_pattern  # noqa: F401
from .capture import capture_first_group, capture_named_groups  # noqa: F401

__all__ = [
    'CacheState',
    'PatternCache',
    'SharedPatternCache',
    'compile_pattern',
    'capture_first_group',
    'capture_named_groups',
]
