"""Regex capture helpers backed by the shared pattern cache."""

from typing import Dict, Optional


def capture_first_group(cache, text: str, pattern: str) -> str:
    """Return group 1 of the first match, or '' when there is no match or no group."""
    match = cache.get(pattern).search(text)
    if match is None or match.re.groups < 1:
        return ''
    return match.group(1) or ''


def capture_named_groups(cache, text: str, pattern: str) -> Dict[str, Optional[str]]:
    match = cache.get(pattern).search(text)
    if match is None:
        return {}
    return match.groupdict()


__all__ = ['capture_first_group', 'capture_named_groups']
