"""
Compiled delimiter regex cache

Every distinct delimiter pair seen while parsing needs three compiled
patterns (open tag, close tag, triple-mustache close). They are built once
and shared process-wide through a small bounded cache.

Eviction is by insertion order: when the cache is full the entry inserted
first is dropped, regardless of how recently it was used. The default
"{{ }}" entry is seeded on construction and is evictable like any other.

Example:
    >>> from whisker.lib.tagcache import regex_cache
    >>> regexes = regex_cache.regexes_getOrBuild(Tags("<%", "%>"))
    >>> regexes.open_tag.pattern
    '<%\\\\s*'
"""

import re
import threading
from typing import Dict, List, Optional

from ..config import appsettings
from ..models.tags import DEFAULT_TAGS, DelimiterRegexes, Tags
from .log import LOG

_ESCAPE_PATTERN = re.compile(r"[\-\[\]{}()*+?.,\^$|#\s]")


def escape_for_pattern(text: str) -> str:
    """
    Escape regex metacharacters so text can be matched literally

    Escapes - [ ] { } ( ) * + ? . , ^ $ | # and any whitespace.

    Example:
        >>> escape_for_pattern("{{")
        '\\\\{\\\\{'
    """
    return _ESCAPE_PATTERN.sub(lambda match: "\\" + match.group(0), text)


def regexes_build(tags: Tags) -> DelimiterRegexes:
    """Compile the open/close/triple-close patterns for a delimiter pair"""
    return DelimiterRegexes(
        open_tag=re.compile(escape_for_pattern(tags.open) + r"\s*"),
        close_tag=re.compile(r"\s*" + escape_for_pattern(tags.close)),
        triple_close=re.compile(r"\s*" + escape_for_pattern("}" + tags.close)),
    )


class DelimiterRegexCache:
    """
    Bounded, thread-safe map from Tags to DelimiterRegexes

    Keys are the canonical "open close" string of a Tags value. Lookups and
    inserts share one lock so the size check and eviction on insert are
    atomic with respect to concurrent parses.

    Attributes:
        capacity: Maximum number of entries; assigning a smaller value evicts
                  the oldest entries immediately
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is None:
            capacity = appsettings.regex_cache_size
        self._capacity = self._capacity_check(capacity)
        self._lock = threading.Lock()
        self._entries: Dict[str, DelimiterRegexes] = {
            str(DEFAULT_TAGS): regexes_build(DEFAULT_TAGS),
        }
        self._evictOldest(self._capacity)

    @staticmethod
    def _capacity_check(capacity: int) -> int:
        if capacity < 1:
            raise ValueError(f"Regex cache capacity must be at least 1, got {capacity}")
        return capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        value = self._capacity_check(value)
        with self._lock:
            self._capacity = value
            evicted = self._evictOldest(value)
        self._evictions_log(evicted)

    def _evictOldest(self, limit: int) -> List[str]:
        """Drop the earliest-inserted entries until at most limit remain (lock held)"""
        evicted = []
        while len(self._entries) > limit:
            key = next(iter(self._entries))
            del self._entries[key]
            evicted.append(key)
        return evicted

    @staticmethod
    def _evictions_log(evicted: List[str]) -> None:
        for key in evicted:
            LOG(f"Evicted delimiter regexes for '{key}'", level=2)

    def regexes_getOrBuild(self, tags: Tags) -> DelimiterRegexes:
        """
        Return the compiled patterns for tags, building them on a miss

        Args:
            tags: Delimiter pair to look up

        Returns:
            DelimiterRegexes shared by every caller using equal Tags
        """
        key = str(tags)
        with self._lock:
            regexes = self._entries.get(key)
            if regexes is not None:
                return regexes

            regexes = regexes_build(tags)
            evicted = self._evictOldest(self._capacity - 1)
            self._entries[key] = regexes

        self._evictions_log(evicted)
        LOG(f"Built delimiter regexes for '{key}'", level=2)
        return regexes

    def keys(self) -> List[str]:
        """Cache keys, oldest first"""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tags: object) -> bool:
        return str(tags) in self._entries


# Process-wide cache shared by every Parser that is not given its own
regex_cache = DelimiterRegexCache()
