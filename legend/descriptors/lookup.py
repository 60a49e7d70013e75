"""
Descriptor Resolver
===================
Generic `id -> descriptor` table with override-then-fallback semantics.

A table is built once from explicit entries. Unknown ids are handed to a
fallback factory exactly once; the result is cached so that repeated lookups
return the *same* object. The cache is injected, which lets several tables
(and the breakdown engine) share one session-scoped cache that tests can clear.
"""

import logging
import re
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, Mapping, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SEPARATOR_RUNS = re.compile(r"[_-]+")
_WORD_START = re.compile(r"\b\w")


def format_fallback_label(value: str) -> str:
    """
    Synthesize a display label from an id.

    'resource_one-two' -> 'Resource One Two'
    """
    spaced = _SEPARATOR_RUNS.sub(" ", value).strip()
    if not spaced:
        return value
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


# =============================================================================
# FALLBACK CACHE
# =============================================================================


class FallbackCache:
    """
    Monotonically growing memo table keyed by (namespace, key).

    There is no eviction: the key space is bounded by loaded game content.
    """

    def __init__(self):
        self._entries: Dict[Tuple[str, Any], Any] = {}
        # Re-entrant: a factory may resolve other entries
        self._lock = threading.RLock()

    def get_or_create(self, namespace: str, key: Any, factory: Callable[[], T]) -> T:
        cache_key = (namespace, key)
        with self._lock:
            if cache_key in self._entries:
                return self._entries[cache_key]
            value = factory()
            self._entries[cache_key] = value
            return value

    def __contains__(self, cache_key: Tuple[str, Any]) -> bool:
        return cache_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()


# =============================================================================
# TABLE
# =============================================================================


class DescriptorTable(Generic[T]):
    """
    Read-only descriptor table for one domain.

    `record` only ever lists the known (explicit) ids; fallback descriptors are
    reachable through `get` but never enumerated.
    """

    def __init__(
        self,
        entries: Iterable[Tuple[str, T]],
        fallback: Callable[[str], T],
        namespace: str = "descriptor",
        cache: Optional[FallbackCache] = None,
    ):
        known: Dict[str, T] = {}
        for descriptor_id, descriptor in entries:
            known[descriptor_id] = descriptor
        self._known = known
        self._record: Mapping[str, T] = MappingProxyType(known)
        self._values: Tuple[T, ...] = tuple(known.values())
        self._fallback = fallback
        self.namespace = namespace
        self._cache = cache if cache is not None else FallbackCache()

    @property
    def record(self) -> Mapping[str, T]:
        return self._record

    def values(self) -> Tuple[T, ...]:
        return self._values

    def has(self, descriptor_id: str) -> bool:
        return descriptor_id in self._known

    def get(self, descriptor_id: str) -> T:
        known = self._known.get(descriptor_id)
        if known is not None:
            return known
        return self._cache.get_or_create(
            self.namespace, descriptor_id, lambda: self._create_fallback(descriptor_id)
        )

    def _create_fallback(self, descriptor_id: str) -> T:
        logger.debug(f"Synthesizing {self.namespace} fallback for {descriptor_id!r}")
        return self._fallback(descriptor_id)

    def __contains__(self, descriptor_id: object) -> bool:
        return descriptor_id in self._known

    def __iter__(self) -> Iterator[str]:
        return iter(self._known)

    def __len__(self) -> int:
        return len(self._known)


def build_table(
    entries: Iterable[Tuple[str, T]],
    fallback: Callable[[str], T],
    namespace: str = "descriptor",
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[T]:
    """Build a descriptor table. See DescriptorTable."""
    return DescriptorTable(entries, fallback, namespace=namespace, cache=cache)
