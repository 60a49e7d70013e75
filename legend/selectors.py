"""
Selector Layer
==============
Read API over a built DescriptorTable.

`select` delegates to `table.get`, so it returns the same object for the same
id on every call. `select_many` and `select_record` are assembled from
`select` calls only, which keeps reference equality across all accessors.
Every collection handed out is immutable (tuples, read-only mappings).
"""

import logging
from types import MappingProxyType
from typing import Generic, Iterable, Mapping, Optional, Tuple, TypeVar

from legend.descriptors.lookup import DescriptorTable
from legend.descriptors.types import AssetDescriptor, TriggerDescriptor
from legend.errors import MissingTriggerError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MetadataSelector(Generic[T]):
    """Memoizing selector over one domain table."""

    def __init__(self, table: DescriptorTable[T]):
        self._table = table

    @property
    def table(self) -> DescriptorTable[T]:
        return self._table

    @property
    def by_id(self) -> Mapping[str, T]:
        """Known descriptors only. Fallbacks are never enumerated."""
        return self._table.record

    @property
    def list(self) -> Tuple[T, ...]:
        return self._table.values()

    def has(self, descriptor_id: str) -> bool:
        return self._table.has(descriptor_id)

    def select(self, descriptor_id: str) -> T:
        return self._table.get(descriptor_id)

    def select_many(self, descriptor_ids: Iterable[str]) -> Tuple[T, ...]:
        return tuple(self.select(descriptor_id) for descriptor_id in descriptor_ids)

    def select_record(self, descriptor_ids: Iterable[str]) -> Mapping[str, T]:
        record = {}
        for descriptor_id in descriptor_ids:
            record[descriptor_id] = self.select(descriptor_id)
        return MappingProxyType(record)


class TriggerSelector(MetadataSelector[TriggerDescriptor]):
    """
    Trigger selector. Unregistered ids raise instead of synthesizing.

    Raises:
        MissingTriggerError: From `select` when the id has no descriptor
    """

    def select(self, descriptor_id: str) -> TriggerDescriptor:
        if not self._table.has(descriptor_id):
            logger.error(f"Trigger {descriptor_id!r} is not registered")
            raise MissingTriggerError.missing_label(descriptor_id)
        return self._table.get(descriptor_id)


class AssetSelector:
    """Selector for one singleton asset."""

    def __init__(self, descriptor: AssetDescriptor):
        self._descriptor = descriptor

    @property
    def descriptor(self) -> AssetDescriptor:
        return self._descriptor

    def select(self, _descriptor_id: Optional[str] = None) -> AssetDescriptor:
        return self._descriptor


def create_selector(table: DescriptorTable[T]) -> MetadataSelector[T]:
    return MetadataSelector(table)
