"""
Resource Display Buckets
========================
Partition the catalog into what a player panel renders:

- resources: plain resources outside any parented group
- stats: resources whose id carries the `:stat:` segment
- groups: parented groups with their children in reconciled order

A group's value is its parent's value as supplied by the simulation
snapshot. This layer never sums the children itself.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from legend.models.resources import ResourceDisplay, TierDefinition
from legend.resources.catalog import ResourceCatalog

STAT_SEGMENT = ":stat:"


@dataclass(frozen=True)
class ResourceEntry:
    id: str
    display: ResourceDisplay
    value: Optional[float] = None
    percent: bool = False
    tier: Optional[TierDefinition] = None


@dataclass(frozen=True)
class GroupEntry:
    id: str
    parent_id: str
    display: Optional[ResourceDisplay]
    value: Optional[float]
    percent: bool
    children: Tuple[ResourceEntry, ...]


@dataclass(frozen=True)
class DisplayBuckets:
    resources: Tuple[ResourceEntry, ...] = ()
    stats: Tuple[ResourceEntry, ...] = ()
    groups: Tuple[GroupEntry, ...] = ()


def is_stat_id(resource_id: str) -> bool:
    return STAT_SEGMENT in resource_id


def _entry(
    catalog: ResourceCatalog, resource_id: str, values: Mapping[str, float]
) -> ResourceEntry:
    value = values.get(resource_id)
    return ResourceEntry(
        id=resource_id,
        display=catalog.resolve_display(resource_id),
        value=value,
        percent=catalog.resolve_percent_flag(resource_id),
        tier=catalog.resolve_tier(resource_id, value) if value is not None else None,
    )


def build_display_buckets(
    catalog: ResourceCatalog,
    values: Optional[Mapping[str, float]] = None,
) -> DisplayBuckets:
    """
    Args:
        catalog: Catalog for the current session snapshot
        values: Current player values keyed by resource or parent id
    """
    values = values or {}
    resources = []
    stats = []
    grouped = set()
    groups = []

    for group in catalog.groups:
        if group.parent is None:
            continue
        children = catalog.ordered_children(group.id)
        grouped.update(children)
        parent_id = group.parent.id
        groups.append(
            GroupEntry(
                id=group.id,
                parent_id=parent_id,
                display=catalog.resolve_group_display(group.id),
                value=values.get(parent_id),
                percent=catalog.resolve_percent_flag(parent_id),
                children=tuple(_entry(catalog, child_id, values) for child_id in children),
            )
        )

    for resource in catalog.resources:
        if resource.id in grouped:
            continue
        target = stats if is_stat_id(resource.id) else resources
        target.append(_entry(catalog, resource.id, values))

    return DisplayBuckets(
        resources=tuple(resources),
        stats=tuple(stats),
        groups=tuple(groups),
    )
