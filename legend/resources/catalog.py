"""
ResourceV2 Catalog
==================
Hierarchical view over resources, groups and group parents.

Resolution rules:
- Display: a resource uses its own display; a parent id uses the parent's.
- Percent flag, tier track and tracking flags fall back from a resource to
  its group's parent when the resource omits them.
- Global action cost belongs to individual resources only.

Group child order is reconciled against the runtime members: declared
children first, then undeclared members in discovery order. Declared ids
without a runtime member are dropped.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from legend.descriptors.factories import fallback_label
from legend.errors import MetadataError
from legend.models.payload import (
    ResourceGroupParentSnapshot,
    ResourceGroupSnapshot,
    ResourceMetadataSnapshot,
    SessionMetadata,
)
from legend.models.resources import (
    GlobalActionCost,
    GroupParent,
    ResourceBounds,
    ResourceDefinition,
    ResourceDisplay,
    ResourceGroup,
    TierDefinition,
    TierTrack,
)

logger = logging.getLogger(__name__)


def reconcile_order(declared: Sequence[str], members: Iterable[str]) -> Tuple[str, ...]:
    """
    Reconcile a declared child order with the members actually present.

    declared=[b, a], members={a, b, c} -> (b, a, c)
    """
    pending: Dict[str, None] = dict.fromkeys(members)
    ordered: List[str] = []
    for child_id in declared:
        if child_id not in pending:
            continue
        ordered.append(child_id)
        del pending[child_id]
    ordered.extend(pending)
    return tuple(ordered)


class ResourceCatalog:
    """Read-only ResourceV2 hierarchy built once per session snapshot."""

    def __init__(
        self,
        resources: Iterable[ResourceDefinition] = (),
        groups: Iterable[ResourceGroup] = (),
    ):
        self._resources: Dict[str, ResourceDefinition] = {}
        for resource in resources:
            self._resources[resource.id] = resource

        self._groups: Dict[str, ResourceGroup] = {}
        self._parents: Dict[str, GroupParent] = {}
        self._group_id_by_parent_id: Dict[str, str] = {}
        for group in groups:
            self._groups[group.id] = group
            if group.parent is not None:
                self._parents[group.parent.id] = group.parent
                self._group_id_by_parent_id[group.parent.id] = group.id

        self._members: Dict[str, List[str]] = {}
        for resource in self._resources.values():
            if resource.group_id is None:
                continue
            if resource.group_id not in self._groups:
                logger.warning(
                    f"Resource {resource.id!r} references unknown group {resource.group_id!r}"
                )
            self._members.setdefault(resource.group_id, []).append(resource.id)

        for group in self._groups.values():
            missing = [
                child_id
                for child_id in group.children
                if child_id not in self._members.get(group.id, ())
            ]
            if missing:
                logger.warning(
                    f"Group {group.id!r} declares children without a member resource: {missing}"
                )

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    @property
    def resources(self) -> Tuple[ResourceDefinition, ...]:
        return tuple(self._resources.values())

    @property
    def groups(self) -> Tuple[ResourceGroup, ...]:
        return tuple(self._groups.values())

    @property
    def parents(self) -> Tuple[GroupParent, ...]:
        return tuple(self._parents.values())

    def has(self, resource_id: str) -> bool:
        return resource_id in self._resources or resource_id in self._parents

    def is_parent(self, resource_id: str) -> bool:
        return resource_id in self._parents

    def get_resource(self, resource_id: str) -> Optional[ResourceDefinition]:
        return self._resources.get(resource_id)

    def get_group(self, group_id: str) -> Optional[ResourceGroup]:
        return self._groups.get(group_id)

    def get_parent(self, parent_id: str) -> Optional[GroupParent]:
        return self._parents.get(parent_id)

    def group_of(self, resource_id: str) -> Optional[ResourceGroup]:
        """Group a resource belongs to, or the group a parent sits on."""
        resource = self._resources.get(resource_id)
        if resource is not None:
            if resource.group_id is None:
                return None
            return self._groups.get(resource.group_id)
        group_id = self._group_id_by_parent_id.get(resource_id)
        return self._groups.get(group_id) if group_id else None

    def parent_of(self, resource_id: str) -> Optional[GroupParent]:
        resource = self._resources.get(resource_id)
        if resource is None:
            return None
        group = self.group_of(resource_id)
        return group.parent if group else None

    def ordered_children(
        self, group_id: str, members: Optional[Iterable[str]] = None
    ) -> Tuple[str, ...]:
        """
        Display order of a group's children.

        Args:
            group_id: Group to order
            members: Runtime members; defaults to the resources that name
                this group, in catalog order
        """
        group = self._groups.get(group_id)
        declared = group.children if group else ()
        if members is None:
            members = self._members.get(group_id, ())
        return reconcile_order(declared, members)

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve_display(self, resource_id: str) -> Optional[ResourceDisplay]:
        resource = self._resources.get(resource_id)
        if resource is not None:
            return resource.display
        parent = self._parents.get(resource_id)
        if parent is not None:
            return parent.display
        return None

    def resolve_group_display(self, group_id: str) -> Optional[ResourceDisplay]:
        """Group display comes from its parent; the children never override it."""
        group = self._groups.get(group_id)
        if group is None:
            return None
        if group.parent is not None:
            return group.parent.display
        if group.title:
            return ResourceDisplay(
                name=group.title,
                icon=group.icon,
                description=group.description,
                order=group.order,
            )
        return None

    def resolve_bounds(self, resource_id: str) -> Optional[ResourceBounds]:
        resource = self._resources.get(resource_id)
        if resource is not None:
            return resource.bounds
        parent = self._parents.get(resource_id)
        return parent.bounds if parent else None

    def resolve_tier_track(self, resource_id: str) -> Optional[TierTrack]:
        resource = self._resources.get(resource_id)
        if resource is None:
            parent = self._parents.get(resource_id)
            return parent.tier_track if parent else None
        if resource.tier_track is not None:
            return resource.tier_track
        parent = self.parent_of(resource_id)
        return parent.tier_track if parent else None

    def resolve_tier(self, resource_id: str, value: float) -> Optional[TierDefinition]:
        track = self.resolve_tier_track(resource_id)
        return track.tier_for(value) if track else None

    def resolve_percent_flag(self, resource_id: str) -> bool:
        resource = self._resources.get(resource_id)
        if resource is None:
            parent = self._parents.get(resource_id)
            return bool(parent and parent.display.display_as_percent)
        if resource.display.display_as_percent is not None:
            return resource.display.display_as_percent
        parent = self.parent_of(resource_id)
        return bool(parent and parent.display.display_as_percent)

    def resolve_global_cost(self, resource_id: str) -> Optional[GlobalActionCost]:
        resource = self._resources.get(resource_id)
        return resource.global_action_cost if resource else None

    def resolve_tracking(self, resource_id: str) -> Tuple[bool, bool]:
        """(track_value_breakdown, track_bound_breakdown), parent as default."""
        resource = self._resources.get(resource_id)
        parent = self.parent_of(resource_id) if resource else self._parents.get(resource_id)
        own_value = resource.track_value_breakdown if resource else None
        own_bound = resource.track_bound_breakdown if resource else None
        if own_value is None and parent is not None:
            own_value = parent.track_value_breakdown
        if own_bound is None and parent is not None:
            own_bound = parent.track_bound_breakdown
        return bool(own_value), bool(own_bound)


def build_catalog(
    resources: Iterable[ResourceDefinition] = (),
    groups: Iterable[ResourceGroup] = (),
) -> ResourceCatalog:
    return ResourceCatalog(resources, groups)


# =============================================================================
# SNAPSHOT MERGE
# =============================================================================


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def _merge_display(
    descriptor_id: str, base: Optional[ResourceDisplay], snapshot
) -> ResourceDisplay:
    return ResourceDisplay(
        name=snapshot.name or (base.name if base else None) or fallback_label(descriptor_id),
        icon=_first(snapshot.icon, base.icon if base else None),
        description=_first(snapshot.description, base.description if base else None),
        order=_first(snapshot.order, base.order if base else None, 0),
        display_as_percent=_first(
            snapshot.display_as_percent, base.display_as_percent if base else None
        ),
    )


def _merge_bounds(base: Optional[ResourceBounds], snapshot) -> Optional[ResourceBounds]:
    lower = _first(snapshot.lower_bound, base.lower_bound if base else None)
    upper = _first(snapshot.upper_bound, base.upper_bound if base else None)
    if lower is None and upper is None:
        return None
    return ResourceBounds(lower_bound=lower, upper_bound=upper)


def _merge_parent(
    base: Optional[GroupParent], snapshot: Optional[ResourceGroupParentSnapshot]
) -> Optional[GroupParent]:
    if snapshot is None:
        return base
    parent_id = snapshot.id or (base.id if base else None)
    if parent_id is None:
        return base
    fields = dict(
        id=parent_id,
        order=_first(snapshot.order, base.order if base else None, 0),
        display=_merge_display(parent_id, base.display if base else None, snapshot),
        bounds=_merge_bounds(base.bounds if base else None, snapshot),
        tier_track=_first(snapshot.tier_track, base.tier_track if base else None),
        track_value_breakdown=_first(
            snapshot.track_value_breakdown, base.track_value_breakdown if base else None
        ),
        track_bound_breakdown=_first(
            snapshot.track_bound_breakdown, base.track_bound_breakdown if base else None
        ),
    )
    relation = _first(snapshot.relation, base.relation if base else None)
    if relation is not None:
        fields["relation"] = relation
    return GroupParent(**fields)


def _merge_group(
    group_id: str,
    base: Optional[ResourceGroup],
    snapshot: ResourceGroupSnapshot,
    parent_snapshots: Mapping[str, ResourceGroupParentSnapshot],
) -> ResourceGroup:
    base_parent = base.parent if base else None
    parent_snapshot = snapshot.parent
    if parent_snapshot is None and base_parent is not None:
        parent_snapshot = parent_snapshots.get(base_parent.id)
    return ResourceGroup(
        id=group_id,
        order=_first(snapshot.order, base.order if base else None, 0),
        title=_first(snapshot.name, base.title if base else None),
        icon=_first(snapshot.icon, base.icon if base else None),
        description=_first(snapshot.description, base.description if base else None),
        children=snapshot.children or (base.children if base else ()),
        parent=_merge_parent(base_parent, parent_snapshot),
    )


def _merge_resource(
    resource_id: str,
    base: Optional[ResourceDefinition],
    snapshot: ResourceMetadataSnapshot,
    group_id_by_parent_id: Mapping[str, str],
    parent_id: Optional[str],
) -> ResourceDefinition:
    group_id = _first(snapshot.group_id, base.group_id if base else None)
    parent_id = _first(snapshot.parent_id, parent_id)
    if group_id is None and parent_id is not None:
        group_id = group_id_by_parent_id.get(parent_id)
    return ResourceDefinition(
        id=resource_id,
        display=_merge_display(resource_id, base.display if base else None, snapshot),
        bounds=_merge_bounds(base.bounds if base else None, snapshot),
        group_id=group_id,
        tier_track=_first(snapshot.tier_track, base.tier_track if base else None),
        global_action_cost=_first(
            snapshot.global_action_cost, base.global_action_cost if base else None
        ),
        track_value_breakdown=_first(
            snapshot.track_value_breakdown, base.track_value_breakdown if base else None
        ),
        track_bound_breakdown=_first(
            snapshot.track_bound_breakdown, base.track_bound_breakdown if base else None
        ),
    )


def _ordered(items: Mapping[str, object], ordered_ids: Sequence[str], order_of) -> List:
    result = [items[item_id] for item_id in dict.fromkeys(ordered_ids) if item_id in items]
    seen = {item_id for item_id in ordered_ids if item_id in items}
    rest = [(item_id, item) for item_id, item in items.items() if item_id not in seen]
    rest.sort(key=lambda entry: (order_of(entry[1]), entry[0]))
    result.extend(item for _, item in rest)
    return result


def catalog_from_metadata(
    metadata: SessionMetadata,
    resources: Iterable[ResourceDefinition] = (),
    groups: Iterable[ResourceGroup] = (),
) -> ResourceCatalog:
    """
    Build a catalog from registry definitions with snapshot metadata merged
    over them. Snapshot values win field by field.

    Raises:
        MetadataError: If the merged data violates a ResourceV2 constraint
    """
    try:
        group_defs: Dict[str, ResourceGroup] = {group.id: group for group in groups}
        for group_id, snapshot in metadata.resource_groups.items():
            group_defs[group_id] = _merge_group(
                group_id, group_defs.get(group_id), snapshot, metadata.resource_group_parents
            )
        group_id_by_parent_id = {
            group.parent.id: group.id for group in group_defs.values() if group.parent
        }

        resource_defs: Dict[str, ResourceDefinition] = {
            resource.id: resource for resource in resources
        }
        for resource_id, snapshot in metadata.resource_metadata.items():
            resource_defs[resource_id] = _merge_resource(
                resource_id,
                resource_defs.get(resource_id),
                snapshot,
                group_id_by_parent_id,
                metadata.parent_id_by_resource_id.get(resource_id),
            )
    except ValidationError as e:
        logger.error(f"Invalid ResourceV2 snapshot metadata: {e}")
        raise MetadataError(f"Invalid ResourceV2 snapshot metadata: {e}") from e

    ordered_resources = _ordered(
        resource_defs, metadata.ordered_resource_ids, lambda resource: resource.display.order
    )
    ordered_groups = _ordered(
        group_defs, metadata.ordered_resource_group_ids, lambda group: group.order
    )
    return ResourceCatalog(ordered_resources, ordered_groups)
