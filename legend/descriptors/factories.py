"""
Domain Descriptor Factories
===========================
One factory per domain. Each composes a canonical-definition source with the
session override map and feeds the result into a DescriptorTable.

Label priority (first non-empty wins):
- resources / populations / buildings / developments / actions:
  override.label -> definition.name / definition.label -> formatted id
- stats, triggers: override.label -> formatted id
- phases: phase.label -> formatted id; steps get synthetic ids when missing
- singleton assets: override.label -> built-in default label

Only triggers and the required singleton assets fail fast. Everything else
degrades to a synthesized fallback.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from legend.descriptors.lookup import (
    DescriptorTable,
    FallbackCache,
    build_table,
    format_fallback_label,
)
from legend.descriptors.types import (
    AssetDescriptor,
    Descriptor,
    PhaseDescriptor,
    PhaseStepDescriptor,
    TriggerDescriptor,
)
from legend.errors import MissingAssetError, MissingTriggerError
from legend.models.payload import (
    ContentDefinition,
    MetadataDescriptor,
    PhaseMetadata,
    PhaseStepMetadata,
    ResourceGroupParentSnapshot,
    ResourceGroupSnapshot,
    ResourceMetadataSnapshot,
    TriggerMetadata,
)
from legend.models.resources import GroupParent, ResourceDefinition, ResourceGroup

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"


def _first(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _first_label(*values: Optional[str]) -> Optional[str]:
    """First non-empty string."""
    for value in values:
        if value:
            return value
    return None


def fallback_label(descriptor_id: str) -> str:
    return format_fallback_label(descriptor_id) or UNKNOWN_LABEL


# =============================================================================
# GENERIC DESCRIPTORS
# =============================================================================


def create_descriptor(
    descriptor_id: str,
    override: Optional[MetadataDescriptor] = None,
    **defaults,
) -> Descriptor:
    """
    Merge an explicit override over per-domain defaults.

    Args:
        descriptor_id: The id being described
        override: Session override for this id, if any
        **defaults: Descriptor fields supplied by the canonical definition
    """
    label = _first_label(
        override.label if override else None,
        defaults.pop("label", None),
    ) or fallback_label(descriptor_id)
    icon = _first(override.icon if override else None, defaults.pop("icon", None))
    description = _first(
        override.description if override else None,
        defaults.pop("description", None),
    )
    display_as_percent = _first(
        override.display_as_percent if override else None,
        defaults.pop("display_as_percent", None),
    )
    format_ = _first(override.format if override else None, defaults.pop("format", None))
    children = defaults.pop("children", None)
    if children is not None:
        children = tuple(children)
    return Descriptor(
        id=descriptor_id,
        label=label,
        icon=icon,
        description=description,
        display_as_percent=display_as_percent,
        format=format_,
        children=children,
        **defaults,
    )


def _fallback_descriptor(descriptor_id: str) -> Descriptor:
    return create_descriptor(descriptor_id)


def build_registry_descriptors(
    definitions: Mapping[str, ContentDefinition],
    overrides: Optional[Mapping[str, MetadataDescriptor]] = None,
    namespace: str = "registry",
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[Descriptor]:
    """
    Descriptor table for a canonical content registry.

    Registry ids come first in registry order, followed by ids that only
    appear in the override map.
    """
    overrides = overrides or {}
    entries: List[Tuple[str, Descriptor]] = []
    processed = set()
    for descriptor_id, definition in definitions.items():
        descriptor = create_descriptor(
            descriptor_id,
            overrides.get(descriptor_id),
            label=_first_label(definition.name, definition.label),
            icon=definition.icon,
            description=definition.description,
        )
        entries.append((descriptor_id, descriptor))
        processed.add(descriptor_id)
    for descriptor_id, override in overrides.items():
        if descriptor_id in processed:
            continue
        entries.append((descriptor_id, create_descriptor(descriptor_id, override)))
    return build_table(entries, _fallback_descriptor, namespace=namespace, cache=cache)


def build_stat_descriptors(
    overrides: Optional[Mapping[str, MetadataDescriptor]] = None,
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[Descriptor]:
    entries = [
        (stat_id, create_descriptor(stat_id, override))
        for stat_id, override in (overrides or {}).items()
    ]
    return build_table(entries, _fallback_descriptor, namespace="stats", cache=cache)


# =============================================================================
# PHASES
# =============================================================================


def create_phase_step(
    phase_id: str, index: int, step: PhaseStepMetadata
) -> PhaseStepDescriptor:
    step_id = step.id or f"{phase_id}:step:{index}"
    label = _first_label(step.label, step.title) or fallback_label(step_id)
    return PhaseStepDescriptor(
        id=step_id,
        label=label,
        icon=step.icon,
        triggers=tuple(step.triggers or ()),
    )


def create_phase_descriptor(
    phase_id: str, phase: Optional[PhaseMetadata] = None
) -> PhaseDescriptor:
    steps = tuple(
        create_phase_step(phase_id, index, step)
        for index, step in enumerate((phase.steps if phase else None) or ())
    )
    return PhaseDescriptor(
        id=phase_id,
        label=_first_label(phase.label if phase else None) or fallback_label(phase_id),
        icon=phase.icon if phase else None,
        action=phase.action if phase else False,
        steps=steps,
        steps_by_id=MappingProxyType({step.id: step for step in steps}),
    )


def build_phase_descriptors(
    phases: Optional[Mapping[str, PhaseMetadata]] = None,
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[PhaseDescriptor]:
    entries = [
        (phase_id, create_phase_descriptor(phase_id, phase))
        for phase_id, phase in (phases or {}).items()
    ]
    return build_table(entries, create_phase_descriptor, namespace="phases", cache=cache)


# =============================================================================
# TRIGGERS
# =============================================================================


def create_trigger_descriptor(
    trigger_id: str, trigger: Optional[TriggerMetadata] = None
) -> TriggerDescriptor:
    return TriggerDescriptor(
        id=trigger_id,
        label=_first_label(trigger.label if trigger else None) or fallback_label(trigger_id),
        icon=trigger.icon if trigger else None,
        future=trigger.future if trigger else None,
        past=trigger.past if trigger else None,
    )


def _missing_trigger(trigger_id: str) -> TriggerDescriptor:
    # Trigger text is hand-authored content; never synthesize it
    logger.error(f"Trigger {trigger_id!r} has no registered descriptor")
    raise MissingTriggerError.missing_label(trigger_id)


def build_trigger_descriptors(
    triggers: Optional[Mapping[str, TriggerMetadata]] = None,
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[TriggerDescriptor]:
    entries = [
        (trigger_id, create_trigger_descriptor(trigger_id, trigger))
        for trigger_id, trigger in (triggers or {}).items()
    ]
    return build_table(entries, _missing_trigger, namespace="triggers", cache=cache)


# =============================================================================
# SINGLETON ASSETS
# =============================================================================


DEFAULT_ASSETS: Mapping[str, AssetDescriptor] = MappingProxyType(
    {
        "land": AssetDescriptor(id="land", label="Land", icon="🗺️"),
        "slot": AssetDescriptor(id="slot", label="Development Slot", icon="🧩"),
        "passive": AssetDescriptor(id="passive", label="Passive", icon="♾️"),
        "population": AssetDescriptor(id="population", label="Population", icon="👥"),
        "upkeep": AssetDescriptor(id="upkeep", label="Upkeep", icon="🧾"),
    }
)

REQUIRED_ASSETS: Tuple[str, ...] = ("land", "slot", "passive")


def resolve_asset_descriptor(
    key: str,
    override: Optional[MetadataDescriptor],
    required: bool = False,
) -> AssetDescriptor:
    """
    Resolve one singleton asset.

    Raises:
        MissingAssetError: If the asset is required and the metadata omits it
    """
    if required and override is None:
        logger.error(f"Session metadata is missing required asset {key!r}")
        raise MissingAssetError(key)
    default = DEFAULT_ASSETS.get(key)
    label = _first_label(
        override.label if override else None,
        default.label if default else None,
    ) or fallback_label(key)
    return AssetDescriptor(
        id=key,
        label=label,
        icon=_first(override.icon if override else None, default.icon if default else None),
        description=_first(
            override.description if override else None,
            default.description if default else None,
        ),
    )


# =============================================================================
# RESOURCE V2 TABLES
# =============================================================================


def _order_key(descriptor: Descriptor):
    order = descriptor.order if descriptor.order is not None else float("inf")
    return (order, descriptor.id)


def order_entries(
    descriptors: Mapping[str, Descriptor],
    ordered_ids: Iterable[str] = (),
) -> List[Tuple[str, Descriptor]]:
    """
    Explicitly ordered ids first (unknown ids skipped), then the rest sorted
    by `order` (missing order last) and id.
    """
    entries: List[Tuple[str, Descriptor]] = []
    processed = set()
    for descriptor_id in ordered_ids:
        descriptor = descriptors.get(descriptor_id)
        if descriptor is None or descriptor_id in processed:
            continue
        entries.append((descriptor_id, descriptor))
        processed.add(descriptor_id)
    remaining = [
        (descriptor_id, descriptor)
        for descriptor_id, descriptor in descriptors.items()
        if descriptor_id not in processed
    ]
    remaining.sort(key=lambda entry: _order_key(entry[1]))
    entries.extend(remaining)
    return entries


def build_resource_descriptors(
    definitions: Optional[Mapping[str, ContentDefinition]] = None,
    overrides: Optional[Mapping[str, MetadataDescriptor]] = None,
    resource_metadata: Optional[Mapping[str, ResourceMetadataSnapshot]] = None,
    ordered_resource_ids: Iterable[str] = (),
    parent_id_by_resource_id: Optional[Mapping[str, str]] = None,
    resources_v2: Iterable[ResourceDefinition] = (),
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[Descriptor]:
    """
    Resource table merging the legacy registry, ResourceV2 definitions,
    snapshot metadata and session overrides.

    Label priority: override.label -> snapshot.name -> display.name ->
    definition.name / definition.label -> formatted id.
    """
    definitions = definitions or {}
    overrides = overrides or {}
    resource_metadata = resource_metadata or {}
    parent_id_by_resource_id = parent_id_by_resource_id or {}
    ordered_resource_ids = tuple(ordered_resource_ids)
    v2_by_id = {resource.id: resource for resource in resources_v2}

    ids: Dict[str, None] = {}
    for source in (definitions, v2_by_id, overrides, resource_metadata, ordered_resource_ids):
        for resource_id in source:
            ids[resource_id] = None

    descriptors: Dict[str, Descriptor] = {}
    for resource_id in ids:
        definition = definitions.get(resource_id)
        v2 = v2_by_id.get(resource_id)
        snapshot = resource_metadata.get(resource_id) or ResourceMetadataSnapshot()
        display = v2.display if v2 else None
        bounds = v2.bounds if v2 else None
        descriptors[resource_id] = create_descriptor(
            resource_id,
            overrides.get(resource_id),
            label=_first_label(
                snapshot.name,
                display.name if display else None,
                definition.name if definition else None,
                definition.label if definition else None,
                definition.key if definition else None,
            ),
            icon=_first(
                snapshot.icon,
                display.icon if display else None,
                definition.icon if definition else None,
            ),
            description=_first(
                snapshot.description,
                display.description if display else None,
                definition.description if definition else None,
            ),
            display_as_percent=_first(
                snapshot.display_as_percent,
                display.display_as_percent if display else None,
            ),
            limited=snapshot.limited,
            group_id=_first(snapshot.group_id, v2.group_id if v2 else None),
            parent_id=_first(snapshot.parent_id, parent_id_by_resource_id.get(resource_id)),
            order=_first(snapshot.order, display.order if display else None),
            lower_bound=_first(snapshot.lower_bound, bounds.lower_bound if bounds else None),
            upper_bound=_first(snapshot.upper_bound, bounds.upper_bound if bounds else None),
            tier_track=_first(snapshot.tier_track, v2.tier_track if v2 else None),
            global_action_cost=_first(
                snapshot.global_action_cost, v2.global_action_cost if v2 else None
            ),
            track_value_breakdown=_first(
                snapshot.track_value_breakdown, v2.track_value_breakdown if v2 else None
            ),
            track_bound_breakdown=_first(
                snapshot.track_bound_breakdown, v2.track_bound_breakdown if v2 else None
            ),
        )

    entries = order_entries(descriptors, ordered_resource_ids)
    return build_table(entries, _fallback_descriptor, namespace="resources", cache=cache)


def build_resource_group_descriptors(
    groups: Iterable[ResourceGroup] = (),
    snapshots: Optional[Mapping[str, ResourceGroupSnapshot]] = None,
    ordered_group_ids: Iterable[str] = (),
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[Descriptor]:
    snapshots = snapshots or {}
    ordered_group_ids = tuple(ordered_group_ids)
    groups_by_id = {group.id: group for group in groups}

    ids: Dict[str, None] = {}
    for source in (groups_by_id, snapshots, ordered_group_ids):
        for group_id in source:
            ids[group_id] = None

    descriptors: Dict[str, Descriptor] = {}
    for group_id in ids:
        definition = groups_by_id.get(group_id)
        snapshot = snapshots.get(group_id) or ResourceGroupSnapshot()
        parent_id = None
        if snapshot.parent is not None and snapshot.parent.id:
            parent_id = snapshot.parent.id
        elif definition is not None and definition.parent is not None:
            parent_id = definition.parent.id
        descriptors[group_id] = create_descriptor(
            group_id,
            label=_first_label(snapshot.name, definition.title if definition else None),
            icon=_first(snapshot.icon, definition.icon if definition else None),
            description=_first(
                snapshot.description, definition.description if definition else None
            ),
            children=snapshot.children or (definition.children if definition else None),
            order=_first(snapshot.order, definition.order if definition else None),
            parent_id=parent_id,
        )

    entries = order_entries(descriptors, ordered_group_ids)
    return build_table(entries, _fallback_descriptor, namespace="resource_groups", cache=cache)


def build_resource_group_parent_descriptors(
    groups: Iterable[ResourceGroup] = (),
    snapshots: Optional[Mapping[str, ResourceGroupParentSnapshot]] = None,
    cache: Optional[FallbackCache] = None,
) -> DescriptorTable[Descriptor]:
    snapshots = snapshots or {}
    parents: Dict[str, GroupParent] = {}
    for group in groups:
        if group.parent is not None:
            parents[group.parent.id] = group.parent

    ids: Dict[str, None] = {}
    for source in (parents, snapshots):
        for parent_id in source:
            ids[parent_id] = None

    descriptors: Dict[str, Descriptor] = {}
    for parent_id in ids:
        definition = parents.get(parent_id)
        snapshot = snapshots.get(parent_id) or ResourceGroupParentSnapshot()
        display = definition.display if definition else None
        bounds = definition.bounds if definition else None
        descriptors[parent_id] = create_descriptor(
            parent_id,
            label=_first_label(snapshot.name, display.name if display else None),
            icon=_first(snapshot.icon, display.icon if display else None),
            description=_first(snapshot.description, display.description if display else None),
            display_as_percent=_first(
                snapshot.display_as_percent, display.display_as_percent if display else None
            ),
            limited=snapshot.limited,
            lower_bound=_first(snapshot.lower_bound, bounds.lower_bound if bounds else None),
            upper_bound=_first(snapshot.upper_bound, bounds.upper_bound if bounds else None),
            tier_track=_first(snapshot.tier_track, definition.tier_track if definition else None),
            track_value_breakdown=_first(
                snapshot.track_value_breakdown,
                definition.track_value_breakdown if definition else None,
            ),
            track_bound_breakdown=_first(
                snapshot.track_bound_breakdown,
                definition.track_bound_breakdown if definition else None,
            ),
            relation=_first(snapshot.relation, definition.relation if definition else None),
            order=_first(snapshot.order, definition.order if definition else None),
        )

    entries = sorted(descriptors.items(), key=lambda entry: _order_key(entry[1]))
    return build_table(
        entries, _fallback_descriptor, namespace="resource_group_parents", cache=cache
    )
