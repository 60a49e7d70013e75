"""
Session Payload Schemas
=======================
Shapes of the two inputs that cross into this package:

- The **session metadata payload** produced by the session layer: one override
  map per domain plus the ResourceV2 snapshot fields.
- The **content registries** that own canonical id -> definition data.

Both are validated exactly once, here. Everything downstream consumes the
typed models and never re-checks shapes.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import Field, ValidationError

from legend.errors import MetadataError
from legend.models.base import PayloadModel
from legend.models.resources import (
    GlobalActionCost,
    ResourceDefinition,
    ResourceGroup,
    TierTrack,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DESCRIPTOR OVERRIDES
# =============================================================================


class MetadataFormat(PayloadModel):
    prefix: Optional[str] = None
    percent: Optional[bool] = None


class MetadataDescriptor(PayloadModel):
    """Explicit display override for one id in one domain."""

    label: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    display_as_percent: Optional[bool] = None
    format: Optional[Union[str, MetadataFormat]] = None


class PhaseStepMetadata(PayloadModel):
    id: Optional[str] = None
    label: Optional[str] = None
    title: Optional[str] = None
    icon: Optional[str] = None
    triggers: Optional[Tuple[str, ...]] = None


class PhaseMetadata(PayloadModel):
    label: Optional[str] = None
    icon: Optional[str] = None
    action: bool = False
    steps: Optional[Tuple[PhaseStepMetadata, ...]] = None


class TriggerMetadata(PayloadModel):
    label: Optional[str] = None
    icon: Optional[str] = None
    future: Optional[str] = None
    past: Optional[str] = None


class AssetsMetadata(PayloadModel):
    land: Optional[MetadataDescriptor] = None
    slot: Optional[MetadataDescriptor] = None
    passive: Optional[MetadataDescriptor] = None
    population: Optional[MetadataDescriptor] = None
    upkeep: Optional[MetadataDescriptor] = None


# =============================================================================
# RESOURCE V2 SNAPSHOTS
# =============================================================================


class ResourceMetadataSnapshot(PayloadModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    display_as_percent: Optional[bool] = None
    limited: Optional[bool] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    tier_track: Optional[TierTrack] = None
    global_action_cost: Optional[GlobalActionCost] = None
    track_value_breakdown: Optional[bool] = None
    track_bound_breakdown: Optional[bool] = None
    group_id: Optional[str] = None
    parent_id: Optional[str] = None


class ResourceGroupParentSnapshot(PayloadModel):
    id: Optional[str] = None
    name: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    relation: Optional[str] = None
    display_as_percent: Optional[bool] = None
    limited: Optional[bool] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    tier_track: Optional[TierTrack] = None
    track_value_breakdown: Optional[bool] = None
    track_bound_breakdown: Optional[bool] = None


class ResourceGroupSnapshot(PayloadModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    children: Tuple[str, ...] = ()
    parent: Optional[ResourceGroupParentSnapshot] = None


# =============================================================================
# ROOT PAYLOAD
# =============================================================================


class SessionMetadata(PayloadModel):
    """
    Metadata payload for one session snapshot.

    Every key is optional at the schema level. The registry enforces the
    required singleton assets (land, slot, passive) when it is built.
    """

    resources: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    populations: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    buildings: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    developments: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    actions: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    stats: Dict[str, MetadataDescriptor] = Field(default_factory=dict)
    phases: Dict[str, PhaseMetadata] = Field(default_factory=dict)
    triggers: Dict[str, TriggerMetadata] = Field(default_factory=dict)
    assets: Optional[AssetsMetadata] = None

    resource_metadata: Dict[str, ResourceMetadataSnapshot] = Field(default_factory=dict)
    resource_groups: Dict[str, ResourceGroupSnapshot] = Field(default_factory=dict)
    resource_group_parents: Dict[str, ResourceGroupParentSnapshot] = Field(
        default_factory=dict
    )
    ordered_resource_ids: Tuple[str, ...] = ()
    ordered_resource_group_ids: Tuple[str, ...] = ()
    parent_id_by_resource_id: Dict[str, str] = Field(default_factory=dict)


# =============================================================================
# CONTENT REGISTRIES
# =============================================================================


class ContentDefinition(PayloadModel):
    """
    Canonical definition from a content registry.

    Buildings, developments, actions and population roles expose `name`;
    legacy resources expose `key`/`label` and optional `tags`.
    """

    id: Optional[str] = None
    key: Optional[str] = None
    name: Optional[str] = None
    label: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()


class ContentRegistries(PayloadModel):
    resources: Dict[str, ContentDefinition] = Field(default_factory=dict)
    populations: Dict[str, ContentDefinition] = Field(default_factory=dict)
    buildings: Dict[str, ContentDefinition] = Field(default_factory=dict)
    developments: Dict[str, ContentDefinition] = Field(default_factory=dict)
    actions: Dict[str, ContentDefinition] = Field(default_factory=dict)
    resources_v2: Tuple[ResourceDefinition, ...] = ()
    resource_groups: Tuple[ResourceGroup, ...] = ()


# =============================================================================
# BOUNDARY PARSERS
# =============================================================================


def parse_metadata(data: Union[SessionMetadata, Mapping[str, Any], None]) -> SessionMetadata:
    """
    Validate a raw metadata payload.

    Raises:
        MetadataError: If the payload does not match the schema
    """
    if isinstance(data, SessionMetadata):
        return data
    if data is None:
        raise MetadataError("Session metadata payload is required")
    try:
        return SessionMetadata.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid session metadata payload: {e}")
        raise MetadataError(f"Invalid session metadata payload: {e}") from e


def parse_registries(
    data: Union[ContentRegistries, Mapping[str, Any], None],
) -> ContentRegistries:
    """Validate raw content registries. An absent registry set is empty."""
    if isinstance(data, ContentRegistries):
        return data
    if data is None:
        return ContentRegistries()
    try:
        return ContentRegistries.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid content registries: {e}")
        raise MetadataError(f"Invalid content registries: {e}") from e
