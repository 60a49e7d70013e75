"""
Descriptor Types
================
Immutable display records produced by the descriptor factories.

Every descriptor carries a non-empty `label`. Collections inside descriptors
are tuples or read-only mappings, so a resolved descriptor cannot be mutated
by a consumer.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from legend.models.payload import MetadataFormat
from legend.models.resources import GlobalActionCost, TierTrack

EMPTY_MAPPING: Mapping = MappingProxyType({})


def _require_label(kind: str, descriptor_id: str, label: str):
    if not label:
        raise ValueError(f"{kind} {descriptor_id!r} requires a non-empty label")


@dataclass(frozen=True)
class Descriptor:
    """
    Resolved display data for one id.

    The ResourceV2 fields are only populated by the resource, group and
    parent tables.
    """

    id: str
    label: str
    icon: Optional[str] = None
    description: Optional[str] = None
    display_as_percent: Optional[bool] = None
    format: Optional[Union[str, MetadataFormat]] = None

    limited: Optional[bool] = None
    group_id: Optional[str] = None
    parent_id: Optional[str] = None
    order: Optional[int] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    tier_track: Optional[TierTrack] = None
    global_action_cost: Optional[GlobalActionCost] = None
    relation: Optional[str] = None
    children: Optional[Tuple[str, ...]] = None
    track_value_breakdown: Optional[bool] = None
    track_bound_breakdown: Optional[bool] = None

    def __post_init__(self):
        _require_label("Descriptor", self.id, self.label)

    @property
    def is_percent(self) -> bool:
        if self.display_as_percent is not None:
            return self.display_as_percent
        if isinstance(self.format, MetadataFormat):
            return bool(self.format.percent)
        return False


@dataclass(frozen=True)
class PhaseStepDescriptor:
    id: str
    label: str
    icon: Optional[str] = None
    triggers: Tuple[str, ...] = ()

    def __post_init__(self):
        _require_label("Phase step", self.id, self.label)


@dataclass(frozen=True)
class PhaseDescriptor:
    id: str
    label: str
    icon: Optional[str] = None
    action: bool = False
    steps: Tuple[PhaseStepDescriptor, ...] = ()
    steps_by_id: Mapping[str, PhaseStepDescriptor] = field(
        default_factory=lambda: EMPTY_MAPPING, compare=False, hash=False
    )

    def __post_init__(self):
        _require_label("Phase", self.id, self.label)


@dataclass(frozen=True)
class TriggerDescriptor:
    id: str
    label: str
    icon: Optional[str] = None
    future: Optional[str] = None
    past: Optional[str] = None

    def __post_init__(self):
        _require_label("Trigger", self.id, self.label)


@dataclass(frozen=True)
class AssetDescriptor:
    id: str
    label: str
    icon: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        _require_label("Asset", self.id, self.label)
