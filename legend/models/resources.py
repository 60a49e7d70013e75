"""
ResourceV2 Schemas
==================
Hierarchical resource model: resources, groups and group parents (aggregates).

A group declares its children in display order and may own at most one
parent. The parent carries its own display, bounds, tier track and tracking
flags, which act as defaults for the group's children.
"""

from typing import Literal, Optional, Tuple

from pydantic import Field, model_validator

from legend.models.base import PayloadModel


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


class ResourceBounds(PayloadModel):
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None

    @model_validator(mode="after")
    def _check_order(self):
        if (
            self.lower_bound is not None
            and self.upper_bound is not None
            and self.lower_bound > self.upper_bound
        ):
            raise ValueError("lowerBound must be less than or equal to upperBound")
        return self


class TierRange(PayloadModel):
    min_inclusive: Optional[float] = None
    max_inclusive: Optional[float] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.min_inclusive is None and self.max_inclusive is None:
            raise ValueError("tier range requires at least a minimum or maximum boundary")
        if (
            self.min_inclusive is not None
            and self.max_inclusive is not None
            and self.min_inclusive > self.max_inclusive
        ):
            raise ValueError("tier range minimum must be <= maximum")
        return self

    def contains(self, value: float) -> bool:
        if self.min_inclusive is not None and value < self.min_inclusive:
            return False
        if self.max_inclusive is not None and value > self.max_inclusive:
            return False
        return True


class TierDefinition(PayloadModel):
    id: str
    label: str
    description: Optional[str] = None
    icon: Optional[str] = None
    range: TierRange


class TierTrack(PayloadModel):
    id: str
    title: str
    description: Optional[str] = None
    tiers: Tuple[TierDefinition, ...] = Field(..., min_length=1)
    show_progress: Optional[bool] = None
    order: Optional[int] = None

    def tier_for(self, value: float) -> Optional[TierDefinition]:
        """First tier whose inclusive range contains the value."""
        for tier in self.tiers:
            if tier.range.contains(value):
                return tier
        return None


class GlobalActionCost(PayloadModel):
    amount: float
    rounding: Optional[Literal["up", "down", "nearest"]] = None
    reconciliation: Optional[Literal["clamp", "pass", "reject"]] = None


class ResourceDisplay(PayloadModel):
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None
    order: int = 0
    display_as_percent: Optional[bool] = None


# =============================================================================
# RESOURCES, PARENTS, GROUPS
# =============================================================================


class ResourceDefinition(PayloadModel):
    """A single ResourceV2 resource."""

    id: str
    display: ResourceDisplay
    bounds: Optional[ResourceBounds] = None
    group_id: Optional[str] = None
    tier_track: Optional[TierTrack] = None
    global_action_cost: Optional[GlobalActionCost] = None
    track_value_breakdown: Optional[bool] = None
    track_bound_breakdown: Optional[bool] = None


class GroupParent(PayloadModel):
    """
    Aggregate that sits on top of a group.

    relation="sumOfAll" means the parent value is the sum of the group's
    children. The value itself is supplied by the simulation snapshot.
    """

    id: str
    order: int = 0
    relation: Literal["sumOfAll"] = "sumOfAll"
    display: ResourceDisplay
    bounds: Optional[ResourceBounds] = None
    tier_track: Optional[TierTrack] = None
    track_value_breakdown: Optional[bool] = None
    track_bound_breakdown: Optional[bool] = None


class ResourceGroup(PayloadModel):
    id: str
    order: int = 0
    title: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    children: Tuple[str, ...] = ()
    parent: Optional[GroupParent] = None
