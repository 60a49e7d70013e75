"""
Contribution Sources
====================
Per-player, per-value map of named sources explaining why a value is what it
is. Produced by the simulation, consumed by the breakdown engine.

Key Concepts:
- ContributionKind: closed taxonomy of what a source or dependency points to
- Longevity: ongoing (conditional) vs permanent
- DependencyLink: one step of the causal chain behind a contribution
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import Field, ValidationError

from legend.errors import MetadataError
from legend.models.base import PayloadModel

logger = logging.getLogger(__name__)


class ContributionKind(str, Enum):
    RESOURCE = "resource"
    STAT = "stat"
    POPULATION = "population"
    BUILDING = "building"
    DEVELOPMENT = "development"
    PHASE = "phase"
    ACTION = "action"
    TRIGGER = "trigger"
    PASSIVE = "passive"
    LAND = "land"
    START = "start"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ContributionKind":
        """Map a raw kind string onto the taxonomy; anything else is UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Longevity(str, Enum):
    ONGOING = "ongoing"
    PERMANENT = "permanent"


class DependencyLink(PayloadModel):
    # Raw kind string; unrecognized values are kept for display
    type: str
    id: Optional[str] = None
    detail: Optional[str] = None

    @property
    def tagged_kind(self) -> ContributionKind:
        return ContributionKind.parse(self.type)


class HistoryItem(PayloadModel):
    turn: Optional[int] = None
    phase: Optional[str] = None
    step: Optional[str] = None
    detail: Optional[str] = None
    phase_name: Optional[str] = None
    step_name: Optional[str] = None
    description: Optional[str] = None


class ContributionExtra(PayloadModel):
    turn: Optional[int] = None
    turns: Tuple[int, ...] = ()
    phase: Optional[str] = None
    step: Optional[str] = None
    history: Tuple[Union[int, str, HistoryItem], ...] = ()
    trigger: Optional[str] = None
    triggers: Tuple[str, ...] = ()


class ContributionMeta(PayloadModel):
    key: str
    longevity: Longevity
    kind: str
    id: Optional[str] = None
    detail: Optional[str] = None
    depends_on: Tuple[DependencyLink, ...] = ()
    removal: Optional[DependencyLink] = None
    extra: Optional[ContributionExtra] = None

    @property
    def tagged_kind(self) -> ContributionKind:
        return ContributionKind.parse(self.kind)


class Contribution(PayloadModel):
    amount: float = Field(allow_inf_nan=False)
    meta: ContributionMeta


SourceMap = Dict[str, Contribution]


def parse_sources(data: Mapping[str, Any]) -> SourceMap:
    """
    Validate a raw contribution source map, keeping insertion order.

    Raises:
        MetadataError: If any entry does not match the schema
    """
    sources: SourceMap = {}
    for source_key, entry in data.items():
        if isinstance(entry, Contribution):
            sources[source_key] = entry
            continue
        try:
            sources[source_key] = Contribution.model_validate(entry)
        except ValidationError as e:
            logger.error(f"Invalid contribution source {source_key!r}: {e}")
            raise MetadataError(f"Invalid contribution source {source_key!r}: {e}") from e
    return sources
