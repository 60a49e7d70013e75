from legend.models.contributions import (
    Contribution,
    ContributionExtra,
    ContributionKind,
    ContributionMeta,
    DependencyLink,
    HistoryItem,
    Longevity,
    SourceMap,
    parse_sources,
)
from legend.models.payload import (
    AssetsMetadata,
    ContentDefinition,
    ContentRegistries,
    MetadataDescriptor,
    MetadataFormat,
    PhaseMetadata,
    PhaseStepMetadata,
    ResourceGroupParentSnapshot,
    ResourceGroupSnapshot,
    ResourceMetadataSnapshot,
    SessionMetadata,
    TriggerMetadata,
    parse_metadata,
    parse_registries,
)
from legend.models.resources import (
    GlobalActionCost,
    GroupParent,
    ResourceBounds,
    ResourceDefinition,
    ResourceDisplay,
    ResourceGroup,
    TierDefinition,
    TierRange,
    TierTrack,
)

__all__ = [
    # Contributions
    "Contribution",
    "ContributionExtra",
    "ContributionKind",
    "ContributionMeta",
    "DependencyLink",
    "HistoryItem",
    "Longevity",
    "SourceMap",
    "parse_sources",
    # Session payload
    "AssetsMetadata",
    "ContentDefinition",
    "ContentRegistries",
    "MetadataDescriptor",
    "MetadataFormat",
    "PhaseMetadata",
    "PhaseStepMetadata",
    "ResourceGroupParentSnapshot",
    "ResourceGroupSnapshot",
    "ResourceMetadataSnapshot",
    "SessionMetadata",
    "TriggerMetadata",
    "parse_metadata",
    "parse_registries",
    # ResourceV2
    "GlobalActionCost",
    "GroupParent",
    "ResourceBounds",
    "ResourceDefinition",
    "ResourceDisplay",
    "ResourceGroup",
    "TierDefinition",
    "TierRange",
    "TierTrack",
]
