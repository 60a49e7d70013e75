"""
Legend
======
Display metadata for game values: descriptor tables with graceful fallbacks,
the ResourceV2 catalog, and contribution breakdowns.
"""

from legend.breakdown import BreakdownEngine, SummaryGroup
from legend.config import Settings
from legend.descriptors import DescriptorTable, FallbackCache, format_fallback_label
from legend.errors import (
    ConfigError,
    LegendError,
    MetadataError,
    MissingAssetError,
    MissingTriggerError,
)
from legend.registry import MetadataRegistry
from legend.resources import ResourceCatalog, build_catalog, build_display_buckets
from legend.selectors import MetadataSelector, TriggerSelector, create_selector

__all__ = [
    "BreakdownEngine",
    "SummaryGroup",
    "Settings",
    "DescriptorTable",
    "FallbackCache",
    "format_fallback_label",
    "ConfigError",
    "LegendError",
    "MetadataError",
    "MissingAssetError",
    "MissingTriggerError",
    "MetadataRegistry",
    "ResourceCatalog",
    "build_catalog",
    "build_display_buckets",
    "MetadataSelector",
    "TriggerSelector",
    "create_selector",
]
