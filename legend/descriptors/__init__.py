from legend.descriptors.factories import (
    DEFAULT_ASSETS,
    REQUIRED_ASSETS,
    build_phase_descriptors,
    build_registry_descriptors,
    build_resource_descriptors,
    build_resource_group_descriptors,
    build_resource_group_parent_descriptors,
    build_stat_descriptors,
    build_trigger_descriptors,
    create_descriptor,
    create_phase_descriptor,
    create_trigger_descriptor,
    fallback_label,
    order_entries,
    resolve_asset_descriptor,
)
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

__all__ = [
    # Resolver
    "DescriptorTable",
    "FallbackCache",
    "build_table",
    "format_fallback_label",
    # Types
    "AssetDescriptor",
    "Descriptor",
    "PhaseDescriptor",
    "PhaseStepDescriptor",
    "TriggerDescriptor",
    # Factories
    "DEFAULT_ASSETS",
    "REQUIRED_ASSETS",
    "build_phase_descriptors",
    "build_registry_descriptors",
    "build_resource_descriptors",
    "build_resource_group_descriptors",
    "build_resource_group_parent_descriptors",
    "build_stat_descriptors",
    "build_trigger_descriptors",
    "create_descriptor",
    "create_phase_descriptor",
    "create_trigger_descriptor",
    "fallback_label",
    "order_entries",
    "resolve_asset_descriptor",
]
