"""
Metadata Registry
=================
Composes every descriptor table, selector and the ResourceV2 catalog for one
(registries, metadata) pairing.

Built once per session snapshot and read-only afterwards. All fallback
tables share one injected FallbackCache, split by namespace, so `reset()`
clears every synthesized descriptor at once.

Construction fails fast when a required singleton asset (land, slot,
passive) is missing from the metadata.
"""

import logging
from typing import Any, Mapping, Optional, Union

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
    resolve_asset_descriptor,
)
from legend.descriptors.lookup import FallbackCache
from legend.descriptors.types import Descriptor, PhaseDescriptor
from legend.models.payload import (
    AssetsMetadata,
    ContentRegistries,
    SessionMetadata,
    parse_metadata,
    parse_registries,
)
from legend.resources.catalog import ResourceCatalog, catalog_from_metadata
from legend.selectors import AssetSelector, MetadataSelector, TriggerSelector

logger = logging.getLogger(__name__)


class MetadataRegistry:
    """
    Session-scoped descriptor registry.

    Attributes:
        resources, populations, buildings, developments, actions, stats:
            MetadataSelector over the domain table
        phases: MetadataSelector[PhaseDescriptor]
        triggers: TriggerSelector (strict)
        resource_groups, resource_group_parents: ResourceV2 selectors
        land, slot, passive, population, upkeep: AssetSelector
        catalog: ResourceCatalog
    """

    def __init__(
        self,
        registries: Union[ContentRegistries, Mapping[str, Any], None],
        metadata: Union[SessionMetadata, Mapping[str, Any], None],
        cache: Optional[FallbackCache] = None,
    ):
        self.registries = parse_registries(registries)
        self.metadata = parse_metadata(metadata)
        self.cache = cache if cache is not None else FallbackCache()

        assets = self.metadata.assets or AssetsMetadata()
        # Required assets are checked before any table is built
        self.land = AssetSelector(self._asset(assets, "land"))
        self.slot = AssetSelector(self._asset(assets, "slot"))
        self.passive = AssetSelector(self._asset(assets, "passive"))
        self.population = AssetSelector(self._asset(assets, "population"))
        self.upkeep = AssetSelector(self._asset(assets, "upkeep"))

        registries = self.registries
        metadata = self.metadata
        self.resources: MetadataSelector[Descriptor] = MetadataSelector(
            build_resource_descriptors(
                registries.resources,
                metadata.resources,
                metadata.resource_metadata,
                metadata.ordered_resource_ids,
                metadata.parent_id_by_resource_id,
                registries.resources_v2,
                cache=self.cache,
            )
        )
        self.resource_groups: MetadataSelector[Descriptor] = MetadataSelector(
            build_resource_group_descriptors(
                registries.resource_groups,
                metadata.resource_groups,
                metadata.ordered_resource_group_ids,
                cache=self.cache,
            )
        )
        self.resource_group_parents: MetadataSelector[Descriptor] = MetadataSelector(
            build_resource_group_parent_descriptors(
                registries.resource_groups,
                metadata.resource_group_parents,
                cache=self.cache,
            )
        )
        self.populations = self._registry_selector(
            registries.populations, metadata.populations, "populations"
        )
        self.buildings = self._registry_selector(
            registries.buildings, metadata.buildings, "buildings"
        )
        self.developments = self._registry_selector(
            registries.developments, metadata.developments, "developments"
        )
        self.actions = self._registry_selector(
            registries.actions, metadata.actions, "actions"
        )
        self.stats: MetadataSelector[Descriptor] = MetadataSelector(
            build_stat_descriptors(metadata.stats, cache=self.cache)
        )
        self.phases: MetadataSelector[PhaseDescriptor] = MetadataSelector(
            build_phase_descriptors(metadata.phases, cache=self.cache)
        )
        self.triggers = TriggerSelector(
            build_trigger_descriptors(metadata.triggers, cache=self.cache)
        )

        self.catalog: ResourceCatalog = catalog_from_metadata(
            metadata, registries.resources_v2, registries.resource_groups
        )

        logger.debug(
            f"Built metadata registry: {len(self.resources.by_id)} resources, "
            f"{len(self.resource_groups.by_id)} groups, {len(self.phases.by_id)} phases, "
            f"{len(self.triggers.by_id)} triggers"
        )

    def _asset(self, assets: AssetsMetadata, key: str):
        return resolve_asset_descriptor(
            key, getattr(assets, key), required=key in REQUIRED_ASSETS
        )

    def _registry_selector(self, definitions, overrides, namespace: str):
        return MetadataSelector(
            build_registry_descriptors(
                definitions, overrides, namespace=namespace, cache=self.cache
            )
        )

    def asset(self, key: str) -> AssetSelector:
        """Selector for a singleton asset by key."""
        if key not in DEFAULT_ASSETS:
            raise KeyError(key)
        return getattr(self, key)

    def reset(self):
        """Drop every cached fallback descriptor."""
        self.cache.clear()
