"""
Kind Label Resolution
=====================
Resolves the (kind, id) pair of a contribution origin or dependency link to
an icon and label, dispatching over the closed ContributionKind taxonomy.

Policy per kind:
- resource: resource table, then catalog (parents), else placeholder
- stat: stat table, then resource table, else placeholder
- population / building / development / action: domain table, else placeholder
- phase: phase descriptor icon + label, else placeholder
- trigger: strict; unregistered ids raise MissingTriggerError
- passive / land: singleton asset
- start: the literal "[MISSING:start]"
- unknown: the raw id (or raw kind) as label

Placeholders and unknown-kind labels are cached per (kind, id), so repeated
lookups hand back the same KindLabel instance.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from legend.breakdown.format import format_detail_text, format_step_label
from legend.descriptors.lookup import FallbackCache
from legend.errors import MissingTriggerError
from legend.models.contributions import ContributionKind
from legend.registry import MetadataRegistry

logger = logging.getLogger(__name__)

PLACEHOLDER_ICON = "⚠️"
START_PLACEHOLDER = "[MISSING:start]"

PLACEHOLDER_NAMESPACE = "kind_placeholders"
UNKNOWN_NAMESPACE = "kind_unknown"


@dataclass(frozen=True)
class KindLabel:
    icon: Optional[str]
    label: str
    text: str


def make_kind_label(icon: Optional[str], label: str) -> KindLabel:
    parts = [part for part in (icon, label) if part]
    return KindLabel(icon=icon or None, label=label, text=" ".join(parts).strip())


def placeholder_text(kind: str, descriptor_id: Optional[str]) -> str:
    if descriptor_id:
        return f"[MISSING:{kind}:{descriptor_id}]"
    return f"[MISSING:{kind}]"


class KindResolver:
    """
    Label resolution for every contribution kind.

    Args:
        registry: Metadata registry for the current session snapshot
        cache: Placeholder cache; defaults to the registry's cache
    """

    def __init__(self, registry: MetadataRegistry, cache: Optional[FallbackCache] = None):
        self.registry = registry
        self.cache = cache if cache is not None else registry.cache
        self._resolvers: Dict[ContributionKind, Callable[[str, Optional[str]], KindLabel]] = {
            ContributionKind.RESOURCE: self._resolve_resource,
            ContributionKind.STAT: self._resolve_stat,
            ContributionKind.POPULATION: self._resolve_population,
            ContributionKind.BUILDING: self._resolve_building,
            ContributionKind.DEVELOPMENT: self._resolve_development,
            ContributionKind.PHASE: self._resolve_phase,
            ContributionKind.ACTION: self._resolve_action,
            ContributionKind.TRIGGER: self._resolve_trigger,
            ContributionKind.PASSIVE: self._resolve_passive,
            ContributionKind.LAND: self._resolve_land,
            ContributionKind.START: self._resolve_start,
            ContributionKind.UNKNOWN: self._resolve_unknown,
        }

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def resolve(self, kind: str, descriptor_id: Optional[str] = None) -> KindLabel:
        """
        Raises:
            MissingTriggerError: For trigger ids with no registered descriptor
        """
        tagged = ContributionKind.parse(kind)
        return self._resolvers[tagged](kind, descriptor_id)

    def format_kind_label(self, kind: str, descriptor_id: Optional[str] = None) -> str:
        return self.resolve(kind, descriptor_id).text

    def format_detail(
        self, kind: str, descriptor_id: Optional[str], detail: Optional[str]
    ) -> Optional[str]:
        """Detail suffix for a kind. Phase details name a step."""
        if not detail:
            return None
        if ContributionKind.parse(kind) is ContributionKind.PHASE:
            phase = self.registry.phases.select(descriptor_id) if descriptor_id else None
            return format_step_label(phase, detail)
        return format_detail_text(detail)

    def trigger_label(self, trigger_id: str) -> str:
        return self._resolve_trigger(ContributionKind.TRIGGER.value, trigger_id).text

    def is_percent(self, target_id: str) -> bool:
        """Whether values of a resource or stat id display as percentages."""
        registry = self.registry
        if registry.catalog.has(target_id):
            return registry.catalog.resolve_percent_flag(target_id)
        if registry.stats.has(target_id):
            return registry.stats.select(target_id).is_percent
        if registry.resources.has(target_id):
            return registry.resources.select(target_id).is_percent
        return False

    # =========================================================================
    # PER-KIND RESOLVERS
    # =========================================================================

    def _placeholder(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        def create() -> KindLabel:
            logger.debug(f"No descriptor for {kind}:{descriptor_id}; using placeholder")
            return make_kind_label(PLACEHOLDER_ICON, placeholder_text(kind, descriptor_id))

        return self.cache.get_or_create(PLACEHOLDER_NAMESPACE, (kind, descriptor_id), create)

    def _from_selector(self, selector, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        if descriptor_id and selector.has(descriptor_id):
            descriptor = selector.select(descriptor_id)
            return make_kind_label(descriptor.icon, descriptor.label)
        return self._placeholder(kind, descriptor_id)

    def _resolve_resource(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        registry = self.registry
        if descriptor_id and registry.resources.has(descriptor_id):
            descriptor = registry.resources.select(descriptor_id)
            return make_kind_label(descriptor.icon, descriptor.label)
        display = registry.catalog.resolve_display(descriptor_id) if descriptor_id else None
        if display is not None:
            return make_kind_label(display.icon, display.name)
        return self._placeholder(kind, descriptor_id)

    def _resolve_stat(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        if descriptor_id and self.registry.stats.has(descriptor_id):
            descriptor = self.registry.stats.select(descriptor_id)
            return make_kind_label(descriptor.icon, descriptor.label)
        return self._resolve_resource(kind, descriptor_id)

    def _resolve_population(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        if not descriptor_id:
            asset = self.registry.population.descriptor
            return make_kind_label(asset.icon, asset.label)
        return self._from_selector(self.registry.populations, kind, descriptor_id)

    def _resolve_building(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        return self._from_selector(self.registry.buildings, kind, descriptor_id)

    def _resolve_development(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        return self._from_selector(self.registry.developments, kind, descriptor_id)

    def _resolve_action(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        return self._from_selector(self.registry.actions, kind, descriptor_id)

    def _resolve_phase(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        return self._from_selector(self.registry.phases, kind, descriptor_id)

    def _resolve_trigger(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        triggers = self.registry.triggers
        if not descriptor_id or not triggers.has(descriptor_id):
            logger.error(f"Trigger {descriptor_id!r} not found in session assets")
            raise MissingTriggerError.not_in_assets(descriptor_id or "")
        trigger = triggers.select(descriptor_id)
        return make_kind_label(trigger.icon, trigger.past or trigger.label)

    def _resolve_passive(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        asset = self.registry.passive.descriptor
        return make_kind_label(asset.icon, asset.label)

    def _resolve_land(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        asset = self.registry.land.descriptor
        return make_kind_label(asset.icon, asset.label)

    def _resolve_start(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        return self.cache.get_or_create(
            PLACEHOLDER_NAMESPACE,
            (ContributionKind.START.value, None),
            lambda: make_kind_label(None, START_PLACEHOLDER),
        )

    def _resolve_unknown(self, kind: str, descriptor_id: Optional[str]) -> KindLabel:
        def create() -> KindLabel:
            logger.debug(f"Unrecognized contribution kind {kind!r}")
            return make_kind_label(None, descriptor_id or kind or "Unknown")

        return self.cache.get_or_create(UNKNOWN_NAMESPACE, (kind, descriptor_id), create)
