"""
Contribution Breakdown Engine
=============================
Turns the source map behind one resource or stat value into grouped,
ordered, human-readable explanation text.

Output shape:

    [SummaryGroup("♾️ Ongoing", (
        SummaryGroup("🏛️ Castle", ("+2", "Ongoing as long as ...", "Triggered by ...")),
        ...
    )),
     SummaryGroup("Permanent", (...))]

Buckets: Ongoing first, then Permanent; only non-empty buckets are emitted.
Within a bucket entries are grouped by origin (kind, id) in insertion order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from legend.breakdown.format import format_amount, format_phase_step, format_value
from legend.breakdown.kinds import KindResolver
from legend.config import Settings
from legend.descriptors.lookup import FallbackCache
from legend.models.contributions import (
    Contribution,
    ContributionExtra,
    ContributionKind,
    ContributionMeta,
    DependencyLink,
    HistoryItem,
    Longevity,
    parse_sources,
)
from legend.registry import MetadataRegistry

logger = logging.getLogger(__name__)

SummaryItem = Union[str, "SummaryGroup"]

POPULATION_SEGMENTS = (":population:", ":role:")


@dataclass(frozen=True)
class SummaryGroup:
    title: str
    items: Tuple[SummaryItem, ...] = ()

    def lines(self, indent: int = 0) -> List[str]:
        """Flatten to indented text lines, title first."""
        pad = "  " * indent
        result = [f"{pad}{self.title}"]
        for item in self.items:
            if isinstance(item, SummaryGroup):
                result.extend(item.lines(indent + 1))
            else:
                result.append(f"{pad}  {item}")
        return result


def _dedupe(lines: Iterable[str]) -> Tuple[str, ...]:
    seen = {}
    for line in lines:
        text = line.strip()
        if text and text not in seen:
            seen[text] = None
    return tuple(seen)


class BreakdownEngine:
    """
    Contribution breakdown for one metadata registry.

    Args:
        registry: Metadata registry for the current session snapshot
        settings: Formatting settings (percent digits)
        cache: Placeholder cache; defaults to the registry's cache
    """

    def __init__(
        self,
        registry: MetadataRegistry,
        settings: Optional[Settings] = None,
        cache: Optional[FallbackCache] = None,
    ):
        self.registry = registry
        self.settings = settings or Settings()
        self.kinds = KindResolver(registry, cache=cache)

    def reset(self):
        self.kinds.cache.clear()

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def summarize(
        self,
        target_id: str,
        sources: Mapping[str, Union[Contribution, Mapping[str, Any]]],
        values: Optional[Mapping[str, float]] = None,
    ) -> List[SummaryGroup]:
        """
        Build the breakdown tree for one value.

        Args:
            target_id: Resource or stat id the sources contribute to
            sources: sourceKey -> {amount, meta}
            values: Current player values used for dependency suffixes

        Raises:
            MetadataError: If a source entry is malformed
            MissingTriggerError: If a source references an unregistered trigger
        """
        parsed = parse_sources(sources)
        values = values or {}
        percent = self.kinds.is_percent(target_id)

        buckets: Dict[Longevity, Dict[Tuple[str, Optional[str]], List[Contribution]]] = {
            Longevity.ONGOING: {},
            Longevity.PERMANENT: {},
        }
        for contribution in parsed.values():
            meta = contribution.meta
            origins = buckets[meta.longevity]
            origins.setdefault((meta.kind, meta.id), []).append(contribution)

        groups: List[SummaryGroup] = []
        for longevity, origins in buckets.items():
            if not origins:
                continue
            items = tuple(
                self._origin_group(entries, percent, values) for entries in origins.values()
            )
            groups.append(SummaryGroup(title=self._bucket_title(longevity), items=items))

        logger.debug(
            f"Summarized {len(parsed)} sources for {target_id!r} into {len(groups)} buckets"
        )
        return groups

    def _bucket_title(self, longevity: Longevity) -> str:
        if longevity is Longevity.ONGOING:
            icon = self.registry.passive.descriptor.icon
            return f"{icon} Ongoing" if icon else "Ongoing"
        return "Permanent"

    def _origin_group(
        self,
        entries: List[Contribution],
        percent: bool,
        values: Mapping[str, float],
    ) -> SummaryGroup:
        meta = entries[0].meta
        lines: List[str] = []
        for contribution in entries:
            lines.extend(self._entry_lines(contribution, percent, values))
        return SummaryGroup(title=self.origin_title(meta), items=tuple(lines))

    def origin_title(self, meta: ContributionMeta) -> str:
        """
        '<icon> <label> · <Detail>', or '<icon> <label>: <Detail>' for actions.
        The detail is skipped when it reads the same as the label.
        """
        resolved = self.kinds.resolve(meta.kind, meta.id)
        detail = self.kinds.format_detail(meta.kind, meta.id, meta.detail)
        label = resolved.label
        if detail:
            if meta.tagged_kind is ContributionKind.ACTION:
                label = f"{label}: {detail}"
            elif label.lower() != detail.lower():
                label = f"{label} · {detail}"
        parts = [part for part in (resolved.icon, label) if part]
        return " ".join(parts).strip()

    def _entry_lines(
        self,
        contribution: Contribution,
        percent: bool,
        values: Mapping[str, float],
    ) -> Tuple[str, ...]:
        meta = contribution.meta
        digits = self.settings.percent_digits
        dependencies = [
            self.format_dependency(link, values) for link in meta.depends_on
        ]
        dependencies = [text for text in dependencies if text]

        lines = [format_amount(contribution.amount, percent, digits)]
        if meta.longevity is Longevity.ONGOING:
            if dependencies:
                lines.append(f"Ongoing as long as {' and '.join(dependencies)}")
            else:
                lines.append("Ongoing")
        else:
            lines.append("Permanent")
        for dependency in dependencies:
            lines.append(f"Triggered by {dependency}")

        if meta.removal is not None:
            removal = self.format_dependency(meta.removal, values, include_values=False)
            if removal:
                if meta.longevity is Longevity.ONGOING:
                    lines.append(f"Removed when {removal}")
                else:
                    lines.append(f"Can be removed when {removal}")

        if meta.extra is not None:
            lines.extend(self.history_lines(meta.extra))
        return _dedupe(lines)

    # =========================================================================
    # DEPENDENCIES
    # =========================================================================

    def format_dependency(
        self,
        link: DependencyLink,
        values: Optional[Mapping[str, float]] = None,
        include_values: bool = True,
    ) -> str:
        """
        '<icon> <label> <Detail> (<value>)' for one dependency link.

        Phase links render as 'Phase · Step'. Population links carry '×N'
        instead of a value.
        """
        values = values or {}
        kind = link.tagged_kind
        if kind is ContributionKind.PHASE:
            phase = self.registry.phases.select(link.id) if link.id else None
            phase_step = format_phase_step(phase, link.id, link.detail)
            if phase_step:
                return phase_step.strip()
            return self.kinds.format_kind_label(link.type, link.id)

        fragments = [self.kinds.format_kind_label(link.type, link.id)]
        detail = self.kinds.format_detail(link.type, link.id, link.detail)
        if detail:
            fragments.append(detail)
        if include_values and link.id is not None and link.id in values:
            fragments.append(self._value_suffix(kind, link.id, values[link.id]))
        return " ".join(fragment for fragment in fragments if fragment).strip()

    def _value_suffix(self, kind: ContributionKind, link_id: str, value: float) -> str:
        digits = self.settings.percent_digits
        is_count = kind is ContributionKind.POPULATION or (
            kind is ContributionKind.RESOURCE
            and any(segment in link_id for segment in POPULATION_SEGMENTS)
        )
        if is_count:
            return f"×{format_value(value, digits=digits)}" if value > 0 else ""
        if kind in (ContributionKind.RESOURCE, ContributionKind.STAT):
            return f"({format_value(value, self.kinds.is_percent(link_id), digits)})"
        return ""

    # =========================================================================
    # HISTORY
    # =========================================================================

    def _phase_hint(self, phase_id: Optional[str], step_id: Optional[str]) -> Optional[str]:
        phase = None
        if phase_id and self.registry.phases.has(phase_id):
            phase = self.registry.phases.select(phase_id)
        return format_phase_step(phase, phase_id, step_id)

    def _history_item(self, item: Union[int, str, HistoryItem]) -> Optional[str]:
        if isinstance(item, int):
            return f"Turn {item}"
        if isinstance(item, str):
            return item
        step_id = item.step or item.detail
        phase_text = self._phase_hint(item.phase, step_id) or " · ".join(
            part for part in (item.phase_name, item.step_name) if part
        )
        parts = []
        if item.turn is not None:
            parts.append(f"Turn {item.turn}")
        if phase_text:
            parts.append(phase_text)
        if item.description:
            parts.append(item.description)
        return " – ".join(parts) if parts else None

    def history_lines(self, extra: ContributionExtra) -> Tuple[str, ...]:
        """History, trigger and turn lines, duplicates dropped."""
        lines: List[str] = []
        for item in extra.history:
            text = self._history_item(item)
            if text:
                lines.append(text)

        trigger_ids = list(extra.triggers)
        if extra.trigger:
            trigger_ids.append(extra.trigger)
        for trigger_id in trigger_ids:
            lines.append(f"Triggered by {self.kinds.trigger_label(trigger_id)}")

        turns = set(extra.turns)
        if extra.turn is not None:
            turns.add(extra.turn)
        phase_hint = self._phase_hint(extra.phase, extra.step)
        if turns:
            for turn in sorted(turns):
                lines.append(f"Turn {turn} – {phase_hint}" if phase_hint else f"Turn {turn}")
        elif phase_hint:
            lines.append(phase_hint)
        return _dedupe(lines)
