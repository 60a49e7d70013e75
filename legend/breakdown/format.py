"""
Breakdown Text Formatting
=========================
Number, amount and detail formatting used by the breakdown engine.
"""

import math
import re
from typing import Optional

from legend.descriptors.types import PhaseDescriptor

_KEBAB_ID = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", re.IGNORECASE)
_LOWER_START = re.compile(r"^[a-z]")


def format_detail_text(detail: Optional[str]) -> str:
    """
    'resource-detail' -> 'Resource Detail'
    'income' -> 'Income'
    Anything else is returned unchanged.
    """
    if not detail:
        return ""
    if _KEBAB_ID.match(detail):
        return " ".join(
            segment[0].upper() + segment[1:] for segment in detail.split("-") if segment
        )
    if _LOWER_START.match(detail):
        return detail[0].upper() + detail[1:]
    return detail


def format_number(value: float, digits: int = 2) -> str:
    """Round to at most `digits` decimals and drop trailing zeros."""
    if not math.isfinite(value):
        return str(value)
    rounded = round(value, digits)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.{digits}f}".rstrip("0").rstrip(".")


def format_value(value: float, percent: bool = False, digits: int = 2) -> str:
    if percent:
        return f"{format_number(value * 100, digits)}%"
    return format_number(value, digits)


def format_amount(amount: float, percent: bool = False, digits: int = 2) -> str:
    """Signed amount: '+3', '-1.5', '+25%'."""
    # Sign follows the rounded value so tiny negatives read "+0"
    scaled = amount * 100 if percent else amount
    rounded = round(scaled, digits) if math.isfinite(scaled) else scaled
    sign = "-" if rounded < 0 else "+"
    return f"{sign}{format_value(abs(amount), percent, digits)}"


# =============================================================================
# PHASES
# =============================================================================


def format_step_label(phase: Optional[PhaseDescriptor], step_id: Optional[str]) -> Optional[str]:
    """Step icon and label, or the formatted step id when the step is unknown."""
    if not step_id:
        return None
    step = phase.steps_by_id.get(step_id) if phase else None
    if step is None:
        return format_detail_text(step_id)
    parts = [step.icon] if step.icon else []
    parts.append(format_detail_text(step.label))
    return " ".join(parts).strip()


def format_phase_step(
    phase: Optional[PhaseDescriptor],
    phase_id: Optional[str],
    step_id: Optional[str],
) -> Optional[str]:
    """
    'Phase · Step' text for a phase/step pair.

    Without a registered step both halves are formatted from their ids; the
    phase half is dropped when it reads the same as the step.
    """
    if not step_id:
        return None
    step = phase.steps_by_id.get(step_id) if phase else None
    if step is None:
        phase_label = format_detail_text(phase_id) if phase_id else ""
        step_label = format_detail_text(step_id)
        if phase_label and phase_label != step_label:
            return f"{phase_label} · {step_label}"
        return step_label
    parts = [part for part in (phase.icon, phase.label) if part]
    step_text = format_step_label(phase, step_id)
    if parts and step_text:
        return f"{' '.join(parts).strip()} · {step_text}"
    return step_text or " ".join(parts).strip()
