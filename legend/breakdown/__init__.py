from legend.breakdown.format import (
    format_amount,
    format_detail_text,
    format_number,
    format_phase_step,
    format_step_label,
    format_value,
)
from legend.breakdown.kinds import KindLabel, KindResolver, placeholder_text
from legend.breakdown.summary import BreakdownEngine, SummaryGroup

__all__ = [
    "BreakdownEngine",
    "SummaryGroup",
    "KindLabel",
    "KindResolver",
    "placeholder_text",
    "format_amount",
    "format_detail_text",
    "format_number",
    "format_phase_step",
    "format_step_label",
    "format_value",
]
