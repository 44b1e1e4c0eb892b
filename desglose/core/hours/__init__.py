"""
Motor de cálculo de horas.

Exporta todas las funciones públicas del paquete.
"""

from .breakdowns import applicable_breakdowns, breakdown_hours, is_applicable
from .daily import compute_daily_hours, effective_standard_hours, extra_hours
from .holidays import affected_dates, holiday_hours, is_holiday, make_holiday_set, toggle_holiday
from .overlap import overlap_hours
from .recompute import (
    apply_breakdown_delete,
    apply_breakdown_edit,
    apply_catalog_delete,
    apply_catalog_edit,
    apply_holiday_toggle,
    apply_manual_breakdown_hours,
    apply_position_assignment,
    apply_standard_hours_change,
    apply_work_time_edit,
    clear_manual_breakdown_hours,
    generate_entries,
    has_hours,
    is_no_hours,
    recompute_entry,
    reset_entry,
)
from .summary import empty_summary, summarize

__all__ = [
    # overlap
    "overlap_hours",
    # holidays
    "holiday_hours",
    "make_holiday_set",
    "toggle_holiday",
    "is_holiday",
    "affected_dates",
    # breakdowns
    "breakdown_hours",
    "applicable_breakdowns",
    "is_applicable",
    # daily
    "compute_daily_hours",
    "effective_standard_hours",
    "extra_hours",
    # recompute
    "generate_entries",
    "reset_entry",
    "has_hours",
    "is_no_hours",
    "recompute_entry",
    "apply_position_assignment",
    "apply_work_time_edit",
    "apply_manual_breakdown_hours",
    "clear_manual_breakdown_hours",
    "apply_holiday_toggle",
    "apply_standard_hours_change",
    "apply_catalog_edit",
    "apply_catalog_delete",
    "apply_breakdown_edit",
    "apply_breakdown_delete",
    # summary
    "summarize",
    "empty_summary",
]
