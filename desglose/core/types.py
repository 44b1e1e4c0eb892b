# desglose/core/types.py

"""
Custom type definitions shared by the hours engine, the tracker and the export.
"""

from datetime import date
from typing import TypedDict

from desglose.core.models import Breakdown, Position


# Type aliases for common structures
Hours = float
HolidaySet = frozenset[date]
Catalog = dict[str, Position]
BreakdownCatalog = dict[str, Breakdown]


class DailyHours(TypedDict):
    """Hours derived for a single day."""

    total: Hours
    extra: Hours
    holiday: Hours
    custom: dict[str, Hours]


class PeriodSummary(TypedDict):
    """Sum of every entry of the period."""

    total: Hours
    extra: Hours
    night: Hours
    holiday: Hours
    custom: dict[str, Hours]
