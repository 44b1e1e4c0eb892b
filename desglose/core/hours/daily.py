"""Horas de un día: totales, extra, festivas y desgloses."""

import datetime
from collections.abc import Iterable

from desglose.core.models import HoursConfig, Position
from desglose.core.time_utils import hours_between, resolve_shift
from desglose.core.types import BreakdownCatalog, DailyHours, HolidaySet

from .breakdowns import breakdown_hours
from .holidays import holiday_hours


def effective_standard_hours(position: Position | None, hours_config: HoursConfig) -> float:
    """Horas estándar del puesto si las tiene, si no el valor global."""
    if position is not None and position.standard_hours is not None:
        return position.standard_hours
    return hours_config.standard_daily_hours


def extra_hours(total: float, standard_hours: float) -> float:
    return max(0.0, total - standard_hours)


def compute_daily_hours(
    date: datetime.date,
    work_start: str,
    work_end: str,
    holidays: HolidaySet,
    standard_hours: float,
    applicable: Iterable[str],
    breakdowns: BreakdownCatalog,
) -> DailyHours:
    """
    Calcula todas las horas derivadas de una jornada.

    Args:
        date: Día de la jornada
        work_start: Hora de entrada "HH:MM"
        work_end: Hora de salida "HH:MM" (menor o igual que la entrada = día siguiente)
        holidays: Conjunto de festivos
        standard_hours: Umbral de horas extra
        applicable: Ids de desgloses a calcular
        breakdowns: Definiciones de desgloses

    Returns:
        DailyHours con total, extra, festivas y horas por desglose
    """
    start_dt, end_dt = resolve_shift(date, work_start, work_end)
    total = hours_between(start_dt, end_dt)

    custom: dict[str, float] = {}
    for breakdown_id in applicable:
        breakdown = breakdowns.get(breakdown_id)
        if breakdown is None:
            continue
        custom[breakdown_id] = breakdown_hours(start_dt, end_dt, breakdown, date)

    return {
        "total": total,
        "extra": extra_hours(total, standard_hours),
        "holiday": holiday_hours(start_dt, end_dt, holidays, date),
        "custom": custom,
    }
