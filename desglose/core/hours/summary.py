"""Resumen del período."""

from collections.abc import Iterable

from desglose.core.models import TimeEntry
from desglose.core.types import PeriodSummary


def empty_summary() -> PeriodSummary:
    return {"total": 0.0, "extra": 0.0, "night": 0.0, "holiday": 0.0, "custom": {}}


def summarize(entries: Iterable[TimeEntry]) -> PeriodSummary:
    """
    Suma las horas de todas las entradas.

    Sin redondeo: redondear a dos decimales es cosa de la presentación.

    Returns:
        PeriodSummary con total, extra, nocturnas (legacy), festivas y
        horas por desglose
    """
    result = empty_summary()

    for entry in entries:
        result["total"] += entry.total_hours
        result["extra"] += entry.extra_hours
        result["night"] += entry.night_hours
        result["holiday"] += entry.holiday_hours

        for breakdown_id, value in entry.custom_hours.items():
            result["custom"][breakdown_id] = result["custom"].get(breakdown_id, 0.0) + value.hours

    return result
