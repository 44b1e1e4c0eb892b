"""Cálculo de horas festivas y manejo del conjunto de festivos."""

import datetime
from collections.abc import Iterable

from desglose.core.time_utils import start_of_day
from desglose.core.types import HolidaySet

from .overlap import overlap_hours


def make_holiday_set(dates: Iterable[datetime.date]) -> HolidaySet:
    """Construye el conjunto de festivos (los duplicados del mismo día desaparecen)."""
    return frozenset(d.date() if isinstance(d, datetime.datetime) else d for d in dates)


def is_holiday(day: datetime.date, holidays: HolidaySet) -> bool:
    return day in holidays


def toggle_holiday(holidays: HolidaySet, day: datetime.date) -> HolidaySet:
    """Marca o desmarca un día como festivo. Devuelve un conjunto nuevo."""
    if is_holiday(day, holidays):
        return holidays - {day}
    return holidays | {day}


def affected_dates(day: datetime.date) -> tuple[datetime.date, datetime.date, datetime.date]:
    """Días cuyo reparto festivo puede cambiar al alternar `day`."""
    one_day = datetime.timedelta(days=1)
    return day - one_day, day, day + one_day


def holiday_hours(
    start_dt: datetime.datetime,
    end_dt: datetime.datetime,
    holidays: HolidaySet,
    shift_date: datetime.date,
) -> float:
    """
    Horas del turno que caen en día festivo.

    Suma dos aportaciones independientes:
    - la parte del turno dentro de `shift_date` si ese día es festivo
    - la parte del turno dentro de `shift_date + 1` si ese día es festivo
      (turnos que cruzan la medianoche)

    Un turno dura como máximo 24 h, así que no hay doble conteo.

    Args:
        start_dt: Inicio resuelto del turno
        end_dt: Fin resuelto del turno
        holidays: Conjunto de festivos
        shift_date: Día al que pertenece el turno

    Returns:
        Horas festivas
    """
    next_day = shift_date + datetime.timedelta(days=1)
    day_start = start_of_day(shift_date)
    next_day_start = start_of_day(next_day)

    hours = 0.0

    if is_holiday(shift_date, holidays):
        hours += overlap_hours(start_dt, end_dt, day_start, next_day_start)

    if is_holiday(next_day, holidays) and end_dt > next_day_start:
        hours += overlap_hours(
            start_dt,
            end_dt,
            next_day_start,
            next_day_start + datetime.timedelta(days=1),
        )

    return hours
