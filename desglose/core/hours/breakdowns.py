"""Horas por desglose (intervalos diarios con nombre, p. ej. nocturnas)."""

import datetime
import logging

from desglose.core.models import Breakdown, Position
from desglose.core.time_utils import resolve_shift
from desglose.core.types import BreakdownCatalog

from .overlap import overlap_hours

logger = logging.getLogger(__name__)

# Anclajes del intervalo recurrente que pueden tocar un turno del día D
_ANCHOR_OFFSETS = (-1, 0, 1)


def breakdown_hours(
    work_start: datetime.datetime,
    work_end: datetime.datetime,
    breakdown: Breakdown,
    shift_date: datetime.date,
) -> float:
    """
    Horas del turno que caen dentro del intervalo de un desglose.

    El intervalo del desglose se resuelve como un turno (si el fin es menor o
    igual que el inicio, termina al día siguiente) y se repite cada día. Se
    comprueban las apariciones ancladas en el día anterior, el propio día y el
    siguiente, así un turno que termina a las 02:00 encuentra el intervalo
    nocturno que empezó el día antes.

    Args:
        work_start: Inicio resuelto de la jornada
        work_end: Fin resuelto de la jornada
        breakdown: Definición del desglose
        shift_date: Día al que pertenece el turno

    Returns:
        Horas del desglose (0 si el desglose no tiene intervalo)
    """
    if not breakdown.has_interval:
        return 0.0

    total = 0.0
    for offset in _ANCHOR_OFFSETS:
        anchor = shift_date + datetime.timedelta(days=offset)
        b_start, b_end = resolve_shift(anchor, breakdown.time_start, breakdown.time_end)
        total += overlap_hours(work_start, work_end, b_start, b_end)

    return total


def applicable_breakdowns(
    position: Position | None,
    breakdowns: BreakdownCatalog,
) -> list[str]:
    """
    Desgloses que se calculan para un puesto.

    Primero los asociados al puesto (en su orden, solo los que existen), después
    todos los desgloses globales (sin puesto propietario) que falten.
    """
    result: list[str] = []

    if position is not None:
        for breakdown_id in position.breakdowns:
            if breakdown_id not in breakdowns:
                logger.warning("Puesto asociado a desglose inexistente %s, se ignora", breakdown_id)
                continue
            if breakdown_id not in result:
                result.append(breakdown_id)

    for breakdown_id, breakdown in breakdowns.items():
        if breakdown.is_global and breakdown_id not in result:
            result.append(breakdown_id)

    return result


def is_applicable(breakdown_id: str, position: Position | None, breakdowns: BreakdownCatalog) -> bool:
    return breakdown_id in applicable_breakdowns(position, breakdowns)
