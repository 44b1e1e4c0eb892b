"""Solapamiento entre intervalos de tiempo."""

import datetime

from desglose.core.time_utils import hours_between


def overlap_hours(
    a_start: datetime.datetime,
    a_end: datetime.datetime,
    b_start: datetime.datetime,
    b_end: datetime.datetime,
) -> float:
    """
    Horas en que dos intervalos se solapan.

    Intervalos semiabiertos: si solo se tocan en un extremo el resultado es 0.
    El resultado no depende del orden de los pares.

    Args:
        a_start: Inicio del primer intervalo
        a_end: Fin del primer intervalo
        b_start: Inicio del segundo intervalo
        b_end: Fin del segundo intervalo

    Returns:
        Horas solapadas (nunca negativas)

    Raises:
        ValueError: Si algún intervalo tiene el fin antes del inicio
    """
    if a_end < a_start or b_end < b_start:
        raise ValueError(f"Intervalo invertido: [{a_start}, {a_end}) / [{b_start}, {b_end})")

    start = max(a_start, b_start)
    end = min(a_end, b_end)

    if end <= start:
        return 0.0

    return hours_between(start, end)
