"""
Recálculo de entradas cuando cambia algo.

Cada función recibe el estado anterior y devuelve entradas nuevas; nunca
modifica los objetos recibidos. Qué se recalcula en cada caso:

- asignar puesto: todo, descartando las ediciones manuales de desgloses
- editar jornada: todo, salvo desgloses marcados como manuales
- alternar festivo: solo horas festivas de D-1, D y D+1
- cambiar horas estándar: solo horas extra
- editar puesto: jornada/turno propagados si coinciden con el valor anterior,
  totales, y desgloses añadidos/quitados/conservados
- editar desglose: ese desglose en las entradas donde aplica y no es manual
- borrar desglose o puesto: limpieza de referencias
"""

import datetime
import logging
import math

from desglose.core.constants import NO_HOURS_POSITIONS
from desglose.core.models import Breakdown, BreakdownValue, HoursConfig, PeriodConfig, Position, TimeEntry
from desglose.core.time_utils import parse_clock, resolve_shift
from desglose.core.types import BreakdownCatalog, Catalog, HolidaySet

from .breakdowns import applicable_breakdowns, breakdown_hours, is_applicable
from .daily import compute_daily_hours, effective_standard_hours, extra_hours
from .holidays import affected_dates, holiday_hours, toggle_holiday

logger = logging.getLogger(__name__)


# === Estado de una entrada ===


def is_no_hours(position: str) -> bool:
    return position in NO_HOURS_POSITIONS


def has_hours(entry: TimeEntry) -> bool:
    """La entrada lleva cálculo: puesto con horas y jornada completa."""
    return not is_no_hours(entry.position) and bool(entry.work_start) and bool(entry.work_end)


def generate_entries(period: PeriodConfig) -> list[TimeEntry]:
    """
    Una entrada vacía por cada día del período (ambos extremos incluidos).

    Las entradas anteriores se descartan, incluidas sus ediciones manuales.
    """
    if not period.is_complete:
        return []

    entries = []
    current = period.start_date
    while current <= period.end_date:
        entries.append(TimeEntry(date=current))
        current += datetime.timedelta(days=1)

    logger.info("Generadas %d entradas para %s..%s", len(entries), period.start_date, period.end_date)
    return entries


def reset_entry(entry: TimeEntry, position: str = "") -> TimeEntry:
    """Vacía horarios y horas. Se usa para puestos sin horas y para "sin asignar"."""
    return entry.model_copy(
        update={
            "position": position,
            "shift_start": "",
            "shift_end": "",
            "work_start": "",
            "work_end": "",
            "total_hours": 0.0,
            "extra_hours": 0.0,
            "night_hours": 0.0,
            "holiday_hours": 0.0,
            "custom_hours": {},
        }
    )


def _with_daily_hours(
    entry: TimeEntry,
    position: Position | None,
    breakdowns: BreakdownCatalog,
    holidays: HolidaySet,
    hours_config: HoursConfig,
    keep_manual: bool,
) -> TimeEntry:
    """Recalcula totales y desgloses aplicables de una entrada con jornada completa."""
    daily = compute_daily_hours(
        entry.date,
        entry.work_start,
        entry.work_end,
        holidays,
        effective_standard_hours(position, hours_config),
        applicable_breakdowns(position, breakdowns),
        breakdowns,
    )

    custom = dict(entry.custom_hours) if keep_manual else {}
    for breakdown_id, hours in daily["custom"].items():
        current = custom.get(breakdown_id)
        if current is not None and current.manual:
            continue
        custom[breakdown_id] = BreakdownValue(hours=hours)

    return entry.model_copy(
        update={
            "total_hours": daily["total"],
            "extra_hours": daily["extra"],
            "night_hours": 0.0,
            "holiday_hours": daily["holiday"],
            "custom_hours": custom,
        }
    )


def _without_hours(entry: TimeEntry) -> TimeEntry:
    return entry.model_copy(
        update={
            "total_hours": 0.0,
            "extra_hours": 0.0,
            "night_hours": 0.0,
            "holiday_hours": 0.0,
            "custom_hours": {},
        }
    )


# === Asignación de puesto y edición de jornada ===


def apply_position_assignment(
    entry: TimeEntry,
    position_id: str,
    catalog: Catalog,
    breakdowns: BreakdownCatalog,
    holidays: HolidaySet,
    hours_config: HoursConfig,
) -> TimeEntry:
    """
    Asigna un puesto a una entrada.

    Args:
        entry: Entrada a modificar
        position_id: "" (sin asignar), un puesto sin horas o una clave del catálogo
        catalog: Catálogo de puestos
        breakdowns: Definiciones de desgloses
        holidays: Conjunto de festivos
        hours_config: Configuración global de horas

    Returns:
        Entrada nueva. Con un puesto del catálogo se copian inicio/fin en turno
        y jornada y se recalcula todo desde cero (las marcas manuales se pierden).
    """
    if position_id == "" or is_no_hours(position_id):
        return reset_entry(entry, position_id)

    position = catalog.get(position_id)
    if position is None:
        logger.warning("Puesto desconocido %r en la entrada %s, se trata como sin asignar", position_id, entry.id)
        return reset_entry(entry, "")

    updated = entry.model_copy(
        update={
            "position": position_id,
            "shift_start": position.start,
            "shift_end": position.end,
            "work_start": position.start,
            "work_end": position.end,
        }
    )
    return _with_daily_hours(updated, position, breakdowns, holidays, hours_config, keep_manual=False)


def apply_work_time_edit(
    entry: TimeEntry,
    work_start: str,
    work_end: str,
    catalog: Catalog,
    breakdowns: BreakdownCatalog,
    holidays: HolidaySet,
    hours_config: HoursConfig,
) -> TimeEntry:
    """
    Cambia la jornada real de una entrada sin cambiar el puesto.

    Los desgloses marcados como manuales conservan su valor.
    """
    if is_no_hours(entry.position):
        raise ValueError(f"El puesto {entry.position!r} no lleva horario")

    for value, field_name in ((work_start, "work_start"), (work_end, "work_end")):
        if value:
            parse_clock(value, field_name)

    updated = entry.model_copy(update={"work_start": work_start, "work_end": work_end})
    if not has_hours(updated):
        return _without_hours(updated)

    return _with_daily_hours(
        updated,
        catalog.get(entry.position),
        breakdowns,
        holidays,
        hours_config,
        keep_manual=True,
    )


def recompute_entry(
    entry: TimeEntry,
    catalog: Catalog,
    breakdowns: BreakdownCatalog,
    holidays: HolidaySet,
    hours_config: HoursConfig,
) -> TimeEntry:
    """Recalcula una entrada respetando las marcas manuales."""
    if not has_hours(entry):
        return entry
    return _with_daily_hours(entry, catalog.get(entry.position), breakdowns, holidays, hours_config, keep_manual=True)


# === Ediciones manuales de desgloses ===


def apply_manual_breakdown_hours(entry: TimeEntry, breakdown_id: str, hours: float) -> TimeEntry:
    """
    Guarda un valor de desglose editado a mano; los recálculos no lo pisan.

    Raises:
        ValueError: Si la entrada no lleva horas (puesto sin horas o jornada
            incompleta) o el valor no es un número finito no negativo
    """
    if not has_hours(entry):
        raise ValueError(f"La entrada {entry.id} no lleva horas; no admite desgloses manuales")
    if not math.isfinite(hours) or hours < 0:
        raise ValueError(f"Horas de desglose no válidas: {hours!r}")

    custom = dict(entry.custom_hours)
    custom[breakdown_id] = BreakdownValue(hours=hours, manual=True)
    return entry.model_copy(update={"custom_hours": custom})


def clear_manual_breakdown_hours(
    entry: TimeEntry,
    breakdown_id: str,
    catalog: Catalog,
    breakdowns: BreakdownCatalog,
) -> TimeEntry:
    """Quita la marca manual y vuelve al valor calculado (o lo elimina si ya no aplica)."""
    custom = dict(entry.custom_hours)
    custom.pop(breakdown_id, None)

    breakdown = breakdowns.get(breakdown_id)
    position = catalog.get(entry.position)
    if has_hours(entry) and breakdown is not None and is_applicable(breakdown_id, position, breakdowns):
        start_dt, end_dt = resolve_shift(entry.date, entry.work_start, entry.work_end)
        custom[breakdown_id] = BreakdownValue(hours=breakdown_hours(start_dt, end_dt, breakdown, entry.date))

    return entry.model_copy(update={"custom_hours": custom})


# === Festivos y configuración global ===


def apply_holiday_toggle(
    day: datetime.date,
    entries: list[TimeEntry],
    holidays: HolidaySet,
) -> tuple[list[TimeEntry], HolidaySet]:
    """
    Alterna `day` como festivo y recalcula las horas festivas afectadas.

    Solo cambian las entradas con horas de D-1, D y D+1; totales, extra y
    desgloses no se tocan.

    Returns:
        (entradas nuevas, festivos nuevos)
    """
    updated_holidays = toggle_holiday(holidays, day)
    affected = set(affected_dates(day))

    result = []
    for entry in entries:
        if entry.date in affected and has_hours(entry):
            start_dt, end_dt = resolve_shift(entry.date, entry.work_start, entry.work_end)
            entry = entry.model_copy(
                update={"holiday_hours": holiday_hours(start_dt, end_dt, updated_holidays, entry.date)}
            )
        result.append(entry)

    logger.debug("Festivo %s alternado (ahora festivo=%s)", day, day in updated_holidays)
    return result, updated_holidays


def apply_standard_hours_change(
    entries: list[TimeEntry],
    catalog: Catalog,
    hours_config: HoursConfig,
) -> list[TimeEntry]:
    """Recalcula solo las horas extra con el umbral efectivo de cada puesto."""
    result = []
    for entry in entries:
        if has_hours(entry):
            standard = effective_standard_hours(catalog.get(entry.position), hours_config)
            entry = entry.model_copy(update={"extra_hours": extra_hours(entry.total_hours, standard)})
        result.append(entry)
    return result


# === Catálogo de puestos ===


def apply_catalog_edit(
    position_id: str,
    old: Position,
    new: Position,
    entries: list[TimeEntry],
    breakdowns: BreakdownCatalog,
    holidays: HolidaySet,
    hours_config: HoursConfig,
) -> list[TimeEntry]:
    """
    Propaga la edición de un puesto a las entradas que lo usan.

    Args:
        position_id: Puesto editado
        old: Definición antes de la edición
        new: Definición después de la edición
        entries: Entradas del período
        breakdowns: Definiciones de desgloses
        holidays: Conjunto de festivos
        hours_config: Configuración global de horas

    Returns:
        Entradas nuevas. Turno y jornada solo se actualizan si aún coinciden
        con el horario anterior del puesto (si no, son ediciones del usuario).
    """
    old_applicable = applicable_breakdowns(old, breakdowns)
    new_applicable = applicable_breakdowns(new, breakdowns)
    removed = [b for b in old_applicable if b not in new_applicable]
    added = [b for b in new_applicable if b not in old_applicable]

    result = []
    changed = 0
    for entry in entries:
        if entry.position != position_id:
            result.append(entry)
            continue

        update = {}
        if (entry.shift_start, entry.shift_end) == (old.start, old.end):
            update["shift_start"], update["shift_end"] = new.start, new.end
        if (entry.work_start, entry.work_end) == (old.start, old.end):
            update["work_start"], update["work_end"] = new.start, new.end

        updated = entry.model_copy(update=update)

        if has_hours(updated):
            custom = dict(updated.custom_hours)
            for breakdown_id in removed:
                custom.pop(breakdown_id, None)
            for breakdown_id in added:
                # asociación nueva: una marca manual antigua no vale
                custom.pop(breakdown_id, None)
            updated = updated.model_copy(update={"custom_hours": custom})
            updated = _with_daily_hours(updated, new, breakdowns, holidays, hours_config, keep_manual=True)

        result.append(updated)
        changed += 1

    logger.info(
        "Puesto %s editado: %d entradas, desgloses +%s -%s",
        position_id,
        changed,
        added,
        removed,
    )
    return result


def apply_catalog_delete(
    position_id: str,
    entries: list[TimeEntry],
    catalog: Catalog,
) -> tuple[list[TimeEntry], Catalog]:
    """Borra un puesto; sus entradas vuelven a "sin asignar"."""
    updated_catalog = {key: value for key, value in catalog.items() if key != position_id}
    updated_entries = [reset_entry(e, "") if e.position == position_id else e for e in entries]
    return updated_entries, updated_catalog


# === Desgloses ===


def apply_breakdown_edit(
    breakdown_id: str,
    breakdown: Breakdown,
    entries: list[TimeEntry],
    catalog: Catalog,
) -> list[TimeEntry]:
    """
    Recalcula un desglose (creado o con intervalo nuevo) en las entradas donde aplica.

    Aplica si el desglose es global o si está en la lista del puesto de la
    entrada. Los valores manuales se respetan.
    """
    result = []
    for entry in entries:
        if not has_hours(entry):
            result.append(entry)
            continue

        position = catalog.get(entry.position)
        applies = breakdown.is_global or (position is not None and breakdown_id in position.breakdowns)
        current = entry.custom_hours.get(breakdown_id)
        if not applies or (current is not None and current.manual):
            result.append(entry)
            continue

        start_dt, end_dt = resolve_shift(entry.date, entry.work_start, entry.work_end)
        custom = dict(entry.custom_hours)
        custom[breakdown_id] = BreakdownValue(hours=breakdown_hours(start_dt, end_dt, breakdown, entry.date))
        result.append(entry.model_copy(update={"custom_hours": custom}))

    return result


def apply_breakdown_delete(
    breakdown_id: str,
    entries: list[TimeEntry],
    catalog: Catalog,
) -> tuple[list[TimeEntry], Catalog]:
    """Quita un desglose de todas las entradas y de todas las listas de puestos."""
    updated_entries = []
    for entry in entries:
        if breakdown_id in entry.custom_hours:
            custom = {k: v for k, v in entry.custom_hours.items() if k != breakdown_id}
            entry = entry.model_copy(update={"custom_hours": custom})
        updated_entries.append(entry)

    updated_catalog = {}
    for position_id, position in catalog.items():
        if breakdown_id in position.breakdowns:
            position = position.model_copy(
                update={"breakdowns": [b for b in position.breakdowns if b != breakdown_id]}
            )
        updated_catalog[position_id] = position

    return updated_entries, updated_catalog
