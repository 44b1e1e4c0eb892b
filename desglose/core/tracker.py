"""
Estado del registro de horas y sus mutaciones.

Cada mutación recibe el estado anterior y devuelve uno nuevo:
(estado, acción) -> estado. Nada se modifica en el sitio y no hay señales
globales; quien llama decide cómo propagar el estado nuevo.
"""

import datetime
import logging
import uuid
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field, field_validator

from desglose.core.constants import NIGHT_HOURS_BREAKDOWN_ID, NO_HOURS_DESCRIPTIONS, NO_HOURS_POSITIONS
from desglose.core.hours import (
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
    make_holiday_set,
    summarize,
)
from desglose.core.models import Breakdown, HoursConfig, PeriodConfig, Position, TimeEntry, WorkerData
from desglose.core.types import PeriodSummary

logger = logging.getLogger(__name__)


class EntryNotFound(LookupError):
    """No entry with the given id in the current period."""


class UnknownPosition(LookupError):
    """The position is not in the catalog."""


class UnknownBreakdown(LookupError):
    """The breakdown is not defined."""


class TrackerState(BaseModel):
    """Snapshot of everything the user has configured."""
    worker: WorkerData = Field(default_factory=WorkerData)
    period: PeriodConfig = Field(default_factory=PeriodConfig)
    entries: list[TimeEntry] = Field(default_factory=list)
    positions: dict[str, Position] = Field(default_factory=dict)
    breakdowns: dict[str, Breakdown] = Field(default_factory=dict)
    holidays: frozenset[datetime.date] = frozenset()
    hours_config: HoursConfig = Field(default_factory=HoursConfig)

    @field_validator("holidays", mode="before")
    @classmethod
    def _collapse_holidays(cls, value):
        # acepta listas o fechas con hora; un festivo es siempre un día entero
        return make_holiday_set(value)


# === Auxiliares ===


def _find_entry(state: TrackerState, entry_id: str) -> int:
    for index, entry in enumerate(state.entries):
        if entry.id == entry_id:
            return index
    raise EntryNotFound(f"Entry not found: {entry_id}")


def _replace_entry(state: TrackerState, index: int, entry: TimeEntry) -> TrackerState:
    entries = list(state.entries)
    entries[index] = entry
    return state.model_copy(update={"entries": entries})


def _require_position(state: TrackerState, position_id: str) -> Position:
    position = state.positions.get(position_id)
    if position is None:
        raise UnknownPosition(f"Unknown position: {position_id}")
    return position


def _require_breakdown(state: TrackerState, breakdown_id: str) -> Breakdown:
    breakdown = state.breakdowns.get(breakdown_id)
    if breakdown is None:
        raise UnknownBreakdown(f"Unknown breakdown: {breakdown_id}")
    return breakdown


# === Período y trabajador ===


def update_period(
    state: TrackerState,
    start_date: datetime.date | None,
    end_date: datetime.date | None,
) -> TrackerState:
    """Cambia el período y regenera todas las entradas (se pierden las ediciones)."""
    period = PeriodConfig(start_date=start_date, end_date=end_date)
    return state.model_copy(update={"period": period, "entries": generate_entries(period)})


def update_worker(state: TrackerState, **fields: str) -> TrackerState:
    worker = state.worker.model_copy(update={k: v for k, v in fields.items() if v is not None})
    return state.model_copy(update={"worker": worker})


# === Entradas ===


def assign_position(state: TrackerState, entry_id: str, position: str) -> TrackerState:
    index = _find_entry(state, entry_id)
    entry = apply_position_assignment(
        state.entries[index],
        position,
        state.positions,
        state.breakdowns,
        state.holidays,
        state.hours_config,
    )
    return _replace_entry(state, index, entry)


def edit_work_times(state: TrackerState, entry_id: str, work_start: str, work_end: str) -> TrackerState:
    index = _find_entry(state, entry_id)
    entry = apply_work_time_edit(
        state.entries[index],
        work_start,
        work_end,
        state.positions,
        state.breakdowns,
        state.holidays,
        state.hours_config,
    )
    return _replace_entry(state, index, entry)


def set_manual_hours(state: TrackerState, entry_id: str, breakdown_id: str, hours: float) -> TrackerState:
    _require_breakdown(state, breakdown_id)
    index = _find_entry(state, entry_id)
    entry = apply_manual_breakdown_hours(state.entries[index], breakdown_id, hours)
    return _replace_entry(state, index, entry)


def clear_manual_hours(state: TrackerState, entry_id: str, breakdown_id: str) -> TrackerState:
    index = _find_entry(state, entry_id)
    entry = clear_manual_breakdown_hours(state.entries[index], breakdown_id, state.positions, state.breakdowns)
    return _replace_entry(state, index, entry)


# === Festivos y configuración ===


def toggle_holiday(state: TrackerState, day: datetime.date) -> TrackerState:
    entries, holidays = apply_holiday_toggle(day, state.entries, state.holidays)
    return state.model_copy(update={"entries": entries, "holidays": holidays})


def update_hours_config(
    state: TrackerState,
    standard_daily_hours: float | None = None,
    night_start: str | None = None,
    night_end: str | None = None,
) -> TrackerState:
    """
    Cambia la configuración global de horas.

    Las horas estándar solo recalculan horas extra. El intervalo nocturno
    (legacy) se traslada al desglose de horas nocturnas si existe.
    """
    changes = {
        key: value
        for key, value in (
            ("standard_daily_hours", standard_daily_hours),
            ("night_start", night_start),
            ("night_end", night_end),
        )
        if value is not None
    }
    hours_config = HoursConfig(**{**state.hours_config.model_dump(), **changes})
    state = state.model_copy(update={"hours_config": hours_config})

    if "standard_daily_hours" in changes:
        entries = apply_standard_hours_change(state.entries, state.positions, hours_config)
        state = state.model_copy(update={"entries": entries})

    night_changed = "night_start" in changes or "night_end" in changes
    if night_changed and NIGHT_HOURS_BREAKDOWN_ID in state.breakdowns:
        state = update_breakdown_interval(
            state,
            NIGHT_HOURS_BREAKDOWN_ID,
            hours_config.night_start,
            hours_config.night_end,
        )

    return state


# === Catálogo de puestos ===


def add_position(
    state: TrackerState,
    name: str,
    start: str,
    end: str,
    standard_hours: float | None = None,
    breakdowns: list[str] | None = None,
) -> TrackerState:
    if not name or name in NO_HOURS_POSITIONS:
        raise ValueError(f"Invalid position name: {name!r}")
    if name in state.positions:
        raise ValueError(f"Position already exists: {name}")

    position = Position(start=start, end=end, standard_hours=standard_hours, breakdowns=breakdowns or [])
    logger.info("Position %s added (%s-%s)", name, start, end)
    return state.model_copy(update={"positions": {**state.positions, name: position}})


def update_position(
    state: TrackerState,
    position_id: str,
    start: str,
    end: str,
    standard_hours: float | None = None,
    breakdowns: list[str] | None = None,
) -> TrackerState:
    old = _require_position(state, position_id)
    new = Position(
        start=start,
        end=end,
        standard_hours=standard_hours,
        breakdowns=old.breakdowns if breakdowns is None else breakdowns,
    )
    entries = apply_catalog_edit(
        position_id,
        old,
        new,
        state.entries,
        state.breakdowns,
        state.holidays,
        state.hours_config,
    )
    return state.model_copy(update={"positions": {**state.positions, position_id: new}, "entries": entries})


def delete_position(state: TrackerState, position_id: str) -> TrackerState:
    _require_position(state, position_id)
    entries, positions = apply_catalog_delete(position_id, state.entries, state.positions)
    logger.info("Position %s deleted", position_id)
    return state.model_copy(update={"entries": entries, "positions": positions})


# === Desgloses ===


def add_breakdown(
    state: TrackerState,
    name: str,
    color: str | None = None,
    time_start: str | None = None,
    time_end: str | None = None,
    position_id: str | None = None,
    breakdown_id: str | None = None,
) -> TrackerState:
    breakdown_id = breakdown_id or str(uuid.uuid4())
    fields = {"name": name, "time_start": time_start, "time_end": time_end, "position_id": position_id}
    if color:
        fields["color"] = color
    breakdown = Breakdown(**fields)

    state = state.model_copy(update={"breakdowns": {**state.breakdowns, breakdown_id: breakdown}})
    if breakdown.has_interval:
        entries = apply_breakdown_edit(breakdown_id, breakdown, state.entries, state.positions)
        state = state.model_copy(update={"entries": entries})

    logger.info("Breakdown %s (%s) added", breakdown_id, name)
    return state


def update_breakdown_interval(
    state: TrackerState,
    breakdown_id: str,
    time_start: str | None,
    time_end: str | None,
) -> TrackerState:
    breakdown = _require_breakdown(state, breakdown_id)
    updated = Breakdown(**{**breakdown.model_dump(), "time_start": time_start, "time_end": time_end})

    entries = apply_breakdown_edit(breakdown_id, updated, state.entries, state.positions)
    state = state.model_copy(update={"breakdowns": {**state.breakdowns, breakdown_id: updated}, "entries": entries})

    if breakdown_id == NIGHT_HOURS_BREAKDOWN_ID and updated.has_interval:
        hours_config = state.hours_config.model_copy(
            update={"night_start": updated.time_start, "night_end": updated.time_end}
        )
        state = state.model_copy(update={"hours_config": hours_config})

    return state


def delete_breakdown(state: TrackerState, breakdown_id: str) -> TrackerState:
    _require_breakdown(state, breakdown_id)
    entries, positions = apply_breakdown_delete(breakdown_id, state.entries, state.positions)
    breakdowns = {k: v for k, v in state.breakdowns.items() if k != breakdown_id}
    logger.info("Breakdown %s deleted", breakdown_id)
    return state.model_copy(update={"entries": entries, "positions": positions, "breakdowns": breakdowns})


# === Lectura ===


def get_summary(state: TrackerState) -> PeriodSummary:
    return summarize(state.entries)


def available_positions(state: TrackerState) -> dict[str, dict[str, str] | str]:
    """Puestos sin horas (con su descripción) seguidos del catálogo con su horario."""
    result: dict[str, dict[str, str] | str] = dict(NO_HOURS_DESCRIPTIONS)
    for name, position in state.positions.items():
        result[name] = {"start": position.start, "end": position.end}
    return result


ACTIONS: dict[str, Callable[..., TrackerState]] = {
    "update_period": update_period,
    "update_worker": update_worker,
    "assign_position": assign_position,
    "edit_work_times": edit_work_times,
    "set_manual_hours": set_manual_hours,
    "clear_manual_hours": clear_manual_hours,
    "toggle_holiday": toggle_holiday,
    "update_hours_config": update_hours_config,
    "add_position": add_position,
    "update_position": update_position,
    "delete_position": delete_position,
    "add_breakdown": add_breakdown,
    "update_breakdown_interval": update_breakdown_interval,
    "delete_breakdown": delete_breakdown,
}


def dispatch(state: TrackerState, action: str, **payload: Any) -> TrackerState:
    """Aplica una acción por nombre y devuelve el estado nuevo."""
    handler = ACTIONS.get(action)
    if handler is None:
        raise ValueError(f"Unsupported action: {action}")
    logger.debug("Dispatching %s", action, extra={"extra_fields": {"action": action}})
    return handler(state, **payload)
