# desglose/routes/tracker.py
"""
JSON API over the hours tracker state.
"""

import datetime
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from desglose.core import tracker
from desglose.core.export import XLSX_MEDIA_TYPE, EmptyExportSet, export_filename, export_workbook
from desglose.core.logging_config import LogContext, get_logger
from desglose.core.store import StateStore, get_store

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["tracker"])


# ============ Request bodies ============


class PeriodUpdate(BaseModel):
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None


class WorkerUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    second_last_name: str | None = None


class PositionAssignment(BaseModel):
    position: str


class WorkTimesUpdate(BaseModel):
    work_start: str = ""
    work_end: str = ""


class ManualHours(BaseModel):
    hours: float = Field(ge=0)


class HolidayToggle(BaseModel):
    date: datetime.date


class HoursConfigUpdate(BaseModel):
    standard_daily_hours: float | None = Field(default=None, ge=0)
    night_start: str | None = None
    night_end: str | None = None


class PositionCreate(BaseModel):
    name: str
    start: str
    end: str
    standard_hours: float | None = None
    breakdowns: list[str] = Field(default_factory=list)


class PositionUpdate(BaseModel):
    """Omitted optional fields keep the position's current values; explicit null clears `standard_hours`."""

    start: str
    end: str
    standard_hours: float | None = None
    breakdowns: list[str] | None = None


class BreakdownCreate(BaseModel):
    name: str
    color: str | None = None
    time_start: str | None = None
    time_end: str | None = None
    position_id: str | None = None


class BreakdownInterval(BaseModel):
    time_start: str | None = None
    time_end: str | None = None


# ============ Helpers ============


def serialize_state(state: tracker.TrackerState) -> dict[str, Any]:
    data = state.model_dump(mode="json")
    data["holidays"] = sorted(day.isoformat() for day in state.holidays)
    return data


def _apply(store: StateStore, action: str, **payload: Any) -> dict[str, Any]:
    """Run a tracker action against the store, mapping domain errors to HTTP errors."""
    with LogContext(action=action):
        try:
            state = tracker.dispatch(store.get(), action, **payload)
        except LookupError as e:
            logger.warning(f"{action} failed: {e}")
            raise HTTPException(status_code=404, detail=str(e)) from e
        except ValueError as e:
            logger.warning(f"{action} rejected: {e}")
            raise HTTPException(status_code=422, detail=str(e)) from e
    return serialize_state(store.replace(state))


# ============ Routes ============


@router.get("/state")
async def get_state(store: StateStore = Depends(get_store)):
    """Whole tracker state: worker, period, entries, catalogs and holidays."""
    return serialize_state(store.get())


@router.put("/period")
async def put_period(body: PeriodUpdate, store: StateStore = Depends(get_store)):
    """Change the period. Entries are regenerated and previous edits are lost."""
    return _apply(store, "update_period", start_date=body.start_date, end_date=body.end_date)


@router.put("/worker")
async def put_worker(body: WorkerUpdate, store: StateStore = Depends(get_store)):
    return _apply(store, "update_worker", **body.model_dump(exclude_none=True))


@router.put("/entries/{entry_id}/position")
async def put_entry_position(entry_id: str, body: PositionAssignment, store: StateStore = Depends(get_store)):
    return _apply(store, "assign_position", entry_id=entry_id, position=body.position)


@router.put("/entries/{entry_id}/work-times")
async def put_entry_work_times(entry_id: str, body: WorkTimesUpdate, store: StateStore = Depends(get_store)):
    return _apply(store, "edit_work_times", entry_id=entry_id, work_start=body.work_start, work_end=body.work_end)


@router.put("/entries/{entry_id}/breakdowns/{breakdown_id}")
async def put_entry_breakdown(
    entry_id: str,
    breakdown_id: str,
    body: ManualHours,
    store: StateStore = Depends(get_store),
):
    """Manually override one breakdown value. It survives later recomputations."""
    return _apply(store, "set_manual_hours", entry_id=entry_id, breakdown_id=breakdown_id, hours=body.hours)


@router.delete("/entries/{entry_id}/breakdowns/{breakdown_id}")
async def delete_entry_breakdown(entry_id: str, breakdown_id: str, store: StateStore = Depends(get_store)):
    """Drop a manual override and go back to the computed value."""
    return _apply(store, "clear_manual_hours", entry_id=entry_id, breakdown_id=breakdown_id)


@router.post("/holidays/toggle")
async def post_holiday_toggle(body: HolidayToggle, store: StateStore = Depends(get_store)):
    return _apply(store, "toggle_holiday", day=body.date)


@router.put("/hours-config")
async def put_hours_config(body: HoursConfigUpdate, store: StateStore = Depends(get_store)):
    return _apply(store, "update_hours_config", **body.model_dump(exclude_none=True))


@router.get("/positions")
async def get_positions(store: StateStore = Depends(get_store)):
    """Selectable positions: the no-hours ones with their description, then the catalog."""
    return tracker.available_positions(store.get())


@router.post("/positions", status_code=201)
async def post_position(body: PositionCreate, store: StateStore = Depends(get_store)):
    return _apply(store, "add_position", **body.model_dump())


@router.put("/positions/{position_id}")
async def put_position(position_id: str, body: PositionUpdate, store: StateStore = Depends(get_store)):
    """Edit a position. Omitted `standard_hours` and `breakdowns` keep their current values."""
    changes = body.model_dump()
    if "standard_hours" not in body.model_fields_set:
        current = store.get().positions.get(position_id)
        changes["standard_hours"] = current.standard_hours if current is not None else None
    return _apply(store, "update_position", position_id=position_id, **changes)


@router.delete("/positions/{position_id}")
async def delete_position(position_id: str, store: StateStore = Depends(get_store)):
    return _apply(store, "delete_position", position_id=position_id)


@router.post("/breakdowns", status_code=201)
async def post_breakdown(body: BreakdownCreate, store: StateStore = Depends(get_store)):
    return _apply(store, "add_breakdown", **body.model_dump())


@router.put("/breakdowns/{breakdown_id}/interval")
async def put_breakdown_interval(breakdown_id: str, body: BreakdownInterval, store: StateStore = Depends(get_store)):
    return _apply(
        store,
        "update_breakdown_interval",
        breakdown_id=breakdown_id,
        time_start=body.time_start,
        time_end=body.time_end,
    )


@router.delete("/breakdowns/{breakdown_id}")
async def delete_breakdown(breakdown_id: str, store: StateStore = Depends(get_store)):
    return _apply(store, "delete_breakdown", breakdown_id=breakdown_id)


@router.get("/summary")
async def get_summary(store: StateStore = Depends(get_store)):
    """Period totals, including one total per breakdown."""
    return tracker.get_summary(store.get())


@router.get("/export")
async def get_export(store: StateStore = Depends(get_store)):
    """Download the period as an xlsx sheet."""
    state = store.get()
    try:
        content = export_workbook(
            state.entries,
            tracker.get_summary(state),
            state.worker,
            state.period,
            state.breakdowns,
        )
    except EmptyExportSet as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    filename = export_filename(state.worker, state.period)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
