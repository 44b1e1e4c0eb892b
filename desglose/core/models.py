import datetime
import uuid

from pydantic import BaseModel, Field, field_validator, model_validator

from desglose.core.config import (
    DEFAULT_NIGHT_END,
    DEFAULT_NIGHT_START,
    DEFAULT_STANDARD_DAILY_HOURS,
)
from desglose.core.constants import DEFAULT_BREAKDOWN_COLOR
from desglose.core.time_utils import parse_clock


def _check_clock(value: str | None, field_name: str) -> str | None:
    """Validate an optional clock; empty means "not set"."""
    if value is None or value == "":
        return value
    parse_clock(value, field_name)
    return value.strip()


class BreakdownValue(BaseModel):
    """Hours of one breakdown on one entry, with the manual override flag."""
    hours: float = 0.0
    manual: bool = False


class TimeEntry(BaseModel):
    """One calendar day of the active period."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    date: datetime.date
    position: str = ""
    shift_start: str = ""
    shift_end: str = ""
    work_start: str = ""
    work_end: str = ""
    total_hours: float = 0.0
    extra_hours: float = 0.0
    night_hours: float = 0.0  # legacy, always 0
    holiday_hours: float = 0.0
    custom_hours: dict[str, BreakdownValue] = Field(default_factory=dict)

    @field_validator("shift_start", "shift_end", "work_start", "work_end")
    @classmethod
    def _valid_clock(cls, value: str, info) -> str:
        return _check_clock(value, info.field_name)


class Position(BaseModel):
    """Shift catalog entry (puesto) with its nominal schedule."""
    start: str
    end: str
    standard_hours: float | None = None
    breakdowns: list[str] = Field(default_factory=list)

    @field_validator("start", "end")
    @classmethod
    def _valid_clock(cls, value: str, info) -> str:
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return _check_clock(value, info.field_name)


class Breakdown(BaseModel):
    """Breakdown (desglose) definition with its optional daily interval."""
    name: str
    color: str = DEFAULT_BREAKDOWN_COLOR
    time_start: str | None = None
    time_end: str | None = None
    position_id: str | None = None

    @field_validator("time_start", "time_end")
    @classmethod
    def _valid_clock(cls, value: str | None, info) -> str | None:
        return _check_clock(value, info.field_name) or None

    @property
    def has_interval(self) -> bool:
        return bool(self.time_start and self.time_end)

    @property
    def is_global(self) -> bool:
        return not self.position_id


class HoursConfig(BaseModel):
    """Global hours configuration."""
    standard_daily_hours: float = Field(default=DEFAULT_STANDARD_DAILY_HOURS, ge=0)
    night_start: str = DEFAULT_NIGHT_START
    night_end: str = DEFAULT_NIGHT_END

    @field_validator("night_start", "night_end")
    @classmethod
    def _valid_clock(cls, value: str, info) -> str:
        return _check_clock(value, info.field_name)


class PeriodConfig(BaseModel):
    """Active period. Bounds given in reverse order are swapped, not rejected."""
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None

    @model_validator(mode="after")
    def _normalize_order(self) -> "PeriodConfig":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            self.start_date, self.end_date = self.end_date, self.start_date
        return self

    @property
    def is_complete(self) -> bool:
        return self.start_date is not None and self.end_date is not None


class WorkerData(BaseModel):
    """Worker identification shown in the export."""
    first_name: str = ""
    last_name: str = ""
    second_last_name: str = ""
