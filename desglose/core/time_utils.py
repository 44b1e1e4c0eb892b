import datetime
import logging
from typing import Any

from desglose.core.config import TIME_FORMAT_HM
from desglose.core.constants import SECONDS_PER_HOUR

logger = logging.getLogger(__name__)


class InvalidClockFormat(ValueError):
    """Raised when a clock value is not a well-formed 24h "HH:MM" string."""


def parse_clock(value: Any, field_name: str = "clock") -> datetime.time:
    """Parse a "HH:MM" clock string into a datetime.time.

    Handles:
    1) str times: "HH:MM", 24-hour, zero-padded
    2) datetime.time objects (returned as-is, seconds dropped)
    3) error handling via logging + InvalidClockFormat (no bare except)
    """
    if isinstance(value, datetime.time):
        return value.replace(second=0, microsecond=0)

    if not isinstance(value, str):
        logger.error("Unsupported %s type. type=%s value=%r", field_name, type(value).__name__, value)
        raise InvalidClockFormat(f"Unsupported {field_name} type: {type(value).__name__}")

    s = value.strip()
    if len(s) != 5 or s[2] != ":":
        logger.error("Malformed %s. value=%r", field_name, value)
        raise InvalidClockFormat(f"Invalid {field_name} format: {value!r}")

    try:
        return datetime.datetime.strptime(s, TIME_FORMAT_HM).time()
    except ValueError as e:
        logger.exception("Failed parsing %s as HH:MM. value=%r", field_name, value)
        raise InvalidClockFormat(f"Invalid {field_name} format: {value!r}") from e


def resolve_shift(
    date: datetime.date,
    start_clock: str,
    end_clock: str,
) -> tuple[datetime.datetime, datetime.datetime]:
    """Resolve a day's start/end clocks into (start_datetime, end_datetime).

    The end is built on the same date; when it is not after the start it is
    moved exactly 24 hours forward, so the duration is always in (0, 24] hours.
    """
    start_dt = datetime.datetime.combine(date, parse_clock(start_clock, "start"))
    end_dt = datetime.datetime.combine(date, parse_clock(end_clock, "end"))

    # Pasa medianoche
    if end_dt <= start_dt:
        end_dt += datetime.timedelta(days=1)

    return start_dt, end_dt


def hours_between(start_dt: datetime.datetime, end_dt: datetime.datetime) -> float:
    return (end_dt - start_dt).total_seconds() / SECONDS_PER_HOUR


def shift_duration_hours(date: datetime.date, start_clock: str, end_clock: str) -> float:
    start_dt, end_dt = resolve_shift(date, start_clock, end_clock)
    return hours_between(start_dt, end_dt)


def start_of_day(date: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(date, datetime.time(0, 0))
