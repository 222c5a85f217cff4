"""Date parsing, relative formatting and date-window filtering."""

from __future__ import annotations

import calendar
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from enum import Enum
from typing import Iterable, TypeVar

from blame_trail.errors import DateValidationError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Formats git emits for %ad / blame timestamps, tried after ISO 8601.
_GIT_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",  # --date=iso, git blame default
    "%a %b %d %H:%M:%S %Y %z",  # --date=default
    "%a, %d %b %Y %H:%M:%S %z",  # --date=rfc
)

_WEEKDAYS = {name.lower(): i for i, name in enumerate(calendar.day_name)}

T = TypeVar("T")


class DateWindow(str, Enum):
    ALL_TIME = "allTime"
    TODAY = "today"
    THIS_WEEK = "thisWeek"
    THIS_MONTH = "thisMonth"
    LAST_6_MONTHS = "last6Months"
    CUSTOM = "custom"


DEFAULT_WINDOW = DateWindow.LAST_6_MONTHS


@dataclass(frozen=True)
class DateRange:
    start: datetime | None = None
    end: datetime | None = None

    @property
    def unbounded(self) -> bool:
        return self.start is None and self.end is None


def local_now() -> datetime:
    return datetime.now().astimezone()


def parse_git_date(value: str) -> datetime | None:
    """Parse a git timestamp into an aware datetime. Returns None if unparseable."""
    text = value.strip()
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _GIT_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        # --date=raw: "<unix seconds> <offset>"
        parts = text.split()
        if len(parts) == 2 and parts[0].isdigit():
            try:
                offset = datetime.strptime(parts[1], "%z").tzinfo
                parsed = datetime.fromtimestamp(int(parts[0]), tz=offset)
            except ValueError:
                parsed = None

    if parsed is None:
        logger.debug("unparseable git date %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_relative_date(when: datetime, now: datetime | None = None) -> str:
    now = now or local_now()
    diff_minutes = math.floor((now - when).total_seconds() / 60)
    if diff_minutes < 60:
        return f"{diff_minutes} minute(s) ago"
    if diff_minutes < 1440:
        return f"{diff_minutes // 60} hour(s) ago"
    return when.astimezone(now.tzinfo).date().isoformat()


def validate_date_string(value: str) -> datetime:
    """Parse a YYYY-MM-DD bound to local midnight, or raise DateValidationError."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise DateValidationError("Please enter date in YYYY-MM-DD format")
    try:
        day = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise DateValidationError(f"Invalid date: {value}") from None
    return day.astimezone()


def date_input_error(value: str) -> str | None:
    """Prompt-validator form of validate_date_string: message or None."""
    if not value:
        return None
    try:
        validate_date_string(value)
    except DateValidationError as e:
        return str(e)
    return None


def subtract_months(when: datetime, months: int) -> datetime:
    """Calendar-month subtraction; the day is clamped to the target month's length."""
    index = when.year * 12 + (when.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(when.day, calendar.monthrange(year, month)[1])
    return when.replace(year=year, month=month, day=day)


def week_start_index(name: str) -> int:
    try:
        return _WEEKDAYS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown weekday: {name}") from None


def resolve_window(
    window: DateWindow | str,
    *,
    now: datetime | None = None,
    custom_start: str | None = None,
    custom_end: str | None = None,
    week_start: str = "sunday",
) -> DateRange:
    """Turn a named window into concrete bounds relative to *now*."""
    window = DateWindow(window)
    now = now or local_now()
    midnight = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)

    if window is DateWindow.ALL_TIME:
        return DateRange()
    if window is DateWindow.TODAY:
        return DateRange(midnight, now)
    if window is DateWindow.THIS_WEEK:
        days_back = (now.weekday() - week_start_index(week_start)) % 7
        return DateRange(midnight - timedelta(days=days_back), now)
    if window is DateWindow.THIS_MONTH:
        return DateRange(midnight.replace(day=1), now)
    if window is DateWindow.LAST_6_MONTHS:
        return DateRange(subtract_months(now, 6), now)
    return _custom_range(custom_start, custom_end, now)


def _custom_range(start: str | None, end: str | None, now: datetime) -> DateRange:
    if not start:
        raise DateValidationError("A custom range needs a start date")
    start_dt = validate_date_string(start)
    if end:
        # The end day is included in full.
        end_dt = validate_date_string(end) + timedelta(days=1) - timedelta(microseconds=1)
    else:
        end_dt = now
    if start_dt > end_dt:
        raise DateValidationError(f"Start date {start} is after end date {end}")
    return DateRange(start_dt, end_dt)


def filter_by_date(
    records: Iterable[T],
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    now: datetime | None = None,
) -> list[T]:
    """Keep records whose commit_date lies in [start, end], both inclusive."""
    lo = start or EPOCH
    hi = end or now or local_now()
    return [r for r in records if lo <= r.commit_date <= hi]  # type: ignore[attr-defined]
