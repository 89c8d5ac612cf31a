"""
Date window resolution.

Turns a named range or an explicit from/to pair into a concrete
[start, end] pair. "now" is always passed in; nothing here reads a clock.

Day boundaries are computed in the reporting timezone; returned datetimes
are timezone-aware.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from linkbio.domain.errors import DomainError, invalid

NAMED_RANGES = (
    "today",
    "yesterday",
    "last7",
    "last30",
    "last90",
    "thisWeek",
    "thisMonth",
)

DEFAULT_RANGE = "last7"

_LAST_N_DAYS = {"last7": 7, "last30": 30, "last90": 90}

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] reporting window."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def start_of_day(day: date, tz: tzinfo = UTC) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo = UTC) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=tz)


def _as_start(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    return start_of_day(value, tz)


def _calendar_day(value: date | datetime, tz: tzinfo) -> date:
    if isinstance(value, datetime):
        return value.astimezone(tz).date() if value.tzinfo else value.date()
    return value


def validate_window_request(
    range_name: str | None = None,
    date_from: date | datetime | None = None,
    date_to: date | datetime | None = None,
    tz: tzinfo = UTC,
) -> list[DomainError]:
    """Check a window request before resolving it."""
    if (date_from is None) != (date_to is None):
        return [
            invalid(
                "window_incomplete",
                "Both 'from' and 'to' are required for a custom window",
                field="from" if date_from is None else "to",
            )
        ]

    if date_from is not None and date_to is not None:
        start = _as_start(date_from, tz)
        end = end_of_day(_calendar_day(date_to, tz), tz)
        if start > end:
            return [invalid("invalid_window", "'from' must not be after 'to'", field="from")]
        return []

    if range_name is not None and range_name not in NAMED_RANGES:
        return [
            invalid(
                "range_invalid",
                f"Unknown range '{range_name}'. Expected one of: {', '.join(NAMED_RANGES)}",
                field="range",
            )
        ]
    return []


def resolve_date_window(
    now: datetime,
    range_name: str | None = None,
    date_from: date | datetime | None = None,
    date_to: date | datetime | None = None,
    tz: tzinfo = UTC,
    default_range: str = DEFAULT_RANGE,
) -> DateWindow:
    """
    Resolve a reporting window.

    An explicit from/to pair wins over a named range; ``to`` is moved to
    23:59:59.999 of its calendar day. Without either, ``default_range``
    applies. Callers validate with ``validate_window_request`` first.

    Raises:
        ValueError: for an unknown range name.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local_now = now.astimezone(tz)
    today = local_now.date()

    if date_from is not None and date_to is not None:
        return DateWindow(
            start=_as_start(date_from, tz),
            end=end_of_day(_calendar_day(date_to, tz), tz),
        )

    name = range_name or default_range

    if name == "today":
        return DateWindow(start=start_of_day(today, tz), end=local_now)

    if name == "yesterday":
        yesterday = today - timedelta(days=1)
        return DateWindow(start=start_of_day(yesterday, tz), end=end_of_day(yesterday, tz))

    if name in _LAST_N_DAYS:
        first = today - timedelta(days=_LAST_N_DAYS[name])
        return DateWindow(start=start_of_day(first, tz), end=end_of_day(today, tz))

    if name == "thisWeek":
        # ISO week: Monday is day 1, Sunday day 7.
        monday = today - timedelta(days=today.isoweekday() - 1)
        return DateWindow(start=start_of_day(monday, tz), end=end_of_day(today, tz))

    if name == "thisMonth":
        return DateWindow(start=start_of_day(today.replace(day=1), tz), end=end_of_day(today, tz))

    raise ValueError(f"Unknown range: {name}")


def previous_window(window: DateWindow) -> DateWindow:
    """The equally long window immediately before ``window``."""
    return DateWindow(
        start=window.start - window.duration,
        end=window.start - timedelta(milliseconds=1),
    )
