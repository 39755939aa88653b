from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple

from timebank.errors import ExcessiveRangeError

MAX_CALENDAR_DAYS = 370
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

logger = logging.getLogger("timebank.calendar")


class CalendarDay(NamedTuple):
    day: date
    weekday: int  # Monday == 0 ... Sunday == 6


def to_calendar_date(value: date | datetime | str) -> date:
    """Return the calendar day a value belongs to.

    Timestamps are read as instants on the UTC calendar: aware values are
    converted to UTC first, naive values are taken as UTC already. Strings
    are either exactly ``YYYY-MM-DD`` or a full ISO timestamp, which is
    handled the same way as a datetime.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if "T" in raw or " " in raw:
            return to_calendar_date(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        if not _ISO_DATE.fullmatch(raw):
            raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
        return date.fromisoformat(raw)
    raise TypeError(f"Unsupported calendar value: {value!r}")


@dataclass(frozen=True)
class CalendarRange:
    """Half-open range of calendar days ``[start, end)``.

    Iterating yields one ``CalendarDay`` per day in ascending order; every
    ``iter()`` call starts over from ``start``. A range wider than
    ``max_days`` is refused before any day is produced.
    """

    start: date
    end: date
    max_days: int = MAX_CALENDAR_DAYS

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days)

    def __iter__(self) -> Iterator[CalendarDay]:
        span = len(self)
        if span > self.max_days:
            logger.error(
                "calendar_range_exceeded",
                extra={
                    "range_start": self.start.isoformat(),
                    "range_end": self.end.isoformat(),
                    "span_days": span,
                    "max_days": self.max_days,
                },
            )
            raise ExcessiveRangeError(self.start, self.end, self.max_days)

        current = self.start
        while current < self.end:
            yield CalendarDay(day=current, weekday=current.weekday())
            current += timedelta(days=1)


def walk_calendar(
    start: date | datetime | str,
    end: date | datetime | str,
    *,
    max_days: int = MAX_CALENDAR_DAYS,
) -> CalendarRange:
    return CalendarRange(
        start=to_calendar_date(start),
        end=to_calendar_date(end),
        max_days=max_days,
    )
