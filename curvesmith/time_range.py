"""
Time range primitives.

A flight and each scheduled event are periods between two instants. Bounds
may be given as datetimes, dates or ISO 8601 strings and are resolved to
datetimes on construction.
"""

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

import pytz

from .errors import (
    InvalidEventError,
    InvalidFlightError,
    InvalidInstantError,
    InvalidTimeRangeError,
)

SECONDS_PER_HOUR = 60 * 60
DEFAULT_TITLE = "Untitled"  # Curve label for events without a usable title


def localize(instant: datetime, time_zone: str) -> datetime:
    """
    Attach an IANA timezone to a naive datetime.

    pytz picks the correct UTC offset for the wall time (EST vs EDT), so
    hour counts across DST transitions stay accurate.

    Args:
        instant: Naive datetime in the given timezone's wall time
        time_zone: IANA timezone name (e.g., "America/New_York")

    Returns:
        Timezone-aware datetime
    """
    try:
        tz = pytz.timezone(time_zone)
    except pytz.UnknownTimeZoneError as e:
        raise InvalidInstantError(f"Unknown time zone: {time_zone}") from e

    if instant.tzinfo is not None:
        return instant.astimezone(tz)
    return tz.localize(instant)


def parse_instant(value: datetime | date | str, time_zone: str | None = None) -> datetime:
    """
    Resolve a datetime, date or ISO 8601 string to a datetime.

    Dates resolve to midnight. A trailing "Z" is read as UTC. When
    `time_zone` is given, naive results are localized to it.

    Raises:
        InvalidInstantError: If the value is not a valid date or time
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidInstantError("Input values must be valid dates")
        try:
            instant = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidInstantError("Input values must be valid dates") from e
    else:
        raise InvalidInstantError("Input values must be dates or ISO 8601 strings")

    if time_zone is not None and instant.tzinfo is None:
        instant = localize(instant, time_zone)

    return instant


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours from start to end (negative if end comes first)."""
    if start.tzinfo is not None and end.tzinfo is not None:
        start = start.astimezone(UTC)
        end = end.astimezone(UTC)
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _check_same_awareness(first: datetime, second: datetime) -> None:
    if (first.tzinfo is None) != (second.tzinfo is None):
        raise InvalidInstantError("Input values must both be naive or both be time zone aware")


@dataclass(frozen=True)
class TimeRange:
    """
    A period of time between two instants.

    `start` must strictly precede `end`. Ranges that merely share an edge
    are not considered overlapping, so events can run back to back.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        start = parse_instant(self.start)
        end = parse_instant(self.end)

        _check_same_awareness(start, end)
        if start >= end:
            raise InvalidTimeRangeError("Start date must strictly precede end date")

        # Frozen dataclass; store the resolved datetimes
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def duration_hours(self) -> float:
        """Duration of this range in hours."""
        return hours_between(self.start, self.end)

    def contains(self, other: "TimeRange") -> bool:
        """True if `other` lies entirely within this range (edges inclusive)."""
        _check_same_awareness(self.start, other.start)
        return other.start >= self.start and other.end <= self.end

    def overlaps(self, other: "TimeRange") -> bool:
        """True if the ranges share any interior time. Adjacency is not overlap."""
        _check_same_awareness(self.start, other.start)
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class Flight(TimeRange):
    """Overall delivery period and total impression goal (like a line item)."""

    impression_goal: float = 0

    def __post_init__(self) -> None:
        super().__post_init__()

        if not _is_finite_number(self.impression_goal):
            raise InvalidFlightError("Impression goal must be a finite number")
        if self.impression_goal < 0:
            raise InvalidFlightError("Impression goal must not be negative")


@dataclass(frozen=True)
class ScheduledEvent(TimeRange):
    """
    A period for which a skewed share of the delivery goal is requested.

    How `goal_percent` is read depends on the goal type: a share of the whole
    flight (TOTAL) or a share of an even day's delivery (DAY).
    """

    goal_percent: float = 0
    title: str | None = ""

    def __post_init__(self) -> None:
        super().__post_init__()

        if not _is_finite_number(self.goal_percent):
            raise InvalidEventError("Goal percent must be a finite number")

    @property
    def title_for_curve(self) -> str:
        """Title used in curve labels; blank titles read as "Untitled"."""
        if self.title and self.title.strip():
            return self.title
        return DEFAULT_TITLE
