"""Duration formatting and calendar range helpers in UTC."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def _as_utc(moment: datetime | None) -> datetime:
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def format_duration(duration: int) -> str:
    """Format seconds as ``"1h 1m 1s"``, ``"1m 1s"`` or ``"30s"``."""
    if duration < 0:
        raise ValueError("duration must not be negative")
    hours, remainder = divmod(duration, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_duration_short(duration: int) -> str:
    """Format seconds as ``"1h1m"``, ``"5m"`` or ``"<1m"``."""
    if duration < 0:
        raise ValueError("duration must not be negative")
    hours, remainder = divmod(duration, 3600)
    minutes = remainder // 60
    if hours:
        return f"{hours}h{minutes}m"
    if minutes < 1:
        return "<1m"
    return f"{minutes}m"


def duration_between(start: datetime, end: datetime) -> int:
    """Whole seconds from ``start`` to ``end``, never negative."""
    seconds = int((_as_utc(end) - _as_utc(start)).total_seconds())
    return max(seconds, 0)


def today_start(now: datetime | None = None) -> datetime:
    """Midnight UTC of the current day."""
    return _midnight(_as_utc(now))


def week_start(now: datetime | None = None) -> datetime:
    """The same time of day on this week's Monday."""
    current = _as_utc(now)
    return current - timedelta(days=current.weekday())


def month_start(now: datetime | None = None) -> datetime:
    """Midnight UTC on the first day of the current month."""
    return _midnight(_as_utc(now)).replace(day=1)


class RangeKind(enum.Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TimeRange:
    """A named or custom span of time."""

    kind: RangeKind
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        has_bounds = self.start is not None and self.end is not None
        if self.kind is RangeKind.CUSTOM and not has_bounds:
            raise ValueError("a custom range needs both a start and an end")
        if self.kind is not RangeKind.CUSTOM and (
            self.start is not None or self.end is not None
        ):
            raise ValueError(f"range {self.kind.value} takes no explicit bounds")

    @classmethod
    def custom(cls, start: datetime, end: datetime) -> TimeRange:
        return cls(RangeKind.CUSTOM, start, end)

    def bounds(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """Return the start and end of the range relative to ``now``."""
        current = _as_utc(now)
        kind = self.kind
        if kind is RangeKind.TODAY:
            return today_start(current), current
        if kind is RangeKind.YESTERDAY:
            today = today_start(current)
            return today - timedelta(days=1), today
        if kind is RangeKind.THIS_WEEK:
            return week_start(current), current
        if kind is RangeKind.LAST_WEEK:
            this_week = week_start(current)
            return this_week - timedelta(days=7), this_week
        if kind is RangeKind.THIS_MONTH:
            return month_start(current), current
        if kind is RangeKind.LAST_MONTH:
            this_month = month_start(current)
            previous_day = this_month - timedelta(days=1)
            return _midnight(previous_day).replace(day=1), this_month
        return self.start, self.end  # type: ignore[return-value]

    def contains(self, moment: datetime, now: datetime | None = None) -> bool:
        """Whether ``moment`` lies within the range, bounds included."""
        start, end = self.bounds(now)
        return _as_utc(start) <= _as_utc(moment) <= _as_utc(end)