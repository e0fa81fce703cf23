"""
Month grid for the job execution calendar.

The grid is always 42 cells (six Monday-first weeks): the tail of the previous
month, the focal month, then the head of the next month. Execution log entries
are projected onto focal cells only.

Grids are rebuilt from (cursor, log) on every change. `overlay` appends, so it
must only be run on a freshly generated grid.
"""
import calendar
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Iterable


GRID_SIZE = 42

WEEKDAY_HEADERS = ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

EVENT_SUCCESS = "success"
EVENT_ERROR = "error"
EVENT_SKIPPED = "skipped"
EVENT_OVERRIDE = "override"
EVENT_NOT_STARTED = "notStarted"
VALID_EVENT_CATEGORIES = frozenset({
    EVENT_SUCCESS, EVENT_ERROR, EVENT_SKIPPED, EVENT_OVERRIDE, EVENT_NOT_STARTED,
})

_ERROR_STATUSES = frozenset({"failed", "error"})

DIRECTION_PREV = "prev"
DIRECTION_NEXT = "next"


@dataclass(frozen=True)
class MonthCursor:
    year: int
    month_index: int  # 0 = January

    def __post_init__(self):
        # out-of-range months roll over into neighbouring years (12 -> next January)
        carry, month_index = divmod(self.month_index, 12)
        object.__setattr__(self, "year", self.year + carry)
        object.__setattr__(self, "month_index", month_index)

    @classmethod
    def from_date(cls, d) -> "MonthCursor":
        return cls(year=d.year, month_index=d.month - 1)


@dataclass
class CalendarEvent:
    label: str
    category: str


@dataclass
class DayCell:
    day: int
    is_focal: bool
    events: list[CalendarEvent] = field(default_factory=list)
    is_selected: bool = False


def days_in_month(year: int, month_index: int) -> int:
    return calendar.monthrange(year, month_index + 1)[1]


def generate_grid(cursor: MonthCursor) -> list[DayCell]:
    year, month_index = cursor.year, cursor.month_index
    first_weekday, focal_days = calendar.monthrange(year, month_index + 1)
    # calendar.monthrange already counts Monday as 0, Sunday as 6
    start_offset = first_weekday

    prev = navigate(cursor, DIRECTION_PREV)
    prev_days = days_in_month(prev.year, prev.month_index)

    cells: list[DayCell] = []
    for i in range(start_offset - 1, -1, -1):
        cells.append(DayCell(day=prev_days - i, is_focal=False))
    for day in range(1, focal_days + 1):
        cells.append(DayCell(day=day, is_focal=True))
    for day in range(1, GRID_SIZE - len(cells) + 1):
        cells.append(DayCell(day=day, is_focal=False))
    return cells


def categorize(status: str | None, triggered_by: str | None) -> str:
    if status in _ERROR_STATUSES:
        return EVENT_ERROR
    if status == "skipped":
        return EVENT_SKIPPED
    if triggered_by == "manual":
        return EVENT_OVERRIDE
    return EVENT_SUCCESS


def parse_timestamp(raw: Any, tz: tzinfo) -> datetime | None:
    """
    Parse a log timestamp into the display timezone.

    Naive values are taken as already local. Returns None for anything that is
    not a datetime or an ISO 8601 string.
    """
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def format_time_label(dt: datetime) -> str:
    """12-hour clock without a leading zero, e.g. "6:05 PM"."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def overlay(
    grid: list[DayCell],
    log: Iterable[dict[str, Any]],
    cursor: MonthCursor,
    tz: tzinfo,
) -> list[DayCell]:
    focal = {cell.day: cell for cell in grid if cell.is_focal}
    for entry in log:
        if not isinstance(entry, dict):
            continue
        dt = parse_timestamp(entry.get("start_time"), tz)
        if dt is None:
            continue
        if dt.year != cursor.year or dt.month != cursor.month_index + 1:
            continue
        cell = focal.get(dt.day)
        if cell is None:
            continue
        cell.events.append(CalendarEvent(
            label=format_time_label(dt),
            category=categorize(entry.get("status"), entry.get("triggered_by")),
        ))
    return grid


def navigate(cursor: MonthCursor, direction: str) -> MonthCursor:
    if direction == DIRECTION_PREV:
        if cursor.month_index <= 0:
            return MonthCursor(year=cursor.year - 1, month_index=11)
        return MonthCursor(year=cursor.year, month_index=cursor.month_index - 1)
    if direction == DIRECTION_NEXT:
        if cursor.month_index >= 11:
            return MonthCursor(year=cursor.year + 1, month_index=0)
        return MonthCursor(year=cursor.year, month_index=cursor.month_index + 1)
    raise ValueError(f"invalid direction: {direction}")


def select(grid: list[DayCell], cell: DayCell) -> DayCell | None:
    """Clear any previous selection, then select `cell` if it is in the focal month."""
    for c in grid:
        c.is_selected = False
    if cell.is_focal:
        cell.is_selected = True
        return cell
    return None


def month_label(cursor: MonthCursor) -> str:
    return f"{MONTH_NAMES[cursor.month_index]} {cursor.year}"
