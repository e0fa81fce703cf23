"""
Execution calendar - month view over the cron execution log.

Pure read-layer: the log is fetched by the caller, this module only projects it
onto a month grid. The grid is rebuilt from scratch on every cursor or log
change.
"""
import logging
from datetime import date, datetime, tzinfo
from typing import Any, Iterable

from opsboard.config import get_settings
from opsboard.domain.calendar_grid import (
    WEEKDAY_HEADERS,
    DayCell,
    MonthCursor,
    generate_grid,
    month_label,
    navigate,
    overlay,
    select,
)

logger = logging.getLogger(__name__)


class ExecutionCalendar:
    def __init__(self, today: date | None = None, tz: tzinfo | None = None):
        self.tz = tz or get_settings().get_timezone()
        if today is None:
            today = datetime.now(tz=self.tz).date()
        self.cursor = MonthCursor.from_date(today)
        self.log: list[dict[str, Any]] = []
        self.selected: DayCell | None = None
        self.grid: list[DayCell] = []
        self._rebuild()

    def _rebuild(self) -> None:
        self.grid = overlay(generate_grid(self.cursor), self.log, self.cursor, self.tz)
        self.selected = None
        logger.debug(
            "Calendar rebuilt for %s (%d log entries)", month_label(self.cursor), len(self.log),
        )

    @property
    def label(self) -> str:
        return month_label(self.cursor)

    def set_log(self, entries: Iterable[dict[str, Any]]) -> None:
        """Replace the execution log (e.g. after a refetch) and rebuild."""
        self.log = list(entries)
        self._rebuild()

    def navigate(self, direction: str) -> MonthCursor:
        self.cursor = navigate(self.cursor, direction)
        self._rebuild()
        return self.cursor

    def select(self, index: int) -> DayCell | None:
        self.selected = select(self.grid, self.grid[index])
        return self.selected

    def view(self) -> dict[str, Any]:
        return _view(self.cursor, self.grid)


def build_month_view(
    year: int,
    month_index: int,
    log: Iterable[dict[str, Any]],
    tz: tzinfo | None = None,
    direction: str | None = None,
) -> dict[str, Any]:
    """Stateless variant: cursor (optionally moved by `direction`) + log -> view model."""
    tz = tz or get_settings().get_timezone()
    cursor = MonthCursor(year=year, month_index=month_index)
    if direction:
        cursor = navigate(cursor, direction)
    grid = overlay(generate_grid(cursor), log, cursor, tz)
    return _view(cursor, grid)


def _view(cursor: MonthCursor, grid: list[DayCell]) -> dict[str, Any]:
    return {
        "year": cursor.year,
        "month_index": cursor.month_index,
        "label": month_label(cursor),
        "weekdays": list(WEEKDAY_HEADERS),
        "cells": [
            {
                "day": cell.day,
                "is_focal": cell.is_focal,
                "is_selected": cell.is_selected,
                "events": [{"label": e.label, "category": e.category} for e in cell.events],
            }
            for cell in grid
        ],
    }
