"""Cron job editor, form helpers and restore history rows.

Schedules are opaque cron expressions here: next-run computation and
validation of the expression itself happen on the backend.
"""
import logging
from dataclasses import replace
from datetime import tzinfo
from typing import Any, Iterable

from opsboard.application.ports import CronJobBackend
from opsboard.config import get_settings
from opsboard.domain.calendar_grid import parse_timestamp
from opsboard.domain.cron_job import DEFAULT_SCHEDULE, CronJob

logger = logging.getLogger(__name__)

_MONTH_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class CronJobValidationError(ValueError):
    pass


def validate_job_form(name: str, schedule: str) -> str | None:
    """Validate the new job form. Returns error message or None."""
    if not name.strip():
        return "Please enter a job name"
    if not schedule.strip():
        return "Please enter a cron schedule"
    return None


def build_job_payload(name: str, schedule: str, is_active: bool = True) -> dict[str, Any]:
    return {"name": name.strip(), "schedule": schedule.strip(), "is_active": is_active}


def describe_schedule(schedule: str, examples: Iterable[dict[str, Any]]) -> str:
    """Human description from the backend's example list, or the raw expression."""
    for example in examples:
        if example.get("expression") == schedule:
            return example.get("description") or schedule
    return schedule


def format_date_short(dt) -> str:
    """Jan 5, 2024"""
    return f"{_MONTH_SHORT[dt.month - 1]} {dt.day}, {dt.year}"


def format_time_padded(dt) -> str:
    """06:05 PM"""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour:02d}:{dt.minute:02d} {suffix}"


def build_restore_rows(
    logs: Iterable[dict[str, Any]],
    tz: tzinfo | None = None,
) -> list[dict[str, str]]:
    """Project execution log entries into rows of the restore history table."""
    tz = tz or get_settings().get_timezone()
    rows: list[dict[str, str]] = []
    for log in logs:
        dt = parse_timestamp(log.get("start_time"), tz)
        rows.append({
            "details": log.get("job_name") or "",
            "date": format_date_short(dt) if dt else "",
            "time": format_time_padded(dt) if dt else "",
            "process": "Manual" if log.get("triggered_by") == "manual" else "Automated",
        })
    return rows


class CronJobEditor:
    """
    Create / inline-edit form for one cron job.

    load() snapshots the job so cancel() can restore it; a successful save()
    makes the saved state the new snapshot.
    """

    def __init__(self, backend: CronJobBackend):
        self.backend = backend
        self.job = CronJob()
        self._snapshot: CronJob | None = None

    @property
    def editing_id(self) -> int | None:
        return self.job.id

    @property
    def is_editing(self) -> bool:
        return self.job.id is not None

    def reset(self) -> None:
        self.job = CronJob()
        self._snapshot = None

    def load(self, record: dict[str, Any]) -> None:
        self.job = CronJob.from_record(record)
        self._snapshot = replace(self.job)

    def cancel(self) -> CronJob:
        """Drop unsaved edits."""
        if self._snapshot is not None:
            self.job = replace(self._snapshot)
        return self.job

    def save(self) -> dict[str, Any]:
        error = validate_job_form(self.job.name, self.job.schedule)
        if error:
            raise CronJobValidationError(error)
        payload = build_job_payload(self.job.name, self.job.schedule, self.job.is_active)

        if self.job.id is not None:
            logger.info("Updating cron job %s", self.job.id)
            try:
                response = self.backend.update(self.job.id, payload)
            except Exception:
                logger.exception("Failed to update cron job %s", self.job.id)
                raise
        else:
            try:
                response = self.backend.create(payload)
            except Exception:
                logger.exception("Failed to create cron job %r", payload["name"])
                raise
            new_id = response.get("id") if isinstance(response, dict) else None
            if new_id is None:
                logger.warning("Backend returned no id for new cron job %r", payload["name"])
            else:
                self.job.id = new_id
                logger.info("Created cron job %s", new_id)

        self.job.name = payload["name"]
        self.job.schedule = payload["schedule"]
        self._snapshot = replace(self.job)
        return response

    def delete(self, record_id: int) -> dict[str, Any]:
        try:
            response = self.backend.delete(record_id)
        except Exception:
            logger.exception("Failed to delete cron job %s", record_id)
            raise
        if record_id == self.job.id:
            self.reset()
        return response

    def trigger(self, record_id: int, override: bool = False) -> dict[str, Any]:
        try:
            response = self.backend.trigger(record_id, override=override)
        except Exception:
            logger.exception("Failed to trigger cron job %s (override=%s)", record_id, override)
            raise
        logger.info("Triggered cron job %s (override=%s)", record_id, override)
        return response

    def toggle_active(self, record_id: int) -> dict[str, Any]:
        try:
            response = self.backend.toggle(record_id)
        except Exception:
            logger.exception("Failed to toggle cron job %s", record_id)
            raise
        if record_id == self.job.id:
            self.job.is_active = not self.job.is_active
            if self._snapshot is not None:
                self._snapshot.is_active = self.job.is_active
        return response
