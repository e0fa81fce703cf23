"""Tests for the cron job editor, form helpers, restore rows and autocomplete options"""
from unittest.mock import Mock
from zoneinfo import ZoneInfo

import pytest

from opsboard.application.cron_jobs import (
    DEFAULT_SCHEDULE, CronJobEditor, CronJobValidationError,
    build_job_payload, build_restore_rows,
    describe_schedule, validate_job_form,
)
from opsboard.application.options import field_options, filter_options, operator_options
from opsboard.domain.cron_job import CronJob


class TestJobForm:
    def test_valid(self):
        assert validate_job_form("Nightly", DEFAULT_SCHEDULE) is None

    def test_requires_name(self):
        assert validate_job_form("  ", DEFAULT_SCHEDULE) == "Please enter a job name"

    def test_requires_schedule(self):
        assert validate_job_form("Nightly", "") == "Please enter a cron schedule"

    def test_payload(self):
        assert build_job_payload(" Nightly ", " 0 18 * * 1-5 ", False) == {
            "name": "Nightly", "schedule": "0 18 * * 1-5", "is_active": False,
        }


def test_describe_schedule():
    examples = [
        {"expression": "0 18 * * 1-5", "description": "Weekdays at 6 PM"},
        {"expression": "0 * * * *", "description": "Every hour"},
    ]
    assert describe_schedule("0 * * * *", examples) == "Every hour"
    assert describe_schedule("5 4 * * *", examples) == "5 4 * * *"


def test_restore_rows(execution_log, utc):
    rows = build_restore_rows(execution_log[:2], tz=utc)
    assert rows == [
        {"details": "Nightly sync", "date": "Jan 5, 2024", "time": "06:00 PM", "process": "Automated"},
        {"details": "Nightly sync", "date": "Jan 5, 2024", "time": "08:30 PM", "process": "Manual"},
    ]


def test_restore_rows_timezone_and_bad_timestamp():
    rows = build_restore_rows([
        {"start_time": "2024-01-31T23:59:00Z", "triggered_by": "manual", "job_name": "Backfill"},
        {"start_time": None, "job_name": "Broken"},
    ], tz=ZoneInfo("Europe/Moscow"))
    assert rows[0]["date"] == "Feb 1, 2024"
    assert rows[0]["time"] == "02:59 AM"
    assert rows[1] == {"details": "Broken", "date": "", "time": "", "process": "Automated"}


class TestOptions:
    def test_field_options(self):
        assert field_options([{"name": "ticker", "display_name": "Ticker"}, {"name": "cusip"}]) == [
            {"label": "Ticker", "value": "ticker"},
            {"label": "cusip", "value": "cusip"},
        ]

    def test_operator_options(self):
        assert operator_options([{"label": "Equals", "value": "equals", "extra": 1}]) == [
            {"label": "Equals", "value": "equals"},
        ]

    def test_filter_is_case_insensitive(self):
        options = [{"label": "Ticker", "value": "ticker"}, {"label": "Price", "value": "price"}]
        assert filter_options(options, "TICK") == [options[0]]
        assert filter_options(options, "") == options


# ── cron job editor ──

def _job_backend(new_id=21):
    backend = Mock()
    backend.create.return_value = {"id": new_id, "message": "Created"}
    backend.update.return_value = {"message": "Updated"}
    backend.delete.return_value = {"message": "Deleted"}
    backend.trigger.return_value = {"message": "Triggered"}
    backend.toggle.return_value = {"message": "Toggled"}
    return backend


JOB_RECORD = {"id": 3, "name": "Nightly sync", "schedule": "0 2 * * *", "is_active": True}


class TestCronJobEditorLifecycle:
    def test_starts_as_blank_draft(self):
        editor = CronJobEditor(_job_backend())
        assert not editor.is_editing
        assert editor.job == CronJob(schedule=DEFAULT_SCHEDULE)

    @pytest.mark.parametrize("name, schedule, message", [
        ("  ", DEFAULT_SCHEDULE, "Please enter a job name"),
        ("Nightly", " ", "Please enter a cron schedule"),
    ])
    def test_invalid_form_rejected(self, name, schedule, message):
        backend = _job_backend()
        editor = CronJobEditor(backend)
        editor.job.name = name
        editor.job.schedule = schedule
        with pytest.raises(CronJobValidationError, match=message):
            editor.save()
        backend.create.assert_not_called()

    def test_create_then_update(self):
        backend = _job_backend(new_id=42)
        editor = CronJobEditor(backend)
        editor.job.name = " Nightly "
        editor.save()
        backend.create.assert_called_once_with(
            {"name": "Nightly", "schedule": DEFAULT_SCHEDULE, "is_active": True},
        )
        assert editor.editing_id == 42

        editor.job.schedule = "0 3 * * *"
        editor.save()
        backend.create.assert_called_once()
        backend.update.assert_called_once_with(
            42, {"name": "Nightly", "schedule": "0 3 * * *", "is_active": True},
        )

    def test_create_without_id_stays_draft(self, caplog):
        backend = _job_backend()
        backend.create.return_value = {"message": "Created"}
        editor = CronJobEditor(backend)
        editor.job.name = "Nightly"
        editor.save()
        assert editor.editing_id is None
        assert "no id" in caplog.text

    def test_update_error_propagates(self, caplog):
        backend = _job_backend()
        backend.update.side_effect = RuntimeError("boom")
        editor = CronJobEditor(backend)
        editor.load(JOB_RECORD)
        editor.job.name = "Renamed"
        with pytest.raises(RuntimeError):
            editor.save()
        assert "Failed to update cron job 3" in caplog.text
        assert editor.cancel().name == "Nightly sync"

    def test_cancel_restores_loaded_job(self):
        editor = CronJobEditor(_job_backend())
        editor.load(JOB_RECORD)
        editor.job.name = "Something else"
        editor.job.schedule = "* * * * *"
        job = editor.cancel()
        assert job == CronJob(name="Nightly sync", schedule="0 2 * * *", is_active=True, id=3)
        assert editor.job == job

    def test_cancel_after_save_keeps_saved_state(self):
        editor = CronJobEditor(_job_backend())
        editor.load(JOB_RECORD)
        editor.job.schedule = "0 4 * * *"
        editor.save()
        editor.job.schedule = "0 5 * * *"
        assert editor.cancel().schedule == "0 4 * * *"

    def test_delete_current_job_resets_form(self):
        backend = _job_backend()
        editor = CronJobEditor(backend)
        editor.load(JOB_RECORD)
        editor.delete(3)
        backend.delete.assert_called_once_with(3)
        assert not editor.is_editing
        assert editor.cancel() == CronJob()

    def test_delete_other_job_keeps_form(self):
        editor = CronJobEditor(_job_backend())
        editor.load(JOB_RECORD)
        editor.delete(99)
        assert editor.editing_id == 3

    @pytest.mark.parametrize("override", [False, True])
    def test_trigger(self, override):
        backend = _job_backend()
        editor = CronJobEditor(backend)
        assert editor.trigger(3, override=override) == {"message": "Triggered"}
        backend.trigger.assert_called_once_with(3, override=override)

    def test_trigger_error_propagates(self, caplog):
        backend = _job_backend()
        backend.trigger.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            CronJobEditor(backend).trigger(3)
        assert "Failed to trigger cron job 3" in caplog.text

    def test_toggle_active_survives_cancel(self):
        backend = _job_backend()
        editor = CronJobEditor(backend)
        editor.load(JOB_RECORD)
        editor.toggle_active(3)
        backend.toggle.assert_called_once_with(3)
        assert editor.job.is_active is False
        assert editor.cancel().is_active is False

    def test_toggle_failure_keeps_flag(self):
        backend = _job_backend()
        backend.toggle.side_effect = RuntimeError("boom")
        editor = CronJobEditor(backend)
        editor.load(JOB_RECORD)
        with pytest.raises(RuntimeError):
            editor.toggle_active(3)
        assert editor.job.is_active is True

    def test_load_null_is_active_means_active(self):
        editor = CronJobEditor(_job_backend())
        editor.load({**JOB_RECORD, "is_active": None})
        assert editor.job.is_active is True
