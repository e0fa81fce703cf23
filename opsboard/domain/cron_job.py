"""CronJob domain entity - a named cron schedule owned by the backend"""
from dataclasses import dataclass
from typing import Any

DEFAULT_SCHEDULE = "0 18 * * 1-5"  # weekdays at 18:00


@dataclass
class CronJob:
    name: str = ""
    schedule: str = DEFAULT_SCHEDULE
    is_active: bool = True
    id: int | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "CronJob":
        is_active = record.get("is_active")
        return cls(
            name=record.get("name") or "",
            schedule=record.get("schedule") or "",
            is_active=True if is_active is None else bool(is_active),
            id=record.get("id"),
        )
