"""RuleSet / PresetSet domain entities - named condition trees owned by the backend"""
from dataclasses import dataclass, field
from typing import Any

from opsboard.domain.condition_tree import Condition, create_root, from_payload, to_payload


def _active_flag(raw: Any) -> bool:
    """Missing or null is_active means active."""
    return True if raw is None else bool(raw)


@dataclass
class RuleSet:
    name: str = ""
    conditions: list[Condition] = field(default_factory=create_root)
    is_active: bool = True
    id: int | None = None  # assigned by the backend on create

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "RuleSet":
        return cls(
            name=record.get("name") or "",
            conditions=from_payload(record.get("conditions")),
            is_active=_active_flag(record.get("is_active")),
            id=record.get("id"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "conditions": to_payload(self.conditions),
            "is_active": self.is_active,
        }


@dataclass
class PresetSet:
    name: str = ""
    conditions: list[Condition] = field(default_factory=create_root)
    description: str = ""
    id: int | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PresetSet":
        return cls(
            name=record.get("name") or "",
            conditions=from_payload(record.get("conditions")),
            description=record.get("description") or "",
            id=record.get("id"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "conditions": to_payload(self.conditions),
            "description": self.description,
        }
