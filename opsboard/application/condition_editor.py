"""
Rule and preset editor forms.

Each editor owns exactly one condition tree. Lifecycle:
  draft (no id) -> save() creates it on the backend -> the returned id is cached
  and the form stays in edit mode -> further save() calls are updates.
Backend errors propagate to the caller, which is responsible for showing them.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any

from opsboard.application.ports import ConditionSetBackend, RuleBackend
from opsboard.domain.condition_sets import PresetSet, RuleSet
from opsboard.domain.condition_tree import (
    Condition,
    append_condition,
    append_subgroup,
    append_to_subgroup,
    label_tree,
    remove_at,
    remove_from_subgroup,
)

logger = logging.getLogger(__name__)


class ConditionSetValidationError(ValueError):
    pass


class _ConditionSetEditor(ABC):
    entity_name = "condition set"

    def __init__(self, backend: ConditionSetBackend):
        self.backend = backend
        self.entity = self._blank()

    @abstractmethod
    def _blank(self):
        pass

    @abstractmethod
    def _from_record(self, record: dict[str, Any]):
        pass

    # --- form state ---

    @property
    def conditions(self) -> list[Condition]:
        return self.entity.conditions

    @property
    def editing_id(self) -> int | None:
        return self.entity.id

    @property
    def is_editing(self) -> bool:
        return self.entity.id is not None

    def reset(self) -> None:
        self.entity = self._blank()

    def load(self, record: dict[str, Any]) -> None:
        """Switch the form to edit mode for a record fetched from the backend."""
        self.entity = self._from_record(record)

    # --- tree editing ---

    def add_condition(self) -> Condition:
        return append_condition(self.entity.conditions)

    def add_subgroup(self) -> Condition:
        return append_subgroup(self.entity.conditions)

    def add_to_subgroup(self, index: int) -> Condition | None:
        node = self.entity.conditions[index]
        added = append_to_subgroup(node)
        if added is None:
            logger.debug("Condition %s is not a subgroup, nothing appended", index)
        return added

    def remove(self, index: int) -> None:
        remove_at(self.entity.conditions, index)

    def remove_from_subgroup(self, index: int, child_index: int) -> None:
        remove_from_subgroup(self.entity.conditions[index], child_index)

    def labels(self) -> list[dict[str, Any]]:
        return label_tree(self.entity.conditions)

    # --- persistence ---

    def save(self) -> dict[str, Any]:
        name = self.entity.name.strip()
        if not name:
            raise ConditionSetValidationError(f"Please enter a {self.entity_name} name")
        self.entity.name = name
        payload = self.entity.to_payload()

        if self.entity.id is not None:
            logger.info("Updating %s %s", self.entity_name, self.entity.id)
            try:
                return self.backend.update(self.entity.id, payload)
            except Exception:
                logger.exception("Failed to update %s %s", self.entity_name, self.entity.id)
                raise

        try:
            response = self.backend.create(payload)
        except Exception:
            logger.exception("Failed to create %s %r", self.entity_name, name)
            raise
        new_id = response.get("id") if isinstance(response, dict) else None
        if new_id is None:
            logger.warning("Backend returned no id for new %s %r", self.entity_name, name)
        else:
            self.entity.id = new_id
            logger.info("Created %s %s", self.entity_name, new_id)
        return response

    def delete(self, record_id: int) -> dict[str, Any]:
        try:
            response = self.backend.delete(record_id)
        except Exception:
            logger.exception("Failed to delete %s %s", self.entity_name, record_id)
            raise
        if record_id == self.entity.id:
            self.reset()
        return response


class RuleEditor(_ConditionSetEditor):
    entity_name = "rule"
    backend: RuleBackend

    def _blank(self) -> RuleSet:
        return RuleSet()

    def _from_record(self, record: dict[str, Any]) -> RuleSet:
        return RuleSet.from_record(record)

    def toggle_active(self, record_id: int) -> dict[str, Any]:
        try:
            response = self.backend.toggle(record_id)
        except Exception:
            logger.exception("Failed to toggle %s %s", self.entity_name, record_id)
            raise
        if record_id == self.entity.id:
            self.entity.is_active = not self.entity.is_active
        return response


class PresetEditor(_ConditionSetEditor):
    entity_name = "preset"

    def _blank(self) -> PresetSet:
        return PresetSet()

    def _from_record(self, record: dict[str, Any]) -> PresetSet:
        return PresetSet.from_record(record)
