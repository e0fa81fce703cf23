"""Port interface for the remote rules/presets backend."""
from typing import Any, Protocol


class ConditionSetBackend(Protocol):
    """CRUD endpoints for one kind of condition set (rules or presets).

    Implemented by the HTTP client layer. Errors (network, 4xx/5xx) are raised
    as exceptions and are surfaced to the user by the caller.
    """

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a record.

        Returns:
            The backend response; must contain the new record's "id".
        """
        ...

    def update(self, record_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        ...

    def delete(self, record_id: int) -> dict[str, Any]:
        ...


class RuleBackend(ConditionSetBackend, Protocol):
    def toggle(self, record_id: int) -> dict[str, Any]:
        """Flip the rule's is_active flag."""
        ...


class CronJobBackend(Protocol):
    """Cron job endpoints. The backend owns scheduling and next-run times."""

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...

    def update(self, record_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        ...

    def delete(self, record_id: int) -> dict[str, Any]:
        ...

    def trigger(self, record_id: int, override: bool = False) -> dict[str, Any]:
        """Run the job now. `override` forces a run the schedule would skip."""
        ...

    def toggle(self, record_id: int) -> dict[str, Any]:
        ...
