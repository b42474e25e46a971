"""Audit entry model.

This module defines the immutable record emitted for every item evaluation
(apply, push, pull, sync, verify) and its JSON Lines serialization.
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class AuditOutcome(str, Enum):
    """Outcome of a single item evaluation.

    Attributes:
        SUCCESS: The action ran (or the verify check passed).
        SKIPPED: A ``skip_if`` guard or idempotency check skipped the item.
        FAILURE: The action or verify check failed.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True, slots=True)
class AuditEntry:
    """Record of one item outcome.

    Attributes:
        command: Command that produced the entry ("apply", "push", "verify", ...).
        module: Owning module name.
        item: Human-readable description of the action.
        outcome: Result of the evaluation.
        error: Error message for failures.
        time: ISO 8601 timestamp (UTC).
    """

    command: str
    module: str
    item: str
    outcome: AuditOutcome
    error: str | None = None
    time: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the entry. ``error`` is omitted
            when empty.
        """
        result: dict[str, Any] = {
            "time": self.time,
            "command": self.command,
            "module": self.module,
            "item": self.item,
            "outcome": self.outcome.value,
        }
        if self.error:
            result["error"] = self.error
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If the outcome is invalid.
        """
        return cls(
            command=data["command"],
            module=data["module"],
            item=data["item"],
            outcome=AuditOutcome(data["outcome"]),
            error=data.get("error"),
            time=data["time"],
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "AuditEntry":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))
