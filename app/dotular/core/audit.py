"""Audit log sinks.

The executor reports every item outcome to an injected sink. Sinks are
fire-and-forget: a sink must never raise into the apply flow.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

from dotular.core.paths import get_audit_log_path
from dotular.models.audit import AuditEntry

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    """Receiver of audit entries."""

    def log(self, entry: AuditEntry) -> None:
        """Record ``entry``. Must not raise."""
        ...


class NullAuditSink:
    """Discards every entry."""

    def log(self, entry: AuditEntry) -> None:
        pass


class MemoryAuditSink:
    """Keeps entries in memory, in emission order."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    def log(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


class AuditLog:
    """Append-only JSONL audit log.

    Storage location: ~/.local/state/dotular/audit.jsonl

    Attributes:
        path: Location of the log file.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize AuditLog.

        Args:
            path: Optional override for the log file location.
        """
        self.path = path if path is not None else get_audit_log_path()

    def log(self, entry: AuditEntry) -> None:
        """Append ``entry`` to the log.

        Write errors are logged and otherwise ignored so that auditing
        never interrupts an apply.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open(mode="a", encoding="utf-8") as f:
                f.write(entry.to_json_line() + "\n")
        except OSError as e:
            logger.warning("Failed to write audit entry to %s: %s", self.path, e)

    def read(self, module: str | None = None, limit: int = 50) -> list[AuditEntry]:
        """Read entries, oldest first.

        Args:
            module: Only return entries for this module.
            limit: Return at most the last ``limit`` entries; <= 0 means all.

        Returns:
            List of entries. Empty if the log does not exist.

        Raises:
            OSError: If the log exists but cannot be read.
        """
        if not self.path.exists():
            return []

        entries: list[AuditEntry] = []
        with self.path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = AuditEntry.from_json_line(line)
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt audit line %d: %s", line_num, str(e))
                    continue
                if module is not None and entry.module != module:
                    continue
                entries.append(entry)

        if limit > 0:
            return entries[-limit:]
        return entries
