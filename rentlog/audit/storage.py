"""
Audit Storage

DESIGN DECISION: The audit trail has its own storage interface, so
the sink can be swapped (file, database, nothing) without touching
the code that emits events. Audit logs are append-only.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from rentlog.models.audit import AuditEvent


class AuditStorageError(Exception):
    """The audit sink could not be written or read."""
    pass


class AuditStorageInterface(ABC):
    """Abstract interface for audit log storage."""

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[dict]:
        """
        Get the most recent audit events.

        Returns:
            Event dicts, newest first
        """
        pass


class JsonLinesAuditStorage(AuditStorageInterface):
    """Audit log kept as one JSON object per line in a local file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    def _read_lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    async def append_event(self, event: AuditEvent) -> bool:
        try:
            await asyncio.to_thread(self._append, event.to_json_line())
        except OSError as e:
            raise AuditStorageError(f"Could not append to {self.path}: {e}") from e
        return True

    async def get_recent_events(self, limit: int = 100) -> list[dict]:
        try:
            lines = await asyncio.to_thread(self._read_lines)
        except OSError as e:
            raise AuditStorageError(f"Could not read {self.path}: {e}") from e

        events = []
        for line in reversed(lines):
            if not line.strip():
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                # A torn last line from an interrupted append
                continue
            if len(events) >= limit:
                break
        return events
