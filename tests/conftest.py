"""
Shared fixtures for RentLog tests.

Hosts are scripted in memory: each picker returns the next queued
answer (None meaning the user dismissed it), so no test ever opens a
real dialog.
"""

from collections import deque
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import pytest

from rentlog.audit import AuditLogger
from rentlog.config import RentLogSettings
from rentlog.models.audit import AuditEvent
from rentlog.models.document import Document, PaymentType
from rentlog.persistence import (
    FallbackHost,
    FileHandle,
    HandleCapableHost,
    HostReadError,
    HostWriteError,
    UploadedFile,
)


FIXED_TODAY = date(2024, 3, 5)


class MemoryHandle(FileHandle):
    """A file handle whose contents live in memory."""

    def __init__(
        self,
        name: str,
        content: str = "",
        fail_read: bool = False,
        fail_write: bool = False,
    ):
        self._name = name
        self.content = content
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.writes: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def read(self) -> str:
        if self.fail_read:
            raise HostReadError(f"{self._name} is gone")
        return self.content

    async def write(self, text: str) -> None:
        if self.fail_write:
            raise HostWriteError("Permission revoked")
        self.content = text
        self.writes.append(text)

    def __repr__(self) -> str:
        return f"MemoryHandle({self._name!r})"


class ScriptedHandleHost(HandleCapableHost):
    """Handle-capable host answering pickers from queues."""

    def __init__(
        self,
        open_picks: Iterable[Optional[FileHandle]] = (),
        save_picks: Iterable[Optional[FileHandle]] = (),
    ):
        self.open_picks = deque(open_picks)
        self.save_picks = deque(save_picks)
        self.suggested_names: list[str] = []

    async def pick_file_to_open(self) -> Optional[FileHandle]:
        return self.open_picks.popleft() if self.open_picks else None

    async def pick_file_to_save_as(self, suggested_name: str) -> Optional[FileHandle]:
        self.suggested_names.append(suggested_name)
        return self.save_picks.popleft() if self.save_picks else None


class ScriptedFallbackHost(FallbackHost):
    """Upload/download host answering uploads from a queue."""

    def __init__(
        self,
        uploads: Iterable[Optional[UploadedFile]] = (),
        fail_download: bool = False,
    ):
        self.uploads = deque(uploads)
        self.downloads: list[tuple[str, str]] = []
        self.fail_download = fail_download

    async def prompt_user_upload(self) -> Optional[UploadedFile]:
        return self.uploads.popleft() if self.uploads else None

    async def offer_download(self, text: str, filename: str) -> None:
        if self.fail_download:
            raise HostWriteError("Download blocked")
        self.downloads.append((text, filename))


class RecordingAuditLogger(AuditLogger):
    """Audit logger that keeps events in a list."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    async def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    @property
    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture
def settings() -> RentLogSettings:
    return RentLogSettings(_env_file=None, host_profile="auto", write_retry_attempts=2)


@pytest.fixture
def sample_document() -> Document:
    """One property, one tenant with a bill and a payment."""
    document = Document()
    prop = document.add_property("Sunrise Apartments", "12 MG Road")
    tenant = document.add_tenant(prop.id, "Asha Rao", Decimal("15000"), date(2023, 6, 1))
    document.add_bill(tenant.id, Decimal("1200.50"), date(2024, 1, 10))
    document.add_payment(
        tenant.id,
        Decimal("15000"),
        date(2024, 1, 5),
        PaymentType.RENT,
        notes="January rent",
    )
    return document
