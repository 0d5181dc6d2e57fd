"""
Persistence Gateway

The only component that moves the Document between memory and a file.

Two variants share one contract:

- HandleGateway (handle-capable hosts): Open retains the picked handle,
  Save writes to it, Save As picks and retains a new one.
- DownloadGateway (fallback hosts): Open reads an upload, every save is
  a download. Nothing is ever retained.

CRITICAL BOUNDARIES:
1. Expected outcomes (cancel, invalid file, refused write) are returned
   as OpenResult / SaveResult values, never raised past this module.
2. A session changes only on success, except that Save As retains its
   new handle BEFORE writing, so a Save issued right after sees it.
3. The in-memory document is never modified here.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Optional, Union

import structlog

from rentlog.config import RentLogSettings, get_settings
from rentlog.models.document import Document
from rentlog.persistence.codec import (
    decode_content,
    default_file_name,
    parse_document,
    serialize_document,
)
from rentlog.persistence.interface import (
    FallbackHost,
    FileHandle,
    HandleCapableHost,
    HostReadError,
    HostWriteError,
    InvalidDocumentError,
    ParseFailureError,
)
from rentlog.persistence.results import (
    InterfaceLabels,
    OpenResult,
    OutcomeStatus,
    SaveResult,
)
from rentlog.persistence.session import PersistenceSession


class PersistenceGateway(ABC):
    """Open / Save / Save As over one host capability profile."""

    profile: str = ""

    def __init__(
        self,
        settings: Optional[RentLogSettings] = None,
        today: Callable[[], date] = date.today,
    ):
        self._settings = settings or get_settings()
        self._today = today
        self._logger = structlog.get_logger(__name__).bind(profile=self.profile)

    @abstractmethod
    async def open_document(self, session: PersistenceSession) -> OpenResult:
        """Ask the user for a data file and parse it."""
        pass

    @abstractmethod
    async def save_document(self, session: PersistenceSession, document: Document) -> SaveResult:
        """Write the document to the current file."""
        pass

    @abstractmethod
    async def save_document_as(self, session: PersistenceSession, document: Document) -> SaveResult:
        """Write the document to a newly chosen file."""
        pass

    @abstractmethod
    def configure_interface(self) -> InterfaceLabels:
        """Labels for the open/save affordances of this profile."""
        pass

    def default_name(self) -> str:
        return default_file_name(self._settings.default_file_prefix, self._today())

    def serialize(self, document: Document) -> str:
        return serialize_document(document, indent=self._settings.json_indent)

    def _load(self, text: str, name: str) -> OpenResult:
        """Parse file text into an OpenResult."""
        try:
            document = parse_document(text)
        except ParseFailureError as e:
            self._logger.warning("document_parse_failed", name=name, error=str(e))
            return OpenResult.failure(OutcomeStatus.PARSE_FAILURE, name, str(e))
        except InvalidDocumentError as e:
            self._logger.warning("document_invalid", name=name, error=str(e))
            return OpenResult.failure(OutcomeStatus.INVALID_DOCUMENT, name, str(e))

        self._logger.info(
            "document_loaded",
            name=name,
            properties=len(document.properties),
            tenants=len(document.tenants),
        )
        return OpenResult.opened(name, document)


class HandleGateway(PersistenceGateway):
    """Gateway for hosts that hand out reusable file handles."""

    profile = "handle"

    def __init__(self, host: HandleCapableHost, **kwargs):
        super().__init__(**kwargs)
        self._host = host

    async def open_document(self, session: PersistenceSession) -> OpenResult:
        handle = await self._host.pick_file_to_open()
        if handle is None:
            self._logger.info("open_cancelled")
            return OpenResult.cancel()

        try:
            text = await handle.read()
        except (HostReadError, OSError) as e:
            self._logger.error("document_read_failed", name=handle.name, error=str(e))
            return OpenResult.failure(OutcomeStatus.READ_FAILURE, handle.name, str(e))

        result = self._load(text, handle.name)
        if result.ok:
            session.retain(handle)
        return result

    async def save_document(self, session: PersistenceSession, document: Document) -> SaveResult:
        if session.retained_target is None:
            return await self.save_document_as(session, document)
        return await self._write(session.retained_target, document)

    async def save_document_as(self, session: PersistenceSession, document: Document) -> SaveResult:
        suggested = session.display_name or self.default_name()
        handle = await self._host.pick_file_to_save_as(suggested)
        if handle is None:
            self._logger.info("save_cancelled")
            return SaveResult.cancel()

        # Retain first: a Save issued while this write is in flight
        # must already target the new file.
        session.retain(handle)
        return await self._write(handle, document)

    async def _write(self, handle: FileHandle, document: Document) -> SaveResult:
        text = self.serialize(document)
        try:
            await handle.write(text)
        except (HostWriteError, OSError) as e:
            self._logger.error("document_write_failed", name=handle.name, error=str(e))
            return SaveResult.write_failure(handle.name, str(e))

        self._logger.info("document_saved", name=handle.name, size=len(text))
        return SaveResult.saved(handle.name)

    def configure_interface(self) -> InterfaceLabels:
        return InterfaceLabels()


class DownloadGateway(PersistenceGateway):
    """
    Gateway for hosts limited to upload and download.

    Every save is necessarily a "save as": Save downloads under the
    name of the opened file (or a fresh default name), Save As always
    downloads under a freshly generated name.
    """

    profile = "fallback"

    def __init__(self, host: FallbackHost, **kwargs):
        super().__init__(**kwargs)
        self._host = host

    async def open_document(self, session: PersistenceSession) -> OpenResult:
        try:
            upload = await self._host.prompt_user_upload()
        except (HostReadError, OSError) as e:
            self._logger.error("upload_read_failed", error=str(e))
            return OpenResult.failure(OutcomeStatus.READ_FAILURE, None, str(e))

        if upload is None:
            self._logger.info("open_cancelled")
            return OpenResult.cancel()

        try:
            text = decode_content(upload.content)
        except ParseFailureError as e:
            self._logger.warning("document_parse_failed", name=upload.name, error=str(e))
            return OpenResult.failure(OutcomeStatus.PARSE_FAILURE, upload.name, str(e))

        result = self._load(text, upload.name)
        if result.ok:
            session.display_name = upload.name
        return result

    async def save_document(self, session: PersistenceSession, document: Document) -> SaveResult:
        return await self._download(session, document, session.display_name or self.default_name())

    async def save_document_as(self, session: PersistenceSession, document: Document) -> SaveResult:
        return await self._download(session, document, self.default_name())

    async def _download(self, session: PersistenceSession, document: Document, name: str) -> SaveResult:
        text = self.serialize(document)
        try:
            await self._host.offer_download(text, name)
        except (HostWriteError, OSError) as e:
            self._logger.error("document_download_failed", name=name, error=str(e))
            return SaveResult.write_failure(name, str(e))

        session.display_name = name
        self._logger.info("document_downloaded", name=name, size=len(text))
        return SaveResult.saved(name)

    def configure_interface(self) -> InterfaceLabels:
        return InterfaceLabels(
            open_label="Upload Data File",
            save_label="Download Data File",
            save_as_label="Download As New File",
            can_save_in_place=False,
        )


def create_gateway(
    host: Union[HandleCapableHost, FallbackHost],
    settings: Optional[RentLogSettings] = None,
    **kwargs,
) -> PersistenceGateway:
    """
    Pick the gateway variant for a host, once, at startup.

    With host_profile "auto" a host offering handles gets the handle
    gateway. "handle" and "fallback" force a variant; forcing one the
    host cannot serve is a configuration error.
    """
    settings = settings or get_settings()
    profile = settings.host_profile
    is_handle = isinstance(host, HandleCapableHost)
    is_fallback = isinstance(host, FallbackHost)

    if profile == "auto":
        profile = "handle" if is_handle else "fallback"

    if profile == "handle" and is_handle:
        return HandleGateway(host, settings=settings, **kwargs)
    if profile == "fallback" and is_fallback:
        return DownloadGateway(host, settings=settings, **kwargs)

    raise TypeError(
        f"Host {type(host).__name__} does not support the '{profile}' profile"
    )
