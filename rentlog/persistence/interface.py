"""
Abstract Host File Interfaces

DESIGN DECISION: RentLog never touches the file system directly from
its business logic. The host (desktop, browser-like frontend, tests)
provides one of two capability sets:

1. HandleCapableHost - the user picks a file and we get back a
   reusable, writable handle to that exact file.
2. FallbackHost - one-shot upload and download only. There is no
   handle, so there is no way to write back to the same file silently.

The persistence gateway adapts either one to the same
open / save / save-as contract.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field


class FileHandle(ABC):
    """A reusable reference to one file chosen by the user."""

    @property
    @abstractmethod
    def name(self) -> str:
        """File name shown to the user (no directory)."""
        pass

    @abstractmethod
    async def read(self) -> str:
        """
        Read the whole file as text.

        Raises:
            HostReadError: If the file cannot be read
        """
        pass

    @abstractmethod
    async def write(self, text: str) -> None:
        """
        Replace the file contents with `text`.

        Implementations must not leave a partially written file behind.

        Raises:
            HostWriteError: If the host denied or interrupted the write
        """
        pass


class HandleCapableHost(ABC):
    """Host that can hand out reusable file handles."""

    @abstractmethod
    async def pick_file_to_open(self) -> Optional[FileHandle]:
        """
        Let the user choose an existing file.

        Returns:
            A handle to the chosen file, or None if the user cancelled
        """
        pass

    @abstractmethod
    async def pick_file_to_save_as(self, suggested_name: str) -> Optional[FileHandle]:
        """
        Let the user choose where to save.

        Args:
            suggested_name: File name to pre-fill in the picker

        Returns:
            A handle to the chosen target, or None if the user cancelled
        """
        pass


class UploadedFile(BaseModel):
    """A file the user handed over through a one-shot upload."""

    name: str = Field(..., description="Original file name")
    content: bytes = Field(..., description="Raw file contents")


class FallbackHost(ABC):
    """Host limited to one-shot upload and download."""

    @abstractmethod
    async def prompt_user_upload(self) -> Optional[UploadedFile]:
        """
        Ask the user for a file to upload.

        Returns:
            The uploaded file, or None if the user cancelled
        """
        pass

    @abstractmethod
    async def offer_download(self, text: str, filename: str) -> None:
        """
        Offer `text` to the user as a download named `filename`.

        Raises:
            HostWriteError: If the download could not be produced
        """
        pass


class PersistenceError(Exception):
    """Base exception for persistence operations."""
    pass


class ParseFailureError(PersistenceError):
    """File content is not valid JSON text."""
    pass


class InvalidDocumentError(PersistenceError):
    """File content is JSON but not a RentLog document."""
    pass


class HostError(PersistenceError):
    """The host failed a file operation."""
    pass


class HostReadError(HostError):
    """The host could not read the chosen file."""
    pass


class HostWriteError(HostError):
    """The host denied or interrupted a write."""
    pass
