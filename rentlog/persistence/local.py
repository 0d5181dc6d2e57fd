"""
Local File System Hosts

Concrete host capabilities backed by the local disk:

- LocalFileHandle: a reusable handle to one path. Writes go to a
  temporary file in the same directory which then replaces the target,
  so a failed write never leaves a half-written data file.
- LocalHandleHost: handle-capable host. How a path is chosen (dialog,
  prompt, text box) is supplied by the caller as async callables.
- LocalDownloadHost: fallback host. Uploads are read from a chosen
  path, downloads are written into a downloads directory.

Blocking file I/O runs in a worker thread so the event loop stays free.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from rentlog.config import get_settings
from rentlog.persistence.interface import (
    FallbackHost,
    FileHandle,
    HandleCapableHost,
    HostReadError,
    HostWriteError,
    UploadedFile,
)


PathLike = Union[str, Path]
OpenPrompt = Callable[[], Awaitable[Optional[PathLike]]]
SavePrompt = Callable[[str], Awaitable[Optional[PathLike]]]

# Interruptions worth another attempt; anything else fails at once
TRANSIENT_WRITE_ERRORS = (InterruptedError, BlockingIOError, TimeoutError)


def _to_path(value: Optional[PathLike]) -> Optional[Path]:
    if value is None or not str(value).strip():
        return None
    return Path(value).expanduser()


class LocalFileHandle(FileHandle):
    """Handle to a file on the local disk."""

    def __init__(self, path: PathLike, retry_attempts: Optional[int] = None):
        self.path = Path(path)
        self._retry_attempts = retry_attempts or get_settings().write_retry_attempts

    @property
    def name(self) -> str:
        return self.path.name

    async def read(self) -> str:
        try:
            return await asyncio.to_thread(self.path.read_text, encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise HostReadError(f"Could not read {self.path}: {e}") from e

    async def write(self, text: str) -> None:
        retrying = Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(TRANSIENT_WRITE_ERRORS),
            reraise=True,
        )
        try:
            await asyncio.to_thread(retrying, self._write_atomic, text)
        except OSError as e:
            raise HostWriteError(f"Could not write {self.path}: {e}") from e

    def _write_atomic(self, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalFileHandle) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)


class LocalHandleHost(HandleCapableHost):
    """
    Handle-capable host over local paths.

    Args:
        choose_open: Returns the path of the file to open, or None to cancel
        choose_save: Receives a suggested file name and returns the
                     path to save to, or None to cancel
    """

    def __init__(
        self,
        choose_open: OpenPrompt,
        choose_save: SavePrompt,
        retry_attempts: Optional[int] = None,
    ):
        self._choose_open = choose_open
        self._choose_save = choose_save
        self._retry_attempts = retry_attempts

    async def pick_file_to_open(self) -> Optional[FileHandle]:
        path = _to_path(await self._choose_open())
        if path is None:
            return None
        return LocalFileHandle(path, self._retry_attempts)

    async def pick_file_to_save_as(self, suggested_name: str) -> Optional[FileHandle]:
        path = _to_path(await self._choose_save(suggested_name))
        if path is None:
            return None
        return LocalFileHandle(path, self._retry_attempts)


class LocalDownloadHost(FallbackHost):
    """
    Upload/download host over local paths.

    Args:
        choose_upload: Returns the path of the file to upload, or None to cancel
        downloads_dir: Where downloads land (defaults to settings.downloads_dir)
    """

    def __init__(
        self,
        choose_upload: OpenPrompt,
        downloads_dir: Optional[PathLike] = None,
    ):
        self._choose_upload = choose_upload
        self.downloads_dir = (
            Path(downloads_dir) if downloads_dir is not None
            else get_settings().downloads_path
        )

    async def prompt_user_upload(self) -> Optional[UploadedFile]:
        path = _to_path(await self._choose_upload())
        if path is None:
            return None
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise HostReadError(f"Could not read {path}: {e}") from e
        return UploadedFile(name=path.name, content=content)

    async def offer_download(self, text: str, filename: str) -> None:
        target = self.downloads_dir / Path(filename).name
        await LocalFileHandle(target).write(text)
