"""
Persistence Package

Moves the RentLog document between memory and the user's data file.
One gateway contract, two host capability profiles (reusable file
handles, or one-shot upload/download).
"""

from rentlog.persistence.codec import (
    check_shape,
    decode_content,
    default_file_name,
    parse_document,
    serialize_document,
)
from rentlog.persistence.gateway import (
    DownloadGateway,
    HandleGateway,
    PersistenceGateway,
    create_gateway,
)
from rentlog.persistence.interface import (
    FallbackHost,
    FileHandle,
    HandleCapableHost,
    HostError,
    HostReadError,
    HostWriteError,
    InvalidDocumentError,
    ParseFailureError,
    PersistenceError,
    UploadedFile,
)
from rentlog.persistence.local import (
    LocalDownloadHost,
    LocalFileHandle,
    LocalHandleHost,
)
from rentlog.persistence.results import (
    InterfaceLabels,
    OpenResult,
    OutcomeStatus,
    SaveResult,
)
from rentlog.persistence.session import PersistenceSession

__all__ = [
    # Codec
    "check_shape",
    "decode_content",
    "default_file_name",
    "parse_document",
    "serialize_document",
    # Gateways
    "DownloadGateway",
    "HandleGateway",
    "PersistenceGateway",
    "create_gateway",
    # Host interfaces
    "FallbackHost",
    "FileHandle",
    "HandleCapableHost",
    "UploadedFile",
    # Exceptions
    "HostError",
    "HostReadError",
    "HostWriteError",
    "InvalidDocumentError",
    "ParseFailureError",
    "PersistenceError",
    # Local hosts
    "LocalDownloadHost",
    "LocalFileHandle",
    "LocalHandleHost",
    # Results
    "InterfaceLabels",
    "OpenResult",
    "OutcomeStatus",
    "SaveResult",
    "PersistenceSession",
]
