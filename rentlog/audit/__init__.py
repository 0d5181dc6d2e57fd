"""Audit logging package."""

from rentlog.audit.logger import AuditLogger, configure_logging
from rentlog.audit.storage import (
    AuditStorageError,
    AuditStorageInterface,
    JsonLinesAuditStorage,
)

__all__ = [
    "AuditLogger",
    "AuditStorageError",
    "AuditStorageInterface",
    "JsonLinesAuditStorage",
    "configure_logging",
]
