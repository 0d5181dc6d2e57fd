"""
Data Models Package

This package contains all Pydantic models used by RentLog.
Everything written to the data file conforms to these schemas.
"""

from rentlog.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from rentlog.models.document import (
    Bill,
    Document,
    DocumentError,
    EntityNotFoundError,
    MissingPropertyError,
    Payment,
    PaymentType,
    Property,
    Tenant,
    new_document,
    next_id,
)
from rentlog.models.migrations import CURRENT_VERSION, MigrationError, migrate
from rentlog.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Document models
    "Bill",
    "Document",
    "Payment",
    "PaymentType",
    "Property",
    "Tenant",
    "new_document",
    "next_id",
    # Errors
    "DocumentError",
    "EntityNotFoundError",
    "MissingPropertyError",
    # Migrations
    "CURRENT_VERSION",
    "MigrationError",
    "migrate",
    # Integrity
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
