"""
Audit Models for RentLog

Every open, save and edit of the data file is recorded. This gives:
1. A trail of what happened to the landlord's records
2. Debugging information when a file cannot be read or written

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Data file
    DOCUMENT_CREATED = "document_created"
    DOCUMENT_OPENED = "document_opened"
    OPEN_CANCELLED = "open_cancelled"
    DOCUMENT_REJECTED = "document_rejected"
    READ_FAILED = "read_failed"
    DOCUMENT_SAVED = "document_saved"
    SAVE_CANCELLED = "save_cancelled"
    SAVE_FAILED = "save_failed"

    # Integrity
    INTEGRITY_ISSUES_FOUND = "integrity_issues_found"

    # Record edits
    ENTITY_ADDED = "entity_added"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_REMOVED = "entity_removed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'document', 'tenant', 'payment')"
    )
    entity_id: Optional[int] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """One line of the JSON-lines audit file."""
        return json.dumps(self.to_log_dict(), ensure_ascii=False, default=str)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.document_opened("rent.json", tenants=3)
        event = AuditEventBuilder.save_failed("rent.json", "Permission denied")
    """

    @staticmethod
    def document_created(properties: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_CREATED,
            entity_type="document",
            description="New data file started",
            details={"properties": properties},
            is_user_action=True,
        )

    @staticmethod
    def document_opened(name: Optional[str], properties: int, tenants: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_OPENED,
            entity_type="document",
            description=f"Data file opened: {name}",
            details={
                "name": name,
                "properties": properties,
                "tenants": tenants,
            },
            is_user_action=True,
        )

    @staticmethod
    def open_cancelled() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPEN_CANCELLED,
            entity_type="document",
            description="File picker dismissed",
            is_user_action=True,
        )

    @staticmethod
    def document_rejected(name: Optional[str], reason: str, error_message: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            description=f"Data file rejected: {reason}",
            details={"name": name, "reason": reason},
            error_message=error_message,
        )

    @staticmethod
    def read_failed(name: Optional[str], error_message: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            description="Data file could not be read",
            details={"name": name},
            error_message=error_message,
        )

    @staticmethod
    def document_saved(name: Optional[str], save_as: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_SAVED,
            entity_type="document",
            description=f"Data file saved: {name}",
            details={"name": name, "save_as": save_as},
            is_user_action=True,
        )

    @staticmethod
    def save_cancelled() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_CANCELLED,
            entity_type="document",
            description="Save picker dismissed",
            is_user_action=True,
        )

    @staticmethod
    def save_failed(name: Optional[str], error_message: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="document",
            description="Data file could not be written",
            details={"name": name},
            error_message=error_message,
        )

    @staticmethod
    def integrity_issues(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTEGRITY_ISSUES_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            description=f"Integrity check found {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def entity_added(entity_type: str, entity_id: int, details: Optional[dict] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def entity_updated(entity_type: str, entity_id: int, details: Optional[dict] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def entity_removed(entity_type: str, entity_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_REMOVED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} removed",
            is_user_action=True,
        )
