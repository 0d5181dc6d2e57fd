"""
Audit Logger

DESIGN DECISION: Every open, save and edit is logged. This provides:
1. Traceability of what happened to the data file
2. Debugging capability when a file cannot be read or written

The audit logger:
- Is async so it fits the gateway's flow
- Gracefully handles failures (a broken audit sink never blocks a save)
- Logs cancellations at info level; they are not errors
"""

import logging
from typing import Optional

import structlog

from rentlog.audit.storage import AuditStorageError, AuditStorageInterface
from rentlog.models.audit import AuditEvent, AuditEventBuilder
from rentlog.persistence.results import OpenResult, OutcomeStatus, SaveResult


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog (JSON lines on stderr) over the stdlib logger."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional audit storage sink (for history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("rentlog.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except AuditStorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_open_result(self, result: OpenResult) -> None:
        """Log the outcome of an open, whatever it was."""
        if result.ok:
            event = AuditEventBuilder.document_opened(
                name=result.name,
                properties=len(result.document.properties),
                tenants=len(result.document.tenants),
            )
        elif result.cancelled:
            event = AuditEventBuilder.open_cancelled()
        elif result.status == OutcomeStatus.READ_FAILURE:
            event = AuditEventBuilder.read_failed(result.name, result.error_message)
        else:
            event = AuditEventBuilder.document_rejected(
                name=result.name,
                reason=result.status.value,
                error_message=result.error_message,
            )
        await self.log(event)

    async def log_save_result(self, result: SaveResult, save_as: bool) -> None:
        """Log the outcome of a save or save-as."""
        if result.success:
            event = AuditEventBuilder.document_saved(result.name, save_as=save_as)
        elif result.cancelled:
            event = AuditEventBuilder.save_cancelled()
        else:
            event = AuditEventBuilder.save_failed(result.name, result.error_message)
        await self.log(event)

    async def log_document_created(self, properties: int) -> None:
        await self.log(AuditEventBuilder.document_created(properties))

    async def log_integrity_issues(self, issues: list[dict]) -> None:
        await self.log(AuditEventBuilder.integrity_issues(issues))

    async def log_entity_added(
        self,
        entity_type: str,
        entity_id: int,
        details: Optional[dict] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entity_added(entity_type, entity_id, details))

    async def log_entity_updated(
        self,
        entity_type: str,
        entity_id: int,
        details: Optional[dict] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entity_updated(entity_type, entity_id, details))

    async def log_entity_removed(self, entity_type: str, entity_id: int) -> None:
        await self.log(AuditEventBuilder.entity_removed(entity_type, entity_id))
