"""
Outcomes of persistence operations.

Expected conditions (a dismissed picker, a file that is not a RentLog
document, a refused write) are returned as values, never raised.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from rentlog.models.document import Document


INVALID_FILE_MESSAGE = (
    "Invalid data file. Please choose another file or create a new one."
)


class OutcomeStatus(str, Enum):
    OK = "ok"
    CANCELLED = "cancelled"
    INVALID_DOCUMENT = "invalid_document"
    PARSE_FAILURE = "parse_failure"
    READ_FAILURE = "read_failure"
    WRITE_FAILURE = "write_failure"


class OpenResult(BaseModel):
    """Result of asking the user for a data file."""

    status: OutcomeStatus
    name: Optional[str] = None
    document: Optional[Document] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    @property
    def cancelled(self) -> bool:
        return self.status == OutcomeStatus.CANCELLED

    @property
    def user_message(self) -> Optional[str]:
        """Message for a blocking dialog, or None when nothing should be shown."""
        if self.status in (OutcomeStatus.OK, OutcomeStatus.CANCELLED):
            return None
        if self.status == OutcomeStatus.READ_FAILURE:
            return (
                f"Could not read {self.name or 'the selected file'}: {self.error_message}. "
                "Please choose another file or create a new one."
            )
        return INVALID_FILE_MESSAGE

    @classmethod
    def opened(cls, name: str, document: Document) -> "OpenResult":
        return cls(status=OutcomeStatus.OK, name=name, document=document)

    @classmethod
    def cancel(cls) -> "OpenResult":
        return cls(status=OutcomeStatus.CANCELLED)

    @classmethod
    def failure(cls, status: OutcomeStatus, name: Optional[str], error_message: str) -> "OpenResult":
        return cls(status=status, name=name, error_message=error_message)


class SaveResult(BaseModel):
    """Result of writing the document out."""

    success: bool
    status: OutcomeStatus
    name: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.status == OutcomeStatus.CANCELLED

    @property
    def user_message(self) -> Optional[str]:
        if self.status == OutcomeStatus.OK:
            return f"Saved {self.name}"
        if self.status == OutcomeStatus.CANCELLED:
            return None
        return (
            f"Could not save {self.name or 'the data file'}: {self.error_message}. "
            "Your changes are still open; try Save As to pick another location."
        )

    @classmethod
    def saved(cls, name: str) -> "SaveResult":
        return cls(success=True, status=OutcomeStatus.OK, name=name)

    @classmethod
    def cancel(cls) -> "SaveResult":
        return cls(success=False, status=OutcomeStatus.CANCELLED)

    @classmethod
    def write_failure(cls, name: Optional[str], error_message: str) -> "SaveResult":
        return cls(
            success=False,
            status=OutcomeStatus.WRITE_FAILURE,
            name=name,
            error_message=error_message,
        )


class InterfaceLabels(BaseModel):
    """Labels for the open/save buttons, matched to the host profile."""

    open_label: str = "Open Data File"
    save_label: str = "Save"
    save_as_label: str = "Save As"
    can_save_in_place: bool = True
