"""
Data File Codec

Turns a Document into the indented JSON text of the data file and back.

Reading is strict about the top-level shape: the file must be a JSON
object whose `properties` and `tenants` keys are both present and both
lists. Anything else is an invalid document, never a silently empty one.
Older files are upgraded by the versioned migration step before the
models validate them.
"""

import json
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError

from rentlog.models.document import Document
from rentlog.models.migrations import MigrationError, migrate
from rentlog.persistence.interface import InvalidDocumentError, ParseFailureError


REQUIRED_KEYS = ("properties", "tenants")

DEFAULT_INDENT = 2


def serialize_document(document: Document, indent: int = DEFAULT_INDENT) -> str:
    """Render the document as indented JSON with the file's camelCase keys."""
    return document.model_dump_json(by_alias=True, indent=indent)


def decode_content(content: bytes) -> str:
    """
    Decode uploaded bytes as UTF-8 (a leading BOM is allowed).

    Raises:
        ParseFailureError: If the bytes are not UTF-8 text
    """
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseFailureError(f"File is not UTF-8 text: {e}") from e


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseFailureError(f"File is not valid JSON: {e}") from e


def check_shape(raw: Any) -> dict[str, Any]:
    """
    Check the top-level shape of a decoded data file.

    Raises:
        InvalidDocumentError: If the shape is not a RentLog document
    """
    if not isinstance(raw, dict):
        raise InvalidDocumentError(
            f"Expected a JSON object at the top level, got {type(raw).__name__}"
        )
    for key in REQUIRED_KEYS:
        if key not in raw:
            raise InvalidDocumentError(f"Missing '{key}' list")
        if not isinstance(raw[key], list):
            raise InvalidDocumentError(
                f"'{key}' must be a list, got {type(raw[key]).__name__}"
            )
    return raw


def _describe_errors(error: ValidationError, limit: int = 3) -> str:
    parts = []
    for item in error.errors()[:limit]:
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {item['msg']}")
    more = error.error_count() - limit
    if more > 0:
        parts.append(f"and {more} more")
    return "; ".join(parts)


def parse_document(text: str) -> Document:
    """
    Parse data file text into a Document.

    Raises:
        ParseFailureError: If the text is not JSON
        InvalidDocumentError: If the JSON is not a RentLog document
    """
    raw = check_shape(_load_json(text))

    try:
        migrated = migrate(raw)
    except MigrationError as e:
        raise InvalidDocumentError(str(e)) from e

    try:
        return Document.model_validate(migrated)
    except ValidationError as e:
        raise InvalidDocumentError(_describe_errors(e)) from e


def default_file_name(prefix: str = "rentlog-data", today: Optional[date] = None) -> str:
    """Date-stamped name for a file that has never been saved."""
    today = today or date.today()
    return f"{prefix}-{today.isoformat()}.json"
