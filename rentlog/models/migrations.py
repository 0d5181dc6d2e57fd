"""
Schema Migrations for the RentLog data file

The data file carries a `version` tag. On every load the raw JSON
object is walked forward, one version at a time, until it reaches
CURRENT_VERSION. Each step is additive: it fills in what older files
lack and never rejects a document for missing optional data.

The tag itself is never rewritten: it only selects which steps run.
A file without one gets the model default when validated. Files
newer than CURRENT_VERSION are passed through untouched.
"""

import copy
from typing import Any, Callable

import structlog


CURRENT_VERSION = 2

# Files written before the version tag existed
LEGACY_VERSION = 1

logger = structlog.get_logger(__name__)


class MigrationError(ValueError):
    """The version tag cannot be interpreted."""
    pass


def _v1_to_v2(raw: dict[str, Any]) -> dict[str, Any]:
    """Tenants gained bill and payment ledgers in version 2."""
    for tenant in raw.get("tenants", []):
        if isinstance(tenant, dict):
            tenant.setdefault("bills", [])
            tenant.setdefault("payments", [])
    return raw


# version -> step that upgrades a document from that version to the next
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _v1_to_v2,
}


def read_version(raw: dict[str, Any]) -> int:
    """Get the schema version of a raw document, defaulting legacy files to 1."""
    version = raw.get("version", LEGACY_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        raise MigrationError(f"Version must be an integer, got {version!r}")
    if version < 1:
        raise MigrationError(f"Version must be at least 1, got {version}")
    return version


def migrate(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a raw document up to the CURRENT_VERSION schema.

    The input is not modified; a migrated copy is returned with its
    version tag (or lack of one) left as it was.

    Raises:
        MigrationError: If the version tag is not a positive integer
    """
    version = read_version(raw)
    migrated = copy.deepcopy(raw)

    if version > CURRENT_VERSION:
        logger.warning(
            "document_version_newer_than_supported",
            version=version,
            supported=CURRENT_VERSION,
        )
        return migrated

    while version < CURRENT_VERSION:
        migrated = MIGRATIONS[version](migrated)
        version += 1
        logger.debug("document_migrated", to_version=version)

    return migrated
