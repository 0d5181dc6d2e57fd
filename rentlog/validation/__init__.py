"""Integrity validation package."""

from rentlog.validation.validator import DocumentValidator

__all__ = ["DocumentValidator"]
