"""Custom exceptions for data loading and validation."""
from __future__ import annotations

from pathlib import Path


class DataError(Exception):
    """Base exception for the data layer; remembers the offending file."""

    def __init__(self, message: str, *, source: Path | None = None) -> None:
        self.source = source
        super().__init__(f"{message} ({source.name})" if source is not None else message)


class DataLoadError(DataError):
    """Raised when JSON files are missing or unreadable."""


class DataValidationError(DataError):
    """Raised when JSON content fails structural validation."""


class DataReferenceError(DataError):
    """Raised when a definition points at another definition that does not exist."""
