"""
Error types raised by the import / load / clear pipeline.

Callers (API routers, CLI) decide how to surface them; nothing here retries.
"""
from __future__ import annotations


class FloperError(Exception):
    """Base class for all pipeline failures."""


class EmptyInputError(FloperError, ValueError):
    """The parsed file yielded zero rows; nothing was written."""

    def __init__(self, message: str = "no rows found") -> None:
        super().__init__(message)


class SpreadsheetError(FloperError, ValueError):
    """The uploaded file could not be parsed into rows."""


class StorageError(FloperError):
    """A remote table call failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RemoteWriteFailure(StorageError):
    """A chunk insert failed. Chunks before ``chunk_index`` stay committed."""

    def __init__(self, message: str, chunk_index: int | None = None) -> None:
        super().__init__(f"error while inserting data: {message}")
        self.chunk_index = chunk_index


class RemoteReadFailure(StorageError):
    """The count query (``page is None``) or a page query failed."""

    def __init__(self, message: str, page: int | None = None) -> None:
        if page is None:
            text = f"error while counting records: {message}"
        else:
            text = f"error while fetching page {page}: {message}"
        super().__init__(text)
        self.page = page


class RemoteDeleteFailure(StorageError):
    """Clear-all failed; the remote collection may be partially deleted."""

    def __init__(self, message: str) -> None:
        super().__init__(f"error while deleting data: {message}")
