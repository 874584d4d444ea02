"""Exceptions raised inside a sync direction.

Each carries the offending ``path``; the underlying ``OSError`` (when
there is one) is chained as ``__cause__``.  The synchronizer converts
them into ``SyncIssue`` diagnostics at the direction boundary.
"""

from __future__ import annotations

from pathlib import Path

from .models import IssueKind


class SyncError(Exception):
    """Base class for sync failures."""

    kind: IssueKind | None = None

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)
        self.message = message


class SourceUnavailable(SyncError):
    """Source root is missing, not a directory, or unreachable."""

    kind = IssueKind.SOURCE_UNAVAILABLE


class DestinationCreationFailed(SyncError):
    """The destination root could not be created."""

    kind = IssueKind.DESTINATION_CREATION_FAILED


class EnumerationFailed(SyncError):
    """Listing the source tree failed part-way."""

    kind = IssueKind.ENUMERATION_FAILED


class ItemCopyFailed(SyncError):
    """Copying a single item, or creating its parent directory, failed."""

    kind = IssueKind.ITEM_COPY_FAILED


class PathMappingError(SyncError, ValueError):
    """An item path could not be mapped onto the destination root."""
