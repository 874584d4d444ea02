"""Pydantic models for the tree synchronizer.

Defines the data contracts shared across the sync modules:

- ``TreeItem``: A file or directory discovered under a root.
- ``ActionLogEntry``: One successful (or, in dry-run, planned) mutation.
- ``ActionLog``: Insertion-ordered, de-duplicating log of entries.
- ``SyncIssue``: A diagnostic raised while syncing one direction.
- ``DirectionResult``: Outcome of one one-way pass.
- ``SyncReport``: Aggregate results for a full bidirectional run.

All models except ``ActionLog`` are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel


class ActionKind(str, Enum):
    """Kinds of filesystem mutation recorded in the action log."""

    CREATED_DIRECTORY = "created_directory"
    COPIED = "copied"


class DirectionState(str, Enum):
    """Lifecycle of one sync direction.

    ``SKIPPED`` and ``ABORTED`` are early exits; item-level failures
    leave the direction in ``ITEM_LOOP`` and it still finishes ``DONE``.
    """

    NOT_STARTED = "not_started"
    SOURCE_VALIDATED = "source_validated"
    DESTINATION_ENSURED = "destination_ensured"
    ENUMERATING = "enumerating"
    ITEM_LOOP = "item_loop"
    DONE = "done"
    SKIPPED = "skipped"
    ABORTED = "aborted"


class IssueKind(str, Enum):
    """Diagnostic categories emitted by the synchronizer."""

    SOURCE_UNAVAILABLE = "source_unavailable"
    DESTINATION_CREATION_FAILED = "destination_creation_failed"
    ENUMERATION_FAILED = "enumeration_failed"
    ITEM_COPY_FAILED = "item_copy_failed"


class TreeItem(BaseModel):
    """A filesystem entry discovered while scanning a root.

    Attributes:
        full_path: Absolute path of the entry.
        root: The root the entry was discovered under.
        is_directory: True for real directories (symlinks are not).
    """

    full_path: Path
    root: Path
    is_directory: bool

    model_config = {"frozen": True}

    @property
    def relative_path(self) -> Path:
        """Path of the entry relative to its root."""
        return self.full_path.relative_to(self.root)


class ActionLogEntry(BaseModel):
    """A record of one state-changing action.

    Attributes:
        kind: What was done.
        source: Source path for ``COPIED``; ``None`` for directories
            created on their own.
        destination: The path that was created.
    """

    kind: ActionKind
    source: Path | None = None
    destination: Path

    model_config = {"frozen": True}

    @classmethod
    def created_directory(cls, path: Path) -> ActionLogEntry:
        return cls(kind=ActionKind.CREATED_DIRECTORY, destination=path)

    @classmethod
    def copied(cls, source: Path, destination: Path) -> ActionLogEntry:
        return cls(
            kind=ActionKind.COPIED, source=source, destination=destination
        )

    def describe(self) -> str:
        """Render the entry as a single human-readable line."""
        if self.kind == ActionKind.CREATED_DIRECTORY:
            return f"CREATED DIRECTORY: {self.destination}"
        return f"COPIED: {self.source} -> {self.destination}"


class ActionLog:
    """Append-only action log that de-duplicates on insertion.

    Entries are keyed by their content, so re-deriving an equivalent
    action (e.g. both directions creating the same directory) keeps only
    the first occurrence, in its original position.
    """

    def __init__(self) -> None:
        self._entries: dict[ActionLogEntry, None] = {}

    def append(self, entry: ActionLogEntry) -> bool:
        """Add *entry* to the log.

        Returns:
            ``True`` if the entry was new, ``False`` for a duplicate.
        """
        if entry in self._entries:
            return False
        self._entries[entry] = None
        return True

    @property
    def entries(self) -> list[ActionLogEntry]:
        return list(self._entries)

    def descriptions(self) -> list[str]:
        """Human-readable lines in first-occurrence order."""
        return [entry.describe() for entry in self._entries]

    def __iter__(self) -> Iterator[ActionLogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


class SyncIssue(BaseModel):
    """A diagnostic produced while syncing one direction.

    Attributes:
        kind: Issue category.
        path: The path the issue concerns.
        message: Human-readable description including the OS error.
    """

    kind: IssueKind
    path: Path
    message: str

    model_config = {"frozen": True}

    @property
    def is_fatal(self) -> bool:
        """Whether this issue ended the direction early."""
        return self.kind != IssueKind.ITEM_COPY_FAILED

    @property
    def severity(self) -> str:
        if self.kind == IssueKind.SOURCE_UNAVAILABLE:
            return "warning"
        return "error"


class DirectionResult(BaseModel):
    """Outcome of one one-way pass.

    Attributes:
        source_root: Root that was read.
        destination_root: Root that was written.
        state: Final state of the direction.
        actions: Log entries appended by this direction (new ones only).
        issues: Diagnostics raised during the pass.
        items_seen: Number of items enumerated under the source.
        items_skipped: Items already present at the destination.
    """

    source_root: Path
    destination_root: Path
    state: DirectionState
    actions: list[ActionLogEntry] = []
    issues: list[SyncIssue] = []
    items_seen: int = 0
    items_skipped: int = 0

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.source_root} -> {self.destination_root}"


class SyncReport(BaseModel):
    """Aggregate report for a full bidirectional run.

    Attributes:
        root_a: First root.
        root_b: Second root.
        dry_run: Whether mutations were only planned.
        directions: Per-direction results, in execution order.
        actions: The de-duplicated action log.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    root_a: Path
    root_b: Path
    dry_run: bool = False
    directions: list[DirectionResult] = []
    actions: list[ActionLogEntry] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def descriptions(self) -> list[str]:
        return [entry.describe() for entry in self.actions]

    @property
    def copied(self) -> list[ActionLogEntry]:
        return [a for a in self.actions if a.kind == ActionKind.COPIED]

    @property
    def created_directories(self) -> list[ActionLogEntry]:
        return [
            a
            for a in self.actions
            if a.kind == ActionKind.CREATED_DIRECTORY
        ]

    @property
    def issues(self) -> list[SyncIssue]:
        return [i for d in self.directions for i in d.issues]

    @property
    def errors(self) -> list[SyncIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[SyncIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> str:
        """Format a short multi-line summary with counts."""
        lines = [
            f"Sync report for '{self.root_a}' <-> '{self.root_b}'"
            + (" (dry run)" if self.dry_run else ""),
            f"  Copied:              {len(self.copied)}",
            f"  Created directories: {len(self.created_directories)}",
            f"  Warnings:            {len(self.warnings)}",
            f"  Errors:              {len(self.errors)}",
        ]
        return "\n".join(lines)
