"""One-directional tree synchronizer.

``TreeSynchronizer.sync`` copies everything that exists under a source
root but not under a destination root, recording each mutation in a
shared ``ActionLog``:

1. Validate the source root (missing -> warning, direction skipped).
2. Ensure the destination root exists (failure -> direction aborted).
3. Enumerate the source tree (failure -> direction aborted).
4. For each item, map its path and copy it if nothing exists there.

Existence is the only comparison: an item present on both sides is left
alone whatever its content.  Nothing is ever deleted or overwritten.

Error handling is per-item: a failed copy, or a parent directory that
cannot be created, is reported and the loop moves on.  Descendants of a
directory that was not copied, or that is shadowed by a non-directory at
the destination, are skipped without further diagnostics.  Only the
destination root and the enumeration can abort a direction.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .errors import (
    DestinationCreationFailed,
    ItemCopyFailed,
    SourceUnavailable,
    SyncError,
)
from .mapper import PathMapper
from .models import (
    ActionLog,
    ActionLogEntry,
    DirectionResult,
    DirectionState,
    SyncIssue,
    TreeItem,
)
from .scanner import scan_tree

logger = logging.getLogger(__name__)


class TreeSynchronizer:
    """Reconcile one root into another, additively.

    Args:
        preserve_metadata: Copy timestamps and mode bits along with
            content (``shutil.copy2``); otherwise ``shutil.copy``.
        dry_run: Plan the actions and log them without touching the
            filesystem.  Destination roots planned for creation are
            remembered, and a later ``sync`` reading from one of them
            treats it as an empty source.
    """

    def __init__(
        self, preserve_metadata: bool = True, dry_run: bool = False
    ) -> None:
        self.preserve_metadata = preserve_metadata
        self.dry_run = dry_run
        self._planned_roots: set[Path] = set()

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def sync(
        self,
        source_root: Path | str,
        destination_root: Path | str,
        log: ActionLog,
    ) -> DirectionResult:
        """Copy items missing from *destination_root* out of *source_root*.

        Args:
            source_root: Absolute root to read from.
            destination_root: Absolute root to write into.
            log: Shared action log; new entries are appended to it.

        Returns:
            A ``DirectionResult`` with the final state, the entries this
            direction added to *log*, and any issues raised.
        """
        source = Path(source_root)
        destination = Path(destination_root)
        actions: list[ActionLogEntry] = []
        issues: list[SyncIssue] = []
        seen = 0
        skipped = 0
        state = DirectionState.NOT_STARTED

        def advance(next_state: DirectionState) -> None:
            nonlocal state
            logger.debug(
                "%s -> %s: %s -> %s",
                source,
                destination,
                state.value,
                next_state.value,
            )
            state = next_state

        def finish(final: DirectionState) -> DirectionResult:
            advance(final)
            return DirectionResult(
                source_root=source,
                destination_root=destination,
                state=state,
                actions=actions,
                issues=issues,
                items_seen=seen,
                items_skipped=skipped,
            )

        logger.info("Syncing %s -> %s", source, destination)

        planned_source = self.dry_run and source in self._planned_roots
        if planned_source:
            logger.debug("%s is planned for creation, treating as empty", source)
        else:
            try:
                self._validate_source(source)
            except SourceUnavailable as exc:
                issues.append(self._report(exc))
                return finish(DirectionState.SKIPPED)

        advance(DirectionState.SOURCE_VALIDATED)

        try:
            created = self._ensure_destination(destination)
        except DestinationCreationFailed as exc:
            issues.append(self._report(exc))
            return finish(DirectionState.ABORTED)
        if created is not None:
            self._record(log, created, actions)
        advance(DirectionState.DESTINATION_ENSURED)

        advance(DirectionState.ENUMERATING)

        if planned_source:
            items: list[TreeItem] = []
        else:
            try:
                items = scan_tree(source)
            except SyncError as exc:
                issues.append(self._report(exc))
                return finish(DirectionState.ABORTED)

        mapper = PathMapper(source, destination)
        planned_dirs: list[Path] = []
        # Targets whose subtree cannot receive copies this run.
        blocked: list[Path] = []
        advance(DirectionState.ITEM_LOOP)

        for item in items:
            seen += 1
            target = mapper.map(item.full_path)

            if self._under(target, blocked):
                skipped += 1
                logger.debug("Parent not copied, skipping: %s", target)
                continue

            if self._exists(target, planned_dirs):
                skipped += 1
                logger.debug("Exists, skipping: %s", target)
                if item.is_directory and self._shadowed(target):
                    blocked.append(target)
                continue

            try:
                self._ensure_parent(target)
            except ItemCopyFailed as exc:
                issues.append(self._report(exc))
                blocked.append(target.parent)
                continue

            try:
                self._copy(item, target)
            except ItemCopyFailed as exc:
                issues.append(self._report(exc))
                if item.is_directory:
                    blocked.append(target)
                continue

            self._record(
                log, ActionLogEntry.copied(item.full_path, target), actions
            )
            if self.dry_run and item.is_directory:
                planned_dirs.append(target)

        return finish(DirectionState.DONE)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _validate_source(self, source: Path) -> None:
        if not os.path.isdir(source):
            raise SourceUnavailable(
                source,
                f"Source root {source} does not exist or is not accessible; "
                "skipping this direction",
            )

    def _ensure_destination(self, destination: Path) -> ActionLogEntry | None:
        """Create the destination root if needed.

        Returns:
            The ``CreatedDirectory`` entry, or ``None`` if it already
            existed.
        """
        if os.path.isdir(destination):
            return None
        if os.path.lexists(destination):
            raise DestinationCreationFailed(
                destination,
                f"Destination root {destination} exists and is not a directory",
            )
        if not self.dry_run:
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise DestinationCreationFailed(
                    destination,
                    f"Cannot create destination root {destination}: "
                    f"{exc.strerror or exc}",
                ) from exc
        else:
            self._planned_roots.add(destination)
        return ActionLogEntry.created_directory(destination)

    def _ensure_parent(self, target: Path) -> None:
        """Create the parent of *target* if missing (not logged)."""
        if self.dry_run or os.path.isdir(target.parent):
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ItemCopyFailed(
                target.parent,
                f"Cannot create directory {target.parent}: "
                f"{exc.strerror or exc}",
            ) from exc

    def _copy(self, item: TreeItem, target: Path) -> None:
        if self.dry_run:
            return
        copy_function = shutil.copy2 if self.preserve_metadata else shutil.copy
        try:
            if item.is_directory:
                shutil.copytree(
                    item.full_path,
                    target,
                    symlinks=True,
                    copy_function=copy_function,
                )
            else:
                copy_function(item.full_path, target, follow_symlinks=False)
        except OSError as exc:
            # shutil.Error (from copytree) subclasses OSError.
            raise ItemCopyFailed(
                item.full_path,
                f"Failed to copy {item.full_path} -> {target}: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _exists(self, target: Path, planned_dirs: list[Path]) -> bool:
        """Whether anything is (or, in dry-run, would be) at *target*."""
        if os.path.lexists(target):
            return True
        return any(target.is_relative_to(d) for d in planned_dirs)

    @staticmethod
    def _under(target: Path, blocked: list[Path]) -> bool:
        return any(d in target.parents for d in blocked)

    @staticmethod
    def _shadowed(target: Path) -> bool:
        """Whether a file or link occupies *target* instead of a directory."""
        if not os.path.lexists(target):
            return False
        return os.path.islink(target) or not os.path.isdir(target)

    def _record(
        self,
        log: ActionLog,
        entry: ActionLogEntry,
        actions: list[ActionLogEntry],
    ) -> None:
        if log.append(entry):
            actions.append(entry)
        if self.dry_run:
            logger.info("(dry run) %s", entry.describe())
        else:
            logger.info(entry.describe())

    @staticmethod
    def _report(exc: SyncError) -> SyncIssue:
        issue = SyncIssue(kind=exc.kind, path=exc.path, message=exc.message)
        if issue.severity == "warning":
            logger.warning(issue.message)
        else:
            logger.error(issue.message)
        return issue
