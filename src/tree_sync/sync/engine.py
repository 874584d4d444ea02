"""Bidirectional sync driver.

The ``SyncEngine`` runs the tree synchronizer twice against one shared
``ActionLog``: first root A into root B, then root B into root A.  The
directions run sequentially; a skipped or aborted direction never stops
the other one.  The result is a ``SyncReport`` holding the
de-duplicated log and both direction outcomes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from .models import ActionLog, SyncReport
from .synchronizer import TreeSynchronizer

logger = logging.getLogger(__name__)


class SyncEngine:
    """Reconcile two roots so both end up with the union of their items.

    Args:
        root_a: First absolute root.
        root_b: Second absolute root.
        preserve_metadata: Passed through to ``TreeSynchronizer``.
    """

    def __init__(
        self,
        root_a: Path | str,
        root_b: Path | str,
        preserve_metadata: bool = True,
    ) -> None:
        self.root_a = Path(root_a)
        self.root_b = Path(root_b)
        self.preserve_metadata = preserve_metadata

    def run(self, dry_run: bool = False) -> SyncReport:
        """Execute both directions.

        Args:
            dry_run: If ``True``, plan actions without copying anything.

        Returns:
            A ``SyncReport`` for the run.  Every call starts from an
            empty log.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        log = ActionLog()
        synchronizer = TreeSynchronizer(
            preserve_metadata=self.preserve_metadata, dry_run=dry_run
        )

        forward = synchronizer.sync(self.root_a, self.root_b, log)
        backward = synchronizer.sync(self.root_b, self.root_a, log)

        report = SyncReport(
            root_a=self.root_a,
            root_b=self.root_b,
            dry_run=dry_run,
            directions=[forward, backward],
            actions=log.entries,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            "Sync complete: %d actions, %d errors, %d warnings",
            len(report.actions),
            len(report.errors),
            len(report.warnings),
        )
        return report


def sync_trees(
    root_a: Path | str,
    root_b: Path | str,
    dry_run: bool = False,
    preserve_metadata: bool = True,
) -> SyncReport:
    """Shortcut for ``SyncEngine(root_a, root_b).run(dry_run)``."""
    engine = SyncEngine(root_a, root_b, preserve_metadata=preserve_metadata)
    return engine.run(dry_run=dry_run)
