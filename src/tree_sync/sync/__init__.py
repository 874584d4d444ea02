"""Additive bidirectional directory-tree sync.

Public API for reconciling two directory trees so that each ends up
holding the union of both.  Items are compared by existence only; nothing
is ever deleted or overwritten.

Modules:

- ``engine``        -- ``SyncEngine``: runs A -> B then B -> A.
- ``synchronizer``  -- ``TreeSynchronizer``: one direction.
- ``scanner``       -- ``scan_tree``: recursive enumeration.
- ``mapper``        -- ``PathMapper`` / ``map_path``: root-prefix remapping.
- ``models``        -- ``TreeItem``, ``ActionLogEntry``, ``ActionLog``,
  ``SyncIssue``, ``DirectionResult``, ``SyncReport``.
- ``errors``        -- failure taxonomy.
- ``reporter``      -- text and JSON report formatting.

Usage example
-------------
::

    from tree_sync.sync import SyncEngine, format_sync_report

    engine = SyncEngine("/srv/data", "/mnt/backup/data")

    preview = engine.run(dry_run=True)
    print(format_sync_report(preview))

    report = engine.run()
    print(format_sync_report(report))
"""

from .engine import SyncEngine, sync_trees
from .errors import (
    DestinationCreationFailed,
    EnumerationFailed,
    ItemCopyFailed,
    PathMappingError,
    SourceUnavailable,
    SyncError,
)
from .mapper import PathMapper, map_path
from .models import (
    ActionKind,
    ActionLog,
    ActionLogEntry,
    DirectionResult,
    DirectionState,
    IssueKind,
    SyncIssue,
    SyncReport,
    TreeItem,
)
from .reporter import ConsoleReporter, format_sync_report, report_to_json
from .scanner import scan_tree
from .synchronizer import TreeSynchronizer

__all__ = [
    "ActionKind",
    "ActionLog",
    "ActionLogEntry",
    "ConsoleReporter",
    "DestinationCreationFailed",
    "DirectionResult",
    "DirectionState",
    "EnumerationFailed",
    "IssueKind",
    "ItemCopyFailed",
    "PathMapper",
    "PathMappingError",
    "SourceUnavailable",
    "SyncEngine",
    "SyncError",
    "SyncIssue",
    "SyncReport",
    "TreeItem",
    "TreeSynchronizer",
    "format_sync_report",
    "map_path",
    "report_to_json",
    "scan_tree",
    "sync_trees",
]
