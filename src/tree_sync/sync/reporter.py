"""Sync report formatting.

- ``format_sync_report`` -- human-readable post-sync report.
- ``report_to_json`` -- structured dict for ``--json`` output.
- ``ConsoleReporter`` -- writes either form to a stream.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .models import SyncReport

NO_CHANGES = "No changes needed."

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as text.

    Action lines appear in first-occurrence order.  Issue sections are
    only included when non-empty.

    Args:
        report: The completed report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report: {report.root_a} <-> {report.root_b}"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    if report.actions:
        lines.extend(report.descriptions)
    else:
        lines.append(NO_CHANGES)
    lines.append("")

    for direction in report.directions:
        if not direction.issues:
            continue
        lines.append(f"Issues ({direction.label}, {direction.state.value}):")
        for issue in direction.issues:
            lines.append(f"  [{issue.severity.upper()}] {issue.message}")
        lines.append("")

    lines.append(
        f"{len(report.copied)} copied, "
        f"{len(report.created_directories)} directories created, "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a JSON-serialisable dict."""
    directions = []
    for d in report.directions:
        directions.append(
            {
                "source_root": str(d.source_root),
                "destination_root": str(d.destination_root),
                "state": d.state.value,
                "items_seen": d.items_seen,
                "items_skipped": d.items_skipped,
                "actions": len(d.actions),
                "issues": [
                    {
                        "kind": i.kind.value,
                        "severity": i.severity,
                        "path": str(i.path),
                        "message": i.message,
                    }
                    for i in d.issues
                ],
            }
        )

    actions = []
    for a in report.actions:
        entry: dict = {
            "kind": a.kind.value,
            "destination": str(a.destination),
            "description": a.describe(),
        }
        if a.source is not None:
            entry["source"] = str(a.source)
        actions.append(entry)

    return {
        "root_a": str(report.root_a),
        "root_b": str(report.root_b),
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "actions": len(report.actions),
            "copied": len(report.copied),
            "created_directories": len(report.created_directories),
            "errors": len(report.errors),
            "warnings": len(report.warnings),
        },
        "actions": actions,
        "directions": directions,
    }


# ------------------------------------------------------------------
# Console reporter
# ------------------------------------------------------------------


class ConsoleReporter:
    """Write a report to a text stream (stdout by default).

    Args:
        stream: Destination stream.
        as_json: Emit ``report_to_json`` output instead of text.
    """

    def __init__(self, stream: TextIO | None = None, as_json: bool = False):
        self.stream = stream if stream is not None else sys.stdout
        self.as_json = as_json

    def report(self, report: SyncReport) -> None:
        if self.as_json:
            text = json.dumps(report_to_json(report), indent=2)
        else:
            text = format_sync_report(report)
        self.stream.write(text + "\n")
        self.stream.flush()
