"""Tests for the one-directional tree synchronizer.

Covers:
- Missing files and directories are copied, directories recursively
- Existing items are skipped regardless of content
- Source missing -> warning, direction skipped
- Destination missing -> created and logged
- Destination not creatable -> direction aborted, nothing logged
- Enumeration failure -> direction aborted
- A single copy failure does not stop the loop
- A failed or shadowed directory skips its descendants, siblings still copy
- Dry-run plans the same actions without touching the filesystem
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path
from unittest.mock import patch

from tree_sync.sync.errors import EnumerationFailed
from tree_sync.sync.models import (
    ActionKind,
    ActionLog,
    DirectionState,
    IssueKind,
)
from tree_sync.sync.synchronizer import TreeSynchronizer

# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


class TestCopyMissing:
    def test_single_file(self, make_tree):
        a = make_tree("a", {"file.txt": "hello"})
        b = make_tree("b")
        log = ActionLog()

        result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert (b / "file.txt").read_text() == "hello"
        assert log.descriptions() == [
            f"COPIED: {a / 'file.txt'} -> {b / 'file.txt'}"
        ]
        assert result.actions == log.entries
        assert result.items_seen == 1

    def test_directory_copied_as_one_unit(self, make_tree):
        a = make_tree("a", {"sub": {"a.txt": "1", "deeper": {"b.txt": "2"}}})
        b = make_tree("b")
        log = ActionLog()

        result = TreeSynchronizer().sync(a, b, log)

        assert (b / "sub" / "a.txt").read_text() == "1"
        assert (b / "sub" / "deeper" / "b.txt").read_text() == "2"
        # Descendants are visited but already present after the subtree copy.
        assert log.descriptions() == [f"COPIED: {a / 'sub'} -> {b / 'sub'}"]
        assert result.items_seen == 4
        assert result.items_skipped == 3

    def test_empty_directory(self, make_tree):
        a = make_tree("a", {"empty": {}})
        b = make_tree("b")

        TreeSynchronizer().sync(a, b, ActionLog())

        assert (b / "empty").is_dir()

    def test_missing_file_inside_existing_directory(self, make_tree):
        a = make_tree("a", {"sub": {"new.txt": "n", "old.txt": "o"}})
        b = make_tree("b", {"sub": {"old.txt": "mine"}})
        log = ActionLog()

        TreeSynchronizer().sync(a, b, log)

        assert (b / "sub" / "new.txt").read_text() == "n"
        assert (b / "sub" / "old.txt").read_text() == "mine"
        assert log.descriptions() == [
            f"COPIED: {a / 'sub' / 'new.txt'} -> {b / 'sub' / 'new.txt'}"
        ]

    def test_symlink_copied_as_link(self, make_tree):
        a = make_tree("a", {"real.txt": "r"})
        os.symlink("real.txt", a / "link.txt")
        b = make_tree("b")

        TreeSynchronizer().sync(a, b, ActionLog())

        assert (b / "link.txt").is_symlink()
        assert os.readlink(b / "link.txt") == "real.txt"

    def test_preserve_metadata_keeps_mtime(self, make_tree):
        a = make_tree("a", {"f.txt": "x"})
        os.utime(a / "f.txt", (1_000_000_000, 1_000_000_000))
        b = make_tree("b")

        TreeSynchronizer(preserve_metadata=True).sync(a, b, ActionLog())

        assert int((b / "f.txt").stat().st_mtime) == 1_000_000_000

    def test_without_metadata_uses_plain_copy(self, make_tree):
        a = make_tree("a", {"f.txt": "x"})
        b = make_tree("b")

        with patch(
            "tree_sync.sync.synchronizer.shutil.copy", wraps=shutil.copy
        ) as mock_copy:
            TreeSynchronizer(preserve_metadata=False).sync(a, b, ActionLog())

        mock_copy.assert_called_once()
        assert (b / "f.txt").read_text() == "x"


class TestSkipOnExists:
    def test_same_name_different_content_not_copied(self, make_tree):
        a = make_tree("a", {"x.txt": "from a"})
        b = make_tree("b", {"x.txt": "from b"})
        log = ActionLog()

        result = TreeSynchronizer().sync(a, b, log)

        assert not log
        assert result.items_skipped == 1
        assert (a / "x.txt").read_text() == "from a"
        assert (b / "x.txt").read_text() == "from b"

    def test_file_where_directory_expected(self, make_tree, listing):
        a = make_tree("a", {"thing": {"inner.txt": "1"}, "zzz.txt": "z"})
        b = make_tree("b", {"thing": "i am a file"})
        log = ActionLog()

        result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert (b / "thing").read_text() == "i am a file"
        # thing/inner.txt is skipped along with thing, without a diagnostic.
        assert result.issues == []
        assert result.items_skipped == 2
        assert listing(b) == {"thing", "zzz.txt"}
        assert log.descriptions() == [
            f"COPIED: {a / 'zzz.txt'} -> {b / 'zzz.txt'}"
        ]

    def test_link_where_directory_expected_not_entered(self, make_tree):
        a = make_tree("a", {"sub": {"f.txt": "1"}})
        elsewhere = make_tree("elsewhere")
        b = make_tree("b")
        os.symlink(elsewhere, b / "sub")

        result = TreeSynchronizer().sync(a, b, ActionLog())

        assert result.issues == []
        assert not (elsewhere / "f.txt").exists()

    def test_dangling_symlink_counts_as_present(self, make_tree):
        a = make_tree("a", {"f.txt": "x"})
        b = make_tree("b")
        os.symlink(b / "nowhere", b / "f.txt")

        log = ActionLog()
        TreeSynchronizer().sync(a, b, log)

        assert not log
        assert (b / "f.txt").is_symlink()


# ---------------------------------------------------------------------------
# Roots
# ---------------------------------------------------------------------------


class TestSourceRoot:
    def test_missing_source_skips_with_warning(
        self, make_tree, tmp_path, listing
    ):
        b = make_tree("b", {"y.txt": "y"})
        log = ActionLog()

        result = TreeSynchronizer().sync(tmp_path / "missing", b, log)

        assert result.state == DirectionState.SKIPPED
        assert [i.kind for i in result.issues] == [IssueKind.SOURCE_UNAVAILABLE]
        assert result.issues[0].severity == "warning"
        assert not log
        assert listing(b) == {"y.txt"}

    def test_source_is_a_file(self, make_tree):
        base = make_tree("base", {"not-a-dir": "x"})
        b = make_tree("b")

        result = TreeSynchronizer().sync(base / "not-a-dir", b, ActionLog())

        assert result.state == DirectionState.SKIPPED


class TestDestinationRoot:
    def test_missing_destination_created_and_logged(self, make_tree, tmp_path):
        a = make_tree("a", {"y.txt": "y"})
        b = tmp_path / "nested" / "b"
        log = ActionLog()

        result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert b.is_dir()
        assert log.descriptions() == [
            f"CREATED DIRECTORY: {b}",
            f"COPIED: {a / 'y.txt'} -> {b / 'y.txt'}",
        ]

    def test_uncreatable_destination_aborts(self, make_tree):
        a = make_tree("a", {"f.txt": "x"})
        blocker = make_tree("base", {"blocker": "file"}) / "blocker"
        log = ActionLog()

        result = TreeSynchronizer().sync(a, blocker / "sub", log)

        assert result.state == DirectionState.ABORTED
        assert [i.kind for i in result.issues] == [
            IssueKind.DESTINATION_CREATION_FAILED
        ]
        assert not log
        assert result.items_seen == 0

    def test_destination_is_a_file(self, make_tree):
        a = make_tree("a", {"f.txt": "x"})
        base = make_tree("base", {"b": "file"})

        result = TreeSynchronizer().sync(a, base / "b", ActionLog())

        assert result.state == DirectionState.ABORTED
        assert "not a directory" in result.issues[0].message

    def test_mkdir_permission_error_aborts(self, make_tree, tmp_path):
        a = make_tree("a", {"f.txt": "x"})

        with patch.object(
            Path,
            "mkdir",
            side_effect=PermissionError(errno.EACCES, "Permission denied"),
        ):
            result = TreeSynchronizer().sync(a, tmp_path / "b", ActionLog())

        assert result.state == DirectionState.ABORTED
        assert "Permission denied" in result.issues[0].message


# ---------------------------------------------------------------------------
# Failures inside the loop
# ---------------------------------------------------------------------------


class TestFailures:
    def test_enumeration_failure_aborts(self, make_tree, listing):
        a = make_tree("a", {"f.txt": "x"})
        b = make_tree("b")
        log = ActionLog()

        with patch(
            "tree_sync.sync.synchronizer.scan_tree",
            side_effect=EnumerationFailed(a, f"Cannot list {a}"),
        ):
            result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.ABORTED
        assert [i.kind for i in result.issues] == [
            IssueKind.ENUMERATION_FAILED
        ]
        assert not log
        assert listing(b) == set()

    def test_item_copy_failure_continues(self, make_tree, listing):
        a = make_tree("a", {"a.txt": "1", "bad.txt": "2", "c.txt": "3"})
        b = make_tree("b")
        log = ActionLog()
        real_copy2 = shutil.copy2

        def flaky_copy(src, dst, *args, **kwargs):
            if Path(src).name == "bad.txt":
                raise OSError(errno.ENOSPC, "No space left on device")
            return real_copy2(src, dst, *args, **kwargs)

        with patch(
            "tree_sync.sync.synchronizer.shutil.copy2", side_effect=flaky_copy
        ):
            result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert listing(b) == {"a.txt", "c.txt"}
        assert len(log) == 2
        assert [i.kind for i in result.issues] == [IssueKind.ITEM_COPY_FAILED]
        assert "No space left on device" in result.issues[0].message
        assert all("bad.txt" not in d for d in log.descriptions())

    def test_directory_copy_failure_skips_descendants(self, make_tree):
        a = make_tree("a", {"sub": {"f.txt": "1"}, "z.txt": "2"})
        b = make_tree("b")
        log = ActionLog()

        with patch(
            "tree_sync.sync.synchronizer.shutil.copytree",
            side_effect=OSError(errno.EIO, "I/O error"),
        ):
            result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        # Reported once for sub; sub/f.txt is not retried.
        assert [i.kind for i in result.issues] == [IssueKind.ITEM_COPY_FAILED]
        assert result.issues[0].path == a / "sub"
        assert not (b / "sub").exists()
        assert (b / "z.txt").read_text() == "2"
        assert log.descriptions() == [
            f"COPIED: {a / 'z.txt'} -> {b / 'z.txt'}"
        ]

    def test_parent_creation_failure_continues(self, make_tree):
        a = make_tree(
            "a", {"sub": {"f.txt": "1", "g.txt": "2"}, "z.txt": "3"}
        )
        b = make_tree("b")
        log = ActionLog()

        # copytree "succeeds" without creating sub, so its children need
        # a parent that cannot be made.
        with patch("tree_sync.sync.synchronizer.shutil.copytree"), patch.object(
            Path,
            "mkdir",
            side_effect=PermissionError(errno.EACCES, "Permission denied"),
        ):
            result = TreeSynchronizer().sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert [i.kind for i in result.issues] == [IssueKind.ITEM_COPY_FAILED]
        assert result.issues[0].path == b / "sub"
        assert "Permission denied" in result.issues[0].message
        assert (b / "z.txt").read_text() == "3"
        assert log.descriptions() == [
            f"COPIED: {a / 'sub'} -> {b / 'sub'}",
            f"COPIED: {a / 'z.txt'} -> {b / 'z.txt'}",
        ]


# ---------------------------------------------------------------------------
# Dry run
# ---------------------------------------------------------------------------


class TestDryRun:
    def test_no_filesystem_changes(self, make_tree, tmp_path):
        a = make_tree("a", {"f.txt": "x", "sub": {"g.txt": "y"}})
        b = tmp_path / "b"
        log = ActionLog()

        result = TreeSynchronizer(dry_run=True).sync(a, b, log)

        assert result.state == DirectionState.DONE
        assert not b.exists()
        assert [e.kind for e in log] == [
            ActionKind.CREATED_DIRECTORY,
            ActionKind.COPIED,
            ActionKind.COPIED,
        ]

    def test_plan_matches_real_run(self, make_tree, tmp_path):
        layout = {"f.txt": "x", "sub": {"g.txt": "y", "deep": {"h": "z"}}}
        a = make_tree("a", layout)
        b = make_tree("b", {"f.txt": "other"})

        planned = ActionLog()
        TreeSynchronizer(dry_run=True).sync(a, b, planned)
        performed = ActionLog()
        TreeSynchronizer().sync(a, b, performed)

        assert planned.descriptions() == performed.descriptions()
        assert performed.descriptions() == [
            f"COPIED: {a / 'sub'} -> {b / 'sub'}"
        ]

    def test_actions_logged_as_planned(self, make_tree, tmp_path, caplog):
        a = make_tree("a", {"f.txt": "x"})
        b = tmp_path / "b"

        with caplog.at_level(logging.INFO, logger="tree_sync.sync.synchronizer"):
            TreeSynchronizer(dry_run=True).sync(a, b, ActionLog())

        messages = [r.getMessage() for r in caplog.records]
        assert f"(dry run) CREATED DIRECTORY: {b}" in messages
        assert f"(dry run) COPIED: {a / 'f.txt'} -> {b / 'f.txt'}" in messages

    def test_real_run_logs_without_prefix(self, make_tree, caplog):
        a = make_tree("a", {"f.txt": "x"})
        b = make_tree("b")

        with caplog.at_level(logging.INFO, logger="tree_sync.sync.synchronizer"):
            TreeSynchronizer().sync(a, b, ActionLog())

        assert all("(dry run)" not in r.getMessage() for r in caplog.records)

    def test_planned_root_read_back_as_empty_source(self, make_tree, tmp_path):
        a = make_tree("a", {"f.txt": "x"})
        b = tmp_path / "b"
        synchronizer = TreeSynchronizer(dry_run=True)
        log = ActionLog()

        synchronizer.sync(a, b, log)
        result = synchronizer.sync(b, a, log)

        assert result.state == DirectionState.DONE
        assert result.issues == []
        assert result.actions == []
        assert not b.exists()
