"""Recursive enumeration of a root directory into ``TreeItem`` records."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import EnumerationFailed
from .models import TreeItem

logger = logging.getLogger(__name__)


def scan_tree(root: Path) -> list[TreeItem]:
    """Enumerate every file and directory below *root*.

    The walk is top-down, so a directory always precedes its
    descendants.  Entries are sorted by name within each directory.
    Symlinks are reported as non-directory items and never followed.

    Args:
        root: Absolute path of an existing directory.

    Returns:
        All items under *root* (the root itself is not included).

    Raises:
        EnumerationFailed: If any directory in the tree cannot be listed.
    """

    def _on_error(exc: OSError) -> None:
        failed = exc.filename or root
        raise EnumerationFailed(
            failed, f"Cannot list {failed}: {exc.strerror or exc}"
        ) from exc

    items: list[TreeItem] = []
    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_on_error, followlinks=False
    ):
        dirnames.sort()
        current = Path(dirpath)

        for name in dirnames:
            path = current / name
            items.append(
                TreeItem(
                    full_path=path,
                    root=root,
                    is_directory=not path.is_symlink(),
                )
            )
        for name in sorted(filenames):
            items.append(
                TreeItem(
                    full_path=current / name,
                    root=root,
                    is_directory=False,
                )
            )

    # Component-wise order: parents before children, deterministic output.
    items.sort(key=lambda item: item.relative_path.parts)
    logger.debug("Scanned %d items under %s", len(items), root)
    return items
