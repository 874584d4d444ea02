"""Root-prefix path mapper.

Translates an absolute path under a source root into the corresponding
absolute path under a destination root.

Mapping is structural, not textual: the item path is made relative to
the source root component-by-component and the remainder is joined onto
the destination root.  A root name that recurs deeper in the item path
(``/data/x/data/f.txt`` under ``/data``) is therefore left untouched, and
trailing separators on either root make no difference.

Everything here is pure: no filesystem access.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from .errors import PathMappingError


def map_path(
    source_root: PurePath | str,
    destination_root: PurePath | str,
    item_path: PurePath | str,
) -> Path:
    """Map *item_path* from under *source_root* to under *destination_root*.

    Args:
        source_root: Absolute root the item was discovered under.
        destination_root: Absolute root to map onto.
        item_path: Absolute path equal to or below *source_root*.

    Returns:
        The absolute destination path.

    Raises:
        PathMappingError: If a root is relative or *item_path* is not
            under *source_root*.
    """
    return PathMapper(source_root, destination_root).map(item_path)


class PathMapper:
    """Map paths from one root onto another.

    Args:
        source_root: Absolute source root.
        destination_root: Absolute destination root.
    """

    def __init__(
        self,
        source_root: PurePath | str,
        destination_root: PurePath | str,
    ) -> None:
        self.source_root = self._absolute(source_root, "Source root")
        self.destination_root = self._absolute(
            destination_root, "Destination root"
        )

    def relative(self, item_path: PurePath | str) -> PurePath:
        """Return *item_path* relative to the source root."""
        item = PurePath(item_path)
        try:
            return item.relative_to(self.source_root)
        except ValueError:
            raise PathMappingError(
                item,
                f"{item} is not under source root {self.source_root}",
            ) from None

    def map(self, item_path: PurePath | str) -> Path:
        """Return the destination path for *item_path*."""
        rel = self.relative(item_path)
        if rel == PurePath("."):
            return self.destination_root
        return self.destination_root / rel

    def reverse(self) -> PathMapper:
        """Mapper for the opposite direction."""
        return PathMapper(self.destination_root, self.source_root)

    @staticmethod
    def _absolute(root: PurePath | str, label: str) -> Path:
        if not str(root):
            raise PathMappingError(root, f"{label} cannot be empty")
        path = Path(root)
        if not path.is_absolute():
            raise PathMappingError(path, f"{label} must be absolute: {path}")
        return path
