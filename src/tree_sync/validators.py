"""
Input validation for sync roots.

Roots must be non-empty, syntactically valid absolute paths, and a pair
must not overlap: with one root nested in the other, every run would copy
the tree one level deeper.  Whether roots exist is checked later by the
synchronizer, not here.
"""

import os
from pathlib import Path


class InvalidRootError(ValueError):
    """A root path failed syntactic validation."""


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Root A")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_root(path_str: str | None, field_name: str = "Root") -> Path:
    """
    Validate one sync root.

    Args:
        path_str: The root path as given by the user or config.
        field_name: Label used in error messages.

    Returns:
        The root as a ``Path``, with ``~`` expanded.

    Raises:
        InvalidRootError: If the path is empty, contains a NUL byte, or
            is not absolute.
    """
    if not path_str or not path_str.strip():
        raise InvalidRootError(
            format_validation_error(field_name, "cannot be empty")
        )

    if "\x00" in path_str:
        raise InvalidRootError(
            format_validation_error(field_name, "cannot contain NUL bytes")
        )

    path = Path(path_str.strip()).expanduser()
    if not path.is_absolute():
        raise InvalidRootError(
            format_validation_error(
                field_name, f"must be an absolute path: {path_str}"
            )
        )

    return path


def validate_roots(root_a: str | None, root_b: str | None) -> tuple[Path, Path]:
    """
    Validate both roots of a sync pair.

    Raises:
        InvalidRootError: If either root is invalid, both are the same
            path, or one lies inside the other.
    """
    a = validate_root(root_a, "Root A")
    b = validate_root(root_b, "Root B")
    # Compare normalized forms so "/data/./a" and "/data/b/.." are caught.
    norm_a = Path(os.path.normpath(a))
    norm_b = Path(os.path.normpath(b))
    if norm_a == norm_b:
        raise InvalidRootError(
            format_validation_error("Root B", f"must differ from Root A ({a})")
        )
    if norm_b.is_relative_to(norm_a):
        raise InvalidRootError(
            format_validation_error("Root B", f"cannot be inside Root A ({a})")
        )
    if norm_a.is_relative_to(norm_b):
        raise InvalidRootError(
            format_validation_error("Root A", f"cannot be inside Root B ({b})")
        )
    return a, b
