"""Shared pytest fixtures for tree-sync tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def build_tree(root: Path, layout: dict) -> Path:
    """Create files and directories under *root* from a nested dict.

    String values become file contents; dict values become directories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            build_tree(path, value)
        else:
            path.write_text(value, encoding="utf-8")
    return root


def tree_listing(root: Path) -> set[str]:
    """Relative POSIX paths of everything under *root*."""
    return {p.relative_to(root).as_posix() for p in root.rglob("*")}


@pytest.fixture
def make_tree(tmp_path):
    """Factory fixture: ``make_tree("a", {"file.txt": "x"})``."""

    def _make(name: str, layout: dict | None = None) -> Path:
        return build_tree(tmp_path / name, layout or {})

    return _make


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep user config and env vars from leaking into tests."""
    for key in (
        "TREE_SYNC_ROOT_A",
        "TREE_SYNC_ROOT_B",
        "TREE_SYNC_DRY_RUN",
        "TREE_SYNC_PRESERVE_METADATA",
        "TREE_SYNC_CONFIG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def listing():
    """The ``tree_listing`` helper as a fixture."""
    return tree_listing
