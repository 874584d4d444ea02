"""Collaborator interfaces around the sync core.

The core never picks folders or prints anything itself.  A front end
supplies roots through a ``RootSelector`` and receives the finished
``SyncReport`` through a ``Reporter``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .sync.models import SyncReport


@runtime_checkable
class RootSelector(Protocol):
    """Source of the two roots to reconcile."""

    def select_roots(self) -> tuple[str, str]: ...


@runtime_checkable
class Reporter(Protocol):
    """Sink for a finished sync report."""

    def report(self, report: SyncReport) -> None: ...


class StaticRootSelector:
    """Root selector over a fixed, already-resolved pair of paths."""

    def __init__(self, root_a: str, root_b: str) -> None:
        self.root_a = root_a
        self.root_b = root_b

    def select_roots(self) -> tuple[str, str]:
        return self.root_a, self.root_b
