"""Configuration schema for tree_sync.

Pydantic models for the YAML config file, with one section per concern:
which roots to reconcile, how to copy, and how to log.  Every section has
defaults, so an empty or missing file is valid.

Usage:
    from tree_sync.config_loader import load_hierarchical_config
    from tree_sync.config_schema import build_config

    unified = build_config(load_hierarchical_config())
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class RootsConfig(BaseModel):
    """The two roots of a sync pair.

    Both are optional: the CLI positional arguments or environment
    variables can supply them instead.
    """

    a: str | None = Field(default=None, description="Root A (absolute)")
    b: str | None = Field(default=None, description="Root B (absolute)")

    model_config = {"frozen": True}


class SyncOptionsConfig(BaseModel):
    """Copy behaviour.

    Attributes:
        preserve_metadata: Copy timestamps and mode bits with content.
        dry_run: Plan actions without touching either tree.
    """

    preserve_metadata: bool = Field(
        default=True,
        description="Preserve timestamps and permission bits when copying",
    )
    dry_run: bool = Field(
        default=False, description="Report planned actions only"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log record format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration; ``UnifiedConfig()`` is always valid."""

    roots: RootsConfig = Field(default_factory=RootsConfig)
    sync: SyncOptionsConfig = Field(default_factory=SyncOptionsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged raw YAML dict.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a section has invalid values.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
