"""Runtime configuration for the tree-sync CLI.

Resolves the two roots and the ambient settings from CLI args,
environment variables, a .env file and the YAML config file.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    TREE_SYNC_ROOT_A: First root (absolute path)
    TREE_SYNC_ROOT_B: Second root (absolute path)
    TREE_SYNC_DRY_RUN: Plan only, do not copy (optional, default: false)
    TREE_SYNC_PRESERVE_METADATA: Preserve timestamps/mode bits (optional, default: true)
    TREE_SYNC_CONFIG: Explicit YAML config file path (see config_loader)

The sync core itself never reads any of these; it is handed resolved
roots.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .config_schema import UnifiedConfig
from .validators import validate_roots

logger = logging.getLogger(__name__)


@dataclass
class Config:
    root_a: Path
    root_b: Path
    dry_run: bool = False
    preserve_metadata: bool = True
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None
    log_format: str = "text"


def get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.strip().lower() in ("true", "1", "yes", "on")


def _resolve_bool(cli_value: bool | None, env_key: str, fallback: bool) -> bool:
    if cli_value is not None:
        return cli_value
    env_value = get_bool_env(env_key)
    if env_value is not None:
        return env_value
    return fallback


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Raises:
        ValueError: If a root is empty or relative, the roots overlap, or
            the log format is unknown.
    """
    config.root_a, config.root_b = validate_roots(
        str(config.root_a), str(config.root_b)
    )

    if config.log_format not in ("text", "json"):
        raise ValueError(
            f"Invalid log format '{config.log_format}': must be 'text' or 'json'"
        )

    if config.dry_run:
        logger.debug("Dry run enabled: no files will be copied")


def load_config(
    root_a: str | None = None,
    root_b: str | None = None,
    dry_run: bool | None = None,
    preserve_metadata: bool | None = None,
    debug: bool = False,
    log_file: str | None = None,
    log_format: str | None = None,
    unified: UnifiedConfig | None = None,
) -> Config:
    """Load configuration with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` first so .env
    values are visible through ``os.getenv()``.

    Args:
        root_a: Root A from the command line.
        root_b: Root B from the command line.
        dry_run: CLI flag; ``None`` when not given.
        preserve_metadata: CLI flag; ``None`` when not given.
        debug: Enable debug logging (CLI flag).
        log_file: Log file path from the command line.
        log_format: Log format from the command line.
        unified: Parsed YAML config, used as the fallback layer.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If a root is missing after checking all sources, or
            fails validation.
    """
    fb = unified or UnifiedConfig()

    final_root_a = root_a or os.getenv("TREE_SYNC_ROOT_A") or fb.roots.a
    if not final_root_a:
        raise ValueError(
            "Root A not found. Pass it as the first argument, set "
            "TREE_SYNC_ROOT_A, or add 'roots.a' to config.yml."
        )

    final_root_b = root_b or os.getenv("TREE_SYNC_ROOT_B") or fb.roots.b
    if not final_root_b:
        raise ValueError(
            "Root B not found. Pass it as the second argument, set "
            "TREE_SYNC_ROOT_B, or add 'roots.b' to config.yml."
        )

    config = Config(
        root_a=Path(final_root_a.strip()),
        root_b=Path(final_root_b.strip()),
        dry_run=_resolve_bool(dry_run, "TREE_SYNC_DRY_RUN", fb.sync.dry_run),
        preserve_metadata=_resolve_bool(
            preserve_metadata,
            "TREE_SYNC_PRESERVE_METADATA",
            fb.sync.preserve_metadata,
        ),
        debug=debug,
        log_level=fb.logging.level,
        log_file=log_file or fb.logging.file,
        log_format=log_format or fb.logging.format,
    )

    validate_config(config)

    return config
