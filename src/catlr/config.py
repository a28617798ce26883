"""User configuration: external tree and file printing commands."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_ENV = "CATLR_CONFIG"
DEFAULT_TREE_COMMAND = "tree"
DEFAULT_FILE_COMMAND = "bat"

_KEYS = {
    "treePrintCommand": "tree_command",
    "filePrintCommand": "file_command",
}


@dataclass(frozen=True, slots=True)
class Config:
    """External commands used to draw trees and print files."""

    tree_command: str = DEFAULT_TREE_COMMAND
    file_command: str = DEFAULT_FILE_COMMAND


def default_config_path() -> Path | None:
    """Return the configuration file location.

    ``$CATLR_CONFIG`` wins; otherwise ``~/.config/catlr/catlr.conf``.
    Returns ``None`` when no home directory can be determined.
    """
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    try:
        home = Path.home()
    except RuntimeError:
        return None
    return home / ".config" / "catlr" / "catlr.conf"


def parse_config_text(text: str) -> Config:
    """Parse ``key = value`` lines into a :class:`Config`.

    Blank lines, ``#`` comments, lines without ``=`` and unknown keys are
    ignored. Empty values keep the default.
    """
    values: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        field_name = _KEYS.get(key.strip())
        if field_name is None:
            logger.debug("Unknown config key: %s", key.strip())
            continue
        if value.strip():
            values[field_name] = value.strip()
    return Config(**values)


def load_config(path: Path | None = None) -> Config:
    """Load configuration, falling back to defaults.

    Args:
        path: Config file to read. Defaults to :func:`default_config_path`.

    Returns:
        Config: Parsed configuration, or defaults when the file is absent
        or unreadable.
    """
    config_path = path if path is not None else default_config_path()
    if config_path is None:
        return Config()
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("No readable config at %s, using defaults", config_path)
        return Config()
    return parse_config_text(text)
