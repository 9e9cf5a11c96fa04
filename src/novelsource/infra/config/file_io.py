"""
Locating, parsing and bootstrapping settings files.

A settings file is a TOML or JSON document whose root is a table. The file
is resolved in this order:

1. the path passed to :func:`load_config`;
2. the path in the ``NOVELSOURCE_CONFIG`` environment variable;
3. ``settings.toml`` or ``settings.json`` in the working directory;
4. the same names in the per-user config directory.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

from novelsource.infra.paths import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAMES,
    SAMPLE_CONFIG,
    USER_CONFIG_DIR,
)

logger = logging.getLogger(__name__)


def _parse_toml(path: Path) -> Any:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _parse_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e


_PARSERS: dict[str, Callable[[Path], Any]] = {
    ".toml": _parse_toml,
    ".json": _parse_json,
}


def find_config_file(config_path: str | Path | None = None) -> Path | None:
    """Returns the settings file that :func:`load_config` would read.

    An explicit path, from the argument or the environment, is final: when
    it does not exist a warning is logged and None is returned rather than
    falling back to another file.
    """
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser().resolve()
        if path.is_file():
            return path
        logger.warning("Specified config file not found: %s", path)
        return None

    for directory in (Path.cwd(), USER_CONFIG_DIR):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Found config file: %s", candidate)
                return candidate.resolve()
    return None


def parse_config_file(path: Path) -> dict[str, Any]:
    """Parses a ``.toml`` or ``.json`` settings file.

    Raises:
        ValueError: If the extension is unsupported, parsing fails, or the
            root element is not a table/object.
    """
    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ValueError(f"Unsupported config file extension: {path.suffix}")

    data = parser(path)
    if not isinstance(data, dict):
        raise ValueError(
            f"Config root must be a table, got {type(data).__name__} in {path}"
        )
    return data


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Loads the settings mapping.

    Args:
        config_path: Optional explicit settings file.

    Raises:
        FileNotFoundError: If no settings file is found.
        ValueError: If the file cannot be parsed.
    """
    path = find_config_file(config_path)
    if path is None:
        raise FileNotFoundError("No valid config file found.")

    logger.debug("Loading configuration from: %s", path)
    return parse_config_file(path)


def copy_default_config(
    target: str | Path | None = None,
    *,
    overwrite: bool = False,
) -> Path:
    """Writes the bundled sample settings and returns where they went.

    Args:
        target: Destination file; defaults to ``settings.toml`` in the
            per-user config directory.
        overwrite: Replace an existing file instead of raising.

    Raises:
        FileExistsError: If ``target`` exists and ``overwrite`` is false.
    """
    dest = Path(target) if target else USER_CONFIG_DIR / CONFIG_FILENAMES[0]
    if dest.exists() and not overwrite:
        raise FileExistsError(f"Config file already exists: {dest}")

    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(SAMPLE_CONFIG.read_bytes())
    logger.info("Default configuration written to: %s", dest)
    return dest
