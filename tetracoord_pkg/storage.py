"""Persistent data files for the command line driver.

This module provides:
- JSON data file loading with validation
- Atomic saving (write to temp file then rename)
- Loading and saving a variable context wrapped in the CLI data file format
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .logging_config import get_logger
from .types import LoadError
from .variable_context import VariableContext

logger = get_logger("storage")

CLI_DATA_TYPE = "tcoord-cli"


def load_file(path: str | Path) -> dict[str, Any] | None:
    """Read a JSON object from ``path``.

    Returns:
        Parsed object, or None if the file does not exist

    Raises:
        LoadError: If the file cannot be read or is not a JSON object
    """
    data_file = Path(path)
    if not data_file.exists():
        logger.info(f"Data file {data_file} does not exist")
        return None
    try:
        with open(data_file, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Failed to read {data_file}: {e}", "FILE_READ_ERROR", str(data_file)) from e
    if not isinstance(data, dict):
        raise LoadError(
            f"Data file {data_file} does not contain a JSON object",
            "MALFORMED_DATA",
            str(data_file),
        )
    logger.debug(f"Loaded data file {data_file}")
    return data


def save_file(path: str | Path, data: dict[str, Any]) -> None:
    """Write ``data`` as JSON to ``path`` atomically.

    Raises:
        LoadError: If the file cannot be written
    """
    data_file = Path(path)
    temp_file = data_file.with_name(data_file.name + ".tmp")
    try:
        data_file.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        temp_file.replace(data_file)
    except (OSError, TypeError, ValueError) as e:
        raise LoadError(f"Failed to write {data_file}: {e}", "FILE_WRITE_ERROR", str(data_file)) from e
    logger.debug(f"Saved data file {data_file}")


def load_context(path: str | Path, var_ctx: VariableContext) -> bool:
    """Merge the variable context saved at ``path`` into ``var_ctx``.

    Returns:
        True if a saved context was found and loaded

    Raises:
        LoadError: If the file is unreadable or malformed
    """
    data = load_file(path)
    if data is None:
        return False
    if data.get("type") != CLI_DATA_TYPE or "var" not in data:
        raise LoadError(
            f"Data file {path} is not a {CLI_DATA_TYPE} file", "MALFORMED_DATA", str(path)
        )
    try:
        var_ctx.load(data["var"])
    except LoadError as e:
        if e.path is None:
            e.path = str(path)
        raise
    logger.info(f"Loaded {len(var_ctx)} variables from {path}")
    return True


def save_context(path: str | Path, var_ctx: VariableContext) -> None:
    save_file(path, {"type": CLI_DATA_TYPE, "var": var_ctx.save()})
    logger.info(f"Saved {len(var_ctx)} variables to {path}")
