"""Locate and read ``parambind.toml``.

Lookup order: the file named by ``PARAMBIND_CONFIG``, else the first
``parambind.toml`` in the start directory or one of its parents. When the
env var is set it pins the choice; a dangling path means no config file.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

from parambind.config.models import ParamBindConfig

CONFIG_FILENAME = "parambind.toml"
CONFIG_ENV_VAR = "PARAMBIND_CONFIG"


def _search_dirs(start: Path) -> Iterator[Path]:
    here = start.resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to use, or None when there is none."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    for directory in _search_dirs(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        click.ClickException: The file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> ParamBindConfig:
    """Validate the sections of *path* (or the discovered file) into a config.

    No file at all yields the code defaults.
    """
    path = path or find_config(cwd)
    if path is None:
        return ParamBindConfig()
    return ParamBindConfig.model_validate(read_config_data(path))
