"""Shared pytest fixtures for parambind tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from parambind.binder import Binder


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def binder() -> Binder:
    """A fresh binder with an empty plan cache."""
    return Binder()


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path]:
    """Run in an empty temp directory with no config discovery leaks."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PARAMBIND_CONFIG", raising=False)
    yield tmp_path


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler/level changes made by configure_logging during a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    pb = logging.getLogger("parambind")
    pb_level = pb.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    pb.setLevel(pb_level)
