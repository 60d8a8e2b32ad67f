"""Shared fixtures for the termcrawl test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

import pytest


@pytest.fixture(autouse=True)
def _reset_termcrawl_logging():
    """Undo any handler/level installed by ``configure_logging`` during a test."""
    root = logging.getLogger("termcrawl")
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("termcrawl.test")


@pytest.fixture
def write_url_file(tmp_path: Path) -> Callable[[Iterable[str]], Path]:
    """Return a helper that writes a URL CSV (with header row) and returns its path."""

    def _write(urls: Iterable[str], name: str = "urls.csv") -> Path:
        lines = ["Rank,URL"] + [f"{i},{u}" for i, u in enumerate(urls, 1)]
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
