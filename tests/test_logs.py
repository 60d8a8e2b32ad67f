"""Tests for the diagnostic logging setup."""

from __future__ import annotations

import logging

from termcrawl.logs import configure_logging, get_logger


def test_stage_loggers_share_the_termcrawl_tree() -> None:
    assert get_logger("fetcher").name == "termcrawl.fetcher"
    assert get_logger("fetcher").parent is logging.getLogger("termcrawl")


def test_configure_logging_installs_one_handler() -> None:
    root = logging.getLogger("termcrawl")
    before = len(root.handlers)

    configure_logging()
    configure_logging(debug=True)

    assert len(root.handlers) == before + 1
    assert root.level == logging.DEBUG


def test_configure_logging_reinstalls_after_removal() -> None:
    root = configure_logging()
    installed = [h for h in root.handlers]
    for handler in installed:
        root.removeHandler(handler)

    configure_logging()

    assert len(root.handlers) == 1
    assert root.level == logging.INFO
