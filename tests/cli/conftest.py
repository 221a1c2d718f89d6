"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _reset_root_handlers() -> Generator[None, None, None]:
    """The CLI points logging at the runner's streams; drop them afterwards."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
