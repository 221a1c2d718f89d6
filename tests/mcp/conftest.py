"""Shared fixtures for MCP tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

import largefile.mcp.tools  # noqa: F401  # registers tools before any test clears the registry
from largefile.config.loader import load_config
from largefile.config.models import LargeFileConfig
from largefile.mcp.context import AppContext
from largefile.mcp.registry import ToolRegistry, registry


@pytest.fixture
def clean_registry() -> Generator[ToolRegistry, None, None]:
    """Clear and yield the global registry, restore after test."""
    # Store existing registrations
    original_tools = dict(registry._tools)
    registry.clear()
    yield registry
    # Restore
    registry._tools = original_tools


@pytest.fixture
def config() -> LargeFileConfig:
    return load_config()


@pytest.fixture
def app_context(config: LargeFileConfig) -> AppContext:
    """A real context over fresh caches."""
    return AppContext.create(config)
