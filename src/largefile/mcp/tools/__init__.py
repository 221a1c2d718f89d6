"""MCP tool handlers."""

from largefile.mcp.tools import cache, files

__all__ = ["cache", "files"]
