"""MCP server module - FastMCP tool registration and wiring."""

from largefile.mcp.context import AppContext
from largefile.mcp.registry import ToolRegistry, ToolSpec
from largefile.mcp.server import call_tool, create_mcp_server

__all__ = ["AppContext", "ToolRegistry", "ToolSpec", "call_tool", "create_mcp_server"]
