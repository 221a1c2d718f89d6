"""Tests for mcp/server.py module.

Covers:
- ToolResponse model
- _extract_log_params() / _extract_result_summary()
- call_tool() envelopes for success and each failure kind
- create_mcp_server() wiring
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from largefile.mcp.context import AppContext
from largefile.mcp.errors import MCPErrorCode
from largefile.mcp.registry import ToolRegistry
from largefile.mcp.server import (
    ToolResponse,
    _extract_log_params,
    _extract_result_summary,
    call_tool,
    create_mcp_server,
)
from largefile.mcp.tools.base import BaseParams


class TestToolResponse:
    """Tests for ToolResponse model."""

    def test_success_defaults(self) -> None:
        response = ToolResponse(success=True, result={"data": "value"})
        assert response.error is None
        assert response.meta == {}

    def test_model_dump(self) -> None:
        data = ToolResponse(success=False, error="boom").model_dump()
        assert data == {"result": None, "meta": {}, "success": False, "error": "boom"}


class TestExtractLogParams:
    def test_truncates_long_strings(self) -> None:
        params = _extract_log_params("search_in_large_file", {"pattern": "x" * 200})
        assert params["pattern"] == "x" * 80 + "..."

    def test_drops_none(self) -> None:
        params = _extract_log_params("read_large_file_chunk", {"path": "/a", "lines": None})
        assert params == {"path": "/a"}


class TestExtractResultSummary:
    def test_chunk_summary(self) -> None:
        result = {"start_line": 1, "end_line": 5, "total_chunks": 2, "byte_size": 30}
        summary = _extract_result_summary("read_large_file_chunk", result)
        assert summary == {"lines": "1-5", "total_chunks": 2, "byte_size": 30}

    def test_search_summary(self) -> None:
        summary = _extract_result_summary("search_in_large_file", {"total_results": 4})
        assert summary == {"results": 4}

    def test_stream_next_offset(self) -> None:
        summary = _extract_result_summary(
            "stream_large_file", {"total_chunks": 1, "next_offset": 64}
        )
        assert summary["next_offset"] == 64


class TestCallTool:
    """call_tool never raises for tool failures."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, app_context: AppContext, ten_line_file: Path) -> None:
        response = await call_tool(
            app_context,
            "read_large_file_chunk",
            {"path": str(ten_line_file), "lines_per_chunk": 5},
        )
        assert response["success"] is True
        assert response["error"] is None
        assert response["result"]["end_line"] == 5
        assert "request_id" in response["meta"]
        assert isinstance(response["meta"]["timestamp"], int)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, app_context: AppContext) -> None:
        response = await call_tool(app_context, "delete_file", {})
        assert response["success"] is False
        assert response["meta"]["error"]["code"] == MCPErrorCode.UNKNOWN_TOOL.value
        assert "read_large_file_chunk" in response["meta"]["error"]["available_tools"]

    @pytest.mark.asyncio
    async def test_validation_error(self, app_context: AppContext, ten_line_file: Path) -> None:
        response = await call_tool(
            app_context, "read_large_file_chunk", {"path": str(ten_line_file), "chunk_index": -1}
        )
        assert response["success"] is False
        assert response["error"].startswith("Validation error")
        assert response["meta"]["error_type"] == "validation"
        assert response["meta"]["error"]["code"] == MCPErrorCode.INVALID_PARAMS.value
        assert response["meta"]["validation_errors"][0]["field"] == "chunk_index"

    @pytest.mark.asyncio
    async def test_unknown_argument_rejected(
        self, app_context: AppContext, ten_line_file: Path
    ) -> None:
        response = await call_tool(
            app_context, "get_file_structure", {"path": str(ten_line_file), "depth": 2}
        )
        assert response["success"] is False
        assert response["meta"]["error_type"] == "validation"

    @pytest.mark.asyncio
    async def test_mcp_error_carries_code_and_causes(
        self, app_context: AppContext, ten_line_file: Path
    ) -> None:
        response = await call_tool(
            app_context, "navigate_to_line", {"path": str(ten_line_file), "line_number": 0}
        )
        assert response["success"] is False
        error = response["meta"]["error"]
        assert error["code"] == MCPErrorCode.OUT_OF_RANGE.value
        assert error["remediation"]
        assert error["causes"]

    @pytest.mark.asyncio
    async def test_missing_file(self, app_context: AppContext, tmp_path: Path) -> None:
        response = await call_tool(
            app_context, "get_file_summary", {"path": str(tmp_path / "missing.txt")}
        )
        assert response["meta"]["error"]["code"] == MCPErrorCode.NOT_ACCESSIBLE.value

    @pytest.mark.asyncio
    async def test_unexpected_exception(
        self, app_context: AppContext, clean_registry: ToolRegistry
    ) -> None:
        @clean_registry.register("explode", "Always fails", BaseParams)
        async def explode(_ctx: Any, _params: Any) -> dict[str, Any]:
            raise RuntimeError("kaboom")

        response = await call_tool(app_context, "explode", {})
        assert response["success"] is False
        assert response["error"] == "kaboom"
        assert response["meta"]["error"]["code"] == MCPErrorCode.INTERNAL_ERROR.value

    @pytest.mark.asyncio
    async def test_request_id_cleared_after_call(
        self, app_context: AppContext, ten_line_file: Path
    ) -> None:
        from largefile.core.logging import get_request_id

        await call_tool(app_context, "get_file_structure", {"path": str(ten_line_file)})
        assert get_request_id() is None


class TestCreateMcpServer:
    """Tests for create_mcp_server function."""

    def test_server_name_from_config(self, app_context: AppContext) -> None:
        mcp = create_mcp_server(app_context)
        assert mcp.name == "large-file-mcp"

    def test_wires_every_registered_tool(self, app_context: AppContext) -> None:
        with patch("largefile.mcp.server._wire_tool") as wire:
            create_mcp_server(app_context)
        wired = {call.args[1].name for call in wire.call_args_list}
        assert wired == {
            "read_large_file_chunk",
            "search_in_large_file",
            "get_file_structure",
            "navigate_to_line",
            "get_file_summary",
            "stream_large_file",
            "cache_stats",
        }
