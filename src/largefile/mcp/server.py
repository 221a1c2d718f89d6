"""FastMCP server creation and wiring.

Includes two-phase tool logging: tool_start with params, tool_complete with
a summary. Expected failures log a warning; unexpected ones log an error
with the traceback at DEBUG.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.utilities.json_schema import dereference_refs
from pydantic import BaseModel, Field, ValidationError

from largefile.core.logging import clear_request_id, set_request_id
from largefile.mcp.errors import MCPError, MCPErrorCode, get_error_documentation

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from largefile.config.models import LargeFileConfig
    from largefile.mcp.context import AppContext
    from largefile.mcp.registry import ToolSpec

log = structlog.get_logger(__name__)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    success: bool
    error: str | None = None


def _extract_log_params(_tool_name: str, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Extract relevant parameters for logging.

    Truncates long strings (search patterns can be large) and drops Nones.
    """
    params: dict[str, Any] = {}

    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 80:
            params[key] = value[:80] + "..."
        elif value is not None:
            params[key] = value

    return params


def _extract_result_summary(tool_name: str, result: dict[str, Any]) -> dict[str, Any]:
    """Extract summary metrics from tool result for logging."""
    summary: dict[str, Any] = {}

    if "total_results" in result:
        summary["results"] = result["total_results"]
    if "total_chunks" in result:
        summary["total_chunks"] = result["total_chunks"]
    if "byte_size" in result:
        summary["byte_size"] = result["byte_size"]
    if "start_line" in result and "end_line" in result:
        summary["lines"] = f"{result['start_line']}-{result['end_line']}"

    if tool_name == "stream_large_file" and "next_offset" in result:
        summary["next_offset"] = result["next_offset"]
    elif tool_name == "get_file_structure" and "estimated_chunks" in result:
        summary["estimated_chunks"] = result["estimated_chunks"]

    return summary


def _failure(error: str, meta: dict[str, Any]) -> dict[str, Any]:
    return ToolResponse(success=False, result=None, error=error, meta=meta).model_dump()


async def call_tool(context: AppContext, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a named tool call and wrap the outcome in a ToolResponse.

    Never raises for tool failures: validation errors, MCPErrors and
    unexpected exceptions all come back as a failed envelope.
    """
    from largefile.mcp.registry import registry

    # Import tools to trigger registration
    from largefile.mcp.tools import cache, files  # noqa: F401

    spec = registry.get(name)
    if spec is None:
        log.warning("tool_unknown", tool=name)
        return _failure(
            f"Unknown tool: {name}",
            {
                "error": {
                    "code": MCPErrorCode.UNKNOWN_TOOL.value,
                    "available_tools": registry.names(),
                }
            },
        )
    return await _run_tool(context, spec, arguments)


async def _run_tool(context: AppContext, spec: ToolSpec, kwargs: dict[str, Any]) -> dict[str, Any]:
    tool_name = spec.name
    request_id = set_request_id()
    start_time = time.perf_counter()

    log.info("tool_start", tool=tool_name, **_extract_log_params(tool_name, kwargs))

    try:
        try:
            params = spec.params_model(**kwargs)
        except ValidationError as e:
            # User input error - no traceback needed
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            first = e.errors()[0]["msg"] if e.errors() else str(e)
            log.warning(
                "tool_validation_error", tool=tool_name, error=first, elapsed_ms=elapsed_ms
            )
            return _failure(
                f"Validation error: {first}",
                {
                    "error_type": "validation",
                    "error": {"code": MCPErrorCode.INVALID_PARAMS.value},
                    "validation_errors": [
                        {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                        for err in e.errors()[:5]
                    ],
                },
            )

        try:
            result_data: dict[str, Any] = await spec.handler(context, params)
        except MCPError as e:
            # Expected error - log warning, no traceback
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=e.code.value,
                error=e.message,
                path=e.path,
                elapsed_ms=elapsed_ms,
            )
            error = e.to_response().to_dict()
            doc = get_error_documentation(e.code.value)
            if doc is not None:
                error["causes"] = doc.causes
            return _failure(e.message, {"request_id": request_id, "error": error})
        except Exception as e:
            # Internal error - summary at ERROR, traceback at DEBUG
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            log.error("tool_internal_error", tool=tool_name, error=str(e), elapsed_ms=elapsed_ms)
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            return _failure(
                str(e),
                {
                    "request_id": request_id,
                    "error": {"code": MCPErrorCode.INTERNAL_ERROR.value},
                },
            )

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        log.info(
            "tool_complete",
            tool=tool_name,
            elapsed_ms=elapsed_ms,
            **_extract_result_summary(tool_name, result_data),
        )
        return ToolResponse(
            success=True,
            result=result_data,
            meta={"request_id": request_id, "timestamp": int(time.time() * 1000)},
        ).model_dump()
    finally:
        clear_request_id()


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext holding the router and caches

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from largefile.mcp.registry import registry

    # Import tools to trigger registration
    from largefile.mcp.tools import cache, files  # noqa: F401

    log.info("mcp_server_creating", name=context.config.server.name)

    mcp = FastMCP(
        context.config.server.name,
        instructions=(
            "Read, search and navigate text files too large to load whole. "
            "Start with get_file_structure, then read chunks or search."
        ),
    )

    tool_count = 0
    for spec in registry.get_all():
        _wire_tool(mcp, spec, context)
        tool_count += 1

    log.info("mcp_server_created", tool_count=tool_count)

    return mcp


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Wire a single tool spec to FastMCP.

    Creates a handler function with the params model's fields as direct
    parameters, ensuring FastMCP generates a flat schema compatible with
    all MCP clients.
    """
    from fastmcp.tools.tool import FunctionTool

    raw_schema = spec.params_model.model_json_schema()
    flat_schema = dereference_refs(raw_schema)

    async def handler(**kwargs: Any) -> dict[str, Any]:
        return await _run_tool(context, spec, kwargs)

    tool = FunctionTool(
        name=spec.name,
        description=spec.description,
        parameters=flat_schema,
        fn=handler,
    )

    mcp.add_tool(tool)


def run_server(config: LargeFileConfig) -> None:
    """Create and run the MCP server on the configured transport."""
    from largefile.core.logging import configure_logging
    from largefile.mcp.context import AppContext

    configure_logging(config=config.logging)

    server = config.server
    log.info(
        "mcp_server_starting",
        transport=server.transport,
        cache_enabled=config.cache.enabled,
        cache_max_size_bytes=config.cache.max_size_bytes,
        cache_ttl_ms=config.cache.ttl_ms,
    )

    context = AppContext.create(config)
    mcp = create_mcp_server(context)

    log.info("mcp_server_running")
    if server.transport == "http":
        mcp.run(transport="http", host=server.host, port=server.port)
    else:
        mcp.run()
