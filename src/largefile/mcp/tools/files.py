"""File MCP tools - chunk, search, structure, navigation, summary, stream.

Chunk reads and structure analysis are served through the router's caches;
the other tools read from disk on every call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, model_validator

from largefile.config.constants import (
    LINES_PER_CHUNK_MAX,
    NAVIGATE_CONTEXT_LINES_MAX,
    SEARCH_CONTEXT_LINES_MAX,
    SEARCH_MAX_RESULTS,
    STREAM_CHUNK_BYTES_MAX,
    STREAM_MAX_CHUNKS,
)
from largefile.core.formatting import compress_path, format_bytes, pluralize
from largefile.files import SearchOptions
from largefile.mcp.registry import registry
from largefile.mcp.tools.base import FileParams

if TYPE_CHECKING:
    from largefile.mcp.context import AppContext


# =============================================================================
# Parameter Models
# =============================================================================


class ReadChunkParams(FileParams):
    """Parameters for read_large_file_chunk."""

    chunk_index: int = Field(0, ge=0, description="Zero-based chunk index")
    lines_per_chunk: int | None = Field(
        None,
        gt=0,
        le=LINES_PER_CHUNK_MAX,
        description="Lines per chunk; auto-selected by file type if omitted",
    )
    include_line_numbers: bool = Field(False, description="Prefix lines with their number")


class SearchParams(FileParams):
    """Parameters for search_in_large_file."""

    pattern: str = Field(..., min_length=1, description="Text or regular expression")
    case_sensitive: bool = Field(False, description="Match case exactly")
    regex: bool = Field(False, description="Treat pattern as a regular expression")
    max_results: int | None = Field(
        None, gt=0, le=SEARCH_MAX_RESULTS, description="Stop after this many matching lines"
    )
    context_before: int = Field(2, ge=0, le=SEARCH_CONTEXT_LINES_MAX)
    context_after: int = Field(2, ge=0, le=SEARCH_CONTEXT_LINES_MAX)
    start_line: int | None = Field(None, gt=0, description="First line to search (1-indexed)")
    end_line: int | None = Field(None, gt=0, description="Last line to search (inclusive)")

    @model_validator(mode="after")
    def validate_range(self) -> SearchParams:
        if (
            self.start_line is not None
            and self.end_line is not None
            and self.end_line < self.start_line
        ):
            raise ValueError(
                f"end_line ({self.end_line}) must be >= start_line ({self.start_line})"
            )
        return self


class StructureParams(FileParams):
    """Parameters for get_file_structure and get_file_summary."""


class NavigateParams(FileParams):
    """Parameters for navigate_to_line."""

    line_number: int = Field(..., description="Line to jump to (1-indexed)")
    context_lines: int | None = Field(
        None,
        ge=0,
        le=NAVIGATE_CONTEXT_LINES_MAX,
        description="Lines before and after the target (server default if omitted)",
    )


class StreamParams(FileParams):
    """Parameters for stream_large_file."""

    chunk_size: int | None = Field(
        None, gt=0, le=STREAM_CHUNK_BYTES_MAX, description="Bytes per streamed chunk"
    )
    start_offset: int = Field(0, ge=0, description="First byte to read")
    max_bytes: int | None = Field(None, gt=0, description="Stop after this many bytes")
    max_chunks: int | None = Field(
        None, gt=0, le=STREAM_MAX_CHUNKS, description="Maximum chunks to return"
    )


# =============================================================================
# Tool Handlers
# =============================================================================


@registry.register(
    "read_large_file_chunk",
    "Read one chunk of a large file. Chunk size is picked from the file type unless "
    "lines_per_chunk is given; chunks after the first repeat the previous chunk's last lines.",
    ReadChunkParams,
)
async def read_large_file_chunk(ctx: AppContext, params: ReadChunkParams) -> dict[str, Any]:
    chunk = ctx.router.read_chunk(
        params.path,
        params.chunk_index,
        lines_per_chunk=params.lines_per_chunk,
        include_line_numbers=params.include_line_numbers,
    )
    return {
        **chunk.to_dict(),
        "summary": (
            f"chunk {chunk.chunk_index + 1}/{chunk.total_chunks} of "
            f"{compress_path(chunk.file_path)}, lines {chunk.start_line}-{chunk.end_line}"
        ),
    }


@registry.register(
    "search_in_large_file",
    "Search a large file for text or a regular expression, with context lines around each hit.",
    SearchParams,
)
async def search_in_large_file(ctx: AppContext, params: SearchParams) -> dict[str, Any]:
    options = SearchOptions(
        case_sensitive=params.case_sensitive,
        regex=params.regex,
        max_results=params.max_results or ctx.config.limits.search_max_results,
        context_before=params.context_before,
        context_after=params.context_after,
        start_line=params.start_line,
        end_line=params.end_line,
    )
    matches = ctx.router.search(params.path, params.pattern, options)
    return {
        "total_results": len(matches),
        "results": [m.to_dict() for m in matches],
        "summary": f"{pluralize(len(matches), 'match', 'matches')} in {compress_path(params.path)}",
    }


@registry.register(
    "get_file_structure",
    "Analyze a file: metadata, line statistics, recommended chunk size and sample lines "
    "from the start and end.",
    StructureParams,
)
async def get_file_structure(ctx: AppContext, params: StructureParams) -> dict[str, Any]:
    structure = ctx.router.get_structure(params.path)
    meta = structure.metadata
    return {
        **structure.to_dict(),
        "summary": (
            f"{compress_path(meta.path)}: {pluralize(meta.total_lines, 'line')}, "
            f"{meta.size_formatted}, {pluralize(structure.estimated_chunks, 'chunk')}"
        ),
    }


@registry.register(
    "navigate_to_line",
    "Jump to a line in a large file and show the lines around it, marking the target line.",
    NavigateParams,
)
async def navigate_to_line(ctx: AppContext, params: NavigateParams) -> dict[str, Any]:
    chunk = ctx.router.navigate_to_line(params.path, params.line_number, params.context_lines)
    return {
        **chunk.to_dict(),
        "summary": (
            f"line {params.line_number} of {chunk.total_lines} in {compress_path(params.path)}"
        ),
    }


@registry.register(
    "get_file_summary",
    "Statistical summary of a file: line, character and word counts.",
    StructureParams,
)
async def get_file_summary(ctx: AppContext, params: StructureParams) -> dict[str, Any]:
    summary = ctx.router.get_summary(params.path)
    return {
        **summary.to_dict(),
        "summary": (
            f"{compress_path(params.path)}: {pluralize(summary.line_stats.total, 'line')}, "
            f"{pluralize(summary.char_stats.total, 'char')}"
        ),
    }


@registry.register(
    "stream_large_file",
    "Stream a byte range of a large file in chunks. Use next_offset to continue.",
    StreamParams,
)
async def stream_large_file(ctx: AppContext, params: StreamParams) -> dict[str, Any]:
    window = ctx.router.stream_file(
        params.path,
        chunk_size_bytes=params.chunk_size,
        start_offset=params.start_offset,
        max_bytes=params.max_bytes,
        max_chunks=params.max_chunks or ctx.config.limits.stream_max_chunks,
    )
    chunks = window.chunks
    bytes_read = sum(c.byte_size for c in chunks)
    return {
        "total_chunks": len(chunks),
        "chunks": [c.content for c in chunks],
        "next_offset": window.next_offset,
        "note": (
            "All chunks returned."
            if window.exhausted
            else "Reached max_chunks limit. "
            "Increase max_chunks or pass next_offset as start_offset."
        ),
        "summary": f"{pluralize(len(chunks), 'chunk')}, {format_bytes(bytes_read)}",
    }
