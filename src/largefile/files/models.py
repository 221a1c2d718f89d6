"""Result and option types for large file reads.

Results are plain dataclasses with to_dict() for the wire. Options are
pydantic models that reject unknown fields and out-of-range values at the
boundary, before any file is opened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FileType(StrEnum):
    """Coarse content class, derived from the file extension."""

    TEXT = "text"
    CODE = "code"
    LOG = "log"
    CSV = "csv"
    JSON = "json"
    XML = "xml"
    MARKDOWN = "markdown"
    BINARY = "binary"
    UNKNOWN = "unknown"


# =============================================================================
# Options
# =============================================================================


class ChunkOptions(BaseModel):
    """Options for a chunk read."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lines_per_chunk: int | None = Field(
        default=None, gt=0, description="Lines per chunk; auto-selected by file type if unset"
    )
    overlap_lines: int = Field(
        default=10, ge=0, description="Lines repeated from the end of the previous chunk"
    )
    include_line_numbers: bool = Field(
        default=False, description="Prefix each line with '<number>: '"
    )


class SearchOptions(BaseModel):
    """Options for a pattern search."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    case_sensitive: bool = False
    regex: bool = False
    max_results: int = Field(default=100, gt=0)
    context_before: int = Field(default=2, ge=0)
    context_after: int = Field(default=2, ge=0)
    start_line: int | None = Field(default=None, gt=0)
    end_line: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_range(self) -> SearchOptions:
        if (
            self.start_line is not None
            and self.end_line is not None
            and self.end_line < self.start_line
        ):
            raise ValueError(
                f"end_line ({self.end_line}) must be >= start_line ({self.start_line})"
            )
        return self


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class FileMetadata:
    """Snapshot of a file's identity and shape at call time."""

    path: str
    size_bytes: int
    size_formatted: str
    total_lines: int
    encoding: str
    file_type: FileType
    created_at: datetime
    modified_at: datetime
    is_text: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "size_bytes": self.size_bytes,
            "size_formatted": self.size_formatted,
            "total_lines": self.total_lines,
            "encoding": self.encoding,
            "file_type": self.file_type.value,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
            "is_text": self.is_text,
        }


@dataclass(frozen=True)
class FileChunk:
    """A bounded, line-delimited slice of a file."""

    content: str
    start_line: int
    end_line: int
    total_lines: int
    chunk_index: int
    total_chunks: int
    file_path: str
    byte_offset: int  # Offset of start_line in the file
    byte_size: int  # UTF-8 size of content

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "total_lines": self.total_lines,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
            "file_path": self.file_path,
            "byte_offset": self.byte_offset,
            "byte_size": self.byte_size,
        }


@dataclass
class SearchMatch:
    """A matching line with its match spans and surrounding lines."""

    line_number: int
    line_content: str
    match_positions: list[tuple[int, int]]
    context_before: list[str] = field(default_factory=list)
    context_after: list[str] = field(default_factory=list)
    chunk_index: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_number": self.line_number,
            "line_content": self.line_content,
            "match_positions": [{"start": s, "end": e} for s, e in self.match_positions],
            "context_before": list(self.context_before),
            "context_after": list(self.context_after),
            "chunk_index": self.chunk_index,
        }


@dataclass(frozen=True)
class LineStats:
    total: int
    empty: int
    non_empty: int
    max_line_length: int
    avg_line_length: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "empty": self.empty,
            "non_empty": self.non_empty,
            "max_line_length": self.max_line_length,
            "avg_line_length": self.avg_line_length,
        }


@dataclass(frozen=True)
class FileStructure:
    """Aggregate statistics and samples describing a file's shape."""

    metadata: FileMetadata
    line_stats: LineStats
    recommended_chunk_size: int
    estimated_chunks: int
    sample_start: list[str]
    sample_end: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "line_stats": self.line_stats.to_dict(),
            "recommended_chunk_size": self.recommended_chunk_size,
            "estimated_chunks": self.estimated_chunks,
            "sample_start": list(self.sample_start),
            "sample_end": list(self.sample_end),
        }


@dataclass(frozen=True)
class CharStats:
    total: int
    alphabetic: int
    numeric: int
    whitespace: int
    special: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "alphabetic": self.alphabetic,
            "numeric": self.numeric,
            "whitespace": self.whitespace,
            "special": self.special,
        }


@dataclass(frozen=True)
class FileSummary:
    """Line, character and word statistics for a file."""

    metadata: FileMetadata
    line_stats: LineStats
    char_stats: CharStats
    word_count: int | None = None  # Only for text and markdown files

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "line_stats": self.line_stats.to_dict(),
            "char_stats": self.char_stats.to_dict(),
            "word_count": self.word_count,
        }


@dataclass(frozen=True)
class StreamChunk:
    """A decoded block of a byte-range stream."""

    offset: int  # Byte offset of the block in the file
    byte_size: int
    content: str
    # First byte not yet decoded into content. Behind offset + byte_size when
    # the block ends inside a multi-byte character.
    resume_offset: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "byte_size": self.byte_size,
            "content": self.content,
            "resume_offset": self.resume_offset,
        }


@dataclass(frozen=True)
class StreamWindow:
    """A bounded run of stream blocks and where to pick up afterwards."""

    chunks: list[StreamChunk]
    next_offset: int  # Always on a character boundary
    exhausted: bool  # Nothing left to read in the requested range
