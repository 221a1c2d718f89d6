"""Line-indexed chunk reads and line navigation.

Chunk i covers lines (i * size, (i + 1) * size], extended backwards by the
overlap so adjacent chunks share context. Overlap changes what a chunk
contains, never how many chunks exist.
"""

from __future__ import annotations

import math
from pathlib import Path

from largefile.files.metadata import FileMetadataProvider, iter_lines, optimal_chunk_size
from largefile.files.models import ChunkOptions, FileChunk
from largefile.mcp.errors import OutOfRangeError

TARGET_MARKER = "→ "
PLAIN_MARKER = "  "


def read_lines(
    path: str | Path, start_line: int, end_line: int, encoding: str = "utf-8"
) -> tuple[list[str], int]:
    """Read lines start_line..end_line (1-based, inclusive).

    Stops reading as soon as end_line is passed.

    Returns:
        (lines, byte offset of start_line). The offset is 0 when the range
        is empty.
    """
    lines: list[str] = []
    start_offset = 0
    if end_line < start_line:
        return lines, start_offset
    for number, offset, text in iter_lines(path, encoding):
        if number < start_line:
            continue
        if number > end_line:
            break
        if not lines:
            start_offset = offset
        lines.append(text)
    return lines, start_offset


def read_chunk(
    path: str | Path,
    chunk_index: int,
    options: ChunkOptions,
    provider: FileMetadataProvider,
) -> FileChunk:
    """Read one chunk of a file.

    Raises:
        OutOfRangeError: chunk_index is negative or past the last chunk.
            Chunk 0 of an empty file is valid and empty.
    """
    metadata = provider.describe(path)
    total_lines = metadata.total_lines
    lines_per_chunk = options.lines_per_chunk or optimal_chunk_size(
        metadata.file_type, total_lines
    )
    total_chunks = math.ceil(total_lines / lines_per_chunk)

    if chunk_index < 0 or chunk_index >= max(total_chunks, 1):
        raise OutOfRangeError(
            str(path), "Chunk index", chunk_index, 0, max(total_chunks - 1, 0)
        )

    start_line = max(1, chunk_index * lines_per_chunk - options.overlap_lines + 1)
    end_line = min(total_lines, (chunk_index + 1) * lines_per_chunk)

    lines, byte_offset = read_lines(path, start_line, end_line, provider.encoding)
    if options.include_line_numbers:
        content = "\n".join(f"{start_line + i}: {line}" for i, line in enumerate(lines))
    else:
        content = "\n".join(lines)

    return FileChunk(
        content=content,
        start_line=start_line,
        end_line=end_line,
        total_lines=total_lines,
        chunk_index=chunk_index,
        total_chunks=total_chunks,
        file_path=str(path),
        byte_offset=byte_offset,
        byte_size=len(content.encode("utf-8")),
    )


def navigate_to_line(
    path: str | Path,
    line_number: int,
    context_lines: int,
    provider: FileMetadataProvider,
    chunk_lines: int = 500,
) -> FileChunk:
    """Read a window of lines centred on line_number, marking the target.

    Args:
        path: File to read.
        line_number: 1-based target line.
        context_lines: Lines shown on each side of the target.
        provider: Metadata provider.
        chunk_lines: Chunk size used to report which chunk holds the line.

    Raises:
        OutOfRangeError: line_number < 1 or > total_lines.
    """
    metadata = provider.describe(path)
    total_lines = metadata.total_lines
    if line_number < 1 or line_number > total_lines:
        raise OutOfRangeError(str(path), "Line number", line_number, 1, total_lines)

    start_line = max(1, line_number - context_lines)
    end_line = min(total_lines, line_number + context_lines)
    lines, byte_offset = read_lines(path, start_line, end_line, provider.encoding)

    rendered = []
    for i, line in enumerate(lines):
        number = start_line + i
        marker = TARGET_MARKER if number == line_number else PLAIN_MARKER
        rendered.append(f"{marker}{number}: {line}")
    content = "\n".join(rendered)

    return FileChunk(
        content=content,
        start_line=start_line,
        end_line=end_line,
        total_lines=total_lines,
        chunk_index=(line_number - 1) // chunk_lines,
        total_chunks=math.ceil(total_lines / chunk_lines),
        file_path=str(path),
        byte_offset=byte_offset,
        byte_size=len(content.encode("utf-8")),
    )
