"""File structure analysis and statistical summaries.

Both run a single sequential scan. Metadata reuses that scan's line count
instead of counting again.
"""

from __future__ import annotations

import math
from collections import deque
from pathlib import Path

from largefile.config.constants import SAMPLE_LINES
from largefile.files.metadata import FileMetadataProvider, iter_lines, optimal_chunk_size
from largefile.files.models import (
    CharStats,
    FileStructure,
    FileSummary,
    FileType,
    LineStats,
)

_WORD_COUNT_TYPES = frozenset({FileType.TEXT, FileType.MARKDOWN})


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def analyze_structure(
    path: str | Path,
    provider: FileMetadataProvider,
    sample_lines: int = SAMPLE_LINES,
) -> FileStructure:
    """Line statistics, recommended chunking and head/tail samples."""
    provider.verify(path)

    line_count = 0
    empty = 0
    max_length = 0
    total_chars = 0
    sample_start: list[str] = []
    sample_end: deque[str] = deque(maxlen=sample_lines)

    for _number, _offset, line in iter_lines(path, provider.encoding):
        line_count += 1
        if not line.strip():
            empty += 1
        length = len(line)
        max_length = max(max_length, length)
        total_chars += length
        if len(sample_start) < sample_lines:
            sample_start.append(line)
        sample_end.append(line)

    metadata = provider.describe(path, total_lines=line_count)
    recommended = optimal_chunk_size(metadata.file_type, line_count)

    return FileStructure(
        metadata=metadata,
        line_stats=LineStats(
            total=line_count,
            empty=empty,
            non_empty=line_count - empty,
            max_line_length=max_length,
            avg_line_length=_round_half_up(total_chars / line_count) if line_count else 0,
        ),
        recommended_chunk_size=recommended,
        estimated_chunks=math.ceil(line_count / recommended),
        sample_start=sample_start,
        sample_end=list(sample_end),
    )


def summarize(path: str | Path, provider: FileMetadataProvider) -> FileSummary:
    """Line and character statistics, plus a word count for prose files.

    Letters and digits are counted in the ASCII sense; any other
    non-whitespace character counts as special.
    """
    provider.verify(path)

    line_count = 0
    empty = 0
    max_length = 0
    total_chars = 0
    alphabetic = numeric = whitespace = special = 0
    words = 0

    for _number, _offset, line in iter_lines(path, provider.encoding):
        line_count += 1
        if not line.strip():
            empty += 1
        else:
            words += len(line.split())
        length = len(line)
        max_length = max(max_length, length)
        total_chars += length

        for ch in line:
            if ch.isascii() and ch.isalpha():
                alphabetic += 1
            elif ch.isascii() and ch.isdigit():
                numeric += 1
            elif ch.isspace():
                whitespace += 1
            else:
                special += 1

    metadata = provider.describe(path, total_lines=line_count)

    return FileSummary(
        metadata=metadata,
        line_stats=LineStats(
            total=line_count,
            empty=empty,
            non_empty=line_count - empty,
            max_line_length=max_length,
            avg_line_length=_round_half_up(total_chars / line_count) if line_count else 0,
        ),
        char_stats=CharStats(
            total=alphabetic + numeric + whitespace + special,
            alphabetic=alphabetic,
            numeric=numeric,
            whitespace=whitespace,
            special=special,
        ),
        word_count=words if metadata.file_type in _WORD_COUNT_TYPES else None,
    )
