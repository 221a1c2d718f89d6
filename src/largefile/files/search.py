"""Streaming pattern search with context lines.

One forward pass per call. Lines before a hit come from a bounded deque;
lines after a hit are attached as they are read. Scanning stops once
max_results hits are collected and their trailing context is complete, so
the cost of a small search is bounded by where its last hit sits, not by the
file size.
"""

from __future__ import annotations

import re
from collections import deque
from pathlib import Path

from largefile.files.metadata import FileMetadataProvider, iter_lines
from largefile.files.models import SearchMatch, SearchOptions
from largefile.mcp.errors import InvalidPatternError


def compile_pattern(pattern: str, *, regex: bool, case_sensitive: bool) -> re.Pattern[str]:
    """Compile pattern as a regex, or as literal text when regex is False.

    Raises:
        InvalidPatternError: The regular expression does not compile.
    """
    source = pattern if regex else re.escape(pattern)
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def search(
    path: str | Path,
    pattern: str,
    options: SearchOptions,
    provider: FileMetadataProvider,
    chunk_lines: int = 500,
) -> list[SearchMatch]:
    """Find lines matching pattern within [start_line, end_line].

    Context before a hit may come from lines ahead of start_line, and context
    after a hit may run past end_line; only matching is limited to the range.

    Raises:
        NotAccessibleError, NotAFileError, FileTooLargeError: From verify.
        InvalidPatternError: Malformed regular expression.
    """
    provider.verify(path)
    compiled = compile_pattern(pattern, regex=options.regex, case_sensitive=options.case_sensitive)

    results: list[SearchMatch] = []
    before: deque[str] = deque(maxlen=options.context_before)
    pending: list[SearchMatch] = []  # hits still collecting context_after
    draining = False  # no more matching, only finishing pending context

    for number, _offset, line in iter_lines(path, provider.encoding):
        if pending:
            for match in pending:
                match.context_after.append(line)
            pending = [m for m in pending if len(m.context_after) < options.context_after]

        if not draining and options.end_line is not None and number > options.end_line:
            draining = True
        if draining:
            if not pending:
                break
            continue

        if options.start_line is None or number >= options.start_line:
            spans = [(m.start(), m.end()) for m in compiled.finditer(line)]
            if spans:
                hit = SearchMatch(
                    line_number=number,
                    line_content=line,
                    match_positions=spans,
                    context_before=list(before),
                    chunk_index=(number - 1) // chunk_lines,
                )
                results.append(hit)
                if options.context_after > 0:
                    pending.append(hit)
                if len(results) >= options.max_results:
                    draining = True
                    if not pending:
                        break

        before.append(line)

    return results
