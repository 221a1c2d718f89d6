"""Request router - the cache integration point for file reads.

Chunk reads and structure analysis are cached; their keys carry every
parameter that changes the output. Search, navigation, summaries and
streams always go to disk.

Cached values are returned as stored. They are not revalidated against the
file's current mtime, so a file modified after caching is served stale
until its entry expires (ttl_ms) or is evicted.
"""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Any

import structlog

from largefile.cache import CacheStore
from largefile.config.models import LargeFileConfig
from largefile.files import (
    ChunkOptions,
    FileChunk,
    FileMetadataProvider,
    FileStructure,
    FileSummary,
    SearchMatch,
    SearchOptions,
    StreamWindow,
    analyze_structure,
    navigate_to_line,
    read_chunk,
    search,
    stream_file,
    summarize,
)

log = structlog.get_logger(__name__)


def chunk_cache_key(
    path: str, chunk_index: int, lines_per_chunk: int | None, include_line_numbers: bool
) -> str:
    size = "auto" if lines_per_chunk is None else str(lines_per_chunk)
    return f"chunk:{path}:{chunk_index}:{size}:{include_line_numbers}"


def structure_cache_key(path: str) -> str:
    return f"structure:{path}"


class RequestRouter:
    """Routes file operations to readers, consulting the caches first."""

    def __init__(
        self,
        config: LargeFileConfig,
        provider: FileMetadataProvider,
        chunk_cache: CacheStore[FileChunk],
        structure_cache: CacheStore[FileStructure],
    ) -> None:
        self._config = config
        self._provider = provider
        self.chunk_cache = chunk_cache
        self.structure_cache = structure_cache

    @classmethod
    def from_config(cls, config: LargeFileConfig) -> RequestRouter:
        provider = FileMetadataProvider(
            max_file_size_bytes=config.chunking.max_file_size_bytes,
            encoding=config.chunking.encoding,
        )
        return cls(
            config,
            provider,
            CacheStore(config.cache, name="chunks"),
            CacheStore(config.cache, name="structures"),
        )

    @property
    def provider(self) -> FileMetadataProvider:
        return self._provider

    def read_chunk(
        self,
        path: str,
        chunk_index: int = 0,
        *,
        lines_per_chunk: int | None = None,
        include_line_numbers: bool = False,
    ) -> FileChunk:
        path = resolve_path(path)
        key = chunk_cache_key(path, chunk_index, lines_per_chunk, include_line_numbers)
        chunk = self.chunk_cache.get(key)
        if chunk is not None:
            log.debug("cache_hit", cache="chunks", key=key)
            return chunk

        log.debug("cache_miss", cache="chunks", key=key)
        options = ChunkOptions(
            lines_per_chunk=lines_per_chunk,
            overlap_lines=self._config.chunking.default_overlap,
            include_line_numbers=include_line_numbers,
        )
        chunk = read_chunk(path, chunk_index, options, self._provider)
        self.chunk_cache.set(key, chunk)
        return chunk

    def get_structure(self, path: str) -> FileStructure:
        path = resolve_path(path)
        key = structure_cache_key(path)
        structure = self.structure_cache.get(key)
        if structure is not None:
            log.debug("cache_hit", cache="structures", key=key)
            return structure

        log.debug("cache_miss", cache="structures", key=key)
        structure = analyze_structure(path, self._provider)
        self.structure_cache.set(key, structure)
        return structure

    def search(self, path: str, pattern: str, options: SearchOptions) -> list[SearchMatch]:
        return search(
            path,
            pattern,
            options,
            self._provider,
            chunk_lines=self._config.chunking.default_chunk_size,
        )

    def navigate_to_line(
        self, path: str, line_number: int, context_lines: int | None = None
    ) -> FileChunk:
        if context_lines is None:
            context_lines = self._config.chunking.default_context_lines
        return navigate_to_line(
            path,
            line_number,
            context_lines,
            self._provider,
            chunk_lines=self._config.chunking.default_chunk_size,
        )

    def get_summary(self, path: str) -> FileSummary:
        return summarize(path, self._provider)

    def stream_file(
        self,
        path: str,
        *,
        chunk_size_bytes: int | None = None,
        start_offset: int = 0,
        max_bytes: int | None = None,
        max_chunks: int | None = None,
    ) -> StreamWindow:
        """Collect at most max_chunks blocks of a byte-range stream.

        next_offset is where a follow-up call should start: the end of the
        last decoded character, not the end of the last block read.
        """
        limits = self._config.limits
        file_size = self._provider.verify(path).st_size
        range_end = file_size if max_bytes is None else min(file_size, start_offset + max_bytes)

        blocks = stream_file(
            path,
            self._provider,
            chunk_size_bytes=chunk_size_bytes or limits.stream_chunk_bytes,
            start_offset=start_offset,
            max_bytes=max_bytes,
        )
        try:
            chunks = list(islice(blocks, max_chunks or limits.stream_max_chunks))
        finally:
            blocks.close()

        next_offset = chunks[-1].resume_offset if chunks else start_offset
        read_end = start_offset + sum(c.byte_size for c in chunks)
        # Undecoded bytes at EOF mean the replacement tail was cut off by max_chunks
        tail_pending = read_end >= file_size and next_offset < read_end
        return StreamWindow(
            chunks=chunks,
            next_offset=next_offset,
            exhausted=read_end >= range_end and not tail_pending,
        )

    def cache_stats(self) -> dict[str, Any]:
        return {
            "enabled": self._config.cache.enabled,
            "ttl_ms": self._config.cache.ttl_ms,
            "chunks": self.chunk_cache.stats().to_dict(),
            "structures": self.structure_cache.stats().to_dict(),
        }

    def clear_cache(self) -> None:
        self.chunk_cache.clear()
        self.structure_cache.clear()
        log.info("cache_cleared")


def resolve_path(path: str) -> str:
    """Normalize a user path so equivalent spellings share cache entries."""
    return str(Path(path).expanduser().resolve())
