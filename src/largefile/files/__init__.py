"""File readers - chunking, search, structure, streaming.

Pure filesystem I/O. No cache dependency; caching happens in the router.
"""

from largefile.files.chunks import navigate_to_line, read_chunk
from largefile.files.metadata import FileMetadataProvider, optimal_chunk_size
from largefile.files.models import (
    ChunkOptions,
    FileChunk,
    FileMetadata,
    FileStructure,
    FileSummary,
    FileType,
    SearchMatch,
    SearchOptions,
    StreamChunk,
    StreamWindow,
)
from largefile.files.search import search
from largefile.files.stream import stream_file
from largefile.files.structure import analyze_structure, summarize

__all__ = [
    "ChunkOptions",
    "FileChunk",
    "FileMetadata",
    "FileMetadataProvider",
    "FileStructure",
    "FileSummary",
    "FileType",
    "SearchMatch",
    "SearchOptions",
    "StreamChunk",
    "StreamWindow",
    "analyze_structure",
    "navigate_to_line",
    "optimal_chunk_size",
    "read_chunk",
    "search",
    "stream_file",
    "summarize",
]
