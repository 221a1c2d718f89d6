"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are protocol constraints, API stability limits, and implementation details.

For configurable values, see models.py (ChunkingConfig, CacheConfig, LimitsConfig).
"""

# =============================================================================
# MCP Tool Maximums
# =============================================================================
# Hard caps for response size. Users can configure defaults below these,
# but requests cannot exceed them.

LINES_PER_CHUNK_MAX = 10_000
"""Maximum lines a caller may request in a single chunk."""

SEARCH_MAX_RESULTS = 1000
"""Maximum search results per call."""

SEARCH_CONTEXT_LINES_MAX = 50
"""Maximum context lines before or after a search hit."""

NAVIGATE_CONTEXT_LINES_MAX = 500
"""Maximum context lines around a navigated line."""

STREAM_CHUNK_BYTES_MAX = 1024 * 1024
"""Maximum bytes per streamed chunk."""

STREAM_MAX_CHUNKS = 100
"""Maximum chunks returned by one stream call."""

# =============================================================================
# Internal Implementation Constants
# =============================================================================

SAMPLE_LINES = 10
"""Lines captured from the start and end of a file for structure samples."""

LARGE_FILE_LINES = 100_000
"""Line count above which chunk sizes are doubled."""

CHUNK_SIZE_CAP = 2000
"""Upper bound on auto-selected lines per chunk for large files."""

READ_BLOCK_BYTES = 1024 * 1024
"""Block size for line counting scans."""
