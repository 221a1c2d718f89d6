"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LARGEFILE__SECTION__KEY)
3. Legacy flat environment variables (CHUNK_SIZE, CACHE_TTL, ...)
4. YAML config file (--config path, else ~/.config/largefile/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    LARGEFILE__<SECTION>__<KEY>=<VALUE>

Examples:
    LARGEFILE__LOGGING__LEVEL=DEBUG
    LARGEFILE__CACHE__MAX_SIZE_BYTES=52428800
    LARGEFILE__CACHE__TTL_MS=60000
    LARGEFILE__CHUNKING__DEFAULT_OVERLAP=0

Configuration is read once at startup. The sections consumed by the cache and
file readers are frozen so they cannot drift while the server runs.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LARGEFILE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit, miss and eviction.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        LARGEFILE__SERVER__TRANSPORT: stdio (default) or http
        LARGEFILE__SERVER__HOST: Bind address for http transport
        LARGEFILE__SERVER__PORT: Port for http transport
    """

    name: str = Field(default="large-file-mcp", description="Server name reported to clients.")
    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="MCP transport. stdio for local agents, http for network clients.",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for http transport. "
        "Use 0.0.0.0 for network access (security risk).",
    )
    port: int = Field(default=7655, description="Port for http transport.")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (0 <= v <= 65535):
            raise ValueError(f"Port must be 0-65535, got {v}")
        return v


class ChunkingConfig(BaseModel):
    """Chunk reading defaults.

    Env vars:
        LARGEFILE__CHUNKING__DEFAULT_CHUNK_SIZE: Lines per chunk for line navigation
        LARGEFILE__CHUNKING__DEFAULT_OVERLAP: Lines repeated from the previous chunk
        LARGEFILE__CHUNKING__DEFAULT_CONTEXT_LINES: Context around navigated lines
        LARGEFILE__CHUNKING__MAX_FILE_SIZE_BYTES: Refuse files larger than this
    """

    model_config = ConfigDict(frozen=True)

    default_chunk_size: int = Field(
        default=500,
        gt=0,
        description="Lines per chunk used to locate lines and search hits within chunks. "
        "Chunk reads pick a per-file-type size unless the caller overrides it.",
    )
    default_overlap: int = Field(
        default=10,
        ge=0,
        description="Lines from the end of the previous chunk prepended to each chunk.",
    )
    default_context_lines: int = Field(
        default=5,
        ge=0,
        description="Lines shown before and after a navigated line.",
    )
    max_file_size_bytes: int = Field(
        default=10 * 1024 * 1024 * 1024,
        gt=0,
        description="Files larger than this are rejected (10 GB default).",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding. Undecodable bytes are replaced, never fatal.",
    )


class CacheConfig(BaseModel):
    """In-memory result cache configuration.

    Env vars:
        LARGEFILE__CACHE__MAX_SIZE_BYTES: Byte budget per cache
        LARGEFILE__CACHE__TTL_MS: Entry time-to-live in milliseconds
        LARGEFILE__CACHE__ENABLED: Disable to always read from disk
    """

    model_config = ConfigDict(frozen=True)

    max_size_bytes: int = Field(
        default=100 * 1024 * 1024,
        ge=0,
        description="Byte budget per cache (100 MB default). "
        "Entries larger than this are never cached.",
    )
    ttl_ms: int = Field(
        default=5 * 60 * 1000,
        ge=0,
        description="Entry time-to-live (5 min default). Cached chunks are not revalidated "
        "against the file on disk, so this bounds how stale a read can be.",
    )
    enabled: bool = Field(default=True, description="Enable result caching.")


class LimitsConfig(BaseModel):
    """Per-request defaults for search and streaming.

    See constants.py for hard maximums that cannot be exceeded.

    Env vars:
        LARGEFILE__LIMITS__SEARCH_MAX_RESULTS: Default search result cap
        LARGEFILE__LIMITS__STREAM_CHUNK_BYTES: Default stream chunk size
        LARGEFILE__LIMITS__STREAM_MAX_CHUNKS: Default chunks per stream call
    """

    search_max_results: int = Field(default=100, gt=0)
    stream_chunk_bytes: int = Field(default=64 * 1024, gt=0)
    stream_max_chunks: int = Field(default=10, gt=0)


class LargeFileConfig(BaseModel):
    """Root configuration for largefile.

    All settings can be configured via:
    1. Environment variables: LARGEFILE__SECTION__KEY
    2. YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
