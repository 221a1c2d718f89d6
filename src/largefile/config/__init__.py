"""Config module exports."""

from largefile.config.loader import load_config
from largefile.config.models import (
    CacheConfig,
    ChunkingConfig,
    LargeFileConfig,
    LimitsConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "CacheConfig",
    "ChunkingConfig",
    "LargeFileConfig",
    "LimitsConfig",
    "LoggingConfig",
    "ServerConfig",
]
