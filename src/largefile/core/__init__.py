"""Core infrastructure: errors, logging, formatting."""

from largefile.core.errors import ConfigError, ErrorCode, LargeFileError
from largefile.core.logging import configure_logging, get_logger

__all__ = ["ConfigError", "ErrorCode", "LargeFileError", "configure_logging", "get_logger"]
