"""Application context for MCP handlers.

Single object passed to all tool handlers. Built once at process start;
the caches inside the router live as long as the context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from largefile.config.models import LargeFileConfig
    from largefile.mcp.router import RequestRouter


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    config: LargeFileConfig
    router: RequestRouter

    @classmethod
    def create(cls, config: LargeFileConfig) -> AppContext:
        """Factory to create context with router and caches wired together."""
        from largefile.mcp.router import RequestRouter

        return cls(config=config, router=RequestRouter.from_config(config))
