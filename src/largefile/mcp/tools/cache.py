"""Cache MCP tool - inspect or reset the chunk and structure caches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from largefile.mcp.registry import registry
from largefile.mcp.tools.base import BaseParams

if TYPE_CHECKING:
    from largefile.mcp.context import AppContext


class CacheStatsParams(BaseParams):
    """Parameters for cache_stats."""

    clear: bool = Field(False, description="Drop all cached entries after reporting")


@registry.register(
    "cache_stats",
    "Report entries, bytes used and hit rates of the chunk and structure caches.",
    CacheStatsParams,
)
async def cache_stats(ctx: AppContext, params: CacheStatsParams) -> dict[str, Any]:
    stats = ctx.router.cache_stats()
    if params.clear:
        ctx.router.clear_cache()
    chunks = stats["chunks"]["entries"]
    structures = stats["structures"]["entries"]
    stats["cleared"] = params.clear
    stats["summary"] = f"{chunks} chunks, {structures} structures cached" + (
        " (cleared)" if params.clear else ""
    )
    return stats
