"""Base classes for tool parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BaseParams(BaseModel):
    """Base class for all tool parameters.

    Uses extra="forbid" to reject unknown fields with clear errors.
    """

    model_config = ConfigDict(extra="forbid")


class FileParams(BaseParams):
    """Parameters for tools that operate on a single file."""

    path: str = Field(..., min_length=1, description="Absolute path to the file")
