"""Pydantic result models for the pstkit-export package.

Contains ``WalkStats`` (what one folder walk did) and ``ExportSummary``
(what one whole run did).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pstkit_export.errors import ExportError


class WalkStats(BaseModel):
    """Counters collected while walking the folder tree."""

    folders_visited: int = 0
    messages_exported: int = 0
    messages_failed: int = 0
    warnings: list[ExportError] = Field(default_factory=list)


class ExportSummary(BaseModel):
    """Outcome of a complete export run."""

    input_file: str
    output_directory: str
    strategy: str
    format_type: str | None = None
    encryption_type: str | None = None
    folders_visited: int = 0
    messages_exported: int = 0
    messages_failed: int = 0
    warnings: list[ExportError] = Field(default_factory=list)
    processing_time_seconds: float = 0.0
