"""Export strategy interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pstkit_core.protocols import Archive, ArchiveFolder, ArchiveMessage

from pstkit_export.config import ExportContext


@runtime_checkable
class ExportStrategy(Protocol):
    """Converts one archive message into one output artifact.

    Implementations hold no per-message state, so a single instance can be
    registered once and reused for every message of a run.
    """

    name: str

    def export(
        self,
        archive: Archive,
        message: ArchiveMessage,
        message_index: int,
        folder: ArchiveFolder,
        context: ExportContext,
    ) -> Path:
        """Export *message* and return the path of the written artifact."""
        ...
