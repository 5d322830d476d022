"""Depth-first folder walker.

Visits every folder below a starting folder in pre-order, in the order the
archive lists them, and hands each message of each visited folder to the
active export strategy.  A failed message is logged and skipped;
enumeration failures abort the walk.
"""

from __future__ import annotations

import logging

from pstkit_core.protocols import Archive, ArchiveFolder, ArchiveMessage

from pstkit_export.config import ExportContext
from pstkit_export.errors import ErrorCode, ExportError
from pstkit_export.models import WalkStats
from pstkit_export.strategies.base import ExportStrategy


class FolderWalker:
    """Walk an archive folder tree and export every message.

    The folder graph is assumed to be a tree (the archive accessor enforces
    this); no cycle detection is done here.

    Parameters
    ----------
    strategy:
        Strategy invoked once per message.
    context:
        Run configuration, passed through to the strategy.
    logger:
        Defaults to ``pstkit_export``.
    """

    def __init__(
        self,
        strategy: ExportStrategy,
        context: ExportContext,
        logger: logging.Logger | None = None,
    ) -> None:
        self._strategy = strategy
        self._context = context
        self._logger = logger or logging.getLogger("pstkit_export")

    def walk(self, archive: Archive, folder: ArchiveFolder) -> WalkStats:
        """Export the messages of every folder below *folder*."""
        stats = WalkStats()
        self._walk(archive, folder, stats)
        return stats

    def _walk(self, archive: Archive, folder: ArchiveFolder, stats: WalkStats) -> None:
        for sub_folder in archive.get_sub_folders(folder):
            stats.folders_visited += 1
            self._logger.info(
                "pstkit_export | folder=%s | detail=Processing sub-folder",
                sub_folder.display_name,
            )

            messages = archive.get_messages(sub_folder)
            if messages:
                self._logger.info(
                    "pstkit_export | folder=%s | detail=Processing %d messages",
                    sub_folder.display_name,
                    len(messages),
                )

            for message_index, message in enumerate(messages):
                self._export_message(archive, message, message_index, sub_folder, stats)

            self._walk(archive, sub_folder, stats)

    def _export_message(
        self,
        archive: Archive,
        message: ArchiveMessage,
        message_index: int,
        folder: ArchiveFolder,
        stats: WalkStats,
    ) -> None:
        try:
            self._strategy.export(archive, message, message_index, folder, self._context)
        except Exception as exc:
            stats.messages_failed += 1
            stats.warnings.append(
                ExportError(
                    code=ErrorCode.W_MESSAGE_SKIPPED,
                    message=f"Failed to export message: {exc}",
                    stage="export",
                    recoverable=True,
                    folder=folder.display_name,
                    message_index=message_index,
                )
            )
            self._logger.error(
                "pstkit_export | folder=%s | index=%d | code=%s | "
                "detail=Failed to export message (skipping): %s",
                folder.display_name,
                message_index,
                ErrorCode.W_MESSAGE_SKIPPED.value,
                exc,
            )
            return
        stats.messages_exported += 1
