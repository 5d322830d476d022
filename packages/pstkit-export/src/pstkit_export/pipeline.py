"""ExportPipeline -- orchestrator and public API for the pstkit-export pipeline.

Runs one export: open archive, validate signature, build indexes, classify
format/encryption, find the root folder, walk every folder with the selected
strategy, close the archive.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Callable, Iterator

from pstkit_core.errors import ArchiveException, CoreErrorCode, PstkitException
from pstkit_core.protocols import Archive

from pstkit_export.config import ExportContext
from pstkit_export.models import ExportSummary
from pstkit_export.strategies.base import ExportStrategy
from pstkit_export.strategies.registry import StrategyRegistry, create_default_registry
from pstkit_export.walker import FolderWalker

ArchiveFactory = Callable[[str], Archive]


def _default_archive_factory(path: str) -> Archive:
    from pstkit_export.archive import PffArchive

    return PffArchive(path)


@contextlib.contextmanager
def _step(code: CoreErrorCode, action: str) -> Iterator[None]:
    """Wrap non-pstkit failures of one pipeline step in an ArchiveException."""
    try:
        yield
    except PstkitException:
        raise
    except Exception as exc:
        raise ArchiveException(
            code=code, message=f"Failed to {action}: {exc}", stage="pipeline"
        ) from exc


class ExportPipeline:
    """Top-level orchestrator for one export run.

    Parameters
    ----------
    strategy:
        Strategy that writes each message.
    context:
        Run configuration.
    archive_factory:
        Callable opening the archive at a path. Defaults to the libpff
        accessor.
    logger:
        Defaults to ``pstkit_export``.
    """

    def __init__(
        self,
        strategy: ExportStrategy,
        context: ExportContext,
        archive_factory: ArchiveFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._strategy = strategy
        self._context = context
        self._archive_factory = archive_factory or _default_archive_factory
        self._logger = logger or logging.getLogger("pstkit_export")

    def execute(self) -> ExportSummary:
        """Export every message of the archive.

        Returns
        -------
        ExportSummary
            Counters and message-level warnings of the run.

        Raises
        ------
        ArchiveException
            Any archive-level failure; the run is aborted.
        """
        overall_start = time.monotonic()
        context = self._context

        self._logger.info(
            "pstkit_export | strategy=%s | detail=Executing export strategy",
            self._strategy.name,
        )
        self._logger.info(
            "pstkit_export | file=%s | detail=Processing archive", context.input_file
        )

        archive = self._open()
        summary = ExportSummary(
            input_file=context.input_file,
            output_directory=context.output_directory,
            strategy=self._strategy.name,
        )

        try:
            self._run(archive, summary)
        except BaseException:
            self._close_after_failure(archive)
            raise

        with _step(CoreErrorCode.E_ARCHIVE_CLOSE_FAILED, "close archive"):
            archive.close()

        summary.processing_time_seconds = time.monotonic() - overall_start
        self._logger.info(
            "pstkit_export | file=%s | strategy=%s | folders=%d | exported=%d | "
            "failed=%d | time=%.1fs",
            context.input_file,
            summary.strategy,
            summary.folders_visited,
            summary.messages_exported,
            summary.messages_failed,
            summary.processing_time_seconds,
        )
        return summary

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _open(self) -> Archive:
        with _step(CoreErrorCode.E_ARCHIVE_OPEN_FAILED, "open archive"):
            return self._archive_factory(self._context.input_file)

    def _run(self, archive: Archive, summary: ExportSummary) -> None:
        with _step(CoreErrorCode.E_ARCHIVE_INVALID_SIGNATURE, "check file signature"):
            is_valid_signature = archive.is_valid_signature()
        if not is_valid_signature:
            raise ArchiveException(
                code=CoreErrorCode.E_ARCHIVE_INVALID_SIGNATURE,
                message="Invalid input file signature",
                stage="validate",
            )

        self._logger.info("pstkit_export | detail=Initializing archive indexes")
        with _step(CoreErrorCode.E_ARCHIVE_INIT_FAILED, "initialize archive"):
            archive.initialize()

        with _step(CoreErrorCode.E_ARCHIVE_CLASSIFY_FAILED, "classify archive"):
            summary.format_type = archive.get_format_type()
            summary.encryption_type = archive.get_encryption_type()
        self._logger.info(
            "pstkit_export | format=%s | encryption=%s",
            summary.format_type,
            summary.encryption_type,
        )

        with _step(CoreErrorCode.E_ARCHIVE_ROOT_FOLDER, "find root folder"):
            root_folder = archive.get_root_folder()

        walker = FolderWalker(self._strategy, self._context, logger=self._logger)
        with _step(CoreErrorCode.E_ARCHIVE_ENUMERATION_FAILED, "enumerate folders"):
            stats = walker.walk(archive, root_folder)

        summary.folders_visited = stats.folders_visited
        summary.messages_exported = stats.messages_exported
        summary.messages_failed = stats.messages_failed
        summary.warnings = stats.warnings

    def _close_after_failure(self, archive: Archive) -> None:
        try:
            archive.close()
        except Exception as exc:
            self._logger.error(
                "pstkit_export | code=%s | detail=Failed to close archive: %s",
                CoreErrorCode.E_ARCHIVE_CLOSE_FAILED.value,
                exc,
            )


def run_export(
    context: ExportContext,
    archive_factory: ArchiveFactory | None = None,
    logger: logging.Logger | None = None,
    registry: StrategyRegistry | None = None,
) -> ExportSummary:
    """Resolve the configured strategy, then run the export.

    The strategy is looked up before any archive is opened, so an unknown
    strategy name fails without touching the input file.

    Raises
    ------
    ExportException
        ``E_STRATEGY_NOT_FOUND`` for an unknown strategy name.
    ArchiveException
        Any archive-level failure.
    """
    if registry is None:
        registry = create_default_registry(logger=logger)
    strategy = registry.get(context.strategy)
    pipeline = ExportPipeline(
        strategy, context, archive_factory=archive_factory, logger=logger
    )
    return pipeline.execute()
