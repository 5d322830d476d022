"""EML export strategy.

Writes every archive message as a standalone ``.eml`` file under
``<output>/<folder display name>/<message index>.eml``.  Headers come from
the message's raw transport headers (repaired when malformed), the body is
the HTML or plain text body, and attachments are re-attached as parts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pstkit_core.errors import ArchiveException
from pstkit_core.protocols import (
    Archive,
    ArchiveAttachment,
    ArchiveFolder,
    ArchiveMessage,
)

from pstkit_export.config import ExportContext
from pstkit_export.errors import ErrorCode, ExportException
from pstkit_export.headers import HeaderParseError, parse_headers
from pstkit_export.repair import HeaderRepairEngine
from pstkit_export.writer import MailWriter, atomic_output, force_charset


def safe_folder_name(display_name: str) -> str:
    """Map a folder display name onto a single directory name."""
    name = display_name.replace("/", "_").replace("\\", "_").replace("\x00", "_")
    if name in ("", ".", ".."):
        return "_"
    return name


class EMLExportStrategy:
    """Export archive messages to EML files.

    Parameters
    ----------
    logger:
        Logger for skip/fallback records. Defaults to ``pstkit_export``.
    """

    name = "eml"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("pstkit_export")

    def export(
        self,
        archive: Archive,
        message: ArchiveMessage,
        message_index: int,
        folder: ArchiveFolder,
        context: ExportContext,
    ) -> Path:
        """Write *message* to ``<output>/<folder>/<message_index>.eml``.

        Returns
        -------
        Path
            The written file.

        Raises
        ------
        ArchiveException
            The raw headers could not be read.
        ExportException
            The headers could not be repaired or the output file could
            not be written.
        """
        folder_name = folder.display_name
        output_directory = Path(context.output_directory) / safe_folder_name(folder_name)
        output_directory.mkdir(parents=True, exist_ok=True)
        output_path = output_directory / f"{message_index}.eml"

        raw_headers = message.get_headers()
        body, subtype = self._select_body(message, context, folder_name, message_index)

        try:
            headers = parse_headers(raw_headers)
        except HeaderParseError as exc:
            repair_engine = HeaderRepairEngine(
                max_attempts=context.max_repair_attempts, logger=self._logger
            )
            headers = repair_engine.repair(raw_headers, exc)

        force_charset(headers)

        try:
            with atomic_output(output_path) as fh:
                writer = MailWriter(fh, headers)
                self._write_attachments(writer, message, folder_name, message_index)
                writer.create_inline(body, subtype)
                writer.close()
        except OSError as exc:
            raise ExportException(
                code=ErrorCode.E_OUTPUT_WRITE_FAILED,
                message=f"Failed to write {output_path}: {exc}",
                stage="write",
                folder=folder_name,
                message_index=message_index,
            ) from exc

        return output_path

    # ------------------------------------------------------------------
    # Body selection
    # ------------------------------------------------------------------

    def _select_body(
        self,
        message: ArchiveMessage,
        context: ExportContext,
        folder_name: str,
        message_index: int,
    ) -> tuple[str, str]:
        """Return ``(body, subtype)`` where subtype is ``"html"`` or ``"plain"``."""
        body: str | None = None
        subtype = "plain"

        if context.plaintext_only:
            body = self._fetch_body(message.get_body)
        else:
            body = self._fetch_body(message.get_body_html)
            if body is not None:
                subtype = "html"
            else:
                body = self._fetch_body(message.get_body)

        if body is None:
            self._logger.warning(
                "pstkit_export | folder=%s | index=%d | code=%s | "
                "detail=Failed to get body from message (maybe the body is RTF?)",
                folder_name,
                message_index,
                ErrorCode.W_BODY_EMPTY.value,
            )
            return "", "plain"

        if not body:
            self._logger.warning(
                "pstkit_export | folder=%s | index=%d | code=%s | detail=Message body is empty",
                folder_name,
                message_index,
                ErrorCode.W_BODY_EMPTY.value,
            )

        return body, subtype

    def _fetch_body(self, getter: Callable[[], str | None]) -> str | None:
        try:
            return getter()
        except ArchiveException as exc:
            self._logger.debug("pstkit_export | detail=Body unavailable: %s", exc)
            return None

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def _write_attachments(
        self,
        writer: MailWriter,
        message: ArchiveMessage,
        folder_name: str,
        message_index: int,
    ) -> None:
        """Re-attach every readable attachment, skipping the unreadable ones."""
        try:
            attachments = message.get_attachments()
        except ArchiveException as exc:
            self._logger.warning(
                "pstkit_export | folder=%s | index=%d | code=%s | "
                "detail=Failed to get message attachments: %s",
                folder_name,
                message_index,
                ErrorCode.W_ATTACHMENTS_UNAVAILABLE.value,
                exc,
            )
            return

        for position, attachment in enumerate(attachments):
            try:
                filename = self._resolve_filename(attachment)
                if filename is None:
                    self._skip_attachment(
                        folder_name, message_index, position, "Failed to get attachment name"
                    )
                    continue
                data = attachment.read_all()
                writer.create_attachment(filename, data)
            except Exception as exc:
                self._skip_attachment(folder_name, message_index, position, str(exc))

    @staticmethod
    def _resolve_filename(attachment: ArchiveAttachment) -> str | None:
        for getter in (attachment.get_long_filename, attachment.get_filename):
            try:
                name = getter()
            except ArchiveException:
                continue
            if name:
                return name
        return None

    def _skip_attachment(
        self, folder_name: str, message_index: int, position: int, detail: str
    ) -> None:
        self._logger.warning(
            "pstkit_export | folder=%s | index=%d | attachment=%d | code=%s | detail=%s, skipping",
            folder_name,
            message_index,
            position,
            ErrorCode.W_ATTACHMENT_SKIPPED.value,
            detail,
        )
