"""Error codes and structured error model for the pstkit-export package.

``ErrorCode`` contains all export-specific error/warning codes plus the shared
archive codes from the core taxonomy.  ``ExportError`` extends
``BaseExportError`` with the narrowed ``code`` type and ``ExportException``
is its raisable form.
"""

from __future__ import annotations

from enum import Enum

from pstkit_core.errors import BaseExportError, PstkitException


class ErrorCode(str, Enum):
    """Error codes for pstkit-export.

    Fatal codes use an ``E_`` prefix; warnings use ``W_``.
    Values equal their names for stable log filtering.
    """

    # Archive errors (reused from core taxonomy)
    E_ARCHIVE_OPEN_FAILED = "E_ARCHIVE_OPEN_FAILED"
    E_ARCHIVE_INVALID_SIGNATURE = "E_ARCHIVE_INVALID_SIGNATURE"
    E_ARCHIVE_CLASSIFY_FAILED = "E_ARCHIVE_CLASSIFY_FAILED"
    E_ARCHIVE_INIT_FAILED = "E_ARCHIVE_INIT_FAILED"
    E_ARCHIVE_ROOT_FOLDER = "E_ARCHIVE_ROOT_FOLDER"
    E_ARCHIVE_ENUMERATION_FAILED = "E_ARCHIVE_ENUMERATION_FAILED"
    E_ARCHIVE_READ_FAILED = "E_ARCHIVE_READ_FAILED"
    E_ARCHIVE_CLOSE_FAILED = "E_ARCHIVE_CLOSE_FAILED"
    E_ARCHIVE_BACKEND_UNAVAILABLE = "E_ARCHIVE_BACKEND_UNAVAILABLE"

    # Export-specific fatal errors
    E_STRATEGY_NOT_FOUND = "E_STRATEGY_NOT_FOUND"
    E_HEADER_UNRECOVERABLE = "E_HEADER_UNRECOVERABLE"
    E_OUTPUT_WRITE_FAILED = "E_OUTPUT_WRITE_FAILED"

    # Warnings (non-fatal)
    W_MESSAGE_SKIPPED = "W_MESSAGE_SKIPPED"
    W_ATTACHMENT_SKIPPED = "W_ATTACHMENT_SKIPPED"
    W_ATTACHMENTS_UNAVAILABLE = "W_ATTACHMENTS_UNAVAILABLE"
    W_BODY_EMPTY = "W_BODY_EMPTY"
    W_HEADER_LINE_REMOVED = "W_HEADER_LINE_REMOVED"


class ExportError(BaseExportError):
    """Structured error for the export pipeline.

    Narrows the ``code`` field to ``ErrorCode`` for type safety while
    remaining serialisation-compatible with the base class.
    """

    code: ErrorCode  # type: ignore[assignment]
    folder: str | None = None
    message_index: int | None = None


class ExportException(PstkitException):
    """Raisable exception wrapping an :class:`ExportError`."""

    error_model = ExportError
