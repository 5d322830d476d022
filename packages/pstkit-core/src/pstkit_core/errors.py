"""Shared error codes, base error model and raisable wrappers for pstkit.

``CoreErrorCode`` contains the archive-level codes common to all pstkit
packages.  ``BaseExportError`` is a Pydantic model that each package extends
with its own narrowed ``code`` field.  ``PstkitException`` carries such a model
through control flow; ``ArchiveException`` is what every archive accessor
raises.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CoreErrorCode(str, Enum):
    """Error codes shared across all pstkit packages.

    Each package maintains its own *complete* ``ErrorCode`` enum that includes
    both the shared codes here and package-specific codes.  Values equal their
    names so they are stable strings suitable for log filtering.
    """

    # Archive access errors (all fatal for a run)
    E_ARCHIVE_OPEN_FAILED = "E_ARCHIVE_OPEN_FAILED"
    E_ARCHIVE_INVALID_SIGNATURE = "E_ARCHIVE_INVALID_SIGNATURE"
    E_ARCHIVE_CLASSIFY_FAILED = "E_ARCHIVE_CLASSIFY_FAILED"
    E_ARCHIVE_INIT_FAILED = "E_ARCHIVE_INIT_FAILED"
    E_ARCHIVE_ROOT_FOLDER = "E_ARCHIVE_ROOT_FOLDER"
    E_ARCHIVE_ENUMERATION_FAILED = "E_ARCHIVE_ENUMERATION_FAILED"
    E_ARCHIVE_READ_FAILED = "E_ARCHIVE_READ_FAILED"
    E_ARCHIVE_CLOSE_FAILED = "E_ARCHIVE_CLOSE_FAILED"
    E_ARCHIVE_BACKEND_UNAVAILABLE = "E_ARCHIVE_BACKEND_UNAVAILABLE"


class BaseExportError(BaseModel):
    """Base structured error with code, message, and context.

    The ``code`` field is typed as ``str`` so it accepts any package-specific
    ``ErrorCode`` enum member.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False


class PstkitException(Exception):
    """Raisable exception wrapping a structured error model.

    Carries the model as the ``.error`` attribute for inspection and
    serialization.  Subclasses swap ``error_model`` for their narrowed
    error type.
    """

    error_model: type[BaseExportError] = BaseExportError

    def __init__(self, **kwargs: object) -> None:
        self.error = self.error_model(**kwargs)  # type: ignore[arg-type]
        super().__init__(self.error.message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def stage(self) -> str | None:
        return self.error.stage

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable


class ArchiveException(PstkitException):
    """Raised by archive accessors for any failure reading the container."""
