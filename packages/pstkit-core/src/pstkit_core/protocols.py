"""Archive accessor protocols for the pstkit framework.

Defines the structural-subtyping interfaces an archive reader must satisfy
for the export pipeline to traverse it.  All protocols are
``@runtime_checkable`` so callers can optionally verify conformance with
``isinstance`` checks.

Accessor failures are reported by raising
:class:`pstkit_core.errors.ArchiveException`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ArchiveAttachment(Protocol):
    """A named binary blob attached to a message."""

    def get_long_filename(self) -> str | None:
        """Return the long filename, or None when not recorded."""
        ...

    def get_filename(self) -> str | None:
        """Return the short (8.3) filename, or None when not recorded."""
        ...

    def read_all(self) -> bytes:
        """Read the attachment data stream completely into memory."""
        ...


@runtime_checkable
class ArchiveMessage(Protocol):
    """One mail item inside a folder."""

    def get_headers(self) -> str:
        """Return the raw transport header text."""
        ...

    def get_body(self) -> str | None:
        """Return the plain text body, or None when unavailable."""
        ...

    def get_body_html(self) -> str | None:
        """Return the HTML body, or None when unavailable."""
        ...

    def get_attachments(self) -> list[ArchiveAttachment]:
        """Return the message attachments in stored order."""
        ...


@runtime_checkable
class ArchiveFolder(Protocol):
    """A named node in the archive's folder tree."""

    @property
    def display_name(self) -> str:
        ...


@runtime_checkable
class Archive(Protocol):
    """An opened mail archive container."""

    def is_valid_signature(self) -> bool:
        """Return True if the file carries the container signature."""
        ...

    def get_format_type(self) -> str:
        """Return the container format (e.g. ``"PST"`` or ``"OST"``)."""
        ...

    def get_encryption_type(self) -> str:
        """Return the container encryption scheme (e.g. ``"compressible"``)."""
        ...

    def initialize(self) -> None:
        """Build the internal indexes.  Called once before traversal."""
        ...

    def get_root_folder(self) -> ArchiveFolder:
        ...

    def get_sub_folders(self, folder: ArchiveFolder) -> list[ArchiveFolder]:
        """Return direct child folders in stored order."""
        ...

    def get_messages(self, folder: ArchiveFolder) -> list[ArchiveMessage]:
        """Return the messages of *folder* in stored order."""
        ...

    def close(self) -> None:
        ...
