"""PST/OST archive accessor backed by libpff.

Thin adapter from the ``pypff`` binding (PyPI: ``libpff-python``) to the
``pstkit_core.protocols`` archive interfaces.  All container parsing is done
by libpff; this module only maps its objects and errors.  Requires
``libpff-python`` (LGPL).
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator
from typing import Any

from pstkit_core.errors import ArchiveException, CoreErrorCode

# MAPI property tags carrying attachment filenames.
PR_ATTACH_LONG_FILENAME = 0x3707
PR_ATTACH_FILENAME = 0x3704

_CONTENT_TYPES = {ord("a"): "PAB", ord("o"): "OST", ord("p"): "PST"}
_ENCRYPTION_TYPES = {0: "none", 1: "compressible", 2: "high"}


def _import_pypff() -> Any:
    try:
        import pypff  # type: ignore[import-not-found]
    except ImportError as exc:
        raise ArchiveException(
            code=CoreErrorCode.E_ARCHIVE_BACKEND_UNAVAILABLE,
            message=(
                "libpff-python is required to read PST/OST archives. "
                "Install it with: pip install libpff-python"
            ),
            stage="open",
        ) from exc
    return pypff


@contextlib.contextmanager
def _archive_errors(code: CoreErrorCode, action: str) -> Iterator[None]:
    """Translate libpff ``IOError``/``OSError`` into :class:`ArchiveException`."""
    try:
        yield
    except OSError as exc:
        raise ArchiveException(
            code=code, message=f"Failed to {action}: {exc}", stage="archive"
        ) from exc


def _decode(data: bytes | str | None) -> str | None:
    if data is None or isinstance(data, str):
        return data
    return bytes(data).decode("utf-8", errors="replace")


def _read_string_property(item: Any, entry_type: int) -> str | None:
    """Return the first string value of MAPI property *entry_type* on *item*."""
    for set_index in range(item.number_of_record_sets):
        record_set = item.get_record_set(set_index)
        for entry_index in range(record_set.number_of_entries):
            entry = record_set.get_entry(entry_index)
            if entry.entry_type == entry_type:
                return entry.get_data_as_string()
    return None


class PffAttachment:
    """One attachment of a libpff message."""

    def __init__(self, item: Any) -> None:
        self.item = item

    def get_long_filename(self) -> str | None:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read attachment long filename"):
            name = _read_string_property(self.item, PR_ATTACH_LONG_FILENAME)
            return name or getattr(self.item, "name", None) or None

    def get_filename(self) -> str | None:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read attachment filename"):
            return _read_string_property(self.item, PR_ATTACH_FILENAME) or None

    def read_all(self) -> bytes:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read attachment data"):
            size = self.item.get_size()
            if not size:
                return b""
            return bytes(self.item.read_buffer(size))


class PffMessage:
    """One message item of a libpff folder."""

    def __init__(self, item: Any) -> None:
        self.item = item

    def get_headers(self) -> str:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read transport headers"):
            headers = self.item.transport_headers
        if headers is None:
            raise ArchiveException(
                code=CoreErrorCode.E_ARCHIVE_READ_FAILED,
                message="Failed to find transport headers",
                stage="archive",
            )
        return _decode(headers) or ""

    def get_body(self) -> str | None:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read plain text body"):
            return _decode(self.item.plain_text_body)

    def get_body_html(self) -> str | None:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read HTML body"):
            return _decode(self.item.html_body)

    def get_attachments(self) -> list[PffAttachment]:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_READ_FAILED, "read attachments"):
            return [
                PffAttachment(self.item.get_attachment(index))
                for index in range(self.item.number_of_attachments)
            ]


class PffFolder:
    """One folder item of a libpff file."""

    def __init__(self, item: Any) -> None:
        self.item = item

    @property
    def display_name(self) -> str:
        return self.item.name or ""


class PffArchive:
    """PST/OST archive opened through libpff.

    Parameters
    ----------
    path:
        Filesystem path of the archive.

    Raises
    ------
    ArchiveException
        ``E_ARCHIVE_BACKEND_UNAVAILABLE`` when ``pypff`` is not installed,
        ``E_ARCHIVE_OPEN_FAILED`` when *path* is not a readable file.
    """

    def __init__(self, path: str) -> None:
        self._path = str(path)
        self._pypff = _import_pypff()
        if not os.path.isfile(self._path):
            raise ArchiveException(
                code=CoreErrorCode.E_ARCHIVE_OPEN_FAILED,
                message=f"Archive file not found: {self._path}",
                stage="open",
            )
        self._file = self._pypff.file()
        self._opened = False

    def is_valid_signature(self) -> bool:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_INVALID_SIGNATURE, "check file signature"):
            return bool(self._pypff.check_file_signature(self._path))

    def initialize(self) -> None:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_INIT_FAILED, "open archive"):
            self._file.open(self._path)
        self._opened = True

    def get_format_type(self) -> str:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_CLASSIFY_FAILED, "read content type"):
            value = self._file.get_content_type()
        return _CONTENT_TYPES.get(value, str(value))

    def get_encryption_type(self) -> str:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_CLASSIFY_FAILED, "read encryption type"):
            value = self._file.get_encryption_type()
        return _ENCRYPTION_TYPES.get(value, str(value))

    def get_root_folder(self) -> PffFolder:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_ROOT_FOLDER, "find root folder"):
            root = self._file.get_root_folder()
        if root is None:
            raise ArchiveException(
                code=CoreErrorCode.E_ARCHIVE_ROOT_FOLDER,
                message="Archive has no root folder",
                stage="archive",
            )
        return PffFolder(root)

    def get_sub_folders(self, folder: PffFolder) -> list[PffFolder]:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_ENUMERATION_FAILED, "list sub-folders"):
            return [
                PffFolder(folder.item.get_sub_folder(index))
                for index in range(folder.item.number_of_sub_folders)
            ]

    def get_messages(self, folder: PffFolder) -> list[PffMessage]:
        with _archive_errors(CoreErrorCode.E_ARCHIVE_ENUMERATION_FAILED, "list messages"):
            return [
                PffMessage(folder.item.get_sub_message(index))
                for index in range(folder.item.number_of_sub_messages)
            ]

    def close(self) -> None:
        if not self._opened:
            return
        with _archive_errors(CoreErrorCode.E_ARCHIVE_CLOSE_FAILED, "close archive"):
            self._file.close()
        self._opened = False
