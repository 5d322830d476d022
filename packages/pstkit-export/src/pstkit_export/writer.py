"""EML output writer built on the stdlib ``email`` package.

``MailWriter`` mirrors a streaming mail writer: it is bound to a parsed
header set, accepts attachment parts and one inline body part, and emits a
``multipart/mixed`` message on ``close()``.  ``atomic_output`` guarantees that
a failed export never leaves a half-written file at the final path.
"""

from __future__ import annotations

import contextlib
import mimetypes
import os
import tempfile
from collections.abc import Iterator
from email.generator import BytesGenerator
from email.message import EmailMessage, MIMEPart
from pathlib import Path
from typing import BinaryIO

from pstkit_export.headers import HEADER_POLICY

OUTPUT_CHARSET = "utf-8"

# Declarations describing the *source* MIME structure; the output has its own.
_SOURCE_STRUCTURE_HEADERS = (
    "Content-Type",
    "Content-Transfer-Encoding",
    "MIME-Version",
)


def force_charset(headers: EmailMessage, charset: str = OUTPUT_CHARSET) -> None:
    """Pin the outgoing character-set declaration of *headers* to *charset*.

    The archive may declare any charset (and a multipart structure that no
    longer exists once bodies are extracted).  Those declarations are
    replaced by a single ``text/plain`` declaration in *charset*, which the
    writer then applies to the inline body part.
    """
    for name in _SOURCE_STRUCTURE_HEADERS:
        del headers[name]
    headers["MIME-Version"] = "1.0"
    headers["Content-Type"] = f'text/plain; charset="{charset}"'


class MailWriter:
    """Assemble and serialise one EML message.

    Parameters
    ----------
    fh:
        Binary file handle the message is written to on :meth:`close`.
    headers:
        Parsed header set, normally passed through :func:`force_charset`.
    """

    def __init__(self, fh: BinaryIO, headers: EmailMessage) -> None:
        self._fh = fh
        self._headers = headers
        self._charset = headers.get_content_charset() or OUTPUT_CHARSET
        self._inline: MIMEPart | None = None
        self._attachments: list[MIMEPart] = []
        self._closed = False

    def create_attachment(self, filename: str, data: bytes) -> MIMEPart:
        """Add an attachment part carrying *data* under *filename*."""
        content_type, _ = mimetypes.guess_type(filename)
        if content_type is None or content_type.startswith(("multipart/", "message/")):
            content_type = "application/octet-stream"
        maintype, _, subtype = content_type.partition("/")

        part = MIMEPart(policy=HEADER_POLICY)
        part.set_content(
            data,
            maintype=maintype,
            subtype=subtype,
            disposition="attachment",
            filename=filename,
        )
        self._attachments.append(part)
        return part

    def create_inline(self, body: str, subtype: str = "plain") -> MIMEPart:
        """Add the single inline body part (``text/<subtype>``)."""
        if self._inline is not None:
            raise ValueError("An inline body part was already created")

        part = MIMEPart(policy=HEADER_POLICY)
        part.set_content(
            body,
            subtype=subtype,
            charset=self._charset,
            cte="quoted-printable",
            disposition="inline",
        )
        self._inline = part
        return part

    def close(self) -> None:
        """Serialise the message to the bound file handle."""
        if self._closed:
            return

        message = self._headers
        for name in ("Content-Type", "Content-Transfer-Encoding"):
            del message[name]
        message["Content-Type"] = "multipart/mixed"
        message.set_payload([])
        if self._inline is not None:
            message.attach(self._inline)
        for part in self._attachments:
            message.attach(part)

        BytesGenerator(self._fh, policy=HEADER_POLICY).flatten(message)
        self._fh.flush()
        self._closed = True


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@contextlib.contextmanager
def atomic_output(path: Path) -> Iterator[BinaryIO]:
    """Yield a handle whose contents replace *path* only on success.

    The finished file gets the usual permissions of a newly created file
    (``0o666`` minus the umask), not the owner-only mode of the temp file.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
