"""Strict RFC 5322 header-block parsing for raw archive transport headers.

The stdlib ``email`` parser accepts almost anything and records defects
instead of failing.  Archive header blobs need the opposite: a parse that
fails loudly, with an error that says *what* is wrong, so the repair engine
can decide how to fix it.  ``parse_headers`` validates every field first and
only then hands the block to :class:`email.parser.HeaderParser`.
"""

from __future__ import annotations

import string
from email import policy
from email.message import EmailMessage
from email.parser import HeaderParser

# Raw source headers are written back exactly as read; only headers we set
# ourselves are folded.  UTF-8 output keeps non-ASCII source values intact.
HEADER_POLICY = policy.SMTPUTF8.clone(refold_source="none")

_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~" + string.ascii_letters + string.digits)
_CONTROL_CHARACTERS = frozenset("\x00\ufffd")


class HeaderParseError(ValueError):
    """Raised when a raw header block is not syntactically valid."""


class MalformedHeaderKeyError(HeaderParseError):
    """A field name is invalid or a field carries NUL / U+FFFD characters."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"malformed MIME header key: {field}")


class MalformedHeaderLineError(HeaderParseError):
    """A line is neither a ``name: value`` field nor a continuation."""

    def __init__(self, line: str) -> None:
        self.line = line.replace("\r", "").replace("\n", "")
        super().__init__(f"malformed MIME header line: {self.line}")


def split_header_lines(text: str) -> list[str]:
    """Split *text* on LF, dropping one trailing CR from each line."""
    lines = text.split("\n")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def strip_control_characters(text: str) -> str:
    """Return *text* without any NUL or Unicode replacement characters."""
    return "".join(ch for ch in text if ch not in _CONTROL_CHARACTERS)


def _has_control_characters(value: str) -> bool:
    return any(ch in _CONTROL_CHARACTERS for ch in value)


def parse_headers(text: str) -> EmailMessage:
    """Parse a raw header block into a headers-only :class:`EmailMessage`.

    Parsing stops at the first empty line.  Continuation lines (leading
    space or tab) are folded into the preceding field.

    Raises
    ------
    MalformedHeaderKeyError
        A field name is empty or contains non-token characters, or a field
        contains NUL / U+FFFD.
    MalformedHeaderLineError
        A line has no colon, carries a bare CR, or is a continuation line
        with nothing to continue.
    """
    block: list[str] = []
    current: str | None = None

    for line in split_header_lines(text):
        if line == "":
            break

        # A bare CR would be written back as a line break.
        if "\r" in line:
            raise MalformedHeaderLineError(line)

        if line[0] in " \t":
            if current is None:
                raise MalformedHeaderLineError(line)
            if _has_control_characters(line):
                raise MalformedHeaderKeyError(current)
            block.append(line)
            continue

        name, sep, value = line.partition(":")
        if not sep:
            raise MalformedHeaderLineError(line)
        if not name or any(ch not in _TOKEN_CHARS for ch in name):
            raise MalformedHeaderKeyError(name)
        if _has_control_characters(value):
            raise MalformedHeaderKeyError(name)

        current = name
        block.append(line)

    source = "\n".join(block) + "\n\n"
    return HeaderParser(policy=HEADER_POLICY).parsestr(source)
