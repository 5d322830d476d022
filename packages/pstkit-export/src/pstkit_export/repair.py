"""Header repair engine.

Archive transport headers are frequently damaged: UTF-16 leftovers show up
as embedded NULs or U+FFFD, and individual lines lose their ``name:`` part.
``HeaderRepairEngine.repair`` recovers a parseable header set from such text
by classifying the parse error and applying one fix per step:

* malformed key  -- strip every NUL and U+FFFD, then re-parse (not metered);
* malformed line -- drop the offending line, then re-parse (metered only when
  the re-parse fails with the very same error).

Any other error is not recoverable and is re-raised unchanged.
"""

from __future__ import annotations

import logging
from email.message import EmailMessage

from pstkit_export.errors import ErrorCode, ExportException
from pstkit_export.headers import (
    HeaderParseError,
    MalformedHeaderKeyError,
    MalformedHeaderLineError,
    parse_headers,
    split_header_lines,
    strip_control_characters,
)

DEFAULT_MAX_ATTEMPTS = 10


class HeaderRepairEngine:
    """Recover a parseable header set from malformed raw header text.

    Parameters
    ----------
    max_attempts:
        Default budget of metered malformed-line steps.
    logger:
        Logger for omitted-line records. Defaults to ``pstkit_export``.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._max_attempts = max_attempts
        self._logger = logger or logging.getLogger("pstkit_export")

    def repair(
        self,
        raw_header_text: str,
        parse_error: Exception,
        max_attempts: int | None = None,
    ) -> EmailMessage:
        """Return the parsed header set recovered from *raw_header_text*.

        *raw_header_text* is never modified; every fix works on a copy.

        Raises
        ------
        ExportException
            ``E_HEADER_UNRECOVERABLE`` when the budget runs out or stripping
            control characters changes nothing.
        Exception
            *parse_error* itself when it is not a recoverable category.
        """
        text = raw_header_text
        error = parse_error
        remaining = self._max_attempts if max_attempts is None else max_attempts

        while True:
            if remaining <= 0:
                raise ExportException(
                    code=ErrorCode.E_HEADER_UNRECOVERABLE,
                    message=f"Failed to fix malformed headers: {error}",
                    stage="repair",
                )

            if isinstance(error, MalformedHeaderKeyError):
                cleaned = strip_control_characters(text)
                try:
                    return parse_headers(cleaned)
                except HeaderParseError as exc:
                    if str(exc) == str(error):
                        raise ExportException(
                            code=ErrorCode.E_HEADER_UNRECOVERABLE,
                            message=f"Failed to fix malformed headers: {exc}",
                            stage="repair",
                        ) from exc
                    text, error = cleaned, exc

            elif isinstance(error, MalformedHeaderLineError):
                cleaned = self._omit_line(text, error.line)
                try:
                    return parse_headers(cleaned)
                except HeaderParseError as exc:
                    if str(exc) == str(error):
                        # A different line may trip the same generic error.
                        remaining -= 1
                    text, error = cleaned, exc

            else:
                raise error

    def _omit_line(self, text: str, malformed_line: str) -> str:
        kept: list[str] = []
        for line in split_header_lines(text):
            if line == malformed_line:
                self._logger.warning(
                    "pstkit_export | code=%s | detail=Removing malformed header line: %r",
                    ErrorCode.W_HEADER_LINE_REMOVED.value,
                    malformed_line,
                )
                continue
            kept.append(line)
        return "\n".join(kept)
