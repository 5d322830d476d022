"""Tests for pstkit_export.repair -- HeaderRepairEngine."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from pstkit_export.errors import ErrorCode, ExportException
from pstkit_export.headers import (
    HeaderParseError,
    MalformedHeaderKeyError,
    MalformedHeaderLineError,
    parse_headers,
)
from pstkit_export.repair import DEFAULT_MAX_ATTEMPTS, HeaderRepairEngine


def _parse_error(text: str) -> HeaderParseError:
    with pytest.raises(HeaderParseError) as exc_info:
        parse_headers(text)
    return exc_info.value


class TestMalformedKey:
    def test_strips_nul_from_value(self):
        raw = "Subject: Hi\x00\r\nFrom: a@b.com\r\n"
        error = _parse_error(raw)
        assert isinstance(error, MalformedHeaderKeyError)

        headers = HeaderRepairEngine().repair(raw, error)
        assert headers["Subject"] == "Hi"
        assert headers["From"] == "a@b.com"

    def test_strips_replacement_characters(self):
        raw = "Sub\ufffdject: caf\ufffd\r\n"
        headers = HeaderRepairEngine().repair(raw, _parse_error(raw))
        assert headers["Subject"] == "caf"

    def test_unchanged_after_stripping_is_unrecoverable(self):
        raw = "Bad Name: value\r\n"
        with pytest.raises(ExportException) as exc_info:
            HeaderRepairEngine().repair(raw, _parse_error(raw))
        assert exc_info.value.code == ErrorCode.E_HEADER_UNRECOVERABLE
        assert isinstance(exc_info.value.__cause__, MalformedHeaderKeyError)

    def test_key_fix_then_line_fix(self):
        raw = "Subject: Hi\x00\r\nnot a header\r\nFrom: a@b.com\r\n"
        engine = HeaderRepairEngine(max_attempts=1)

        headers = engine.repair(raw, _parse_error(raw))
        assert headers["Subject"] == "Hi"
        assert headers["From"] == "a@b.com"


class TestMalformedLine:
    def test_removes_offending_line(self, caplog):
        raw = "Subject: Hi\r\ngarbage line\r\nFrom: a@b.com\r\n"
        error = _parse_error(raw)
        assert isinstance(error, MalformedHeaderLineError)

        headers = HeaderRepairEngine().repair(raw, error)
        assert headers.keys() == ["Subject", "From"]
        assert ErrorCode.W_HEADER_LINE_REMOVED.value in caplog.text
        assert "garbage line" in caplog.text

    def test_removes_every_copy_of_the_line(self):
        raw = "junk\r\nSubject: Hi\r\njunk\r\n"
        headers = HeaderRepairEngine().repair(raw, _parse_error(raw))
        assert headers.keys() == ["Subject"]

    def test_different_lines_do_not_consume_budget(self):
        raw = "first junk\r\nSubject: Hi\r\nsecond junk\r\nthird junk\r\n"
        engine = HeaderRepairEngine(max_attempts=1)

        headers = engine.repair(raw, _parse_error(raw))
        assert headers["Subject"] == "Hi"

    def test_orphan_continuation_removed(self):
        raw = " orphan\r\nSubject: Hi\r\n"
        headers = HeaderRepairEngine().repair(raw, _parse_error(raw))
        assert headers["Subject"] == "Hi"


class TestBudget:
    def test_default_budget(self):
        assert DEFAULT_MAX_ATTEMPTS == 10

    def test_zero_budget_fails_immediately(self):
        raw = "Subject: Hi\r\ngarbage\r\n"
        with pytest.raises(ExportException) as exc_info:
            HeaderRepairEngine(max_attempts=0).repair(raw, _parse_error(raw))
        assert exc_info.value.code == ErrorCode.E_HEADER_UNRECOVERABLE
        assert exc_info.value.stage == "repair"

    def test_repeated_same_error_exhausts_budget(self):
        # The bare CR is dropped from the reported line, so omission never matches.
        raw = "Subject: Hi\r\nju\rnk\r\n"
        error = _parse_error(raw)

        with patch("pstkit_export.repair.parse_headers", wraps=parse_headers) as spy:
            with pytest.raises(ExportException) as exc_info:
                HeaderRepairEngine(max_attempts=3).repair(raw, error)

        assert exc_info.value.code == ErrorCode.E_HEADER_UNRECOVERABLE
        assert "malformed MIME header line: junk" in exc_info.value.message
        assert spy.call_count == 3

    def test_per_call_budget_overrides_default(self):
        raw = "Subject: Hi\r\ngarbage\r\n"
        engine = HeaderRepairEngine(max_attempts=0)

        headers = engine.repair(raw, _parse_error(raw), max_attempts=2)
        assert headers["Subject"] == "Hi"


class TestUnclassifiable:
    def test_other_errors_reraised_unchanged(self):
        error = RuntimeError("not a header problem")
        with pytest.raises(RuntimeError) as exc_info:
            HeaderRepairEngine().repair("Subject: Hi\r\n", error)
        assert exc_info.value is error
