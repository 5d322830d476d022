"""In-memory archive fakes satisfying the pstkit_core archive protocols."""

from __future__ import annotations

from pathlib import Path

PLAIN_BODY = "Hello, this is a test email body."
HTML_BODY = "<html><body><p>Hello, this is <b>HTML</b> body.</p></body></html>"

DEFAULT_HEADERS = (
    "From: sender@example.com\r\n"
    "To: recipient@example.com\r\n"
    "Subject: Test Subject\r\n"
    "Date: Mon, 17 Feb 2026 12:00:00 +0000\r\n"
    "Message-ID: <test-123@example.com>\r\n"
)


class _Failing:
    """Raise the configured exception when a named method is called."""

    def __init__(self, errors: dict[str, BaseException] | None = None) -> None:
        self.errors = dict(errors or {})
        self.calls: list[str] = []

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.errors:
            raise self.errors[name]


class FakeAttachment(_Failing):
    def __init__(self, long_filename=None, filename=None, data=b"", errors=None):
        super().__init__(errors)
        self.long_filename = long_filename
        self.filename = filename
        self.data = data

    def get_long_filename(self):
        self._call("get_long_filename")
        return self.long_filename

    def get_filename(self):
        self._call("get_filename")
        return self.filename

    def read_all(self):
        self._call("read_all")
        return self.data


class FakeMessage(_Failing):
    def __init__(
        self,
        headers=DEFAULT_HEADERS,
        body=PLAIN_BODY,
        body_html=None,
        attachments=(),
        errors=None,
    ):
        super().__init__(errors)
        self.headers = headers
        self.body = body
        self.body_html = body_html
        self.attachments = list(attachments)

    def get_headers(self):
        self._call("get_headers")
        return self.headers

    def get_body(self):
        self._call("get_body")
        return self.body

    def get_body_html(self):
        self._call("get_body_html")
        return self.body_html

    def get_attachments(self):
        self._call("get_attachments")
        return list(self.attachments)


class FakeFolder:
    def __init__(self, display_name, messages=(), sub_folders=()):
        self.display_name = display_name
        self.messages = list(messages)
        self.sub_folders = list(sub_folders)


class FakeArchive(_Failing):
    def __init__(
        self,
        root,
        valid_signature=True,
        format_type="PST",
        encryption_type="none",
        errors=None,
    ):
        super().__init__(errors)
        self.root = root
        self.valid_signature = valid_signature
        self.format_type = format_type
        self.encryption_type = encryption_type
        self.close_calls = 0

    def is_valid_signature(self):
        self._call("is_valid_signature")
        return self.valid_signature

    def get_format_type(self):
        self._call("get_format_type")
        return self.format_type

    def get_encryption_type(self):
        self._call("get_encryption_type")
        return self.encryption_type

    def initialize(self):
        self._call("initialize")

    def get_root_folder(self):
        self._call("get_root_folder")
        return self.root

    def get_sub_folders(self, folder):
        self._call("get_sub_folders")
        return list(folder.sub_folders)

    def get_messages(self, folder):
        self._call("get_messages")
        return list(folder.messages)

    def close(self):
        self.close_calls += 1
        self._call("close")


class RecordingStrategy:
    """Export strategy that records every message it is handed."""

    name = "recording"

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.exported: list[tuple[str, int, object]] = []

    def export(self, archive, message, message_index, folder, context):
        if (folder.display_name, message_index) in self.fail_on:
            raise RuntimeError("export failed")
        self.exported.append((folder.display_name, message_index, message))
        return Path(context.output_directory) / folder.display_name / f"{message_index}.eml"
