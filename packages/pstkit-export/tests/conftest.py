"""Shared fixtures for pstkit-export tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fakes import (
    HTML_BODY,
    FakeArchive,
    FakeAttachment,
    FakeFolder,
    FakeMessage,
)
from pstkit_export.config import ExportContext


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def context(output_dir: Path) -> ExportContext:
    """Default context writing below a temp directory."""
    return ExportContext(input_file="test.pst", output_directory=str(output_dir))


@pytest.fixture
def plaintext_context(output_dir: Path) -> ExportContext:
    return ExportContext(
        input_file="test.pst", output_directory=str(output_dir), plaintext_only=True
    )


@pytest.fixture
def sample_tree() -> FakeFolder:
    """Root -> [Inbox -> [Projects], Sent], with messages in every child."""
    projects = FakeFolder("Projects", messages=[FakeMessage()])
    inbox = FakeFolder(
        "Inbox",
        messages=[
            FakeMessage(),
            FakeMessage(
                body_html=HTML_BODY,
                attachments=[FakeAttachment(long_filename="notes.txt", data=b"notes")],
            ),
        ],
        sub_folders=[projects],
    )
    sent = FakeFolder("Sent", messages=[FakeMessage()])
    return FakeFolder(
        "Top of Personal Folders",
        messages=[FakeMessage()],
        sub_folders=[inbox, sent],
    )


@pytest.fixture
def sample_archive(sample_tree: FakeFolder) -> FakeArchive:
    return FakeArchive(sample_tree)
