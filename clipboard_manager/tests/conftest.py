"""Shared fixtures and in-memory collaborators."""

import os
import shutil
import tempfile

import pytest

from clipboard_manager.core.manager import ClipboardManager
from clipboard_manager.core.storage import ClipStorage, VaultStorage


class FakeClipboard:
    """In-memory clipboard; set ``error`` to make reads and writes fail."""

    def __init__(self, content: str = ""):
        self.content = content
        self.error = None
        self.reads = 0

    def read(self) -> str:
        self.reads += 1
        if self.error:
            raise self.error
        return self.content

    def write(self, content: str):
        if self.error:
            raise self.error
        self.content = content


class FakeEditor:
    def __init__(self):
        self.inserted = []

    def insert_at_cursor(self, content: str):
        self.inserted.append(content)


@pytest.fixture
def temp_dir():
    path = tempfile.mkdtemp()
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def manager(temp_dir, clipboard):
    """Manager backed by a temporary state file and vault."""
    return ClipboardManager(
        clipboard=clipboard,
        storage=ClipStorage(os.path.join(temp_dir, "state.json")),
        vault=VaultStorage(os.path.join(temp_dir, "vault")),
    )


@pytest.fixture
def editor():
    return FakeEditor()
