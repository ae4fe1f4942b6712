"""Clipboard and editor collaborators."""

from typing import Protocol

import pyperclip


class ClipboardSource(Protocol):
    """Read/write access to a text clipboard. Both calls may raise."""

    def read(self) -> str: ...

    def write(self, content: str) -> None: ...


class EditorTarget(Protocol):
    """Something that can receive pasted text at its cursor."""

    def insert_at_cursor(self, content: str) -> None: ...


class SystemClipboard:
    """System clipboard backed by pyperclip."""

    def read(self) -> str:
        return pyperclip.paste() or ""

    def write(self, content: str) -> None:
        pyperclip.copy(content)
