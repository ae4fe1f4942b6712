"""File storage for persisted state and exported documents."""

import json
import logging
import os
import tempfile
from typing import Any, Dict

logger = logging.getLogger(__name__)


class ClipStorage:
    """Single JSON document holding settings and clipboard history."""

    def __init__(self, state_path: str):
        self.state_path = state_path

    def load(self) -> Dict[str, Any]:
        """Read the persisted document; missing or unreadable yields {}."""
        if not os.path.exists(self.state_path):
            return {}

        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read state from {self.state_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed state document in {self.state_path}")
            return {}
        return data

    def save(self, document: Dict[str, Any]) -> bool:
        """Atomically replace the persisted document."""
        directory = os.path.dirname(self.state_path) or "."
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=".state-", suffix=".json", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.state_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
            return True

        except OSError as e:
            logger.error(f"Storage error: {e}")
            return False


class VaultStorage:
    """Files addressed by paths relative to a root folder."""

    def __init__(self, root: str):
        self.root = root

    def _resolve(self, path: str) -> str:
        """Absolute path for a vault-relative path; refuses to leave the vault."""
        root = os.path.realpath(self.root)
        resolved = os.path.realpath(os.path.join(root, path))
        if os.path.commonpath([root, resolved]) != root:
            raise PermissionError(f"Path escapes the vault: {path}")
        return resolved

    def exists(self, path: str) -> bool:
        return os.path.exists(self._resolve(path))

    def create_folder(self, path: str):
        os.makedirs(self._resolve(path), exist_ok=True)

    def create(self, path: str, content: str):
        """Write a new file; raises FileExistsError if it is already there."""
        with open(self._resolve(path), "x", encoding="utf-8") as f:
            f.write(content)
