"""Root component that owns application state and wires the core together."""

import logging
from typing import Any, Dict, List, Optional

from clipboard_manager.core.clipboard import ClipboardSource, EditorTarget
from clipboard_manager.core.exporter import ExportBatcher
from clipboard_manager.core.history import HistoryStore
from clipboard_manager.core.monitor import ChangeMonitor
from clipboard_manager.core.notifier import NoticeBoard, UpdateNotifier
from clipboard_manager.core.storage import ClipStorage, VaultStorage
from clipboard_manager.models.schemas import AppState, ClipboardEntry, Settings

logger = logging.getLogger(__name__)

HISTORY_KEY = "clipboardHistory"
PASTE_RESULT_LIMIT = 10


class ClipboardManager:
    """Clipboard history with monitoring, search, reuse and export."""

    def __init__(
        self,
        clipboard: ClipboardSource,
        storage: ClipStorage,
        vault: VaultStorage,
    ):
        self.state = AppState()
        self.clipboard = clipboard
        self.storage = storage

        self.notifier = UpdateNotifier()
        self.notices = NoticeBoard()
        self.history = HistoryStore(
            self.state, self.notifier, self.notices, persist=self.save_state
        )
        self.monitor = ChangeMonitor(
            self.state, clipboard, self.history, self.notices
        )
        self.exporter = ExportBatcher(vault, self.notices)

    @property
    def settings(self) -> Settings:
        return self.state.settings

    def load(self):
        """Populate settings and history from the persisted document."""
        data = self.storage.load()
        self.state.settings = Settings.from_persisted(data)

        records = data.get(HISTORY_KEY) or []
        if not isinstance(records, list):
            logger.warning(f"Ignoring non-list {HISTORY_KEY} in persisted state")
            records = []
        count = self.history.hydrate(records)
        logger.info(f"Loaded {count} clipboard entries")

    def document(self) -> Dict[str, Any]:
        data = self.state.settings.to_document()
        data[HISTORY_KEY] = [entry.model_dump() for entry in self.state.history]
        return data

    def save_state(self) -> bool:
        return self.storage.save(self.document())

    def start(self):
        self.monitor.start()

    def shutdown(self):
        self.monitor.stop()
        self.save_state()

    def update_settings(self, **values: Any) -> Settings:
        """Apply setting changes; invalid values keep the previous setting."""
        previous = self.state.settings
        settings = previous
        for name, value in values.items():
            settings = settings.with_value(name, value)

        if settings == previous:
            return settings

        self.state.settings = settings
        self.save_state()

        if (
            settings.poll_interval_ms != previous.poll_interval_ms
            and self.monitor.is_running
        ):
            self.monitor.restart()
        return settings

    def search(self, query: str = "") -> List[ClipboardEntry]:
        return self.history.search(query)

    def delete_entry(self, entry_id: str) -> int:
        return self.history.delete(entry_id)

    def clear_history(self):
        self.history.clear()

    def copy_to_clipboard(self, content: str) -> bool:
        """Put content on the clipboard. Leaves the monitor's last value alone."""
        try:
            self.clipboard.write(content)
        except Exception as e:
            logger.error(f"Error copying to clipboard: {e}")
            self.notices.show("Failed to copy to clipboard")
            return False

        self.notices.show("Copied to clipboard!")
        return True

    def paste_entry(self, entry: ClipboardEntry, editor: Optional[EditorTarget]):
        if editor is not None:
            editor.insert_at_cursor(entry.content)

    def paste_candidates(
        self, query: str = "", limit: int = PASTE_RESULT_LIMIT
    ) -> List[ClipboardEntry]:
        return self.history.search(query)[:limit]

    def paste_first_result(
        self, query: str, editor: Optional[EditorTarget]
    ) -> Optional[ClipboardEntry]:
        results = self.history.search(query)
        if not results:
            return None
        self.paste_entry(results[0], editor)
        return results[0]

    def export(
        self,
        query: str = "",
        folder: Optional[str] = None,
        max_count: Optional[int] = None,
    ) -> Optional[str]:
        """Export matching entries, newest first, using settings defaults."""
        return self.exporter.export(
            self.history.search(query),
            folder or self.state.settings.export_folder_path,
            max_count or self.state.settings.export_default_count,
        )
