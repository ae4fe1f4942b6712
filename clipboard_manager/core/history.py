"""Bounded, newest-first clipboard history."""

import logging
from typing import Any, Callable, Iterable, List, Optional

from pydantic import ValidationError

from clipboard_manager.core.notifier import NoticeBoard, UpdateNotifier
from clipboard_manager.models.schemas import AppState, ClipboardEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """Clipboard entries held in AppState, capped at settings.max_entries.

    Every mutation persists state and then notifies observers. Capacity is
    enforced only when an entry is added, so lowering ``max_entries`` takes
    effect on the next capture.
    """

    def __init__(
        self,
        state: AppState,
        notifier: UpdateNotifier,
        notices: NoticeBoard,
        persist: Optional[Callable[[], Any]] = None,
    ):
        self.state = state
        self.notifier = notifier
        self.notices = notices
        self._persist = persist

    @property
    def entries(self) -> List[ClipboardEntry]:
        return list(self.state.history)

    def __len__(self) -> int:
        return len(self.state.history)

    def hydrate(self, records: Iterable[Any]) -> int:
        """Replace history with persisted records, skipping malformed ones."""
        history = []
        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping non-object history record: {record!r}")
                continue
            try:
                history.append(ClipboardEntry.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed history record: {e}")
        self.state.history = history
        return len(history)

    def add(self, content: str) -> Optional[ClipboardEntry]:
        """Prepend a new entry and evict the oldest beyond capacity."""
        if not content:
            return None

        entry = ClipboardEntry.create(content)
        history = [entry] + self.state.history
        max_entries = self.state.settings.max_entries
        if len(history) > max_entries:
            history = history[:max_entries]
        self.state.history = history

        self._changed()
        return entry

    def get(self, entry_id: str) -> Optional[ClipboardEntry]:
        for entry in self.state.history:
            if entry.id == entry_id:
                return entry
        return None

    def delete(self, entry_id: str) -> int:
        """Remove every entry with this id. Returns how many were removed."""
        before = len(self.state.history)
        self.state.history = [e for e in self.state.history if e.id != entry_id]
        removed = before - len(self.state.history)

        self._changed()
        return removed

    def clear(self):
        self.state.history = []
        self._changed()
        self.notices.show("Clipboard history cleared!")

    def search(self, query: str) -> List[ClipboardEntry]:
        """Case-insensitive substring match over content and preview."""
        if not query:
            return self.state.history

        needle = query.casefold()
        return [
            entry
            for entry in self.state.history
            if needle in entry.content.casefold() or needle in entry.preview.casefold()
        ]

    def _changed(self):
        if self._persist is not None:
            self._persist()
        self.notifier.notify_all()
