"""Clipboard polling loop."""

import asyncio
import logging
from typing import Optional

from clipboard_manager.core.clipboard import ClipboardSource
from clipboard_manager.core.history import HistoryStore
from clipboard_manager.core.notifier import NoticeBoard
from clipboard_manager.models.schemas import AppState

logger = logging.getLogger(__name__)

MIN_POLL_INTERVAL_MS = 100


class ChangeMonitor:
    """Polls a ClipboardSource on the running event loop and records changes."""

    def __init__(
        self,
        state: AppState,
        source: ClipboardSource,
        history: HistoryStore,
        notices: NoticeBoard,
    ):
        self.state = state
        self.source = source
        self.history = history
        self.notices = notices
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float:
        """Seconds between ticks, never below the minimum poll interval."""
        return max(self.state.settings.poll_interval_ms, MIN_POLL_INTERVAL_MS) / 1000

    def start(self):
        """Remember the current clipboard value and schedule polling."""
        if self._task is not None:
            self.stop()

        try:
            self.state.last_observed = self.source.read()
        except Exception as e:
            logger.warning(f"Could not read initial clipboard content: {e}")

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(self.interval))
        logger.info(f"Clipboard monitoring started ({self.interval:.3f}s interval)")

    def stop(self):
        """Cancel future ticks. A tick already running completes."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("Clipboard monitoring stopped")

    def restart(self):
        self.stop()
        self.start()

    async def _run(self, interval: float):
        while True:
            await asyncio.sleep(interval)
            self.check_clipboard()

    def check_clipboard(self) -> bool:
        """One poll tick. Returns True if new content was captured."""
        try:
            current = self.source.read()
        except Exception as e:
            logger.error(f"Error checking clipboard: {e}")
            return False

        if not current or current == self.state.last_observed:
            return False

        self.history.add(current)
        self.state.last_observed = current
        logger.debug(f"Captured clipboard content ({len(current)} chars)")

        if self.state.settings.notify_on_capture:
            self.notices.show("Clipboard content saved!")
        return True
