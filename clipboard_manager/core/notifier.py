"""Observer fan-out for history changes and user-visible notices."""

import logging
from collections import deque
from typing import Callable, Deque, List

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class UpdateNotifier:
    """Registry of zero-argument callbacks invoked after history mutations."""

    def __init__(self):
        self._callbacks: List[Callback] = []

    def register(self, callback: Callback):
        if not any(cb == callback for cb in self._callbacks):
            self._callbacks.append(callback)

    def unregister(self, callback: Callback):
        self._callbacks = [cb for cb in self._callbacks if cb != callback]

    def notify_all(self):
        """Invoke every registered callback on the calling thread."""
        for callback in list(self._callbacks):
            callback()

    def __len__(self) -> int:
        return len(self._callbacks)


class NoticeBoard:
    """Advisory messages for the user, kept until drained."""

    def __init__(self, max_size: int = 50):
        self._pending: Deque[str] = deque(maxlen=max_size)

    def show(self, message: str):
        logger.info(f"Notice: {message}")
        self._pending.append(message)

    def drain(self) -> List[str]:
        """Return pending notices and forget them."""
        messages = list(self._pending)
        self._pending.clear()
        return messages
