"""Markdown export of clipboard entries."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from clipboard_manager.core.notifier import NoticeBoard
from clipboard_manager.core.storage import VaultStorage
from clipboard_manager.models.schemas import ClipboardEntry

logger = logging.getLogger(__name__)

MARKDOWN_INDICATORS = ("#", "```", "*", "- [")
DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def looks_like_markdown(content: str) -> bool:
    return any(marker in content for marker in MARKDOWN_INDICATORS)


def format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime(DISPLAY_TIME_FORMAT)


def export_filename(now: datetime) -> str:
    """UTC ISO-8601 timestamp with ':' and '.' made filename-safe."""
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    stamp += f".{now.microsecond // 1000:03d}Z"
    return stamp.replace(":", "-").replace(".", "-") + ".md"


def render_document(entries: Sequence[ClipboardEntry], now: datetime) -> str:
    """Build the export document for the given entries, in order."""
    parts: List[str] = [f"# Clipboard Export ({now.strftime(DISPLAY_TIME_FORMAT)})\n\n"]

    for index, entry in enumerate(entries, start=1):
        parts.append(f"## Entry {index} - {format_timestamp(entry.timestamp)}\n\n")
        if looks_like_markdown(entry.content):
            # Fenced copy keeps the exact text; the raw copy renders.
            parts.append("```markdown\n" + entry.content + "\n```\n\n")
            parts.append(entry.content + "\n\n")
        else:
            parts.append("```\n" + entry.content + "\n```\n\n")

    return "".join(parts)


class ExportBatcher:
    """Writes a batch of entries into one document under a vault folder."""

    def __init__(self, storage: VaultStorage, notices: NoticeBoard):
        self.storage = storage
        self.notices = notices

    def export(
        self,
        entries: Sequence[ClipboardEntry],
        destination_folder: str,
        max_count: int,
    ) -> Optional[str]:
        """Export the first max_count entries. Returns the new file's path."""
        limited = list(entries[:max_count])
        if not limited:
            self.notices.show("No entries to export")
            return None

        try:
            now = datetime.now().astimezone()
            document = render_document(limited, now)

            if not self.storage.exists(destination_folder):
                self.storage.create_folder(destination_folder)

            filename = f"{destination_folder}/{export_filename(now)}"
            self.storage.create(filename, document)

        except (OSError, ValueError, OverflowError) as e:
            logger.error(f"Error exporting clipboard entries: {e}")
            self.notices.show("Failed to export clipboard entries")
            return None

        self.notices.show(f"Exported {len(limited)} clipboard entries to {filename}")
        return filename
