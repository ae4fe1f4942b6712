"""Data models for the Clipboard Manager."""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

PREVIEW_MAX_LENGTH = 100

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def now_ms() -> int:
    return int(time.time() * 1000)


def create_preview(content: str, max_length: int = PREVIEW_MAX_LENGTH) -> str:
    """Single-line summary of content, truncated with an ellipsis."""
    flattened = _LINE_BREAKS.sub(" ", content.strip())
    if len(flattened) > max_length:
        return flattened[:max_length] + "..."
    return flattened


class ClipboardEntry(BaseModel):
    """One captured clipboard snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    timestamp: int
    preview: str

    @classmethod
    def create(cls, content: str, timestamp: Optional[int] = None) -> "ClipboardEntry":
        """Build an entry stamped with the current time in milliseconds."""
        if timestamp is None:
            timestamp = now_ms()
        return cls(
            id=str(timestamp),
            content=content,
            timestamp=timestamp,
            preview=create_preview(content),
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ClipboardEntry":
        """Load a persisted record, deriving the preview if it is missing."""
        data = dict(record)
        if "preview" not in data and isinstance(data.get("content"), str):
            data["preview"] = create_preview(data["content"])
        return cls.model_validate(data)


class Settings(BaseModel):
    """User settings, persisted with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    max_entries: int = Field(default=100, ge=1)
    poll_interval_ms: int = Field(default=1000, ge=100)
    notify_on_capture: bool = False
    export_folder_path: str = Field(default="clipboard", min_length=1)
    export_default_count: int = Field(default=50, ge=1)

    @classmethod
    def from_persisted(cls, data: Any) -> "Settings":
        """Populate each field independently, falling back to its default."""
        settings = cls()
        if not isinstance(data, dict):
            return settings

        for name, info in cls.model_fields.items():
            key = info.alias or name
            if key in data:
                settings = settings.with_value(name, data[key])
            elif name in data:
                settings = settings.with_value(name, data[name])
        return settings

    def with_value(self, name: str, value: Any) -> "Settings":
        """Return a copy with one field replaced, or self if the value is invalid."""
        if name not in type(self).model_fields:
            return self
        try:
            return type(self).model_validate({**self.model_dump(), name: value})
        except ValidationError:
            return self

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass
class AppState:
    """Mutable application state owned by the root component."""

    settings: Settings = field(default_factory=Settings)
    history: List[ClipboardEntry] = field(default_factory=list)
    last_observed: str = ""
