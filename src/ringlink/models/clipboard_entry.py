from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional, Tuple

from pydantic import BaseModel
from ulid import ULID

EntryKind = Literal["text", "image"]


@dataclass(frozen=True)
class ClipboardEntry:
    """Immutable snapshot of one distinct clipboard state."""
    kind: EntryKind
    content: str
    preview: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    size: Optional[Tuple[int, int]] = None
    entry_id: str = field(default_factory=lambda: f"c_{ULID()}")


class HistoryEntryView(BaseModel):
    id: str
    type: EntryKind
    preview: str
    content: Optional[str] = None  # only text entries expose their content
    timestamp: datetime
    time_ago: str
