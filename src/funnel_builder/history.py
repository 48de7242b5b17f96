from __future__ import annotations

import logging

from .models.editor import HistoryEntry
from .models.funnel import FunnelDocument

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class HistoryManager:
    """Bounded, linear snapshot history with a cursor.

    Entries before the cursor can be undone, entries after it redone.
    Recording after an undo discards the redo tail. Once ``limit`` is
    exceeded the oldest entry is evicted and the cursor stays on the newest.
    """

    def __init__(self, document: FunnelDocument, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self._limit = limit
        self._entries: list[HistoryEntry] = [HistoryEntry(document=document)]
        self._cursor = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> FunnelDocument:
        return self._entries[self._cursor].document

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, document: FunnelDocument) -> None:
        del self._entries[self._cursor + 1 :]
        self._entries.append(HistoryEntry(document=document))
        if len(self._entries) > self._limit:
            del self._entries[0]
            logger.debug("Evicted oldest history entry", extra={"history_limit": self._limit})
        self._cursor = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def undo(self) -> FunnelDocument | None:
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor].document

    def redo(self) -> FunnelDocument | None:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor].document

    def reset(self, document: FunnelDocument) -> None:
        self._entries = [HistoryEntry(document=document)]
        self._cursor = 0


__all__ = ["DEFAULT_HISTORY_LIMIT", "HistoryManager"]
