from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .funnel import FunnelDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    document: FunnelDocument
    timestamp: datetime = Field(default_factory=_utcnow)


class Selection(BaseModel):
    model_config = ConfigDict(frozen=True)

    active_step_id: str
    active_component_id: str | None = None


class EditorState(BaseModel):
    """Derived editor view handed to observers after every change."""

    model_config = ConfigDict(frozen=True)

    document: FunnelDocument
    selection: Selection
    can_undo: bool
    can_redo: bool
    history_size: int
    history_cursor: int


__all__ = ["EditorState", "HistoryEntry", "Selection"]
