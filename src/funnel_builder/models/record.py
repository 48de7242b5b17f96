from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .funnel import FunnelDocument


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FunnelRecord(BaseModel):
    """A stored funnel document with bookkeeping timestamps."""

    document: FunnelDocument
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def id(self) -> str:
        return self.document.id


class FunnelSummary(BaseModel):
    id: str
    name: str
    step_count: int
    updated_at: datetime

    @staticmethod
    def from_record(record: FunnelRecord) -> "FunnelSummary":
        return FunnelSummary(
            id=record.document.id,
            name=record.document.name,
            step_count=len(record.document.steps),
            updated_at=record.updated_at,
        )


__all__ = ["FunnelRecord", "FunnelSummary"]
