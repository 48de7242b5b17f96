from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from .document_loader import dump_document, load_document
from .models.funnel import FunnelDocument
from .models.record import FunnelRecord

logger = logging.getLogger(__name__)


class FunnelStore:
    """In-memory funnel persistence used in dev and tests.

    Documents are kept as JSON payloads and re-validated on read so the store
    behaves like the Firestore one.
    """

    def __init__(self) -> None:
        self._payloads: Dict[str, dict[str, Any]] = {}
        self._created: Dict[str, datetime] = {}
        self._updated: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def save_funnel(self, document: FunnelDocument | Mapping[str, Any]) -> FunnelRecord:
        document = load_document(document)
        now = datetime.now(timezone.utc)
        with self._lock:
            self._payloads[document.id] = dump_document(document)
            created = self._created.setdefault(document.id, now)
            self._updated[document.id] = now
        logger.info("Saved funnel", extra={"funnel_id": document.id, "steps": len(document.steps)})
        return FunnelRecord(document=document, created_at=created, updated_at=now)

    def get_funnel(self, funnel_id: str) -> FunnelRecord | None:
        with self._lock:
            payload = self._payloads.get(funnel_id)
            if payload is None:
                return None
            created, updated = self._created[funnel_id], self._updated[funnel_id]
        return FunnelRecord(document=load_document(payload), created_at=created, updated_at=updated)

    def list_funnels(self) -> list[FunnelRecord]:
        with self._lock:
            funnel_ids = sorted(self._payloads, key=lambda key: self._updated[key], reverse=True)
        records = [self.get_funnel(funnel_id) for funnel_id in funnel_ids]
        return [record for record in records if record is not None]

    def delete_funnel(self, funnel_id: str) -> bool:
        with self._lock:
            removed = self._payloads.pop(funnel_id, None) is not None
            self._created.pop(funnel_id, None)
            self._updated.pop(funnel_id, None)
        if removed:
            logger.info("Deleted funnel", extra={"funnel_id": funnel_id})
        return removed


__all__ = ["FunnelStore"]
