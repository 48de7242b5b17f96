from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .document_loader import dump_document, load_document
from .models.funnel import FunnelDocument
from .models.quiz import QuizSubmission, StyleResult, SubmissionRecord
from .models.record import FunnelRecord

logger = logging.getLogger(__name__)


class FirestoreFunnelStore:
    """Firestore-backed funnel store for production use."""

    COLLECTION_NAME = "funnels"

    def __init__(self, project_id: str | None = None, *, client: Any | None = None) -> None:
        self._db = client if client is not None else firestore.Client(project=project_id)
        self._collection = self._db.collection(self.COLLECTION_NAME)

    def save_funnel(self, document: FunnelDocument | Mapping[str, Any]) -> FunnelRecord:
        """Create or overwrite the stored document, keeping its creation time."""
        document = load_document(document)
        now = datetime.now(timezone.utc)
        doc_ref = self._collection.document(document.id)

        existing = doc_ref.get()
        created_at = existing.to_dict().get("created_at", now) if existing.exists else now

        doc_ref.set({"document": dump_document(document), "created_at": created_at, "updated_at": now})

        logger.info(
            "Saved funnel",
            extra={"funnel_id": document.id, "steps": len(document.steps), "is_new": not existing.exists},
        )
        return FunnelRecord(document=document, created_at=created_at, updated_at=now)

    def get_funnel(self, funnel_id: str) -> FunnelRecord | None:
        doc = self._collection.document(funnel_id).get()
        if not doc.exists:
            return None
        return self._from_firestore_dict(doc.to_dict())

    def list_funnels(self, *, limit: int = 100) -> list[FunnelRecord]:
        query = self._collection.order_by("updated_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [self._from_firestore_dict(doc.to_dict()) for doc in query.stream()]

    def delete_funnel(self, funnel_id: str) -> bool:
        doc_ref = self._collection.document(funnel_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        logger.info("Deleted funnel", extra={"funnel_id": funnel_id})
        return True

    def _from_firestore_dict(self, data: dict) -> FunnelRecord:
        # Stored payloads go through the same validation as uploads.
        return FunnelRecord(
            document=load_document(data["document"]),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )


class FirestoreSubmissionStore:
    """Firestore-backed participant submissions."""

    COLLECTION_NAME = "quiz_submissions"

    def __init__(self, project_id: str | None = None, *, client: Any | None = None) -> None:
        self._db = client if client is not None else firestore.Client(project=project_id)
        self._collection = self._db.collection(self.COLLECTION_NAME)

    def create_submission(
        self,
        *,
        quiz_id: str,
        submission: QuizSubmission,
        results: list[StyleResult],
    ) -> SubmissionRecord:
        # Firestore assigns the document id.
        doc_ref = self._collection.document()
        record = SubmissionRecord(
            id=doc_ref.id,
            quiz_id=quiz_id,
            participant=submission.participant,
            answers=list(submission.answers),
            results=list(results),
        )
        doc_ref.set(record.model_dump(mode="json", exclude={"id", "created_at"}) | {"created_at": record.created_at})

        logger.info(
            "Created submission",
            extra={"submission_id": record.id, "quiz_id": quiz_id, "answers": len(record.answers)},
        )
        return record

    def get_submission(self, submission_id: str) -> SubmissionRecord | None:
        doc = self._collection.document(submission_id).get()
        if not doc.exists:
            return None
        return SubmissionRecord.model_validate({**doc.to_dict(), "id": doc.id})

    def list_submissions(self, *, quiz_id: str | None = None, limit: int = 100) -> list[SubmissionRecord]:
        query = self._collection
        if quiz_id is not None:
            query = query.where(filter=FieldFilter("quiz_id", "==", quiz_id))
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [SubmissionRecord.model_validate({**doc.to_dict(), "id": doc.id}) for doc in query.stream()]


__all__ = ["FirestoreFunnelStore", "FirestoreSubmissionStore"]
