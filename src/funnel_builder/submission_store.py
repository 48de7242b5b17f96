from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict

from .models.quiz import QuizSubmission, StyleResult, SubmissionRecord

logger = logging.getLogger(__name__)


class SubmissionStore:
    def __init__(self) -> None:
        self._submissions: Dict[str, SubmissionRecord] = {}
        self._lock = threading.Lock()

    def create_submission(
        self,
        *,
        quiz_id: str,
        submission: QuizSubmission,
        results: list[StyleResult],
    ) -> SubmissionRecord:
        with self._lock:
            record = SubmissionRecord(
                id=self._generate_id(),
                quiz_id=quiz_id,
                participant=submission.participant,
                answers=list(submission.answers),
                results=list(results),
            )
            self._submissions[record.id] = record
        logger.info(
            "Created submission",
            extra={"submission_id": record.id, "quiz_id": quiz_id, "answers": len(record.answers)},
        )
        return record

    def get_submission(self, submission_id: str) -> SubmissionRecord | None:
        with self._lock:
            return self._submissions.get(submission_id)

    def list_submissions(self, *, quiz_id: str | None = None) -> list[SubmissionRecord]:
        with self._lock:
            records = list(self._submissions.values())
        if quiz_id is not None:
            records = [record for record in records if record.quiz_id == quiz_id]
        return records

    def _generate_id(self) -> str:
        return f"participant_{uuid.uuid4().hex[:12]}"


__all__ = ["SubmissionStore"]
