from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

from .models.quiz import Quiz

logger = logging.getLogger(__name__)

QUIZ_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")


class QuizRepository(Protocol):
    def get(self, *, quiz_id: str) -> Quiz:
        ...


class LocalQuizRepository:
    """Quiz definitions stored as ``<base_path>/<quiz_id>.json``.

    Ids outside letters, digits, ``-`` and ``_`` are treated as missing, so a
    request can never address a file outside ``base_path``.
    """

    def __init__(self, *, base_path: Path) -> None:
        self._base_path = base_path

    def get(self, *, quiz_id: str) -> Quiz:
        if not QUIZ_ID_PATTERN.fullmatch(quiz_id):
            raise FileNotFoundError(f"No quiz definition can exist for id {quiz_id!r}")
        file_path = self._base_path / f"{quiz_id}.json"
        if not file_path.is_file():
            raise FileNotFoundError(f"Quiz definition not found: {file_path}")
        quiz = Quiz.model_validate_json(file_path.read_text(encoding="utf-8"))
        if quiz.id != quiz_id:
            logger.warning("Quiz file id mismatch", extra={"quiz_id": quiz_id, "file_quiz_id": quiz.id})
        return quiz


__all__ = ["LocalQuizRepository", "QUIZ_ID_PATTERN", "QuizRepository"]
