from __future__ import annotations

import logging
from typing import Iterable

from .models.quiz import AnswerSubmission, Quiz, StyleResult

logger = logging.getLogger(__name__)


def score_answers(quiz: Quiz, answers: Iterable[AnswerSubmission]) -> list[StyleResult]:
    """Weighted-sum style scoring.

    Each answer adds its points (or, when it carries none, the option's points)
    to the option's style. Answers pointing at unknown options or options
    without a style are skipped. Styles are ranked by descending points; ties
    keep the order in which the styles were first accumulated.
    """
    style_points: dict[str, int] = {}
    for answer in answers:
        option = quiz.find_option(answer.option_id)
        if option is None or not option.style_code:
            logger.debug(
                "Skipping unscored answer",
                extra={"quiz_id": quiz.id, "question_id": answer.question_id, "option_id": answer.option_id},
            )
            continue
        points = answer.points if answer.points is not None else option.points
        style_points[option.style_code] = style_points.get(option.style_code, 0) + points

    total = sum(style_points.values())
    ranked = sorted(style_points.items(), key=lambda item: item[1], reverse=True)
    results = []
    for rank, (style_code, points) in enumerate(ranked, start=1):
        percentage = round(points / total * 100, 2) if total else 0.0
        results.append(
            StyleResult(style_code=style_code, points=points, percentage=percentage, rank=rank, is_primary=rank == 1)
        )
    return results


__all__ = ["score_answers"]
