from __future__ import annotations

from funnel_builder.models.quiz import AnswerSubmission, QuestionOption, Quiz, QuizQuestion
from funnel_builder.scoring import score_answers


def build_quiz() -> Quiz:
    return Quiz(
        id="quiz-teste",
        title="Quiz",
        questions=[
            QuizQuestion(
                id="q1",
                title="Roupa favorita",
                options=[
                    QuestionOption(id="o-natural", text="Conforto", style_code="natural"),
                    QuestionOption(id="o-classico", text="Discrição", style_code="classico"),
                    QuestionOption(id="o-elegante", text="Refinada", style_code="elegante", points=2),
                    QuestionOption(id="o-neutra", text="Nenhuma"),
                ],
            )
        ],
    )


def answer(option_id: str, points: int | None = None) -> AnswerSubmission:
    return AnswerSubmission(question_id="q1", option_id=option_id, points=points)


def test_points_percentages_and_ranks():
    results = score_answers(build_quiz(), [answer("o-natural"), answer("o-elegante"), answer("o-natural")])

    assert [(r.style_code, r.points, r.rank) for r in results] == [("natural", 2, 1), ("elegante", 2, 2)]
    assert [r.percentage for r in results] == [50.0, 50.0]
    assert [r.is_primary for r in results] == [True, False]


def test_ties_keep_first_accumulated_style_ahead():
    results = score_answers(build_quiz(), [answer("o-classico"), answer("o-natural")])

    assert [r.style_code for r in results] == ["classico", "natural"]


def test_answer_points_override_option_points():
    results = score_answers(build_quiz(), [answer("o-natural", points=3), answer("o-classico")])

    assert results[0].style_code == "natural"
    assert results[0].percentage == 75.0
    assert results[1].percentage == 25.0


def test_percentages_are_rounded():
    results = score_answers(build_quiz(), [answer("o-natural"), answer("o-natural"), answer("o-classico")])

    assert [r.percentage for r in results] == [66.67, 33.33]


def test_unknown_and_unstyled_options_are_skipped():
    assert score_answers(build_quiz(), [answer("o-neutra"), answer("missing")]) == []


def test_zero_total_gives_zero_percentages():
    results = score_answers(build_quiz(), [answer("o-natural", points=0)])

    assert results[0].percentage == 0.0
    assert results[0].is_primary

