from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, EmailStr, Field


class StyleType(BaseModel):
    id: str = Field(..., description="Style code referenced by question options")
    name: str
    description: str | None = None
    color_primary: str | None = None
    color_secondary: str | None = None


class QuestionOption(BaseModel):
    id: str
    text: str
    image_url: str | None = None
    points: int = 1
    style_code: str | None = None
    order_index: int = 0


class QuizQuestion(BaseModel):
    id: str
    title: str
    kind: str = "multiple-choice"
    order_index: int = 0
    required_selections: int = Field(default=1, ge=1)
    options: list[QuestionOption] = Field(default_factory=list)


class Quiz(BaseModel):
    id: str
    title: str
    description: str | None = None
    active: bool = True
    styles: list[StyleType] = Field(default_factory=list)
    questions: list[QuizQuestion] = Field(default_factory=list)

    def find_option(self, option_id: str) -> QuestionOption | None:
        for question in self.questions:
            for option in question.options:
                if option.id == option_id:
                    return option
        return None


class ParticipantData(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None


class AnswerSubmission(BaseModel):
    question_id: str
    option_id: str
    points: int | None = Field(default=None, description="Overrides the option's points when set")


class QuizSubmission(BaseModel):
    participant: ParticipantData
    answers: list[AnswerSubmission] = Field(..., min_length=1)


class StyleResult(BaseModel):
    style_code: str
    points: int
    percentage: float
    rank: int
    is_primary: bool


class SubmissionRecord(BaseModel):
    id: str
    quiz_id: str
    participant: ParticipantData
    answers: list[AnswerSubmission]
    results: list[StyleResult]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    "AnswerSubmission",
    "ParticipantData",
    "QuestionOption",
    "Quiz",
    "QuizQuestion",
    "QuizSubmission",
    "StyleResult",
    "StyleType",
    "SubmissionRecord",
]
