from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from funnel_builder.document_loader import dump_document
from funnel_builder.errors import InvalidDocument
from funnel_builder.firestore_store import FirestoreFunnelStore, FirestoreSubmissionStore
from funnel_builder.funnel_store import FunnelStore
from funnel_builder.logging_config import set_trace_id, setup_logging
from funnel_builder.models.quiz import Quiz, QuizSubmission, StyleResult, StyleType
from funnel_builder.models.record import FunnelRecord, FunnelSummary
from funnel_builder.quiz_repository import LocalQuizRepository
from funnel_builder.scoring import score_answers
from funnel_builder.submission_store import SubmissionStore


class FunnelResponse(BaseModel):
    id: str
    document: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def from_record(record: FunnelRecord) -> "FunnelResponse":
        return FunnelResponse(
            id=record.id,
            document=dump_document(record.document),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class SubmissionResponse(BaseModel):
    participant_id: str
    results: list[StyleResult]


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
QUIZ_DATA_DIR = os.getenv("QUIZ_DATA_DIR", "data/quizzes")

setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)

app = FastAPI(title="Funnel Builder API", version="0.1.0")

# Use Firestore in production, in-memory for dev
if ENVIRONMENT == "dev":
    funnel_store = FunnelStore()
    submission_store = SubmissionStore()
else:
    funnel_store = FirestoreFunnelStore(project_id=PROJECT_ID)
    submission_store = FirestoreSubmissionStore(project_id=PROJECT_ID)

quiz_repository = LocalQuizRepository(base_path=Path(QUIZ_DATA_DIR).resolve())


@app.middleware("http")
async def bind_trace_id(request: Request, call_next):
    header = request.headers.get("X-Cloud-Trace-Context")
    trace = header.split("/", 1)[0] if header else None
    if trace and PROJECT_ID:
        trace = f"projects/{PROJECT_ID}/traces/{trace}"
    set_trace_id(trace)
    return await call_next(request)


@app.post("/v1/funnels", response_model=FunnelResponse)
async def save_funnel(payload: dict[str, Any]) -> FunnelResponse:
    try:
        record = funnel_store.save_funnel(payload)
    except InvalidDocument as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return FunnelResponse.from_record(record)


@app.get("/v1/funnels", response_model=list[FunnelSummary])
async def list_funnels() -> list[FunnelSummary]:
    return [FunnelSummary.from_record(record) for record in funnel_store.list_funnels()]


@app.get("/v1/funnels/{funnel_id}", response_model=FunnelResponse)
async def get_funnel(funnel_id: str) -> FunnelResponse:
    record = funnel_store.get_funnel(funnel_id)
    if not record:
        raise HTTPException(status_code=404, detail="Funnel not found")
    return FunnelResponse.from_record(record)


@app.delete("/v1/funnels/{funnel_id}")
async def delete_funnel(funnel_id: str) -> JSONResponse:
    if not funnel_store.delete_funnel(funnel_id):
        raise HTTPException(status_code=404, detail="Funnel not found")
    return JSONResponse({"id": funnel_id, "deleted": True})


@app.get("/v1/quizzes/{quiz_id}", response_model=Quiz)
async def get_quiz(quiz_id: str) -> Quiz:
    return _load_quiz(quiz_id)


@app.get("/v1/quizzes/{quiz_id}/styles", response_model=list[StyleType])
async def get_quiz_styles(quiz_id: str) -> list[StyleType]:
    return _load_quiz(quiz_id).styles


@app.post("/v1/quizzes/{quiz_id}/submissions", response_model=SubmissionResponse)
async def submit_quiz(quiz_id: str, submission: QuizSubmission) -> SubmissionResponse:
    quiz = _load_quiz(quiz_id)
    if not quiz.active:
        raise HTTPException(status_code=409, detail="Quiz is not active")
    results = score_answers(quiz, submission.answers)
    record = submission_store.create_submission(quiz_id=quiz.id, submission=submission, results=results)
    return SubmissionResponse(participant_id=record.id, results=record.results)


def _load_quiz(quiz_id: str) -> Quiz:
    try:
        return quiz_repository.get(quiz_id=quiz_id)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Quiz not found") from exc


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
