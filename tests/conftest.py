from __future__ import annotations

from pathlib import Path

import pytest

from funnel_builder.editor import FunnelEditor
from funnel_builder.models.funnel import Component, ComponentKind, FunnelDocument, Step, StepKind

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def make_document() -> FunnelDocument:
    """Steps ``[A, B]`` with A holding components ``[x, y]``."""
    return FunnelDocument(
        id="funnel-1",
        name="Quiz de Estilo",
        steps=(
            Step(
                id="A",
                title="Introdução",
                kind=StepKind.intro,
                progress_percent=0,
                components=(
                    Component(id="x", kind=ComponentKind.heading, properties={"text": "Olá", "level": 1}),
                    Component(id="y", kind=ComponentKind.button, properties={"label": "Começar", "disabled": False}),
                ),
            ),
            Step(id="B", title="Pergunta 1", progress_percent=50),
        ),
    )


def component_ids(document: FunnelDocument, step_id: str) -> list[str]:
    for step in document.steps:
        if step.id == step_id:
            return [component.id for component in step.components]
    raise AssertionError(f"missing step {step_id}")


def step_ids(document: FunnelDocument) -> list[str]:
    return [step.id for step in document.steps]


@pytest.fixture
def document() -> FunnelDocument:
    return make_document()


@pytest.fixture
def editor(document: FunnelDocument) -> FunnelEditor:
    return FunnelEditor(document)


@pytest.fixture
def quiz_dir() -> Path:
    return DATA_DIR / "quizzes"
