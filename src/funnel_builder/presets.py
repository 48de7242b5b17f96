from __future__ import annotations

from typing import Any, Mapping

from .component_registry import DEFAULT_REGISTRY, ComponentRegistry
from .models.funnel import Component, ComponentKind, FunnelDocument, Step, StepKind, StepSettings

DEFAULT_FUNNEL_ID = "quiz-1"
DEFAULT_BACKGROUND = "#1f2937"

_STYLE_CHOICES = (
    ("1a", "Conforto, leveza e praticidade no vestir.", "natural", "11_hqmr8l.webp"),
    ("1b", "Discrição, caimento clássico e sobriedade.", "classico", "12_edlmwf.webp"),
    ("1c", "Praticidade com um toque de estilo atual.", "contemporaneo", "4_snhaym.webp"),
    ("1d", "Elegância refinada, moderna e sem exageros.", "elegante", "14_l2nprc.webp"),
)
_IMAGE_BASE = "https://res.cloudinary.com/dqljyf76t/image/upload/"


def _component(
    registry: ComponentRegistry,
    component_id: str,
    kind: ComponentKind,
    **properties: Any,
) -> Component:
    return Component(id=component_id, kind=kind, properties=registry.build_properties(kind, properties))


def _settings(*, show_progress: bool) -> Mapping[str, Any]:
    return {"settings": StepSettings(background_color=DEFAULT_BACKGROUND), "show_progress": show_progress}


def default_funnel_document(
    *,
    funnel_id: str = DEFAULT_FUNNEL_ID,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> FunnelDocument:
    """Starter funnel: intro, one style question and the result page."""
    intro = Step(
        id="intro",
        title="Introdução",
        kind=StepKind.intro,
        progress_percent=0,
        components=(
            _component(registry, "intro-title", ComponentKind.heading, text="Bem-vindo ao Quiz", color="#ffffff"),
            _component(
                registry,
                "intro-subtitle",
                ComponentKind.paragraph,
                text="Descubra seu estilo pessoal em poucos minutos",
                font_size="1.125rem",
                text_align="center",
                color="#9ca3af",
            ),
            _component(registry, "start-button", ComponentKind.button, label="Começar Quiz"),
        ),
        **_settings(show_progress=False),
    )
    question = Step(
        id="question-1",
        title="Pergunta 1",
        kind=StepKind.question,
        progress_percent=50,
        components=(
            _component(
                registry,
                "q1-title",
                ComponentKind.heading,
                text="Qual seu estilo favorito?",
                font_size="1.5rem",
                font_weight="600",
                color="#ffffff",
            ),
            _component(
                registry,
                "q1-options",
                ComponentKind.choice_group,
                options=[
                    {"id": option_id, "label": label, "value": value, "image_ref": _IMAGE_BASE + image}
                    for option_id, label, value, image in _STYLE_CHOICES
                ],
                allow_multiple=True,
                selection_limit=3,
                columns=2,
            ),
            _component(registry, "q1-button", ComponentKind.button, label="Continuar", background_color="#8B4513"),
        ),
        **_settings(show_progress=True),
    )
    result = Step(
        id="result-page",
        title="Resultado",
        kind=StepKind.result,
        progress_percent=100,
        components=(
            _component(registry, "result-title", ComponentKind.heading, text="Seu Resultado", color="#ffffff"),
        ),
        **_settings(show_progress=False),
    )
    return FunnelDocument(
        id=funnel_id,
        name="Meu Quiz",
        steps=(intro, question, result),
        config={"theme": "dark", "colors": {"primary": "#3b82f6", "secondary": "#6b7280", "background": DEFAULT_BACKGROUND}},
    )


__all__ = ["DEFAULT_FUNNEL_ID", "default_funnel_document"]
