from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class ComponentKind(str, Enum):
    heading = "heading"
    paragraph = "paragraph"
    image = "image"
    video = "video"
    logo = "logo"
    button = "button"
    text_input = "text_input"
    choice_group = "choice_group"
    spacer = "spacer"
    divider = "divider"
    embed = "embed"
    price = "price"
    countdown = "countdown"
    testimonial = "testimonial"
    guarantee = "guarantee"
    bonus = "bonus"
    faq = "faq"
    social_proof = "social_proof"
    progress = "progress"


class StepKind(str, Enum):
    intro = "intro"
    question = "question"
    strategic_question = "strategic_question"
    transition = "transition"
    loading = "loading"
    lead_capture = "lead_capture"
    result = "result"
    offer = "offer"
    sales = "sales"
    checkout = "checkout"
    upsell = "upsell"
    thankyou = "thankyou"


class ChoiceOption(BaseModel):
    id: str
    label: str
    value: str
    image_ref: str | None = None


class Component(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: ComponentKind
    properties: Mapping[str, Any] = Field(default_factory=dict)


class StepSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    background_color: str | None = None
    background_image: str | None = None
    auto_advance: bool = False
    time_limit: int | None = Field(default=None, ge=0, description="Seconds before auto-advance")
    redirect_url: str | None = None


class Step(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    kind: StepKind = StepKind.question
    progress_percent: int = Field(default=0, ge=0, le=100)
    show_header: bool = True
    show_progress: bool = True
    components: tuple[Component, ...] = ()
    settings: StepSettings = Field(default_factory=StepSettings)


class FunnelDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    steps: tuple[Step, ...]
    config: Mapping[str, Any] = Field(default_factory=dict)


class ComponentDraft(BaseModel):
    """Insertion intent for a component; ``id`` is generated when omitted."""

    model_config = ConfigDict(frozen=True)

    kind: ComponentKind
    properties: Mapping[str, Any] = Field(default_factory=dict)
    id: str | None = None


class StepDraft(BaseModel):
    """Insertion intent for a step; ``progress_percent`` is derived when omitted."""

    model_config = ConfigDict(frozen=True)

    title: str
    kind: StepKind = StepKind.question
    progress_percent: int | None = Field(default=None, ge=0, le=100)
    show_header: bool = True
    show_progress: bool = True
    settings: StepSettings = Field(default_factory=StepSettings)
    components: tuple[ComponentDraft, ...] = ()
    id: str | None = None


__all__ = [
    "ChoiceOption",
    "Component",
    "ComponentDraft",
    "ComponentKind",
    "FunnelDocument",
    "Step",
    "StepDraft",
    "StepKind",
    "StepSettings",
]
