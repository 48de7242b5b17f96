"""Pure edit operations over :class:`FunnelDocument` snapshots.

Every function takes a document plus an edit intent and returns a new
document, leaving the input untouched. An edit that changes nothing returns
the input object itself so callers can skip recording it. Removing an id that
is already gone is a no-op; any other reference to a missing id raises
:class:`NotFound`.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from .component_registry import DEFAULT_REGISTRY, ComponentRegistry
from .errors import InvalidOperation, NotFound
from .models.funnel import Component, ComponentDraft, FunnelDocument, Step, StepDraft, StepSettings
from .node_store import collect_ids, locate_component, step_index

STEP_FLAGS = ("show_header", "show_progress")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def generate_id(prefix: str, taken: set[str]) -> str:
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


def coerce_model(model: type[_ModelT], value: _ModelT | Mapping[str, Any]) -> _ModelT:
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise InvalidOperation(f"Invalid {model.__name__}: {exc.errors()[0]['msg']}") from exc


def _check_index(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOperation(f"{name} must be an integer, got {value!r}")


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


def _with_step(document: FunnelDocument, s_index: int, step: Step) -> FunnelDocument:
    steps = list(document.steps)
    steps[s_index] = step
    return document.model_copy(update={"steps": tuple(steps)})


def _with_components(step: Step, components: list[Component]) -> Step:
    return step.model_copy(update={"components": tuple(components)})


def _claim_id(requested: str | None, prefix: str, taken: set[str]) -> str:
    if requested is not None:
        if requested in taken:
            raise InvalidOperation(f"Id already in use: {requested}")
        node_id = requested
    else:
        node_id = generate_id(prefix, taken)
    taken.add(node_id)
    return node_id


def _build_component(draft: ComponentDraft, taken: set[str], registry: ComponentRegistry) -> Component:
    properties = registry.build_properties(draft.kind, draft.properties)
    node_id = _claim_id(draft.id, draft.kind.value, taken)
    return Component(id=node_id, kind=draft.kind, properties=properties)


def insert_component(
    document: FunnelDocument,
    step_id: str,
    draft: ComponentDraft | Mapping[str, Any],
    at_index: int | None = None,
    *,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> FunnelDocument:
    draft = coerce_model(ComponentDraft, draft)
    if at_index is not None:
        _check_index(at_index, "at_index")
    s_index = step_index(document, step_id)
    if s_index is None:
        raise NotFound(f"Step not found: {step_id}")

    component = _build_component(draft, collect_ids(document), registry)
    step = document.steps[s_index]
    components = list(step.components)
    position = len(components) if at_index is None else _clamp(at_index, len(components))
    components.insert(position, component)
    return _with_step(document, s_index, _with_components(step, components))


def update_component(
    document: FunnelDocument,
    component_id: str,
    patch: Mapping[str, Any],
    *,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> FunnelDocument:
    position = locate_component(document, component_id)
    if position is None:
        raise NotFound(f"Component not found: {component_id}")
    s_index, c_index = position
    step = document.steps[s_index]
    component = step.components[c_index]

    patch = registry.validate_properties(component.kind, patch)
    if {**component.properties, **patch} == dict(component.properties):
        return document
    # Snapshots must not share nested values such as option lists.
    properties = {**copy.deepcopy(dict(component.properties)), **patch}
    components = list(step.components)
    components[c_index] = component.model_copy(update={"properties": properties})
    return _with_step(document, s_index, _with_components(step, components))


def remove_component(document: FunnelDocument, component_id: str) -> FunnelDocument:
    position = locate_component(document, component_id)
    if position is None:
        return document
    s_index, c_index = position
    step = document.steps[s_index]
    components = list(step.components)
    del components[c_index]
    return _with_step(document, s_index, _with_components(step, components))


def move_component(
    document: FunnelDocument,
    component_id: str,
    to_step_id: str,
    to_index: int,
) -> FunnelDocument:
    _check_index(to_index, "to_index")
    position = locate_component(document, component_id)
    if position is None:
        raise NotFound(f"Component not found: {component_id}")
    target_index = step_index(document, to_step_id)
    if target_index is None:
        raise NotFound(f"Step not found: {to_step_id}")
    s_index, c_index = position

    if s_index == target_index:
        step = document.steps[s_index]
        components = list(step.components)
        destination = _clamp(to_index, len(components) - 1)
        if destination == c_index:
            return document
        components.insert(destination, components.pop(c_index))
        return _with_step(document, s_index, _with_components(step, components))

    source = document.steps[s_index]
    target = document.steps[target_index]
    source_components = list(source.components)
    component = source_components.pop(c_index)
    target_components = list(target.components)
    target_components.insert(_clamp(to_index, len(target_components)), component)

    steps = list(document.steps)
    steps[s_index] = _with_components(source, source_components)
    steps[target_index] = _with_components(target, target_components)
    return document.model_copy(update={"steps": tuple(steps)})


def duplicate_component(document: FunnelDocument, component_id: str) -> FunnelDocument:
    position = locate_component(document, component_id)
    if position is None:
        raise NotFound(f"Component not found: {component_id}")
    s_index, c_index = position
    step = document.steps[s_index]
    original = step.components[c_index]
    clone = Component(
        id=generate_id(original.kind.value, collect_ids(document)),
        kind=original.kind,
        properties=copy.deepcopy(dict(original.properties)),
    )
    components = list(step.components)
    components.insert(c_index + 1, clone)
    return _with_step(document, s_index, _with_components(step, components))


def insert_step(
    document: FunnelDocument,
    draft: StepDraft | Mapping[str, Any],
    at_index: int | None = None,
    *,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> FunnelDocument:
    draft = coerce_model(StepDraft, draft)
    if at_index is not None:
        _check_index(at_index, "at_index")

    taken = collect_ids(document)
    step_id = _claim_id(draft.id, "step", taken)
    count = len(document.steps)
    progress = draft.progress_percent
    if progress is None:
        progress = round(count / (count + 1) * 100)
    step = Step(
        id=step_id,
        title=draft.title,
        kind=draft.kind,
        progress_percent=progress,
        show_header=draft.show_header,
        show_progress=draft.show_progress,
        settings=draft.settings,
        components=tuple(_build_component(item, taken, registry) for item in draft.components),
    )
    steps = list(document.steps)
    steps.insert(count if at_index is None else _clamp(at_index, count), step)
    return document.model_copy(update={"steps": tuple(steps)})


def remove_step(document: FunnelDocument, step_id: str) -> FunnelDocument:
    s_index = step_index(document, step_id)
    if s_index is None:
        return document
    if len(document.steps) == 1:
        raise InvalidOperation("A funnel must keep at least one step")
    steps = list(document.steps)
    del steps[s_index]
    return document.model_copy(update={"steps": tuple(steps)})


def move_step(document: FunnelDocument, step_id: str, to_index: int) -> FunnelDocument:
    _check_index(to_index, "to_index")
    s_index = step_index(document, step_id)
    if s_index is None:
        raise NotFound(f"Step not found: {step_id}")
    destination = _clamp(to_index, len(document.steps) - 1)
    if destination == s_index:
        return document
    steps = list(document.steps)
    steps.insert(destination, steps.pop(s_index))
    return document.model_copy(update={"steps": tuple(steps)})


def _update_step(document: FunnelDocument, step_id: str, **changes: Any) -> FunnelDocument:
    s_index = step_index(document, step_id)
    if s_index is None:
        raise NotFound(f"Step not found: {step_id}")
    step = document.steps[s_index]
    if all(getattr(step, name) == value for name, value in changes.items()):
        return document
    return _with_step(document, s_index, step.model_copy(update=changes))


def rename_step(document: FunnelDocument, step_id: str, title: str) -> FunnelDocument:
    if not isinstance(title, str):
        raise InvalidOperation(f"Step title must be a string, got {title!r}")
    return _update_step(document, step_id, title=title)


def set_step_flag(document: FunnelDocument, step_id: str, flag: str, value: bool) -> FunnelDocument:
    if flag not in STEP_FLAGS:
        raise InvalidOperation(f"Unknown step flag: {flag}")
    if not isinstance(value, bool):
        raise InvalidOperation(f"Step flag {flag} must be a boolean, got {value!r}")
    return _update_step(document, step_id, **{flag: value})


def set_step_setting(document: FunnelDocument, step_id: str, name: str, value: Any) -> FunnelDocument:
    if name not in StepSettings.model_fields:
        raise InvalidOperation(f"Unknown step setting: {name}")
    s_index = step_index(document, step_id)
    if s_index is None:
        raise NotFound(f"Step not found: {step_id}")
    current = document.steps[s_index].settings
    try:
        settings = StepSettings.model_validate({**current.model_dump(), name: value})
    except ValidationError as exc:
        raise InvalidOperation(f"Invalid value for step setting {name}: {exc.errors()[0]['msg']}") from exc
    return _update_step(document, step_id, settings=settings)


def rename_funnel(document: FunnelDocument, name: str) -> FunnelDocument:
    if not isinstance(name, str):
        raise InvalidOperation(f"Funnel name must be a string, got {name!r}")
    if name == document.name:
        return document
    return document.model_copy(update={"name": name})


__all__ = [
    "STEP_FLAGS",
    "coerce_model",
    "duplicate_component",
    "generate_id",
    "insert_component",
    "insert_step",
    "move_component",
    "move_step",
    "remove_component",
    "remove_step",
    "rename_funnel",
    "rename_step",
    "set_step_flag",
    "set_step_setting",
    "update_component",
]
