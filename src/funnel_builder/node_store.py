from __future__ import annotations

from typing import Iterator

from .models.funnel import Component, FunnelDocument, Step


def find_step(document: FunnelDocument, step_id: str) -> Step | None:
    for step in document.steps:
        if step.id == step_id:
            return step
    return None


def step_index(document: FunnelDocument, step_id: str) -> int | None:
    for index, step in enumerate(document.steps):
        if step.id == step_id:
            return index
    return None


def locate_component(document: FunnelDocument, component_id: str) -> tuple[int, int] | None:
    """Return ``(step_index, component_index)`` of a component, searching every step."""
    for s_index, step in enumerate(document.steps):
        for c_index, component in enumerate(step.components):
            if component.id == component_id:
                return s_index, c_index
    return None


def iter_ids(document: FunnelDocument) -> Iterator[str]:
    for step in document.steps:
        yield step.id
        for component in step.components:
            yield component.id


def collect_ids(document: FunnelDocument) -> set[str]:
    return set(iter_ids(document))


class NodeStore:
    """Holds the current document snapshot and answers lookups against it."""

    def __init__(self, document: FunnelDocument) -> None:
        self._document = document

    def get(self) -> FunnelDocument:
        return self._document

    def find_step(self, step_id: str) -> Step | None:
        return find_step(self._document, step_id)

    def find_component(self, step_id: str, component_id: str) -> Component | None:
        step = self.find_step(step_id)
        if step is None:
            return None
        for component in step.components:
            if component.id == component_id:
                return component
        return None

    def locate_component(self, component_id: str) -> tuple[Step, Component] | None:
        position = locate_component(self._document, component_id)
        if position is None:
            return None
        step = self._document.steps[position[0]]
        return step, step.components[position[1]]

    def replace(self, document: FunnelDocument) -> None:
        self._document = document


__all__ = ["NodeStore", "collect_ids", "find_step", "iter_ids", "locate_component", "step_index"]
