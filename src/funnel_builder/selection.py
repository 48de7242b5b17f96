from __future__ import annotations

from .errors import NotFound
from .models.editor import Selection
from .models.funnel import Component, FunnelDocument, Step
from .node_store import NodeStore, find_step, locate_component


class SelectionController:
    """Tracks the active step and component by id only."""

    def __init__(self, store: NodeStore) -> None:
        self._store = store
        self._selection = Selection(active_step_id=store.get().steps[0].id)

    @property
    def selection(self) -> Selection:
        return self._selection

    def select_step(self, step_id: str) -> Selection:
        if self._store.find_step(step_id) is None:
            raise NotFound(f"Step not found: {step_id}")
        self._selection = Selection(active_step_id=step_id)
        return self._selection

    def select_component(self, component_id: str) -> Selection:
        located = self._store.locate_component(component_id)
        if located is None:
            raise NotFound(f"Component not found: {component_id}")
        step, _ = located
        self._selection = Selection(active_step_id=step.id, active_component_id=component_id)
        return self._selection

    def clear_component(self) -> Selection:
        self._selection = Selection(active_step_id=self._selection.active_step_id)
        return self._selection

    def reconcile(self, document: FunnelDocument) -> Selection:
        step_id = self._selection.active_step_id
        component_id = self._selection.active_component_id

        if component_id is not None:
            position = locate_component(document, component_id)
            if position is None:
                component_id = None
            else:
                step_id = document.steps[position[0]].id
        if find_step(document, step_id) is None:
            step_id = document.steps[0].id

        self._selection = Selection(active_step_id=step_id, active_component_id=component_id)
        return self._selection

    def current_step(self) -> Step | None:
        return self._store.find_step(self._selection.active_step_id)

    def current_component(self) -> Component | None:
        if self._selection.active_component_id is None:
            return None
        return self._store.find_component(self._selection.active_step_id, self._selection.active_component_id)


__all__ = ["SelectionController"]
