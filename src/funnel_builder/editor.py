"""Editing session facade used by presentation layers.

``FunnelEditor`` keeps the node store, history and selection consistent.
Each mutating call applies a pure operation, records the resulting snapshot,
reconciles the selection and notifies observers. A failing operation raises
and leaves every piece of state exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .component_registry import DEFAULT_REGISTRY, ComponentRegistry, PropertyField
from .document_loader import dump_document, load_document
from .errors import FunnelEditError
from .history import DEFAULT_HISTORY_LIMIT, HistoryManager
from .models.editor import EditorState, Selection
from .models.funnel import Component, ComponentDraft, ComponentKind, FunnelDocument, Step, StepDraft
from .node_store import NodeStore, collect_ids
from .selection import SelectionController
from . import operations

logger = logging.getLogger(__name__)

Observer = Callable[[EditorState], None]


class FunnelEditor:
    def __init__(
        self,
        document: FunnelDocument | Mapping[str, Any] | str | bytes,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        registry: ComponentRegistry = DEFAULT_REGISTRY,
    ) -> None:
        document = load_document(document, registry=registry)
        self._registry = registry
        self._store = NodeStore(document)
        self._history = HistoryManager(document, limit=history_limit)
        self._selection = SelectionController(self._store)
        self._observers: list[Observer] = []

    @classmethod
    def from_payload(cls, data: Mapping[str, Any] | str | bytes, **kwargs: Any) -> "FunnelEditor":
        return cls(data, **kwargs)

    # Derived state

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    @property
    def store(self) -> NodeStore:
        return self._store

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def selection(self) -> Selection:
        return self._selection.selection

    def current_document(self) -> FunnelDocument:
        return self._store.get()

    def current_step(self) -> Step | None:
        return self._selection.current_step()

    def current_component(self) -> Component | None:
        return self._selection.current_component()

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def property_schema(self, kind: ComponentKind | str) -> tuple[PropertyField, ...]:
        return self._registry.property_schema(kind)

    def state(self) -> EditorState:
        return EditorState(
            document=self._store.get(),
            selection=self._selection.selection,
            can_undo=self._history.can_undo(),
            can_redo=self._history.can_redo(),
            history_size=len(self._history),
            history_cursor=self._history.cursor,
        )

    def to_payload(self) -> dict[str, Any]:
        return dump_document(self._store.get())

    # Observers

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        state = self.state()
        for observer in list(self._observers):
            observer(state)

    # Session

    def load(self, document: FunnelDocument | Mapping[str, Any]) -> None:
        """Start over with another document; history is discarded."""
        document = load_document(document, registry=self._registry)
        self._store.replace(document)
        self._history.reset(document)
        self._selection = SelectionController(self._store)
        logger.info("Loaded funnel", extra={"funnel_id": document.id, "steps": len(document.steps)})
        self._notify()

    # Component edits

    def add_component(
        self,
        step_id: str,
        kind: ComponentKind | str,
        properties: Mapping[str, Any] | None = None,
        at_index: int | None = None,
    ) -> str:
        draft = operations.coerce_model(ComponentDraft, {"kind": kind, "properties": dict(properties or {})})
        component_id = operations.generate_id(draft.kind.value, collect_ids(self._store.get()))
        draft = draft.model_copy(update={"id": component_id})
        self._apply("insert_component", operations.insert_component, step_id, draft, at_index, registry=self._registry)
        self._selection.select_component(component_id)
        self._notify()
        return component_id

    def update_component(self, component_id: str, patch: Mapping[str, Any]) -> bool:
        return self._run("update_component", operations.update_component, component_id, patch, registry=self._registry)

    def remove_component(self, component_id: str) -> bool:
        return self._run("remove_component", operations.remove_component, component_id)

    def move_component(self, component_id: str, to_step_id: str, to_index: int) -> bool:
        return self._run("move_component", operations.move_component, component_id, to_step_id, to_index)

    def duplicate_component(self, component_id: str) -> str:
        before = collect_ids(self._store.get())
        self._apply("duplicate_component", operations.duplicate_component, component_id)
        (clone_id,) = collect_ids(self._store.get()) - before
        self._selection.select_component(clone_id)
        self._notify()
        return clone_id

    # Step edits

    def add_step(
        self,
        title: str,
        kind: str = "question",
        at_index: int | None = None,
        **fields: Any,
    ) -> str:
        draft = operations.coerce_model(StepDraft, {"title": title, "kind": kind, **fields})
        step_id = draft.id or operations.generate_id("step", collect_ids(self._store.get()))
        draft = draft.model_copy(update={"id": step_id})
        self._apply("insert_step", operations.insert_step, draft, at_index, registry=self._registry)
        self._selection.select_step(step_id)
        self._notify()
        return step_id

    def remove_step(self, step_id: str) -> bool:
        return self._run("remove_step", operations.remove_step, step_id)

    def move_step(self, step_id: str, to_index: int) -> bool:
        return self._run("move_step", operations.move_step, step_id, to_index)

    def rename_step(self, step_id: str, title: str) -> bool:
        return self._run("rename_step", operations.rename_step, step_id, title)

    def set_step_flag(self, step_id: str, flag: str, value: bool) -> bool:
        return self._run("set_step_flag", operations.set_step_flag, step_id, flag, value)

    def set_step_setting(self, step_id: str, name: str, value: Any) -> bool:
        return self._run("set_step_setting", operations.set_step_setting, step_id, name, value)

    def rename_funnel(self, name: str) -> bool:
        return self._run("rename_funnel", operations.rename_funnel, name)

    # Selection

    def select_step(self, step_id: str) -> Selection:
        selection = self._selection.select_step(step_id)
        self._notify()
        return selection

    def select_component(self, component_id: str) -> Selection:
        selection = self._selection.select_component(component_id)
        self._notify()
        return selection

    def clear_component_selection(self) -> Selection:
        selection = self._selection.clear_component()
        self._notify()
        return selection

    # History

    def undo(self) -> bool:
        return self._replay(self._history.undo(), "undo")

    def redo(self) -> bool:
        return self._replay(self._history.redo(), "redo")

    def _replay(self, document: FunnelDocument | None, action: str) -> bool:
        if document is None:
            return False
        self._store.replace(document)
        self._selection.reconcile(document)
        logger.debug(action.capitalize(), extra={"funnel_id": document.id, "history_cursor": self._history.cursor})
        self._notify()
        return True

    # Internals

    def _run(self, name: str, operation: Callable[..., FunnelDocument], *args: Any, **kwargs: Any) -> bool:
        changed = self._apply(name, operation, *args, **kwargs)
        if changed:
            self._notify()
        return changed

    def _apply(self, name: str, operation: Callable[..., FunnelDocument], *args: Any, **kwargs: Any) -> bool:
        current = self._store.get()
        try:
            document = operation(current, *args, **kwargs)
        except FunnelEditError as exc:
            logger.info(
                "Rejected edit",
                extra={"operation": name, "funnel_id": current.id, "error_kind": exc.kind, "error": str(exc)},
            )
            raise
        if document is current:
            logger.debug("Edit produced no change", extra={"operation": name, "funnel_id": current.id})
            return False
        self._history.record(document)
        self._store.replace(document)
        self._selection.reconcile(document)
        logger.debug(
            "Applied edit",
            extra={"operation": name, "funnel_id": document.id, "history_cursor": self._history.cursor},
        )
        return True


__all__ = ["FunnelEditor", "Observer"]
