from __future__ import annotations

import pytest

from conftest import component_ids, make_document, step_ids
from funnel_builder.editor import FunnelEditor
from funnel_builder.errors import InvalidDocument, InvalidOperation, NotFound
from funnel_builder.models.funnel import ComponentKind, StepKind
from funnel_builder.presets import default_funnel_document


def snapshot(editor: FunnelEditor):
    return editor.current_document(), editor.history.cursor, len(editor.history), editor.selection


def test_example_session(editor):
    new_id = editor.add_component("A", "heading", {"text": "hi"}, 1)

    assert component_ids(editor.current_document(), "A") == ["x", new_id, "y"]
    assert len(editor.history) == 2
    assert editor.can_undo()

    assert editor.undo()
    assert component_ids(editor.current_document(), "A") == ["x", "y"]

    assert editor.remove_step("B")
    result = editor.current_document()
    with pytest.raises(InvalidOperation):
        editor.remove_step("A")
    assert editor.current_document() is result


def test_add_component_selects_new_component(editor):
    new_id = editor.add_component("B", ComponentKind.choice_group)

    assert editor.selection.active_step_id == "B"
    assert editor.selection.active_component_id == new_id
    component = editor.current_component()
    assert component.properties["allow_multiple"] is False
    assert len(component.properties["options"]) == 2


def test_add_step_selects_new_step(editor):
    step_id = editor.add_step("Carregando", kind="loading", at_index=1, show_header=False)

    assert step_ids(editor.current_document()) == ["A", step_id, "B"]
    assert editor.selection.active_step_id == step_id
    step = editor.current_step()
    assert step.kind == StepKind.loading
    assert step.show_header is False


def test_undo_then_redo_round_trip(editor):
    initial = editor.current_document()
    editor.update_component("x", {"text": "Descubra seu estilo"})
    editor.move_component("y", "B", 0)
    editor.rename_step("B", "Pergunta sobre estilo")
    final = editor.current_document()

    for _ in range(3):
        assert editor.undo()
    assert editor.current_document() == initial
    assert not editor.undo()

    for _ in range(3):
        assert editor.redo()
    assert editor.current_document() == final
    assert not editor.redo()


def test_new_edit_after_undo_discards_redo(editor):
    editor.rename_funnel("Primeiro")
    editor.rename_funnel("Segundo")
    editor.undo()
    editor.set_step_flag("A", "show_progress", False)

    assert not editor.can_redo()
    assert not editor.redo()
    assert editor.current_document().name == "Primeiro"


def test_history_cap_is_respected():
    editor = FunnelEditor(make_document(), history_limit=4)
    for index in range(10):
        editor.rename_funnel(f"Nome {index}")

    assert len(editor.history) == 4
    undone = 0
    while editor.undo():
        undone += 1
    assert undone == 3
    assert editor.current_document().name == "Nome 6"


def test_no_op_edits_do_not_record(editor):
    before = snapshot(editor)

    assert not editor.move_step("A", 0)
    assert not editor.move_component("x", "A", 0)
    assert not editor.remove_component("missing")
    assert not editor.rename_step("A", "Introdução")

    assert snapshot(editor) == before
    assert not editor.can_undo()


def test_rejected_edits_leave_state_untouched(editor):
    editor.select_component("y")
    before = snapshot(editor)

    with pytest.raises(NotFound):
        editor.update_component("missing", {"text": "x"})
    with pytest.raises(NotFound):
        editor.move_component("x", "missing", 0)
    with pytest.raises(InvalidOperation):
        editor.update_component("x", {"level": 0})
    with pytest.raises(InvalidOperation):
        editor.add_component("A", "carousel")
    with pytest.raises(InvalidOperation):
        editor.set_step_setting("A", "time_limit", -5)

    assert snapshot(editor) == before


def test_selection_is_repaired_after_undo(editor):
    new_id = editor.add_component("B", "paragraph")
    assert editor.selection.active_component_id == new_id

    editor.undo()

    assert editor.selection.active_step_id == "B"
    assert editor.selection.active_component_id is None


def test_duplicate_component_returns_and_selects_clone(editor):
    clone_id = editor.duplicate_component("y")

    assert component_ids(editor.current_document(), "A") == ["x", "y", clone_id]
    assert editor.selection.active_component_id == clone_id


def test_observers_receive_state(editor):
    states = []
    unsubscribe = editor.subscribe(states.append)

    editor.rename_funnel("Observado")
    editor.select_step("B")
    unsubscribe()
    editor.rename_funnel("Silencioso")

    assert len(states) == 2
    assert states[0].document.name == "Observado"
    assert states[0].can_undo
    assert states[1].selection.active_step_id == "B"


def test_rejected_edit_does_not_notify(editor):
    states = []
    editor.subscribe(states.append)

    with pytest.raises(NotFound):
        editor.move_step("Z", 0)
    editor.move_step("A", 0)

    assert states == []


def test_load_resets_session(editor):
    editor.rename_funnel("Antes")
    editor.select_step("B")

    editor.load(default_funnel_document())

    assert editor.current_document().id == "quiz-1"
    assert not editor.can_undo()
    assert editor.selection.active_step_id == "intro"


def test_from_payload_round_trip(editor):
    editor.add_component("B", "faq", {"items": [{"question": "Quanto custa?", "answer": "R$ 97"}]})
    payload = editor.to_payload()

    restored = FunnelEditor.from_payload(payload)

    assert restored.current_document() == editor.current_document()


def test_from_payload_rejects_invalid_documents():
    with pytest.raises(InvalidDocument):
        FunnelEditor.from_payload({"id": "f", "name": "vazio", "steps": []})
    with pytest.raises(InvalidDocument):
        FunnelEditor.from_payload("{not json")
    with pytest.raises(InvalidDocument):
        FunnelEditor.from_payload(
            {
                "id": "f",
                "name": "x",
                "steps": [
                    {"id": "s", "title": "S", "components": [{"id": "c", "kind": "heading", "properties": {"level": "um"}}]}
                ],
            }
        )


def test_property_schema_describes_kind(editor):
    names = [field.name for field in editor.property_schema("button")]

    assert names[:2] == ["label", "action"]
    assert "disabled" in names


def test_mutating_current_properties_does_not_reach_history(editor):
    choice_id = editor.add_component("B", "choice_group")
    editor.update_component(choice_id, {"columns": 2})

    editor.current_component().properties["options"].append({"id": "3", "label": "Opção 3", "value": "option3"})
    editor.undo()

    assert len(editor.current_component().properties["options"]) == 2


def test_non_mapping_patch_is_rejected(editor):
    before = snapshot(editor)

    with pytest.raises(InvalidOperation):
        editor.update_component("x", None)
    with pytest.raises(InvalidOperation):
        editor.update_component("x", [("text", "oi")])

    assert snapshot(editor) == before
