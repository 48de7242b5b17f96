from __future__ import annotations

import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from funnel_builder.document_loader import dump_document
from funnel_builder.errors import InvalidDocument
from funnel_builder.firestore_store import FirestoreFunnelStore, FirestoreSubmissionStore
from funnel_builder.funnel_store import FunnelStore
from funnel_builder.models.quiz import AnswerSubmission, ParticipantData, QuizSubmission, StyleResult
from funnel_builder.presets import default_funnel_document
from funnel_builder.submission_store import SubmissionStore


def make_submission() -> QuizSubmission:
    return QuizSubmission(
        participant=ParticipantData(name="Maria", email="maria@example.com", utm_source="instagram"),
        answers=[AnswerSubmission(question_id="q1", option_id="q1-natural")],
    )


def test_in_memory_save_and_load(document):
    store = FunnelStore()
    saved = store.save_funnel(document)
    loaded = store.get_funnel(document.id)

    assert loaded.document == document
    assert loaded.created_at == saved.created_at
    assert store.get_funnel("missing") is None


def test_in_memory_resave_keeps_creation_time(document):
    store = FunnelStore()
    first = store.save_funnel(document)
    second = store.save_funnel(dump_document(document) | {"name": "Renomeado"})

    assert second.created_at == first.created_at
    assert store.get_funnel(document.id).document.name == "Renomeado"


def test_in_memory_list_and_delete(document):
    store = FunnelStore()
    store.save_funnel(document)
    store.save_funnel(default_funnel_document())

    assert {record.id for record in store.list_funnels()} == {"funnel-1", "quiz-1"}
    assert store.delete_funnel("funnel-1")
    assert not store.delete_funnel("funnel-1")
    assert [record.id for record in store.list_funnels()] == ["quiz-1"]


def test_in_memory_rejects_invalid_document():
    with pytest.raises(InvalidDocument):
        FunnelStore().save_funnel({"id": "f", "name": "x", "steps": []})


def test_submission_store_filters_by_quiz():
    store = SubmissionStore()
    results = [StyleResult(style_code="natural", points=1, percentage=100.0, rank=1, is_primary=True)]
    first = store.create_submission(quiz_id="quiz-estilo", submission=make_submission(), results=results)
    store.create_submission(quiz_id="outro", submission=make_submission(), results=[])

    assert store.get_submission(first.id) == first
    assert [record.id for record in store.list_submissions(quiz_id="quiz-estilo")] == [first.id]
    assert len(store.list_submissions()) == 2


def test_firestore_save_writes_payload(document):
    client = MagicMock()
    doc_ref = client.collection.return_value.document.return_value
    doc_ref.get.return_value.exists = False

    record = FirestoreFunnelStore(client=client).save_funnel(document)

    client.collection.assert_called_once_with("funnels")
    client.collection.return_value.document.assert_called_with("funnel-1")
    written = doc_ref.set.call_args.args[0]
    assert written["document"] == dump_document(document)
    assert written["created_at"] == record.created_at


def test_firestore_save_logs_with_info_enabled(document, caplog):
    caplog.set_level(logging.INFO, logger="funnel_builder.firestore_store")
    client = MagicMock()
    client.collection.return_value.document.return_value.get.return_value.exists = False

    FirestoreFunnelStore(client=client).save_funnel(document)

    (record,) = [r for r in caplog.records if r.getMessage() == "Saved funnel"]
    assert record.funnel_id == "funnel-1"
    assert record.is_new is True


def test_firestore_get_revalidates_payload(document):
    client = MagicMock()
    stamp = datetime(2025, 1, 1, tzinfo=timezone.utc)
    snapshot = client.collection.return_value.document.return_value.get.return_value
    snapshot.exists = True
    snapshot.to_dict.return_value = {"document": dump_document(document), "created_at": stamp, "updated_at": stamp}

    record = FirestoreFunnelStore(client=client).get_funnel("funnel-1")

    assert record.document == document
    assert record.updated_at == stamp

    snapshot.to_dict.return_value = {"document": {"id": "f", "name": "x", "steps": []}, "created_at": stamp, "updated_at": stamp}
    with pytest.raises(InvalidDocument):
        FirestoreFunnelStore(client=client).get_funnel("f")


def test_firestore_delete_missing_returns_false():
    client = MagicMock()
    doc_ref = client.collection.return_value.document.return_value
    doc_ref.get.return_value.exists = False

    assert not FirestoreFunnelStore(client=client).delete_funnel("missing")
    doc_ref.delete.assert_not_called()


def test_firestore_submission_uses_generated_id():
    client = MagicMock()
    doc_ref = client.collection.return_value.document.return_value
    doc_ref.id = "abc123"

    record = FirestoreSubmissionStore(client=client).create_submission(
        quiz_id="quiz-estilo", submission=make_submission(), results=[]
    )

    assert record.id == "abc123"
    client.collection.assert_called_once_with("quiz_submissions")
    written = doc_ref.set.call_args.args[0]
    assert written["quiz_id"] == "quiz-estilo"
    assert written["participant"]["email"] == "maria@example.com"
    assert "id" not in written
