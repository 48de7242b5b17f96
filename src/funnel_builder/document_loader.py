from __future__ import annotations

from collections import Counter
from typing import Any, Mapping

from pydantic import ValidationError

from .component_registry import DEFAULT_REGISTRY, ComponentRegistry
from .errors import InvalidDocument, InvalidOperation
from .models.funnel import FunnelDocument
from .node_store import iter_ids


def validate_document(document: FunnelDocument, *, registry: ComponentRegistry = DEFAULT_REGISTRY) -> FunnelDocument:
    """Reject documents breaking the structural invariants instead of repairing them."""
    if not document.steps:
        raise InvalidDocument(f"Funnel {document.id} has no steps")
    duplicates = sorted(node_id for node_id, count in Counter(iter_ids(document)).items() if count > 1)
    if duplicates:
        raise InvalidDocument(f"Funnel {document.id} has duplicate ids: {', '.join(duplicates)}")
    for step in document.steps:
        for component in step.components:
            try:
                registry.validate_properties(component.kind, component.properties)
            except InvalidOperation as exc:
                raise InvalidDocument(f"Component {component.id} in step {step.id}: {exc}") from exc
    return document


def load_document(
    data: FunnelDocument | Mapping[str, Any] | str | bytes,
    *,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> FunnelDocument:
    if isinstance(data, FunnelDocument):
        return validate_document(data, registry=registry)
    try:
        if isinstance(data, (str, bytes)):
            document = FunnelDocument.model_validate_json(data)
        else:
            document = FunnelDocument.model_validate(data)
    except ValidationError as exc:
        raise InvalidDocument(f"Malformed funnel document: {exc.errors()[0]['msg']}") from exc
    return validate_document(document, registry=registry)


def dump_document(document: FunnelDocument) -> dict[str, Any]:
    return document.model_dump(mode="json")


__all__ = ["dump_document", "load_document", "validate_document"]
