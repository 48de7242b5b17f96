from __future__ import annotations


class FunnelEditError(ValueError):
    """Base class for failures surfaced by the funnel editing engine."""

    kind = "FunnelEditError"


class NotFound(FunnelEditError):
    """A referenced step or component id does not exist."""

    kind = "NotFound"


class InvalidOperation(FunnelEditError):
    """The edit would violate a structural invariant of the document."""

    kind = "InvalidOperation"


class InvalidDocument(FunnelEditError):
    """A document supplied at load time failed shape validation."""

    kind = "InvalidDocument"


__all__ = ["FunnelEditError", "NotFound", "InvalidOperation", "InvalidDocument"]
