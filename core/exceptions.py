"""Exceptions raised by the core service layer."""

from __future__ import annotations

from collections.abc import Sequence

from formrules.graph_validator import GraphErrorKind, GraphValidationResult


class GraphRejectedError(Exception):
    """A graph submission was rejected; nothing was written.

    Args:
        header: Message header (`Cannot add graph`, `Page received incorrect data`).
        details: Ordered detail messages.
        kind: Entity-level rejection reason, when one applies.
    """

    def __init__(self, header: str, details: Sequence[str], *, kind: GraphErrorKind | None = None) -> None:
        super().__init__(header)
        self.header = header
        self.details = tuple(details)
        self.kind = kind

    @classmethod
    def from_result(cls, result: GraphValidationResult) -> GraphRejectedError:
        return cls(result.header, result.errors, kind=result.kind)


class MediaTypeRejectedError(Exception):
    """A media type submission was rejected; nothing was written."""

    def __init__(self, header: str, details: Sequence[str]) -> None:
        super().__init__(header)
        self.header = header
        self.details = tuple(details)
