"""Exception types raised by confdoc."""

from __future__ import annotations

from typing import Optional, Sequence


class ConfDocError(RuntimeError):
    """Base class for confdoc failures."""


class StructuralError(ConfDocError):
    """Raised when an annotated definition cannot be documented as written."""

    def __init__(self, message: str, *, location: Optional[str] = None) -> None:
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class DuplicateDefinitionError(StructuralError):
    """Raised when two different definitions share an identifier."""


class MissingMarkerError(ConfDocError):
    """Raised when a target document lacks the marker pair to patch."""


class UnreadableDocumentError(ConfDocError):
    """Raised when a target document cannot be decoded as UTF-8."""


class CyclicDependencyError(ConfDocError):
    """Raised when flattened definitions reference each other in a loop."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__("Cyclic flatten reference: " + " -> ".join(self.cycle))


__all__ = [
    "ConfDocError",
    "CyclicDependencyError",
    "DuplicateDefinitionError",
    "MissingMarkerError",
    "StructuralError",
    "UnreadableDocumentError",
]
