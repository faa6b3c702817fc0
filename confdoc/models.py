"""Core data models shared across confdoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class OutputFormat(str, Enum):
    """Layout of the generated markdown."""

    FLAT = "flat"
    GROUPED = "grouped"


class RenameRule(str, Enum):
    """Case conversion applied to every field name of a definition."""

    SNAKE = "snake_case"
    CAMEL = "camelCase"
    PASCAL = "PascalCase"
    KEBAB = "kebab-case"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"
    SCREAMING_KEBAB = "SCREAMING-KEBAB-CASE"
    LOWER = "lowercase"
    UPPER = "UPPERCASE"


@dataclass
class RawField:
    """One field declaration as reported by a front-end."""

    name: Optional[str]
    type_text: str
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    doc_lines: List[str] = field(default_factory=list)
    location: Optional[str] = None


@dataclass
class RawDefinition:
    """One annotated class as reported by a front-end."""

    identifier: str
    fields: List[RawField] = field(default_factory=list)
    rename_all: Optional[str] = None
    register: bool = False
    generate: Optional[Dict[str, Optional[str]]] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class FieldDoc:
    """Documented field, ready for rendering."""

    name: str
    type_text: str
    required: bool
    default_text: Optional[str]
    details: str = ""


@dataclass(frozen=True)
class GenerationRequest:
    """Where and how a root definition wants its documentation written."""

    target: str
    format: OutputFormat = OutputFormat.FLAT
    slot: int = 0


@dataclass(frozen=True)
class DefinitionDoc:
    """Documented definition: direct fields plus flattened dependencies."""

    identifier: str
    fields: Tuple[FieldDoc, ...] = ()
    flatten_refs: Tuple[str, ...] = ()
    rename_rule: Optional[RenameRule] = None
    request: Optional[GenerationRequest] = None
    location: Optional[str] = field(default=None, compare=False)

    @property
    def is_root(self) -> bool:
        return self.request is not None


@dataclass(frozen=True)
class FlatRow:
    """A field paired with the definition it came from."""

    field: FieldDoc
    group: str


@dataclass(frozen=True)
class ResolvedSection:
    """Fields contributed by a single definition in grouped layout."""

    identifier: str
    fields: Tuple[FieldDoc, ...]


@dataclass(frozen=True)
class ResolvedOutput:
    """Fully expanded view of a root definition, the renderer's only input."""

    root: str
    format: OutputFormat
    rows: Tuple[FlatRow, ...]
    sections: Tuple[ResolvedSection, ...]


__all__ = [
    "DefinitionDoc",
    "FieldDoc",
    "FlatRow",
    "GenerationRequest",
    "OutputFormat",
    "RawDefinition",
    "RawField",
    "RenameRule",
    "ResolvedOutput",
    "ResolvedSection",
]
