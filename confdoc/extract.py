"""Turn raw front-end output into documented fields and definitions."""

from __future__ import annotations

from typing import Dict, List, Optional

from .casing import apply_rule, parse_rule
from .errors import StructuralError
from .logging import at, get_logger
from .models import (
    DefinitionDoc,
    FieldDoc,
    GenerationRequest,
    OutputFormat,
    RawDefinition,
    RawField,
    RenameRule,
)

_LOGGER = get_logger("extract")

DEFAULT_VALUE = "default_value"
DEFAULT_VALUE_T = "default_value_t"
FLATTEN = "flatten"
SKIP = "skip"
HELP = "help"
RENAME = "rename"


def extract_field(raw: RawField, rule: Optional[RenameRule] = None) -> FieldDoc:
    """Build the ``FieldDoc`` for one named field."""
    if not raw.name:
        raise StructuralError("only named fields are supported", location=raw.location)

    attributes = raw.attributes
    if DEFAULT_VALUE in attributes and DEFAULT_VALUE_T in attributes:
        raise StructuralError(
            f"field '{raw.name}' declares both {DEFAULT_VALUE} and {DEFAULT_VALUE_T}",
            location=raw.location,
        )

    default_text: Optional[str] = None
    if DEFAULT_VALUE in attributes:
        default_text = attributes[DEFAULT_VALUE] or ""
    elif DEFAULT_VALUE_T in attributes:
        default_text = attributes[DEFAULT_VALUE_T] or ""

    renamed = attributes.get(RENAME)
    name = renamed if renamed else apply_rule(raw.name, rule)

    details = _join_doc_lines(raw.doc_lines)
    if not details and attributes.get(HELP):
        details = (attributes[HELP] or "").strip()

    return FieldDoc(
        name=name,
        type_text=raw.type_text,
        required=default_text is None,
        default_text=default_text,
        details=details,
    )


def build_definition(raw: RawDefinition) -> DefinitionDoc:
    """Build the ``DefinitionDoc`` for an annotated class.

    Flattened fields become dependency references instead of rows, skipped
    fields disappear, and declaration order is kept for both.
    """
    try:
        rule = parse_rule(raw.rename_all)
    except ValueError:
        raise StructuralError(
            f"unknown rename_all rule '{raw.rename_all}' on {raw.identifier}",
            location=raw.location,
        ) from None

    unnamed = [item for item in raw.fields if not item.name]
    if unnamed:
        raise StructuralError(
            f"{raw.identifier}: only named fields are supported",
            location=unnamed[0].location or raw.location,
        )

    fields: List[FieldDoc] = []
    flatten_refs: List[str] = []
    for item in raw.fields:
        if SKIP in item.attributes:
            continue
        if FLATTEN in item.attributes:
            flatten_refs.append(type_identifier(item.type_text))
            continue
        fields.append(extract_field(item, rule))

    request = None
    if raw.generate is not None:
        if raw.register:
            _LOGGER.debug(
                "%s is both registered and a generation root; treating it as a root",
                raw.identifier,
                extra=at(raw.location),
            )
        request = parse_request(raw.generate, location=raw.location)

    return DefinitionDoc(
        identifier=raw.identifier,
        fields=tuple(fields),
        flatten_refs=tuple(flatten_refs),
        rename_rule=rule,
        request=request,
        location=raw.location,
    )


def parse_request(
    options: Dict[str, Optional[str]], *, location: Optional[str] = None
) -> GenerationRequest:
    """Validate generation options (``target``, ``format``, ``slot``)."""
    target = options.get("target")
    if not target:
        raise StructuralError("generate requires a 'target' path", location=location)

    format_name = options.get("format") or OutputFormat.FLAT.value
    try:
        output_format = OutputFormat(format_name)
    except ValueError:
        raise StructuralError(
            f"unknown format '{format_name}' (expected 'flat' or 'grouped')",
            location=location,
        ) from None

    slot_text = options.get("slot")
    slot = 0
    if slot_text is not None:
        try:
            slot = int(slot_text)
        except ValueError:
            raise StructuralError(f"slot must be an integer, got '{slot_text}'", location=location) from None
        if slot < 0:
            raise StructuralError("slot must not be negative", location=location)

    return GenerationRequest(target=target, format=output_format, slot=slot)


def type_identifier(type_text: str) -> str:
    """Return the definition identifier named by a flattened field's type."""
    text = type_text.strip().strip("'\"")
    return text.rsplit(".", 1)[-1].strip()


def _join_doc_lines(lines: List[str]) -> str:
    parts = [line.strip() for line in lines]
    return " ".join(part for part in parts if part)


__all__ = ["build_definition", "extract_field", "parse_request", "type_identifier"]
