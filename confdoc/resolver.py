"""Expand a root definition's flatten references into a complete field list."""

from __future__ import annotations

from typing import List, Mapping, Optional, Set

from .errors import CyclicDependencyError
from .models import DefinitionDoc, FlatRow, ResolvedOutput, ResolvedSection


class _Unresolved(Exception):
    """Internal signal: a referenced definition is not registered yet."""


def resolve(
    root: DefinitionDoc, definitions: Mapping[str, DefinitionDoc]
) -> Optional[ResolvedOutput]:
    """Return the expanded output for ``root`` or None when a dependency is missing.

    Dependencies are walked depth-first in declaration order; each one adds
    its rows and a section before its own dependencies. The root's fields
    come last. Nothing is mutated, so calling this again after more
    definitions are registered is always safe.
    """
    if root.request is None:
        raise ValueError(f"{root.identifier} has no generation request")

    rows: List[FlatRow] = []
    sections: List[ResolvedSection] = []
    expanded: Set[str] = set()

    def _walk(definition: DefinitionDoc, ancestors: List[str]) -> None:
        for identifier in definition.flatten_refs:
            if identifier in ancestors:
                raise CyclicDependencyError(ancestors[ancestors.index(identifier):] + [identifier])
            if identifier in expanded:
                continue
            nested = definitions.get(identifier)
            if nested is None:
                raise _Unresolved(identifier)
            expanded.add(identifier)
            rows.extend(FlatRow(field=item, group=identifier) for item in nested.fields)
            sections.append(ResolvedSection(identifier=identifier, fields=nested.fields))
            _walk(nested, ancestors + [identifier])

    try:
        _walk(root, [root.identifier])
    except _Unresolved:
        return None

    rows.extend(FlatRow(field=item, group=root.identifier) for item in root.fields)
    sections.append(ResolvedSection(identifier=root.identifier, fields=root.fields))
    return ResolvedOutput(
        root=root.identifier,
        format=root.request.format,
        rows=tuple(rows),
        sections=tuple(sections),
    )


def missing_dependencies(
    root: DefinitionDoc, definitions: Mapping[str, DefinitionDoc]
) -> List[str]:
    """List identifiers reachable from ``root`` that are not registered."""
    missing: List[str] = []
    seen: Set[str] = {root.identifier}
    stack = list(reversed(root.flatten_refs))
    while stack:
        identifier = stack.pop()
        if identifier in seen:
            continue
        seen.add(identifier)
        nested = definitions.get(identifier)
        if nested is None:
            missing.append(identifier)
            continue
        stack.extend(reversed(nested.flatten_refs))
    return missing


__all__ = ["missing_dependencies", "resolve"]
