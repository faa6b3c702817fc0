"""Tests for the definition registry."""

from __future__ import annotations

import threading

import pytest

from confdoc.errors import DuplicateDefinitionError
from confdoc.models import DefinitionDoc, FieldDoc, GenerationRequest
from confdoc.registry import Registry, get_registry, reset_registry


def _definition(identifier: str, *fields: str, root: bool = False) -> DefinitionDoc:
    return DefinitionDoc(
        identifier=identifier,
        fields=tuple(
            FieldDoc(name=name, type_text="str", required=True, default_text=None) for name in fields
        ),
        request=GenerationRequest(target="README.md") if root else None,
    )


def test_registry_insert_and_lookup(registry: Registry) -> None:
    definition = _definition("DatabaseConfig", "host")

    assert registry.insert(definition) is True
    assert "DatabaseConfig" in registry
    assert registry.get("DatabaseConfig") == definition
    assert registry.get("Missing") is None
    assert len(registry) == 1


def test_registry_ignores_identical_reinsert(registry: Registry) -> None:
    registry.insert(_definition("DatabaseConfig", "host"))
    assert registry.insert(_definition("DatabaseConfig", "host")) is False
    assert len(registry) == 1


def test_registry_rejects_conflicting_reinsert(registry: Registry) -> None:
    registry.insert(_definition("DatabaseConfig", "host"))
    with pytest.raises(DuplicateDefinitionError):
        registry.insert(_definition("DatabaseConfig", "port"))


def test_registry_roots_keep_insertion_order(registry: Registry) -> None:
    registry.insert(_definition("Second", root=True))
    registry.insert(_definition("Nested"))
    registry.insert(_definition("First", root=True))

    assert [item.identifier for item in registry.roots()] == ["Second", "First"]
    assert registry.identifiers() == ["Second", "Nested", "First"]


def test_registry_snapshot_is_isolated(registry: Registry) -> None:
    registry.insert(_definition("A"))
    snapshot = registry.snapshot()
    registry.insert(_definition("B"))

    assert list(snapshot) == ["A"]
    with pytest.raises(TypeError):
        snapshot["C"] = _definition("C")  # type: ignore[index]


def test_registry_clear_empties_store(registry: Registry) -> None:
    registry.insert(_definition("A"))
    registry.clear()
    assert len(registry) == 0


def test_registry_accepts_concurrent_inserts(registry: Registry) -> None:
    threads = [
        threading.Thread(target=registry.insert, args=(_definition(f"Config{index}"),))
        for index in range(32)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 32


def test_default_registry_is_shared_until_reset() -> None:
    reset_registry()
    first = get_registry()
    assert get_registry() is first
    first.insert(_definition("A"))

    reset_registry()
    second = get_registry()
    assert second is not first
    assert len(second) == 0
    assert len(first) == 0
