"""Process-wide store of documented definitions."""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .errors import DuplicateDefinitionError
from .logging import at, get_logger
from .models import DefinitionDoc

_LOGGER = get_logger("registry")


class Registry:
    """Keyed, insert-only store shared by every event of a build.

    Inserts and reads go through one lock, so an insert is visible to any
    event that runs after it. Resolution works on ``snapshot()`` copies.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._definitions: Dict[str, DefinitionDoc] = {}

    def insert(self, definition: DefinitionDoc) -> bool:
        """Store ``definition``; return False when an equal entry already exists."""
        with self._lock:
            existing = self._definitions.get(definition.identifier)
            if existing is not None:
                if existing == definition:
                    return False
                raise DuplicateDefinitionError(
                    f"definition '{definition.identifier}' is already registered"
                    + (f" at {existing.location}" if existing.location else ""),
                    location=definition.location,
                )
            self._definitions[definition.identifier] = definition
            _LOGGER.debug(
                "Registered %s (%d total)",
                definition.identifier,
                len(self._definitions),
                extra=at(definition.location),
            )
            return True

    def get(self, identifier: str) -> Optional[DefinitionDoc]:
        with self._lock:
            return self._definitions.get(identifier)

    def identifiers(self) -> List[str]:
        with self._lock:
            return list(self._definitions)

    def roots(self) -> List[DefinitionDoc]:
        """Definitions carrying a generation request, in insertion order."""
        with self._lock:
            return [item for item in self._definitions.values() if item.is_root]

    def snapshot(self) -> Mapping[str, DefinitionDoc]:
        with self._lock:
            return MappingProxyType(dict(self._definitions))

    def clear(self) -> None:
        with self._lock:
            self._definitions.clear()

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._definitions

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)


_DEFAULT_LOCK = threading.Lock()
_DEFAULT_REGISTRY: Optional[Registry] = None


def get_registry() -> Registry:
    """Return the process-wide registry, creating it on first use."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = Registry()
        return _DEFAULT_REGISTRY


def reset_registry() -> None:
    """Tear down the process-wide registry."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_LOCK:
        if _DEFAULT_REGISTRY is not None:
            _DEFAULT_REGISTRY.clear()
        _DEFAULT_REGISTRY = None


__all__ = ["Registry", "get_registry", "reset_registry"]
