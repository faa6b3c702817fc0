"""Runtime markers for annotated configuration classes.

The decorators only record their options on ``cls.__confdoc__``; documents
are produced by ``confdoc build``, which reads the source. Usage::

    from confdoc import arg, generate, register, rename_all

    @register
    @rename_all("kebab-case")
    class DatabaseConfig:
        # Database host
        db_host: str
        # Database port
        db_port: int = arg(default_value_t=5432)

    @generate(target="README.md", format="grouped")
    class Config:
        database: DatabaseConfig = arg(flatten=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from ..casing import parse_rule
from ..models import OutputFormat

_T = TypeVar("_T", bound=type)

METADATA_ATTR = "__confdoc__"


@dataclass(frozen=True)
class Arg:
    """Placeholder left on the class for fields declared with ``arg(...)``."""

    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def flatten(self) -> bool:
        return bool(self.options.get("flatten"))


def arg(**options: Any) -> Any:
    """Declare field attributes (``default_value``, ``default_value_t``, ``flatten``...)."""
    if "default_value" in options and "default_value_t" in options:
        raise TypeError("arg() accepts default_value or default_value_t, not both")
    return Arg(options=dict(options))


def _metadata(cls: type) -> Dict[str, Any]:
    existing = cls.__dict__.get(METADATA_ATTR)
    if existing is None:
        existing = {}
        setattr(cls, METADATA_ATTR, existing)
    return existing


def register(cls: Optional[_T] = None) -> Union[_T, Callable[[_T], _T]]:
    """Mark a class as a definition other roots may flatten."""

    def _apply(target: _T) -> _T:
        _metadata(target)["register"] = True
        return target

    if cls is None:
        return _apply
    return _apply(cls)


def generate(target: str, format: str = "flat", slot: int = 0) -> Callable[[_T], _T]:
    """Mark a class as a root whose documentation is written to ``target``."""
    output_format = OutputFormat(format)
    if slot < 0:
        raise ValueError("slot must not be negative")

    def _apply(cls: _T) -> _T:
        _metadata(cls)["generate"] = {
            "target": target,
            "format": output_format.value,
            "slot": slot,
        }
        return cls

    return _apply


def rename_all(rule: str) -> Callable[[_T], _T]:
    """Apply a case rule to every field name of the class."""
    parsed = parse_rule(rule)

    def _apply(cls: _T) -> _T:
        _metadata(cls)["rename_all"] = parsed.value if parsed else None
        return cls

    return _apply


__all__ = ["Arg", "METADATA_ATTR", "arg", "generate", "register", "rename_all"]
