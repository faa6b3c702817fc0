"""Field name case conversion."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional

from .models import RenameRule

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[0-9]+")


def split_words(name: str) -> List[str]:
    """Split an identifier on separators and case boundaries."""
    words: List[str] = []
    for chunk in re.split(r"[^A-Za-z0-9]+", name):
        words.extend(_WORD_RE.findall(chunk))
    return words


def _camel(words: List[str]) -> str:
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


_CONVERTERS: Dict[RenameRule, Callable[[List[str]], str]] = {
    RenameRule.SNAKE: lambda words: "_".join(word.lower() for word in words),
    RenameRule.CAMEL: _camel,
    RenameRule.PASCAL: lambda words: "".join(word.capitalize() for word in words),
    RenameRule.KEBAB: lambda words: "-".join(word.lower() for word in words),
    RenameRule.SCREAMING_SNAKE: lambda words: "_".join(word.upper() for word in words),
    RenameRule.SCREAMING_KEBAB: lambda words: "-".join(word.upper() for word in words),
    RenameRule.LOWER: lambda words: "".join(word.lower() for word in words),
    RenameRule.UPPER: lambda words: "".join(word.upper() for word in words),
}


def parse_rule(value: Optional[str]) -> Optional[RenameRule]:
    """Return the rule named by ``value`` or None when no rule is given.

    Raises ValueError for names that are not a known rule.
    """
    if value is None:
        return None
    return RenameRule(value.strip())


def apply_rule(name: str, rule: Optional[RenameRule]) -> str:
    """Convert ``name`` according to ``rule``; no rule leaves it unchanged."""
    if rule is None:
        return name
    words = split_words(name)
    if not words:
        return name
    return _CONVERTERS[rule](words)


__all__ = ["apply_rule", "parse_rule", "split_words"]
