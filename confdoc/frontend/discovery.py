"""Locate Python sources that may carry annotated configuration classes."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, Sequence

_SKIPPED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
        "node_modules",
        "build",
        "dist",
    }
)

DEFAULT_INCLUDE = ("**/*.py",)


def _matches(rel_path: str, pattern: str) -> bool:
    # Patterns without a slash match the last path component at any depth.
    if "/" in pattern:
        return fnmatchcase(rel_path, pattern.lstrip("/"))
    return fnmatchcase(rel_path.rsplit("/", 1)[-1], pattern)


def _included(rel_path: str, include: Sequence[str]) -> bool:
    for pattern in include:
        if fnmatchcase(rel_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatchcase(rel_path, pattern[3:]):
            return True
    return False


def _excluded(rel_path: str, is_dir: bool, exclude: Sequence[str]) -> bool:
    """Apply ``exclude_paths``: ``name/`` prunes directories, other patterns drop files."""
    for raw in exclude:
        pattern = raw.strip()
        if not pattern:
            continue
        if pattern.endswith("/"):
            if is_dir and _matches(rel_path, pattern.rstrip("/")):
                return True
        elif not is_dir and _matches(rel_path, pattern):
            return True
    return False


def iter_source_files(
    root: Path,
    include: Sequence[str] = DEFAULT_INCLUDE,
    exclude: Sequence[str] = (),
) -> Iterator[Path]:
    """Yield files under ``root`` matching ``include`` and not excluded, in sorted order."""
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        rel_dir = base.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in _SKIPPED_DIRS
            and not name.endswith(".egg-info")
            and not _excluded(prefix + name, True, exclude)
        )
        for filename in sorted(filenames):
            rel_path = prefix + filename
            if _included(rel_path, include) and not _excluded(rel_path, False, exclude):
                yield base / filename


__all__ = ["DEFAULT_INCLUDE", "iter_source_files"]
