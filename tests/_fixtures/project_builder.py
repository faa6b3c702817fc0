"""Helper utilities for constructing temporary projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from confdoc.postproc.markers import END_MARKER, START_MARKER

MARKED_README = f"# Project\n\nIntro.\n\n{START_MARKER}\n{END_MARKER}\n\nFooter.\n"


class ProjectBuilder:
    """Utility for writing files into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir(parents=True)

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_readme(self, name: str = "README.md", content: str = MARKED_README) -> Path:
        path = self.root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["MARKED_README", "ProjectBuilder"]
