"""Markdown table rendering for resolved definitions."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader

from .models import FieldDoc, OutputFormat, ResolvedOutput

FLAT_HEADERS = ("Field Name", "Type", "Required", "Default", "Details", "Group")
GROUPED_HEADERS = ("Field Name", "Type", "Required", "Default", "Details")

_TEMPLATES = {
    OutputFormat.FLAT: "flat.md.j2",
    OutputFormat.GROUPED: "grouped.md.j2",
}


def format_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a padded markdown table."""
    materialised: List[Sequence[str]] = [list(row) for row in rows]
    widths = [len(header) for header in headers]
    for row in materialised:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def _line(cells: Sequence[str]) -> str:
        padded = [f" {cell.ljust(widths[index])} " for index, cell in enumerate(cells)]
        return "|" + "|".join(padded) + "|"

    lines = [_line(headers), "|" + "|".join("-" * (width + 2) for width in widths) + "|"]
    lines.extend(_line(row) for row in materialised)
    return "\n".join(lines)


def field_cells(item: FieldDoc) -> List[str]:
    return [
        item.name,
        item.type_text,
        "Yes" if item.required else "No",
        item.default_text if item.default_text is not None else "-",
        item.details,
    ]


class TableRenderer:
    """Turns a ``ResolvedOutput`` into markdown, in flat or grouped layout."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, output: ResolvedOutput) -> str:
        template = self._env.get_template(_TEMPLATES[output.format])
        if output.format is OutputFormat.FLAT:
            table = format_table(
                FLAT_HEADERS,
                (field_cells(row.field) + [row.group] for row in output.rows),
            )
            rendered = template.render(table=table)
        else:
            sections = [
                {
                    "identifier": section.identifier,
                    "table": format_table(
                        GROUPED_HEADERS, (field_cells(item) for item in section.fields)
                    ),
                }
                for section in output.sections
            ]
            rendered = template.render(sections=sections)
        return rendered.rstrip("\n")


__all__ = ["FLAT_HEADERS", "GROUPED_HEADERS", "TableRenderer", "field_cells", "format_table"]
