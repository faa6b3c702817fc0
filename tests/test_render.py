"""Tests for markdown table rendering."""

from __future__ import annotations

from confdoc.models import FieldDoc, FlatRow, OutputFormat, ResolvedOutput, ResolvedSection
from confdoc.render import TableRenderer, format_table


def _field(name: str, type_text: str, default: str | None, details: str) -> FieldDoc:
    return FieldDoc(
        name=name,
        type_text=type_text,
        required=default is None,
        default_text=default,
        details=details,
    )


DB_HOST = _field("db-host", "String", None, "Database host")
DB_PORT = _field("db-port", "u16", "5432", "Database port")
CACHE_HOST = _field("cache-host", "String", None, "Cache host")
CACHE_TTL = _field("cache-ttl", "u32", "3600", "Cache TTL in seconds")
PORT = _field("port", "u16", "8080", "Server port")


def test_flat_render_matches_padded_markdown_table() -> None:
    output = ResolvedOutput(
        root="MainConfig",
        format=OutputFormat.FLAT,
        rows=(
            FlatRow(DB_HOST, "DatabaseConfig"),
            FlatRow(DB_PORT, "DatabaseConfig"),
            FlatRow(CACHE_HOST, "CacheConfig"),
            FlatRow(CACHE_TTL, "CacheConfig"),
            FlatRow(PORT, "MainConfig"),
        ),
        sections=(),
    )

    expected = "\n".join(
        [
            "| Field Name | Type   | Required | Default | Details              | Group          |",
            "|------------|--------|----------|---------|----------------------|----------------|",
            "| db-host    | String | Yes      | -       | Database host        | DatabaseConfig |",
            "| db-port    | u16    | No       | 5432    | Database port        | DatabaseConfig |",
            "| cache-host | String | Yes      | -       | Cache host           | CacheConfig    |",
            "| cache-ttl  | u32    | No       | 3600    | Cache TTL in seconds | CacheConfig    |",
            "| port       | u16    | No       | 8080    | Server port          | MainConfig     |",
        ]
    )
    assert TableRenderer().render(output) == expected


def test_grouped_render_emits_one_section_per_definition() -> None:
    output = ResolvedOutput(
        root="Config",
        format=OutputFormat.GROUPED,
        rows=(),
        sections=(
            ResolvedSection("DatabaseConfig", (DB_HOST,)),
            ResolvedSection("Config", ()),
        ),
    )

    expected = "\n".join(
        [
            "## DatabaseConfig Configuration",
            "",
            "| Field Name | Type   | Required | Default | Details       |",
            "|------------|--------|----------|---------|---------------|",
            "| db-host    | String | Yes      | -       | Database host |",
            "",
            "## Config Configuration",
            "",
            "| Field Name | Type | Required | Default | Details |",
            "|------------|------|----------|---------|---------|",
        ]
    )
    assert TableRenderer().render(output) == expected


def test_cells_are_not_escaped() -> None:
    table = format_table(("A",), [["x | y"], ["`code`"]])
    assert "| x | y  |" in table
    assert "| `code` |" in table
