"""Tests for field and definition extraction."""

from __future__ import annotations

import pytest

from confdoc.errors import StructuralError
from confdoc.extract import build_definition, extract_field, parse_request, type_identifier
from confdoc.models import OutputFormat, RawDefinition, RawField, RenameRule


def test_field_without_default_is_required() -> None:
    doc = extract_field(RawField(name="database_host", type_text="String"), RenameRule.KEBAB)

    assert doc.name == "database-host"
    assert doc.type_text == "String"
    assert doc.required is True
    assert doc.default_text is None
    assert doc.details == ""


def test_string_default_makes_field_optional() -> None:
    raw = RawField(
        name="postgres_database",
        type_text="String",
        attributes={"default_value": "data-ingestion"},
    )
    doc = extract_field(raw)

    assert doc.required is False
    assert doc.default_text == "data-ingestion"


def test_expression_default_keeps_source_text() -> None:
    raw = RawField(
        name="timeout",
        type_text="float",
        attributes={"default_value_t": "60 * 5"},
    )
    doc = extract_field(raw)

    assert doc.required is False
    assert doc.default_text == "60 * 5"


def test_field_with_both_default_forms_is_rejected() -> None:
    raw = RawField(
        name="port",
        type_text="u16",
        attributes={"default_value": "1", "default_value_t": "2"},
    )
    with pytest.raises(StructuralError):
        extract_field(raw)


def test_doc_lines_are_joined_with_single_spaces() -> None:
    raw = RawField(
        name="host",
        type_text="str",
        doc_lines=["  Database host ", "", "used for writes"],
    )
    assert extract_field(raw).details == "Database host used for writes"


def test_help_attribute_is_used_when_no_doc_lines() -> None:
    raw = RawField(name="host", type_text="str", attributes={"help": "Server host"})
    assert extract_field(raw).details == "Server host"

    documented = RawField(
        name="host",
        type_text="str",
        attributes={"help": "Server host"},
        doc_lines=["From comment"],
    )
    assert extract_field(documented).details == "From comment"


def test_rename_attribute_overrides_rule() -> None:
    raw = RawField(name="db_host", type_text="str", attributes={"rename": "DB"})
    assert extract_field(raw, RenameRule.KEBAB).name == "DB"


def test_unnamed_field_is_rejected() -> None:
    with pytest.raises(StructuralError):
        extract_field(RawField(name=None, type_text="str"))


def test_build_definition_separates_flatten_refs_in_order() -> None:
    raw = RawDefinition(
        identifier="MainConfig",
        rename_all="kebab-case",
        register=True,
        fields=[
            RawField(name="server_port", type_text="u16", attributes={"default_value_t": "8080"}),
            RawField(name="database", type_text="DatabaseConfig", attributes={"flatten": None}),
            RawField(name="log_level", type_text="str"),
            RawField(name="cache", type_text="settings.CacheConfig", attributes={"flatten": None}),
            RawField(name="internal", type_text="str", attributes={"skip": None}),
        ],
    )

    definition = build_definition(raw)

    assert definition.identifier == "MainConfig"
    assert [item.name for item in definition.fields] == ["server-port", "log-level"]
    assert definition.flatten_refs == ("DatabaseConfig", "CacheConfig")
    assert definition.rename_rule is RenameRule.KEBAB
    assert definition.request is None
    assert definition.is_root is False


def test_build_definition_rejects_any_unnamed_field() -> None:
    raw = RawDefinition(
        identifier="Tuple",
        register=True,
        fields=[RawField(name="ok", type_text="str"), RawField(name=None, type_text="int")],
    )
    with pytest.raises(StructuralError, match="named fields"):
        build_definition(raw)


def test_build_definition_rejects_unknown_rename_rule() -> None:
    raw = RawDefinition(identifier="Config", rename_all="Title Case", register=True)
    with pytest.raises(StructuralError, match="Title Case"):
        build_definition(raw)


def test_generation_request_takes_precedence_over_registration() -> None:
    raw = RawDefinition(
        identifier="Config",
        register=True,
        generate={"target": "README.md", "format": "grouped"},
    )
    definition = build_definition(raw)

    assert definition.is_root
    assert definition.request is not None
    assert definition.request.target == "README.md"
    assert definition.request.format is OutputFormat.GROUPED
    assert definition.request.slot == 0


def test_parse_request_defaults_and_validation() -> None:
    request = parse_request({"target": "docs/config.md"})
    assert request.format is OutputFormat.FLAT
    assert parse_request({"target": "a.md", "slot": "2"}).slot == 2

    with pytest.raises(StructuralError):
        parse_request({})
    with pytest.raises(StructuralError):
        parse_request({"target": "a.md", "format": "table"})
    with pytest.raises(StructuralError):
        parse_request({"target": "a.md", "slot": "first"})
    with pytest.raises(StructuralError):
        parse_request({"target": "a.md", "slot": "-1"})


def test_type_identifier_uses_last_segment() -> None:
    assert type_identifier("settings.DatabaseConfig") == "DatabaseConfig"
    assert type_identifier("'RedisConfig'") == "RedisConfig"
    assert type_identifier("CacheConfig") == "CacheConfig"
