"""Tree-sitter powered discovery of annotated configuration classes."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter_python
from tree_sitter import Language, Node, Parser

from ..errors import StructuralError
from ..logging import get_logger
from ..models import RawDefinition, RawField

_PY_LANGUAGE = Language(tree_sitter_python.language())

_REGISTER = "register"
_GENERATE = "generate"
_RENAME_ALL = "rename_all"
_ARG = "arg"
_MARKER_FLAGS = {"flatten", "skip"}
_STRING_OPTIONS = {"default_value", "help", "rename"}


class SourceScanner:
    """Extracts ``RawDefinition`` records from Python source files."""

    def __init__(self) -> None:
        self._parser = Parser(_PY_LANGUAGE)
        self.logger = get_logger("scanner")

    def scan_file(self, path: Path, *, display_name: str | None = None) -> List[RawDefinition]:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Skipping %s: %s", path, exc)
            return []
        return self.scan_source(source, filename=display_name or str(path))

    def scan_source(self, source: str, *, filename: str = "<string>") -> List[RawDefinition]:
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        if tree.root_node.has_error:
            self.logger.warning("Skipping %s: source does not parse", filename)
            return []
        reader = _SourceReader(source_bytes, source.split("\n"), filename)
        definitions: List[RawDefinition] = []
        for decorators, class_node in _iter_decorated_classes(tree.root_node):
            definition = reader.read_class(decorators, class_node)
            if definition is not None:
                definitions.append(definition)
        return definitions


def _iter_decorated_classes(node: Node) -> Iterator[Tuple[List[Node], Node]]:
    for child in node.named_children:
        if child.type == "decorated_definition":
            definition = child.child_by_field_name("definition")
            if definition is not None and definition.type == "class_definition":
                decorators = [item for item in child.named_children if item.type == "decorator"]
                yield decorators, definition
        yield from _iter_decorated_classes(child)


class _SourceReader:
    def __init__(self, source_bytes: bytes, lines: List[str], filename: str) -> None:
        self._source = source_bytes
        self._lines = lines
        self._filename = filename

    def text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def location(self, node: Node) -> str:
        return f"{self._filename}:{node.start_point[0] + 1}"

    def read_class(self, decorators: List[Node], class_node: Node) -> Optional[RawDefinition]:
        register = False
        generate: Optional[Dict[str, Optional[str]]] = None
        rename_all: Optional[str] = None

        for decorator in decorators:
            name, arguments = self._decorator_call(decorator)
            if name == _REGISTER:
                register = True
            elif name == _GENERATE:
                generate = self._generate_options(arguments, decorator)
            elif name == _RENAME_ALL:
                rename_all = self._rename_rule(arguments, decorator)

        if not register and generate is None:
            return None

        name_node = class_node.child_by_field_name("name")
        body = class_node.child_by_field_name("body")
        return RawDefinition(
            identifier=self.text(name_node) if name_node is not None else "",
            fields=self._read_fields(body) if body is not None else [],
            rename_all=rename_all,
            register=register,
            generate=generate,
            location=self.location(class_node),
        )

    def _decorator_call(self, decorator: Node) -> Tuple[Optional[str], Optional[Node]]:
        expression = decorator.named_children[0] if decorator.named_children else None
        if expression is None:
            return None, None
        arguments = None
        if expression.type == "call":
            arguments = expression.child_by_field_name("arguments")
            expression = expression.child_by_field_name("function")
            if expression is None:
                return None, None
        if expression.type not in {"identifier", "attribute"}:
            return None, None
        qualified = self.text(expression)
        qualifier, _, name = qualified.rpartition(".")
        # Only bare names or names reached through the confdoc package count.
        if qualifier and qualifier.split(".")[0] != "confdoc":
            return None, None
        return name, arguments

    def _arguments(self, arguments: Optional[Node]) -> Tuple[List[Node], Dict[str, Node]]:
        positional: List[Node] = []
        keywords: Dict[str, Node] = {}
        if arguments is None:
            return positional, keywords
        for child in arguments.named_children:
            if child.type == "comment":
                continue
            if child.type == "keyword_argument":
                key = child.child_by_field_name("name")
                value = child.child_by_field_name("value")
                if key is not None and value is not None:
                    keywords[self.text(key)] = value
            else:
                positional.append(child)
        return positional, keywords

    def _generate_options(
        self, arguments: Optional[Node], decorator: Node
    ) -> Dict[str, Optional[str]]:
        positional, keywords = self._arguments(arguments)
        options: Dict[str, Optional[str]] = {}
        for key, value in zip(("target", "format", "slot"), positional):
            options[key] = self._literal_text(value, decorator)
        for key, value in keywords.items():
            options[key] = self._literal_text(value, decorator)
        return options

    def _rename_rule(self, arguments: Optional[Node], decorator: Node) -> Optional[str]:
        positional, keywords = self._arguments(arguments)
        value = positional[0] if positional else keywords.get("rule")
        if value is None:
            raise StructuralError("rename_all requires a rule", location=self.location(decorator))
        return self._literal_text(value, decorator)

    def _literal_text(self, node: Node, owner: Node) -> str:
        try:
            value = ast.literal_eval(self.text(node))
        except (ValueError, SyntaxError):
            raise StructuralError(
                f"expected a literal, got '{self.text(node)}'", location=self.location(owner)
            ) from None
        return str(value)

    def _read_fields(self, body: Node) -> List[RawField]:
        fields: List[RawField] = []
        statements = [child for child in body.named_children if child.type != "comment"]
        for index, statement in enumerate(statements):
            if statement.type != "expression_statement" or not statement.named_children:
                continue
            assignment = statement.named_children[0]
            if assignment.type != "assignment":
                continue
            type_node = assignment.child_by_field_name("type")
            if type_node is None:
                continue
            type_text = self.text(type_node)
            if type_text.startswith(("ClassVar", "typing.ClassVar")):
                continue

            left = assignment.child_by_field_name("left")
            name = self.text(left) if left is not None and left.type == "identifier" else None
            attributes = self._field_attributes(assignment.child_by_field_name("right"), statement)

            doc_lines = self._leading_comments(statement)
            if not doc_lines and index + 1 < len(statements):
                doc_lines = self._attribute_docstring(statements[index + 1])

            fields.append(
                RawField(
                    name=name,
                    type_text=type_text,
                    attributes=attributes,
                    doc_lines=doc_lines,
                    location=self.location(statement),
                )
            )
        return fields

    def _field_attributes(
        self, right: Optional[Node], statement: Node
    ) -> Dict[str, Optional[str]]:
        if right is None:
            return {}
        if right.type == "call":
            function = right.child_by_field_name("function")
            if function is not None and self.text(function).rpartition(".")[2] == _ARG:
                return self._arg_options(right.child_by_field_name("arguments"), statement)
        return {"default_value_t": self.text(right)}

    def _arg_options(
        self, arguments: Optional[Node], statement: Node
    ) -> Dict[str, Optional[str]]:
        _, keywords = self._arguments(arguments)
        attributes: Dict[str, Optional[str]] = {}
        for key, value in keywords.items():
            if key == "default_value_t":
                attributes[key] = self.text(value)
            elif key in _MARKER_FLAGS:
                if self.text(value) == "True":
                    attributes[key] = None
            elif key in _STRING_OPTIONS:
                if value.type not in {"string", "concatenated_string"}:
                    raise StructuralError(
                        f"{key} must be a string literal", location=self.location(statement)
                    )
                attributes[key] = self._literal_text(value, statement)
            else:
                attributes[key] = self.text(value)
        return attributes

    def _leading_comments(self, statement: Node) -> List[str]:
        collected: List[str] = []
        row = statement.start_point[0] - 1
        while row >= 0:
            stripped = self._lines[row].strip()
            if not stripped.startswith("#"):
                break
            collected.append(stripped[2:] if stripped.startswith("#:") else stripped[1:])
            row -= 1
        collected.reverse()
        return [line.strip() for line in collected]

    def _attribute_docstring(self, statement: Node) -> List[str]:
        if statement.type != "expression_statement" or len(statement.named_children) != 1:
            return []
        literal = statement.named_children[0]
        if literal.type != "string":
            return []
        try:
            value = ast.literal_eval(self.text(literal))
        except (ValueError, SyntaxError):
            return []
        if not isinstance(value, str):
            return []
        return [line.strip() for line in value.strip().splitlines()]


__all__ = ["SourceScanner"]
