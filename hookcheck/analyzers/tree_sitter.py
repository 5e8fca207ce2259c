"""Tree-sitter backed view of PHP sources as a stream of tagged nodes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter_php
from tree_sitter import Language, Node, Parser, Tree

from ..models import SourceLocation, normalize_function_name
from ..types import Atomic, LiteralAtomic, Union

PHP_LANGUAGE = Language(tree_sitter_php.language_php())

_parser: Optional[Parser] = None


def php_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(PHP_LANGUAGE)
    return _parser


class NodeTag(Enum):
    """Node kinds that matter when pairing doc comments with hook calls."""

    CALL = "call"
    RETURN = "return"
    VARIABLE = "variable"
    ECHO = "echo"
    OTHER = "other"


_TAG_BY_TYPE: Dict[str, NodeTag] = {
    "function_call_expression": NodeTag.CALL,
    "return_statement": NodeTag.RETURN,
    "variable_name": NodeTag.VARIABLE,
    "echo_statement": NodeTag.ECHO,
    "print_intrinsic": NodeTag.ECHO,
}

# Not descended into: their children are tokens rather than syntax of interest.
_LEAF_TYPES = {
    "variable_name",
    "name",
    "qualified_name",
    "string",
    "encapsed_string",
    "heredoc",
    "nowdoc",
    "integer",
    "float",
    "boolean",
    "null",
}

# Visited through but never yielded, so "(apply_filters(...))" keeps its doc.
_TRANSPARENT_TYPES = {"parenthesized_expression"}

_STRING_PARTS = {"string_content", "string_value", "escape_sequence"}

_DOUBLE_QUOTE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "\\": "\\",
    "$": "$",
    '"': '"',
}


@dataclass
class CallArgument:
    """One actual argument of a call; ``expression`` is None for ``foo(...)``."""

    expression: Optional[Node]
    text: str
    name: Optional[str] = None
    unpacked: bool = False
    string_value: Optional[str] = None
    int_value: Optional[int] = None


@dataclass
class CallExpression:
    """A plain function call, with its function name resolved when static."""

    function_name: Optional[str]
    arguments: List[CallArgument]
    location: SourceLocation
    node: Node = field(repr=False)

    @property
    def hook_name(self) -> Optional[str]:
        """Literal string passed as the first argument, if any."""
        if not self.arguments:
            return None
        return self.arguments[0].string_value


@dataclass
class VisitedNode:
    tag: NodeTag
    node_type: str
    location: SourceLocation
    doc_comment: Optional[str] = None
    call: Optional[CallExpression] = None


class PhpSource:
    """A parsed PHP file.

    :meth:`nodes` walks the syntax tree in pre-order and yields one
    :class:`VisitedNode` per named node. Tree-sitter keeps comments as
    sibling nodes, so the last ``/** ... */`` comment before a node is
    attached to that node and to every descendant starting at the same
    offset, the way PHP parsers share leading comments between a statement
    and the expressions it opens with.
    """

    def __init__(self, path: str, source: bytes, parser: Optional[Parser] = None) -> None:
        self.path = path
        self.source = source
        self._parser = parser
        self._tree: Optional[Tree] = None

    @classmethod
    def from_path(cls, path: Path, parser: Optional[Parser] = None) -> "PhpSource":
        return cls(str(path), Path(path).read_bytes(), parser)

    @classmethod
    def from_text(cls, text: str, path: str = "<string>") -> "PhpSource":
        return cls(path, text.encode("utf-8"))

    @property
    def tree(self) -> Tree:
        if self._tree is None:
            parser = self._parser or php_parser()
            self._tree = parser.parse(self.source)
        return self._tree

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def location_of(self, node: Node) -> SourceLocation:
        row, column = node.start_point[0], node.start_point[1]
        return SourceLocation(self.path, row + 1, column + 1)

    def nodes(self) -> Iterator[VisitedNode]:
        stack: List[Tuple[Node, Optional[str]]] = [(self.tree.root_node, None)]
        while stack:
            node, doc = stack.pop()
            if node.type not in _TRANSPARENT_TYPES:
                yield self._visit(node, doc)
            if node.type in _LEAF_TYPES:
                continue
            stack.extend(reversed(self._children_with_docs(node, doc)))

    def calls(self) -> Iterator[CallExpression]:
        for visited in self.nodes():
            if visited.call is not None:
                yield visited.call

    def _children_with_docs(
        self, node: Node, doc: Optional[str]
    ) -> List[Tuple[Node, Optional[str]]]:
        children: List[Tuple[Node, Optional[str]]] = []
        pending: Optional[str] = None
        for child in node.children:
            if not child.is_named:
                continue
            if child.type == "comment":
                text = self.text_of(child)
                if text.startswith("/**"):
                    pending = text
                continue
            child_doc = pending
            if child_doc is None and doc is not None and child.start_byte == node.start_byte:
                child_doc = doc
            pending = None
            children.append((child, child_doc))
        return children

    def _visit(self, node: Node, doc: Optional[str]) -> VisitedNode:
        tag = _TAG_BY_TYPE.get(node.type, NodeTag.OTHER)
        call = self._call_expression(node) if tag is NodeTag.CALL else None
        return VisitedNode(
            tag=tag,
            node_type=node.type,
            location=self.location_of(node),
            doc_comment=doc,
            call=call,
        )

    def _call_expression(self, node: Node) -> CallExpression:
        function = node.child_by_field_name("function")
        function_name = None
        if function is not None and function.type in {"name", "qualified_name"}:
            function_name = normalize_function_name(self.text_of(function))

        arguments: List[CallArgument] = []
        arguments_node = node.child_by_field_name("arguments")
        if arguments_node is not None:
            for child in arguments_node.named_children:
                if child.type == "comment":
                    continue
                arguments.append(self._argument(child))
        return CallExpression(
            function_name=function_name,
            arguments=arguments,
            location=self.location_of(node),
            node=node,
        )

    def _argument(self, node: Node) -> CallArgument:
        if node.type != "argument":
            return CallArgument(expression=None, text=self.text_of(node))

        name_node = node.child_by_field_name("name")
        expression = None
        for child in node.named_children:
            if name_node is not None and child.start_byte == name_node.start_byte:
                continue
            if child.type == "comment":
                continue
            expression = child

        unpacked = False
        if expression is not None and expression.type == "variadic_unpacking":
            unpacked = True
            inner = [child for child in expression.named_children if child.type != "comment"]
            expression = inner[0] if inner else None

        return CallArgument(
            expression=expression,
            text=self.text_of(node),
            name=self.text_of(name_node) if name_node is not None else None,
            unpacked=unpacked,
            string_value=self.string_value(expression) if not unpacked else None,
            int_value=self.int_value(expression) if not unpacked else None,
        )

    def string_value(self, node: Optional[Node]) -> Optional[str]:
        """Value of a string literal without interpolation, else None."""
        if node is None:
            return None
        if node.type == "string":
            text = self.text_of(node)
            if text[:1] in {"b", "B"}:
                text = text[1:]
            if len(text) < 2 or text[0] != "'" or text[-1] != "'":
                return None
            return re.sub(r"\\([\\'])", r"\1", text[1:-1])
        if node.type == "encapsed_string":
            if any(child.type not in _STRING_PARTS for child in node.named_children):
                return None
            text = self.text_of(node)
            if text[:1] in {"b", "B"}:
                text = text[1:]
            if len(text) < 2 or text[0] != '"' or text[-1] != '"':
                return None
            return re.sub(
                r"\\(.)",
                lambda match: _DOUBLE_QUOTE_ESCAPES.get(match.group(1), match.group(0)),
                text[1:-1],
            )
        return None

    def int_value(self, node: Optional[Node]) -> Optional[int]:
        if node is None or node.type != "integer":
            return None
        return parse_php_int(self.text_of(node))


def parse_php_int(text: str) -> Optional[int]:
    cleaned = text.replace("_", "").lower()
    try:
        if cleaned.startswith(("0x", "0b", "0o")):
            return int(cleaned, 0)
        if len(cleaned) > 1 and cleaned.startswith("0"):
            return int(cleaned, 8)
        return int(cleaned)
    except ValueError:
        return None


_CAST_TYPES = {
    "int": "int",
    "integer": "int",
    "bool": "bool",
    "boolean": "bool",
    "float": "float",
    "double": "float",
    "real": "float",
    "string": "string",
    "binary": "string",
    "array": "array",
    "object": "object",
}


class LiteralTypeProvider:
    """Infers the types of argument expressions that are evident from syntax.

    Anything needing real inference (variables, calls, property access) is
    reported as unknown.
    """

    def __init__(self, source: PhpSource) -> None:
        self._source = source

    def type_of(self, node: Optional[Node]) -> Optional[Union]:
        if node is None:
            return None
        kind = node.type
        if kind in {"string", "encapsed_string"}:
            value = self._source.string_value(node)
            if value is None:
                return Union((Atomic("string"),))
            return Union((LiteralAtomic("string", value),))
        if kind in {"heredoc", "nowdoc"}:
            return Union((Atomic("string"),))
        if kind == "integer":
            value = self._source.int_value(node)
            return Union((LiteralAtomic("int", value),)) if value is not None else Union((Atomic("int"),))
        if kind == "float":
            try:
                return Union((LiteralAtomic("float", float(self._source.text_of(node).replace("_", ""))),))
            except ValueError:
                return Union((Atomic("float"),))
        if kind == "boolean":
            return Union((LiteralAtomic("bool", self._source.text_of(node).lower() == "true"),))
        if kind == "null":
            return Union((Atomic("null"),))
        if kind == "array_creation_expression":
            return Union((Atomic("array"),))
        if kind == "object_creation_expression":
            for child in node.named_children:
                if child.type in {"name", "qualified_name"}:
                    return Union((Atomic(self._source.text_of(child).lstrip("\\")),))
            return Union((Atomic("object"),))
        if kind == "binary_expression":
            operator = node.child_by_field_name("operator")
            if operator is not None and self._source.text_of(operator) == ".":
                return Union((Atomic("string"),))
            return None
        if kind == "cast_expression":
            for child in node.named_children:
                if child.type == "cast_type":
                    cast = _CAST_TYPES.get(self._source.text_of(child).strip().lower())
                    return Union((Atomic(cast),)) if cast else None
            return None
        if kind == "parenthesized_expression":
            inner = [child for child in node.named_children if child.type != "comment"]
            return self.type_of(inner[0]) if inner else None
        return None


__all__ = [
    "CallArgument",
    "CallExpression",
    "LiteralTypeProvider",
    "NodeTag",
    "PHP_LANGUAGE",
    "PhpSource",
    "VisitedNode",
    "parse_php_int",
    "php_parser",
]
