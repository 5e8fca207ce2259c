"""Immutable PHPDoc type model and a parser for textual type expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


class TypeParseError(ValueError):
    """Raised when a type expression cannot be parsed."""


@dataclass(frozen=True)
class Atomic:
    """Named atomic type, optionally generic (``array<string, int>``)."""

    name: str
    params: Tuple["Union", ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.name
        inner = ", ".join(str(param) for param in self.params)
        return f"{self.name}<{inner}>"


@dataclass(frozen=True)
class LiteralAtomic:
    """Literal value type such as ``'foo'``, ``42`` or ``true``."""

    base: str
    value: object

    def widen(self) -> Atomic:
        return Atomic(self.base)

    def __str__(self) -> str:
        if self.base == "bool":
            return "true" if self.value else "false"
        if self.base == "string":
            escaped = str(self.value).replace("\\", "\\\\").replace("'", "\\'")
            return f"'{escaped}'"
        return repr(self.value)


@dataclass(frozen=True)
class ShapeItem:
    key: str
    type: "Union"
    optional: bool = False

    def __str__(self) -> str:
        marker = "?" if self.optional else ""
        return f"{self.key}{marker}: {self.type}"


@dataclass(frozen=True)
class ArrayShape:
    """Keyed array shape, ``array{key: string, other?: int}``."""

    items: Tuple[ShapeItem, ...]
    name: str = "array"

    def __str__(self) -> str:
        inner = ", ".join(str(item) for item in self.items)
        return f"{self.name}{{{inner}}}"


@dataclass(frozen=True)
class CallableAtomic:
    """Callable with a parameter list and a return type."""

    params: Tuple["Union", ...]
    return_type: Optional["Union"] = None

    def __str__(self) -> str:
        inner = ", ".join(str(param) for param in self.params)
        if self.return_type is None:
            return f"callable({inner})"
        return f"callable({inner}): {self.return_type}"


AtomicType = Atomic | LiteralAtomic | ArrayShape | CallableAtomic


@dataclass(frozen=True)
class Union:
    """Ordered, duplicate-free set of atomic members."""

    atomics: Tuple[AtomicType, ...]

    @classmethod
    def of(cls, *atomics: AtomicType) -> "Union":
        return cls(_dedupe(atomics))

    def is_single(self) -> bool:
        return len(self.atomics) == 1

    def __str__(self) -> str:
        return "|".join(str(atomic) for atomic in self.atomics)


def named(name: str) -> Union:
    return Union((Atomic(name),))


def _dedupe(atomics: Iterable[AtomicType]) -> Tuple[AtomicType, ...]:
    seen: List[AtomicType] = []
    for atomic in atomics:
        if atomic not in seen:
            seen.append(atomic)
    return tuple(seen)


MIXED = named("mixed")
STRING = named("string")
NULLABLE_INT = Union((Atomic("int"), Atomic("null")))
VOID_OR_NULL = Union((Atomic("void"), Atomic("null")))

# Tokenizer

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<number>-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
  | (?P<ident>\$this\b|\\?[A-Za-z_][A-Za-z0-9_\\-]*)
  | (?P<punct>[|&?()<>{}\[\],:])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    position: int


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            raise TypeParseError(f"Unexpected character {text[position]!r} in {text!r}")
        kind = match.lastgroup or ""
        if kind != "ws":
            tokens.append(_Token(kind, match.group(), position))
        position = match.end()
    return tokens


class _TypeParser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = _tokenize(text)
        self._index = 0

    def parse(self) -> Union:
        if not self._tokens:
            raise TypeParseError("Empty type expression")
        value = self._union()
        if self._peek() is not None:
            token = self._peek()
            raise TypeParseError(f"Unexpected {token.text!r} in {self._text!r}")
        return value

    def _peek(self, offset: int = 0) -> Optional[_Token]:
        index = self._index + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise TypeParseError(f"Unexpected end of {self._text!r}")
        self._index += 1
        return token

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == "punct" and token.text == text:
            self._index += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            token = self._peek()
            found = token.text if token else "end of input"
            raise TypeParseError(f"Expected {text!r} but found {found!r} in {self._text!r}")

    def _union(self) -> Union:
        members: List[AtomicType] = list(self._postfix().atomics)
        while self._accept("|"):
            members.extend(self._postfix().atomics)
        return Union(_dedupe(members))

    def _postfix(self) -> Union:
        value = self._primary()
        while self._is_punct(self._peek(), "[") and self._is_punct(self._peek(1), "]"):
            self._index += 2
            value = Union((Atomic("array", (value,)),))
        return value

    @staticmethod
    def _is_punct(token: Optional[_Token], text: str) -> bool:
        return token is not None and token.kind == "punct" and token.text == text

    def _primary(self) -> Union:
        token = self._next()
        if token.kind == "punct":
            if token.text == "?":
                inner = self._primary()
                return Union(_dedupe(inner.atomics + (Atomic("null"),)))
            if token.text == "(":
                inner = self._union()
                self._expect(")")
                return inner
            raise TypeParseError(f"Unexpected {token.text!r} in {self._text!r}")
        if token.kind == "string":
            return Union((LiteralAtomic("string", _unquote(token.text)),))
        if token.kind == "number":
            if re.fullmatch(r"-?\d+", token.text):
                return Union((LiteralAtomic("int", int(token.text)),))
            return Union((LiteralAtomic("float", float(token.text)),))
        return self._named(token.text)

    def _named(self, name: str) -> Union:
        lowered = name.lower()
        if lowered == "true":
            return Union((LiteralAtomic("bool", True),))
        if lowered == "false":
            return Union((LiteralAtomic("bool", False),))
        if lowered in {"array", "list", "non-empty-array", "non-empty-list"} and self._accept("{"):
            return Union((ArrayShape(self._shape_items(), name=lowered),))
        if lowered in {"callable", "closure", "\\closure"} and self._accept("("):
            return Union((self._callable(),))
        if self._accept("<"):
            params = [self._union()]
            while self._accept(","):
                params.append(self._union())
            self._expect(">")
            return Union((Atomic(name, tuple(params)),))
        return Union((Atomic(name),))

    def _shape_items(self) -> Tuple[ShapeItem, ...]:
        items: List[ShapeItem] = []
        while not self._accept("}"):
            key_token = self._next()
            if key_token.kind == "string":
                key = _unquote(key_token.text)
            elif key_token.kind in {"ident", "number"}:
                key = key_token.text
            else:
                raise TypeParseError(f"Invalid array shape key {key_token.text!r} in {self._text!r}")
            optional = self._accept("?")
            self._expect(":")
            items.append(ShapeItem(key, self._union(), optional))
            if not self._accept(","):
                self._expect("}")
                break
        return tuple(items)

    def _callable(self) -> CallableAtomic:
        params: List[Union] = []
        if not self._accept(")"):
            params.append(self._union())
            while self._accept(","):
                params.append(self._union())
            self._expect(")")
        return_type = self._postfix() if self._accept(":") else None
        return CallableAtomic(tuple(params), return_type)


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def parse_type(text: str) -> Union:
    """Parse a PHPDoc type expression into a :class:`Union`."""
    return _TypeParser(text).parse()


__all__ = [
    "ArrayShape",
    "Atomic",
    "AtomicType",
    "CallableAtomic",
    "LiteralAtomic",
    "MIXED",
    "NULLABLE_INT",
    "STRING",
    "ShapeItem",
    "TypeParseError",
    "Union",
    "VOID_OR_NULL",
    "named",
    "parse_type",
]
