"""Minimal PHPDoc block parser for ``@param`` extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

_TAG_RE = re.compile(r"^@([A-Za-z][\w-]*)(.*)$", re.DOTALL)
_VARIABLE_RE = re.compile(r"^(?:&\s*)?(?:\.\.\.\s*)?\$\w+")
_OPENERS = {"<": ">", "{": "}", "(": ")", "[": "]"}


class DocBlockParseError(ValueError):
    """Raised when a comment is not a well-formed PHPDoc block."""


@dataclass
class DocTag:
    name: str
    content: str


@dataclass
class ParamTag:
    """A ``@param`` tag; ``type_text`` is None when the tag declares no usable type."""

    type_text: Optional[str]
    variable: Optional[str]
    description: str = ""


@dataclass
class DocBlock:
    summary: str
    tags: List[DocTag] = field(default_factory=list)

    def tags_named(self, name: str) -> List[DocTag]:
        return [tag for tag in self.tags if tag.name == name]

    def params(self) -> List[ParamTag]:
        return [parse_param_tag(tag.content) for tag in self.tags_named("param")]


def parse_docblock(text: str) -> DocBlock:
    stripped = text.strip()
    if not stripped.startswith("/**") or not stripped.endswith("*/") or len(stripped) < 5:
        raise DocBlockParseError("Not a PHPDoc block")

    body = stripped[3:-2]
    summary_lines: List[str] = []
    tags: List[Tuple[str, List[str]]] = []
    depth = 0
    for raw_line in body.splitlines():
        line = raw_line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        line = line.rstrip()
        match = _TAG_RE.match(line.strip())
        # Tags nested in an open "{" block (such as @type) belong to the enclosing tag.
        if match and depth <= 0:
            tags.append((match.group(1), [match.group(2).strip()]))
            depth = line.count("{") - line.count("}")
        elif tags:
            depth += line.count("{") - line.count("}")
            tags[-1][1].append(line)
        else:
            summary_lines.append(line)

    return DocBlock(
        summary="\n".join(summary_lines).strip(),
        tags=[DocTag(name, "\n".join(lines).strip()) for name, lines in tags],
    )


def parse_param_tag(content: str) -> ParamTag:
    """Split ``<type> $name description`` into its parts."""
    content = content.strip()
    if not content or _VARIABLE_RE.match(content):
        variable = _VARIABLE_RE.match(content)
        return ParamTag(
            type_text=None,
            variable=variable.group(0) if variable else None,
            description=content[variable.end():].strip() if variable else "",
        )

    type_text, rest = _split_type(content)
    if not type_text or _has_unbalanced_brackets(type_text):
        return ParamTag(type_text=None, variable=None, description=content)

    rest = rest.strip()
    variable_match = _VARIABLE_RE.match(rest)
    if variable_match:
        return ParamTag(type_text, variable_match.group(0), rest[variable_match.end():].strip())
    return ParamTag(type_text, None, rest)


def _split_type(content: str) -> Tuple[str, str]:
    """Read a type token, allowing whitespace inside brackets and quotes."""
    stack: List[str] = []
    quote: Optional[str] = None
    index = 0
    while index < len(content):
        char = content[index]
        if quote:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif stack and char == stack[-1]:
            stack.pop()
        elif not stack and char.isspace():
            # "callable(): int" and "A | B" keep going across the whitespace.
            following = content[index:].lstrip()
            preceding = content[:index].rstrip()
            if preceding.endswith(("|", ":", ",")) or following.startswith(("|", ":")):
                index += 1
                continue
            break
        index += 1
    return content[:index].strip(), content[index:]


def _has_unbalanced_brackets(text: str) -> bool:
    depth = 0
    for char in text:
        if char in "<{([":
            depth += 1
        elif char in ">})]":
            depth -= 1
            if depth < 0:
                return True
    return depth != 0


__all__ = [
    "DocBlock",
    "DocBlockParseError",
    "DocTag",
    "ParamTag",
    "parse_docblock",
    "parse_param_tag",
]
