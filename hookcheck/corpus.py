"""Loading of hook descriptions from JSON corpus files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from .logging import get_logger
from .models import HookKind
from .normalizer import normalize_types
from .registry import HookRegistry

logger = get_logger("corpus")

DEFAULT_HOOKS_DIR = Path(__file__).resolve().parent / "data" / "hooks"
CORPUS_FILENAMES = ("actions.json", "filters.json")

_TYPE_LINE_RE = re.compile(r"@type\s+(\S+)\s+\$(\w+)")


class CorpusTag(BaseModel):
    name: str
    content: str = ""
    types: Optional[List[str]] = None


class CorpusDoc(BaseModel):
    description: str = ""
    long_description: str = ""
    tags: List[CorpusTag] = Field(default_factory=list)


class CorpusHook(BaseModel):
    """One hook descriptor of a corpus file."""

    name: str
    type: HookKind
    file: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)
    doc: CorpusDoc = Field(default_factory=CorpusDoc)


def synthesize_array_shape(content: str) -> Optional[str]:
    """Turn ``@type <type> $<key>`` lines of a nested PHPDoc block into ``array{ ... }``."""
    if content.count("{") != 1:
        return None
    matches = _TYPE_LINE_RE.findall(content)
    if not matches:
        return None
    properties = [f"{key}: {type_text}" for type_text, key in matches]
    return "array{ " + ", ".join(properties) + " }"


def parameter_type_expressions(hook: CorpusHook) -> List[str]:
    """Return one type expression per documented parameter, in declaration order."""
    expressions: List[str] = []
    for tag in hook.doc.tags:
        if tag.name != "param":
            continue
        types = tag.types
        if types is None or types == ["array"]:
            shape = synthesize_array_shape(tag.content)
            if shape is not None:
                types = [shape]
        expression = "|".join(types or [])
        # Invalid PHPDoc can leave a parameter without any type.
        if expression:
            expressions.append(expression)
    return expressions


class CorpusLoader:
    """Populates a :class:`HookRegistry` from corpus files."""

    def __init__(self, registry: HookRegistry) -> None:
        self.registry = registry

    def load(self, files: Sequence[Path]) -> int:
        """Load every file once per session; a populated registry makes this a no-op."""
        if len(self.registry):
            return 0
        total = 0
        for path in _unique(files):
            total += self.load_file(path)
        logger.debug("Loaded %d hooks from %d corpus files", total, len(files))
        return total

    def load_file(self, path: Path) -> int:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Skipping hook corpus %s: %s", path, exc)
            return 0
        return self.load_data(data, source=str(path))

    def load_data(self, data: Any, *, source: str = "<memory>") -> int:
        hooks = data.get("hooks") if isinstance(data, dict) else None
        if not isinstance(hooks, list) or not hooks:
            logger.warning("Hook corpus %s has no hooks list", source)
            return 0

        count = 0
        for entry in hooks:
            try:
                hook = CorpusHook.model_validate(entry)
            except ValidationError as exc:
                logger.debug("Skipping malformed hook entry in %s: %s", source, exc)
                continue
            expressions = parameter_type_expressions(hook)
            types = normalize_types(expressions)
            # Parameters are positional; one unusable type invalidates the whole hook.
            if len(types) != len(expressions):
                logger.debug("Skipping hook %s in %s: unparseable parameter type", hook.name, source)
                continue
            self.registry.register(hook.name, hook.type, types)
            for alias in hook.aliases:
                self.registry.register(alias, hook.type, types)
            count += 1
        return count


def default_corpus_files() -> List[Path]:
    return [DEFAULT_HOOKS_DIR / name for name in CORPUS_FILENAMES]


def _unique(paths: Iterable[Path]) -> List[Path]:
    seen: List[Path] = []
    for path in paths:
        if path not in seen:
            seen.append(path)
    return seen


__all__ = [
    "CORPUS_FILENAMES",
    "CorpusHook",
    "CorpusLoader",
    "DEFAULT_HOOKS_DIR",
    "default_corpus_files",
    "parameter_type_expressions",
    "synthesize_array_shape",
]
