"""Normalisation of documented hook parameter types."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .logging import get_logger
from .types import AtomicType, LiteralAtomic, TypeParseError, Union, parse_type

logger = get_logger("normalizer")


def widen_literals(value: Union) -> Union:
    """Replace literal members (``'foo'``, ``3``, ``true``) with their general type."""
    atomics: List[AtomicType] = []
    for atomic in value.atomics:
        atomics.append(atomic.widen() if isinstance(atomic, LiteralAtomic) else atomic)
    return Union.of(*atomics)


def normalize_type(expression: Optional[str]) -> Optional[Union]:
    """Parse and widen one type expression; ``None`` when nothing usable remains."""
    if expression is None or not expression.strip():
        return None
    try:
        parsed = parse_type(expression)
    except TypeParseError as exc:
        logger.debug("Dropping unparseable type %r: %s", expression, exc)
        return None
    return widen_literals(parsed)


def normalize_types(expressions: Iterable[Optional[str]]) -> List[Union]:
    """Normalise many expressions, silently dropping the unusable ones."""
    types: List[Union] = []
    for expression in expressions:
        value = normalize_type(expression)
        if value is not None:
            types.append(value)
    return types


__all__ = ["normalize_type", "normalize_types", "widen_literals"]
