"""Core data models shared across hookcheck components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .types import Union


class HookKind(str, Enum):
    """Kind of a hook, as declared by the corpus or the invoking function."""

    ACTION = "action"
    ACTION_REFERENCE = "action_reference"
    FILTER = "filter"
    FILTER_REFERENCE = "filter_reference"

    @property
    def is_action(self) -> bool:
        return self in (HookKind.ACTION, HookKind.ACTION_REFERENCE)

    @property
    def is_filter(self) -> bool:
        return not self.is_action

    def satisfies(self, expected: "HookKind") -> bool:
        """Return True when a hook of this kind may be registered as ``expected``."""
        return self.is_action == expected.is_action


@dataclass(frozen=True)
class HookSignature:
    """Kind plus ordered parameter types of one hook name."""

    kind: HookKind
    parameter_types: Tuple[Union, ...] = ()


@dataclass(frozen=True)
class SourceLocation:
    """1-based position of a node inside a source file."""

    file_path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class FunctionParameter:
    """Parameter descriptor handed back to the host for a registration call."""

    name: str
    type: Union
    by_reference: bool = False
    is_optional: bool = False


INVOCATION_FUNCTIONS: Dict[str, HookKind] = {
    "apply_filters": HookKind.FILTER,
    "apply_filters_ref_array": HookKind.FILTER_REFERENCE,
    "apply_filters_deprecated": HookKind.FILTER,
    "do_action": HookKind.ACTION,
    "do_action_ref_array": HookKind.ACTION_REFERENCE,
    "do_action_deprecated": HookKind.ACTION,
}

REGISTRATION_FUNCTIONS: Dict[str, HookKind] = {
    "add_action": HookKind.ACTION,
    "add_filter": HookKind.FILTER,
}


def normalize_function_name(name: str) -> str:
    """PHP function names are case-insensitive and may be fully qualified."""
    return name.lstrip("\\").lower()


def invocation_kind(function_name: Optional[str]) -> Optional[HookKind]:
    if not function_name:
        return None
    return INVOCATION_FUNCTIONS.get(normalize_function_name(function_name))


def registration_kind(function_name: Optional[str]) -> Optional[HookKind]:
    if not function_name:
        return None
    return REGISTRATION_FUNCTIONS.get(normalize_function_name(function_name))
