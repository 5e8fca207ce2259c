"""Fallback hook signatures inferred from invocation call arguments."""

from __future__ import annotations

from typing import Any, List, Optional, Protocol

from ..logging import get_logger
from ..models import HookSignature, invocation_kind
from ..normalizer import widen_literals
from ..registry import HookRegistry
from ..types import MIXED, Union
from .tree_sitter import CallExpression

logger = get_logger("analyzers.call_sites")


class TypeProvider(Protocol):
    """Source of the types the host already inferred for expressions."""

    def type_of(self, node: Any) -> Optional[Union]:
        ...


class CallSiteInferrer:
    """Registers signatures for undocumented hooks from their call arguments."""

    def __init__(self, registry: HookRegistry) -> None:
        self.registry = registry

    def infer(self, call: CallExpression, types: TypeProvider) -> Optional[HookSignature]:
        """Register the call's argument types unless the hook is already known."""
        kind = invocation_kind(call.function_name)
        if kind is None:
            return None
        name = call.hook_name
        if name is None or name in self.registry:
            return None

        parameter_types: List[Union] = []
        for argument in call.arguments[1:]:
            inferred = types.type_of(argument.expression) if argument.expression is not None else None
            parameter_types.append(widen_literals(inferred) if inferred is not None else MIXED)

        logger.debug(
            "Inferred %s hook %s from call at %s", kind.value, name, call.location
        )
        return self.registry.register(name, kind, parameter_types)


__all__ = ["CallSiteInferrer", "TypeProvider"]
