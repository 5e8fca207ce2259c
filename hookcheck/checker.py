"""Callback shapes for ``add_action`` / ``add_filter`` registration calls."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .analyzers.tree_sitter import CallExpression
from .diagnostics import HOOK_KIND_MISMATCH, HOOK_NOT_FOUND, Diagnostic, IssueBuffer
from .logging import get_logger
from .models import FunctionParameter, registration_kind
from .registry import HookRegistry
from .types import MIXED, NULLABLE_INT, STRING, VOID_OR_NULL, CallableAtomic, Union

logger = get_logger("checker")

# Callbacks receive one argument unless the registration asks for more.
DEFAULT_ACCEPTED_ARGS = 1
_ACCEPTED_ARGS_POSITION = 3


class RegistrationChecker:
    """Answers which callback a registration call must receive."""

    def __init__(self, registry: HookRegistry, issues: IssueBuffer) -> None:
        self.registry = registry
        self.issues = issues

    def function_params(
        self, call: CallExpression, suppressed: Iterable[str] = ()
    ) -> Optional[List[FunctionParameter]]:
        """Return the registration call's parameters, ``[]`` when unconstrained.

        ``None`` means the call is not a registration with a literal hook
        name, so nothing is known about it.
        """
        expected = registration_kind(call.function_name)
        hook_name = call.hook_name
        if expected is None or hook_name is None:
            return None

        signature = self.registry.get(hook_name)
        if signature is None:
            self._report(HOOK_NOT_FOUND, f"Hook [{hook_name}] not found", call, suppressed)
            return []

        if not signature.kind.satisfies(expected):
            if expected.is_action:
                message = f"Hook [{hook_name}] is a filter not an action"
            else:
                message = f"Hook [{hook_name}] is an action not a filter"
            self._report(HOOK_KIND_MISMATCH, message, call, suppressed)
            return []

        accepted = _accepted_args(call)
        hook_params = signature.parameter_types[:accepted]

        # Filters return their first parameter; without docs anything goes.
        if expected.is_action:
            return_type = VOID_OR_NULL
        elif signature.parameter_types:
            return_type = signature.parameter_types[0]
        else:
            return_type = MIXED

        callback = Union((CallableAtomic(tuple(hook_params), return_type),))
        return [
            FunctionParameter("Hook", STRING),
            FunctionParameter("Callback", callback),
            FunctionParameter("Priority", NULLABLE_INT, is_optional=True),
            FunctionParameter("Args", NULLABLE_INT, is_optional=True),
        ]

    def _report(
        self, code: str, message: str, call: CallExpression, suppressed: Iterable[str]
    ) -> None:
        if call.location is None:
            return
        diagnostic = Diagnostic(code=code, message=message, location=call.location)
        if self.issues.accepts(diagnostic, suppressed):
            logger.info("%s", diagnostic.format())


def _accepted_args(call: CallExpression) -> int:
    if len(call.arguments) <= _ACCEPTED_ARGS_POSITION:
        return DEFAULT_ACCEPTED_ARGS
    value = call.arguments[_ACCEPTED_ARGS_POSITION].int_value
    if value is None:
        return DEFAULT_ACCEPTED_ARGS
    return max(value, 0)


def callback_of(params: List[FunctionParameter]) -> Optional[CallableAtomic]:
    """Return the expected callback from a :meth:`RegistrationChecker.function_params` result."""
    for param in params:
        if param.name == "Callback" and param.type.is_single():
            atomic = param.type.atomics[0]
            if isinstance(atomic, CallableAtomic):
                return atomic
    return None


__all__ = ["DEFAULT_ACCEPTED_ARGS", "RegistrationChecker", "callback_of"]
