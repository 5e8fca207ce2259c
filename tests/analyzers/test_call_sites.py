"""Tests for call-site signature inference."""

from __future__ import annotations

from typing import Dict, Optional

from hookcheck.analyzers.call_sites import CallSiteInferrer
from hookcheck.analyzers.tree_sitter import CallArgument, CallExpression, LiteralTypeProvider, PhpSource
from hookcheck.models import HookKind, SourceLocation
from hookcheck.registry import HookRegistry
from hookcheck.types import LiteralAtomic, MIXED, STRING, Union, named

LOCATION = SourceLocation("plugin.php", 3, 1)


class FakeTypes:
    """Looks argument types up by the argument's source text."""

    def __init__(self, types: Dict[str, Union]) -> None:
        self._types = types

    def type_of(self, node: object) -> Optional[Union]:
        return self._types.get(node)


def _call(function_name: str, name: Optional[str], *expressions: str) -> CallExpression:
    arguments = [CallArgument(expression=None, text=repr(name), string_value=name)]
    arguments.extend(CallArgument(expression=expression, text=expression) for expression in expressions)
    return CallExpression(function_name=function_name, arguments=arguments, location=LOCATION, node=None)


def test_unknown_argument_types_become_mixed() -> None:
    registry = HookRegistry()
    signature = CallSiteInferrer(registry).infer(
        _call("do_action", "my_action", "$a", "$b"), FakeTypes({"$a": named("int")})
    )
    assert signature.kind is HookKind.ACTION
    assert signature.parameter_types == (named("int"), MIXED)
    assert registry.get("my_action") == signature


def test_literal_argument_types_are_widened() -> None:
    registry = HookRegistry()
    types = FakeTypes({"'x'": Union((LiteralAtomic("string", "x"), LiteralAtomic("string", "y")))})
    CallSiteInferrer(registry).infer(_call("apply_filters", "my_filter", "'x'"), types)
    assert registry.get("my_filter").parameter_types == (STRING,)


def test_known_hooks_are_not_overwritten() -> None:
    registry = HookRegistry()
    registry.register("the_content", HookKind.FILTER, [STRING])

    result = CallSiteInferrer(registry).infer(
        _call("apply_filters", "the_content", "$a"), FakeTypes({"$a": named("int")})
    )

    assert result is None
    assert registry.get("the_content").parameter_types == (STRING,)


def test_non_literal_names_and_other_functions_are_ignored() -> None:
    registry = HookRegistry()
    inferrer = CallSiteInferrer(registry)

    assert inferrer.infer(_call("apply_filters", None, "$a"), FakeTypes({})) is None
    assert inferrer.infer(_call("add_filter", "hook", "$a"), FakeTypes({})) is None
    assert inferrer.infer(_call("esc_html", "hook"), FakeTypes({})) is None
    assert len(registry) == 0


def test_placeholder_arguments_become_mixed() -> None:
    registry = HookRegistry()
    call = _call("apply_filters_ref_array", "by_ref")
    call.arguments.append(CallArgument(expression=None, text="..."))

    CallSiteInferrer(registry).infer(call, FakeTypes({}))

    signature = registry.get("by_ref")
    assert signature.kind is HookKind.FILTER_REFERENCE
    assert signature.parameter_types == (MIXED,)


def test_hook_without_arguments_is_registered_empty() -> None:
    registry = HookRegistry()
    CallSiteInferrer(registry).infer(_call("do_action", "init"), FakeTypes({}))
    assert registry.get("init").parameter_types == ()


def test_infers_from_php_literals() -> None:
    source = PhpSource.from_text("<?php\ndo_action( 'my_action', 'text', 42, $thing );\n")
    (call,) = source.calls()
    registry = HookRegistry()

    CallSiteInferrer(registry).infer(call, LiteralTypeProvider(source))

    assert registry.get("my_action").parameter_types == (STRING, named("int"), MIXED)
