"""Recovery of hook signatures from PHPDoc comments at invocation call sites."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..corpus import synthesize_array_shape
from ..docblock import DocBlockParseError, parse_docblock
from ..logging import get_logger
from ..models import HookKind, invocation_kind
from ..normalizer import normalize_type
from ..types import MIXED, Union
from .tree_sitter import CallExpression, NodeTag, VisitedNode

logger = get_logger("analyzers.doc_comments")

# Node kinds whose leading doc comment may describe a hook call inside them:
# "return apply_filters(...)", "$var = apply_filters(...)", "echo apply_filters(...)".
_DOC_CARRIERS = {NodeTag.CALL, NodeTag.RETURN, NodeTag.VARIABLE, NodeTag.ECHO}


@dataclass
class DocumentedHook:
    name: str
    kind: HookKind
    types: List[Union]


class HookDocVisitor:
    """Pairs pending doc comments with the invocation calls they describe.

    The only state is the most recent doc comment that may still belong to
    an upcoming call. Any node that is neither a doc carrier nor a call
    discards it, and it is always consumed by the next call examined.
    """

    def __init__(self) -> None:
        self._pending: Optional[str] = None
        self.hooks: Dict[str, DocumentedHook] = {}

    def visit(self, node: VisitedNode) -> None:
        if node.doc_comment and node.tag in _DOC_CARRIERS:
            self._pending = node.doc_comment
        elif self._pending is not None and node.tag is not NodeTag.CALL:
            self._pending = None

        if self._pending is not None and node.tag is NodeTag.CALL and node.call is not None:
            doc = self._pending
            self._pending = None
            self._examine(node.call, doc)

    def _examine(self, call: CallExpression, doc: str) -> None:
        kind = invocation_kind(call.function_name)
        if kind is None:
            return
        hook_name = call.hook_name
        if hook_name is None:
            return

        try:
            block = parse_docblock(doc)
        except DocBlockParseError as exc:
            logger.debug("Ignoring doc comment for hook %s: %s", hook_name, exc)
            return

        types: List[Union] = []
        for param in block.params():
            type_text = param.type_text
            if type_text == "array":
                type_text = synthesize_array_shape(param.description) or type_text
            # A placeholder keeps later parameters aligned with their arguments.
            types.append(normalize_type(type_text) or MIXED)

        if not types:
            return
        self.hooks[hook_name] = DocumentedHook(hook_name, kind, types)


def collect_documented_hooks(nodes: Iterable[VisitedNode]) -> List[DocumentedHook]:
    """Run a :class:`HookDocVisitor` over one file's nodes."""
    visitor = HookDocVisitor()
    for node in nodes:
        visitor.visit(node)
    return list(visitor.hooks.values())


__all__ = ["DocumentedHook", "HookDocVisitor", "collect_documented_hooks"]
