"""Hook discovery over PHP syntax trees."""

from .call_sites import CallSiteInferrer, TypeProvider
from .doc_comments import DocumentedHook, HookDocVisitor, collect_documented_hooks
from .tree_sitter import CallExpression, LiteralTypeProvider, NodeTag, PhpSource, VisitedNode

__all__ = [
    "CallExpression",
    "CallSiteInferrer",
    "DocumentedHook",
    "HookDocVisitor",
    "LiteralTypeProvider",
    "NodeTag",
    "PhpSource",
    "TypeProvider",
    "VisitedNode",
    "collect_documented_hooks",
]
