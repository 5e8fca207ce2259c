"""Session-scoped registry of hook signatures."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .logging import get_logger
from .models import HookKind, HookSignature
from .types import Union

logger = get_logger("registry")


class HookRegistry:
    """Maps hook names to merged signatures discovered during one analysis session.

    Signatures arrive from the corpus, from documentation comments and from
    call-site inference, in that order of discovery. :meth:`register` is the
    only way to write; it never shrinks a stored parameter list and never
    changes a stored kind.
    """

    def __init__(self) -> None:
        self._hooks: Dict[str, HookSignature] = {}
        self._lock = threading.Lock()

    def register(
        self, name: str, kind: HookKind, types: Iterable[Optional[Union]]
    ) -> HookSignature:
        """Merge ``types`` into the signature stored under ``name`` and return it."""
        supplied = [value for value in types if value is not None]
        with self._lock:
            existing = self._hooks.get(name)
            if existing is None:
                signature = HookSignature(kind=kind, parameter_types=tuple(supplied))
                self._hooks[name] = signature
                logger.debug("Registered %s hook %s with %d params", kind.value, name, len(supplied))
                return signature

            if not supplied:
                return existing

            merged: List[Union] = list(supplied)
            # New types win position by position; the stored tail survives.
            merged.extend(existing.parameter_types[len(supplied):])
            signature = HookSignature(kind=existing.kind, parameter_types=tuple(merged))
            self._hooks[name] = signature
            return signature

    def get(self, name: str) -> Optional[HookSignature]:
        return self._hooks.get(name)

    def items(self) -> List[Tuple[str, HookSignature]]:
        with self._lock:
            return list(self._hooks.items())

    def clear(self) -> None:
        with self._lock:
            self._hooks.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._hooks))


__all__ = ["HookRegistry"]
