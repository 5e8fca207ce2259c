"""Diagnostics raised while checking hook registrations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Set

from .logging import get_logger
from .models import SourceLocation

HOOK_NOT_FOUND = "HookNotFound"
HOOK_KIND_MISMATCH = "HookKindMismatch"

logger = get_logger("diagnostics")


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    location: SourceLocation

    def format(self) -> str:
        return f"{self.location}: {self.code}: {self.message}"


class IssueBuffer:
    """Collects diagnostics, dropping those suppressed by name."""

    def __init__(self, suppressed: Iterable[str] = ()) -> None:
        self.suppressed: Set[str] = set(suppressed)
        self.diagnostics: List[Diagnostic] = []

    def accepts(self, diagnostic: Diagnostic, suppressed: Iterable[str] = ()) -> bool:
        """Record ``diagnostic`` unless its code is suppressed; return whether it was kept."""
        if diagnostic.code in self.suppressed or diagnostic.code in set(suppressed):
            logger.debug("Suppressed %s", diagnostic.format())
            return False
        self.diagnostics.append(diagnostic)
        return True

    def __len__(self) -> int:
        return len(self.diagnostics)


__all__ = ["Diagnostic", "HOOK_KIND_MISMATCH", "HOOK_NOT_FOUND", "IssueBuffer"]
