"""Hook-aware type information for WordPress plugin hooks."""

from .models import HookKind, HookSignature
from .registry import HookRegistry
from .session import HookSession

__all__ = ["HookKind", "HookRegistry", "HookSession", "HookSignature"]
