"""Analysis session wiring the hook registry to its discovery pathways."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .analyzers.call_sites import CallSiteInferrer, TypeProvider
from .analyzers.doc_comments import collect_documented_hooks
from .analyzers.tree_sitter import CallExpression, LiteralTypeProvider, PhpSource
from .checker import RegistrationChecker
from .config import HookConfig
from .corpus import CorpusLoader, default_corpus_files
from .diagnostics import Diagnostic, IssueBuffer
from .logging import get_logger
from .models import FunctionParameter, HookSignature, invocation_kind, registration_kind
from .registry import HookRegistry

DEFAULT_STUBS_DIR = Path(__file__).resolve().parent / "data" / "stubs"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "vendor",
    ".idea",
}


class HookSession:
    """One analysis run: owns the registry from creation until it is discarded.

    The corpus is loaded on construction. Hosts then call
    :meth:`before_file_analysis` for each file, :meth:`after_invocation_call`
    for every analysed ``do_action``/``apply_filters`` call and
    :meth:`registration_params` for every ``add_action``/``add_filter`` call.
    """

    def __init__(
        self,
        config: Optional[HookConfig] = None,
        *,
        registry: Optional[HookRegistry] = None,
        issues: Optional[IssueBuffer] = None,
    ) -> None:
        self.config = config or HookConfig(root=Path.cwd())
        self.registry = registry if registry is not None else HookRegistry()
        self.issues = issues if issues is not None else IssueBuffer(self.config.suppress_issues)
        self.logger = get_logger("session")
        self._loader = CorpusLoader(self.registry)
        self._inferrer = CallSiteInferrer(self.registry)
        self._checker = RegistrationChecker(self.registry, self.issues)
        self.load_corpus()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.issues.diagnostics

    def corpus_files(self) -> List[Path]:
        files: List[Path] = []
        if self.config.use_default_hooks:
            files.extend(default_corpus_files())
        files.extend(self.config.hook_files())
        return files

    def stub_files(self) -> List[Path]:
        """Declaration stubs the host should load alongside the analysed code."""
        if not self.config.use_default_stubs:
            return []
        return sorted(DEFAULT_STUBS_DIR.glob("*.php"))

    def load_corpus(self) -> int:
        return self._loader.load(self.corpus_files())

    def before_file_analysis(self, source: PhpSource) -> int:
        """Register the hooks documented at invocation sites of ``source``."""
        hooks = collect_documented_hooks(source.nodes())
        for hook in hooks:
            self.registry.register(hook.name, hook.kind, hook.types)
        if hooks:
            self.logger.debug("Recovered %d documented hooks from %s", len(hooks), source.path)
        return len(hooks)

    def after_invocation_call(
        self, call: CallExpression, types: TypeProvider
    ) -> Optional[HookSignature]:
        return self._inferrer.infer(call, types)

    def registration_params(
        self, call: CallExpression, suppressed: Iterable[str] = ()
    ) -> Optional[List[FunctionParameter]]:
        self.load_corpus()
        return self._checker.function_params(call, suppressed)

    def analyze_source(self, source: PhpSource) -> None:
        self.before_file_analysis(source)
        types = LiteralTypeProvider(source)
        for call in source.calls():
            if invocation_kind(call.function_name) is not None:
                self.after_invocation_call(call, types)
            elif registration_kind(call.function_name) is not None:
                self.registration_params(call)

    def analyze_paths(self, paths: Sequence[Path]) -> List[Diagnostic]:
        """Analyse PHP files and directories one file at a time."""
        for path in iter_php_files(paths):
            try:
                source = PhpSource.from_path(path)
            except OSError as exc:
                self.logger.warning("Skipping %s: %s", path, exc)
                continue
            self.analyze_source(source)
        return self.diagnostics


def iter_php_files(paths: Sequence[Path]) -> Iterator[Path]:
    for path in paths:
        path = Path(path)
        if path.is_file():
            yield path
            continue
        if not path.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
            for filename in sorted(filenames):
                if filename.lower().endswith(".php"):
                    yield Path(dirpath) / filename


__all__ = ["HookSession", "iter_php_files"]
