from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest


def _hook_entry(name: str, kind: str = "filter", *param_types: List[str], **extra: Any) -> Dict[str, Any]:
    """Build a corpus descriptor with one ``param`` tag per entry of ``param_types``."""
    tags = [{"name": "param", "content": "", "types": types} for types in param_types]
    entry: Dict[str, Any] = {
        "name": name,
        "type": kind,
        "file": "wp-includes/plugin.php",
        "doc": {"description": "", "long_description": "", "tags": tags},
    }
    entry.update(extra)
    return entry


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[..., Path]:
    """Write a corpus file holding the given hook descriptors."""

    def _write(hooks: List[Dict[str, Any]], filename: str = "hooks.json") -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"hooks": hooks}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_php(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def hook_entry() -> Callable[..., Dict[str, Any]]:
    return _hook_entry
