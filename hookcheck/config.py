"""Configuration loading for hookcheck (.hookcheck.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .corpus import CORPUS_FILENAMES

CONFIG_FILENAME = ".hookcheck.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration is invalid or points at missing hook sources."""


@dataclass
class HookSource:
    """Extra hook corpus: a single JSON file, or a directory of actions/filters files."""

    kind: str
    path: Path
    recursive: bool = False


@dataclass
class HookConfig:
    """Represents the settings defined in .hookcheck.yml."""

    root: Path
    use_default_stubs: bool = True
    use_default_hooks: bool = True
    hooks: List[HookSource] = field(default_factory=list)
    suppress_issues: List[str] = field(default_factory=list)

    def hook_files(self) -> List[Path]:
        """Resolve the configured hook sources into corpus files, in declaration order."""
        files: List[Path] = []
        for source in self.hooks:
            for path in _source_files(source):
                if path not in files:
                    files.append(path)
        return files


def parse_flag(value: Any, default: bool) -> bool:
    """Tri-state flag rule: absent means ``default``, ``false``/"false" means off, anything else on."""
    if value is None:
        return default
    if value is False:
        return False
    if isinstance(value, str) and value.strip().lower() == "false":
        return False
    return True


def load_config(config_path: Path) -> HookConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HookConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    return HookConfig(
        root=root,
        use_default_stubs=parse_flag(data.get("useDefaultStubs"), True),
        use_default_hooks=parse_flag(data.get("useDefaultHooks"), True),
        hooks=_parse_hook_sources(data.get("hooks"), root),
        suppress_issues=_as_str_list(data.get("suppressIssues")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_hook_sources(value: Any, root: Path) -> List[HookSource]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("'hooks' must be a list of file or directory entries")

    sources: List[HookSource] = []
    for entry in value:
        entry_data = _as_dict(entry)
        if "file" in entry_data:
            path = _resolve_path(entry_data.get("file"), root)
            if not path.is_file():
                raise ConfigError(f'Hook file "{path}" does not exist')
            sources.append(HookSource(kind="file", path=path))
        elif "directory" in entry_data:
            path = _resolve_path(entry_data.get("directory"), root)
            if not path.is_dir():
                raise ConfigError(f'Hook directory "{path}" does not exist')
            recursive = parse_flag(entry_data.get("recursive"), False)
            sources.append(HookSource(kind="directory", path=path, recursive=recursive))
        else:
            raise ConfigError(f"Hook source must declare 'file' or 'directory': {entry!r}")
    return sources


def _source_files(source: HookSource) -> List[Path]:
    if source.kind == "file":
        return [source.path]

    directories = [source.path]
    if source.recursive:
        directories = sorted(child for child in source.path.iterdir() if child.is_dir())
        directories.append(source.path)

    files: List[Path] = []
    for directory in directories:
        for filename in CORPUS_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                files.append(candidate)
    return files


def _resolve_path(value: Any, root: Path) -> Path:
    text = _as_str(value)
    if not text:
        raise ConfigError("Hook source path must be a non-empty string")
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = root / path
    return path


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "HookConfig", "HookSource", "load_config", "parse_flag"]
