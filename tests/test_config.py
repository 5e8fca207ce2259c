"""Tests for .hookcheck.yml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from hookcheck.config import CONFIG_FILENAME, ConfigError, HookConfig, load_config, parse_flag


def _write_config(root: Path, content: str) -> Path:
    path = root / CONFIG_FILENAME
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "value, default, expected",
    [
        (None, True, True),
        (None, False, False),
        (False, True, False),
        ("false", True, False),
        ("FALSE", True, False),
        (True, False, True),
        ("true", False, True),
        ("no", False, True),
        (0, False, True),
    ],
)
def test_parse_flag(value: object, default: bool, expected: bool) -> None:
    assert parse_flag(value, default) is expected


def test_missing_config_yields_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert config.root == tmp_path.resolve()
    assert config.use_default_stubs is True
    assert config.use_default_hooks is True
    assert config.hooks == []
    assert config.suppress_issues == []


def test_empty_config_yields_defaults(tmp_path: Path) -> None:
    _write_config(tmp_path, "")
    assert load_config(tmp_path) == HookConfig(root=tmp_path.resolve())


def test_loads_flags_and_suppressions(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        "useDefaultStubs: false\nuseDefaultHooks: 'false'\nsuppressIssues:\n  - HookNotFound\n",
    )
    config = load_config(path)
    assert config.use_default_stubs is False
    assert config.use_default_hooks is False
    assert config.suppress_issues == ["HookNotFound"]


def test_hook_files_resolve_relative_to_config(tmp_path: Path) -> None:
    hooks_dir = tmp_path / "hooks"
    (hooks_dir / "plugin-a").mkdir(parents=True)
    (hooks_dir / "plugin-b").mkdir()
    (hooks_dir / "plugin-a" / "actions.json").write_text("{}", encoding="utf-8")
    (hooks_dir / "plugin-b" / "filters.json").write_text("{}", encoding="utf-8")
    (hooks_dir / "plugin-b" / "actions.json").write_text("{}", encoding="utf-8")
    (hooks_dir / "filters.json").write_text("{}", encoding="utf-8")
    extra = tmp_path / "extra.json"
    extra.write_text("{}", encoding="utf-8")

    _write_config(
        tmp_path,
        "hooks:\n"
        "  - file: extra.json\n"
        "  - directory: hooks\n"
        "    recursive: true\n"
        "  - directory: hooks\n",
    )
    config = load_config(tmp_path)

    root = tmp_path.resolve()
    assert config.hook_files() == [
        root / "extra.json",
        root / "hooks" / "plugin-a" / "actions.json",
        root / "hooks" / "plugin-b" / "actions.json",
        root / "hooks" / "plugin-b" / "filters.json",
        root / "hooks" / "filters.json",
    ]


def test_non_recursive_directory_only_reads_its_own_files(tmp_path: Path) -> None:
    (tmp_path / "hooks" / "nested").mkdir(parents=True)
    (tmp_path / "hooks" / "nested" / "actions.json").write_text("{}", encoding="utf-8")
    _write_config(tmp_path, "hooks:\n  - directory: hooks\n")
    assert load_config(tmp_path).hook_files() == []


def test_missing_hook_sources_raise(tmp_path: Path) -> None:
    _write_config(tmp_path, "hooks:\n  - file: nope.json\n")
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path)

    _write_config(tmp_path, "hooks:\n  - directory: nowhere\n")
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "hooks: extra.json\n",
        "hooks:\n  - somewhere: else\n",
        "hooks: [unclosed\n",
    ],
)
def test_invalid_configs_raise(tmp_path: Path, content: str) -> None:
    _write_config(tmp_path, content)
    with pytest.raises(ConfigError):
        load_config(tmp_path)
