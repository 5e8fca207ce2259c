"""CLI entrypoints for hookcheck commands."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, List

from .config import CONFIG_FILENAME, ConfigError, load_config
from .logging import configure_logging
from .session import HookSession


def _session_options() -> argparse.ArgumentParser:
    """Options shared by every sub-command that opens an analysis session."""
    options = argparse.ArgumentParser(add_help=False)
    # SUPPRESS keeps a top-level "-v" from being reset by the sub-command.
    options.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Log debug details of the analysis."
    )
    options.add_argument(
        "--config",
        default=".",
        help=f"Path to {CONFIG_FILENAME} or the directory containing it (defaults to current directory).",
    )
    return options


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookcheck",
        description="Check WordPress hook registrations against documented hook signatures.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details of the analysis.")
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    session_options = _session_options()
    check_parser = subparsers.add_parser(
        "check",
        parents=[session_options],
        help="Report unknown hooks and action/filter mismatches in PHP sources.",
    )
    check_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="PHP files or directories to analyse (defaults to current directory).",
    )
    check_parser.add_argument(
        "--suppress",
        action="append",
        default=[],
        metavar="NAME",
        help="Suppress a diagnostic by name (repeatable), e.g. HookNotFound.",
    )

    hooks_parser = subparsers.add_parser(
        "hooks",
        parents=[session_options],
        help="List the known hook signatures.",
    )
    hooks_parser.add_argument(
        "paths",
        nargs="*",
        default=[],
        help="PHP files or directories to scan for documented and inferred hooks.",
    )
    hooks_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the registry as JSON.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for hookcheck commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = load_config(Path(args.config))
        if args.command == "check":
            config.suppress_issues.extend(args.suppress)
        session = HookSession(config)
    except ConfigError as exc:
        parser.exit(2, f"hookcheck: {exc}\n")

    paths = [Path(path) for path in args.paths]
    diagnostics = session.analyze_paths(paths)

    if args.command == "check":
        for diagnostic in diagnostics:
            print(diagnostic.format())
        return 1 if diagnostics else 0

    if args.json:
        print(json.dumps(_registry_payload(session), indent=2))
    else:
        for name, signature in session.registry.items():
            params = ", ".join(str(value) for value in signature.parameter_types)
            print(f"{signature.kind.value} {name}({params})")
    return 0


def _registry_payload(session: HookSession) -> Dict[str, Dict[str, object]]:
    payload: Dict[str, Dict[str, object]] = {}
    for name, signature in session.registry.items():
        types: List[str] = [str(value) for value in signature.parameter_types]
        payload[name] = {"type": signature.kind.value, "params": types}
    return payload


if __name__ == "__main__":
    raise SystemExit(main())
