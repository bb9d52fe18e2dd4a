"""CLI entry point for the another-mq configuration tools."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from anothermq.config.loader import (
    DUMP_FORMATS,
    dump_config,
    initialize_config,
    load_config_result,
)
from anothermq.config.paths import EnvironmentNotConfiguredError, Platform, resolve_config_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="anothermq-config")
    subparsers = parser.add_subparsers(dest="command", required=True)
    platforms = [platform.value for platform in Platform]

    path_parser = subparsers.add_parser("path", help="Print the default config file location")
    path_parser.add_argument("--platform", choices=platforms, default=None)

    show_parser = subparsers.add_parser("show", help="Print the effective configuration")
    show_parser.add_argument("--config", type=Path, default=None)
    show_parser.add_argument("--platform", choices=platforms, default=None)
    show_parser.add_argument("--format", dest="output_format", choices=DUMP_FORMATS, default="toml")

    check_parser = subparsers.add_parser("check", help="Report whether the config file loads cleanly")
    check_parser.add_argument("--config", type=Path, default=None)
    check_parser.add_argument("--platform", choices=platforms, default=None)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=Path("./another-mq.toml"))
    init_parser.add_argument("--force", action="store_true")

    return parser


def _config_path(config_path: Path | None, platform: str | None) -> Path:
    if config_path is not None:
        return config_path
    return Path(resolve_config_path(Platform(platform) if platform else None))


def cmd_path(platform: str | None) -> int:
    print(_config_path(None, platform))
    return 0


def cmd_show(config_path: Path | None, platform: str | None, output_format: str) -> int:
    result = load_config_result(_config_path(config_path, platform))
    print(dump_config(result.config, output_format).rstrip("\n"))
    return 0


def cmd_check(config_path: Path | None, platform: str | None) -> int:
    result = load_config_result(_config_path(config_path, platform))
    payload: dict[str, object] = {
        "path": str(result.path),
        "ok": not result.used_defaults,
        "error": str(result.error) if result.error is not None else None,
    }
    print(json.dumps(payload, indent=2))
    return 1 if result.used_defaults else 0


def cmd_init(config_path: Path, force: bool) -> int:
    try:
        initialize_config(config_path, force=force)
    except FileExistsError as exc:
        print(json.dumps({"error": str(exc)}, indent=2))
        return 1
    print(f"wrote config: {config_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "path":
            return cmd_path(args.platform)
        if args.command == "show":
            return cmd_show(args.config, args.platform, args.output_format)
        if args.command == "check":
            return cmd_check(args.config, args.platform)
        if args.command == "init":
            return cmd_init(args.config, args.force)
    except EnvironmentNotConfiguredError as exc:
        print(json.dumps({"error": str(exc), "variable": exc.variable}, indent=2))
        return 1

    parser.error(f"unknown command: {args.command}")
    return 2

