from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from . import commands
from .errors import SlateError
from .lib.env import PATHS
from .logging_utils import DEFAULT_LOG_PATH, configure_logging

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = os.path.join(PATHS.config_dir, PATHS.config_name)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slate", description="Tool, not jailer.")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to slate config (yaml|json)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to slate log")
    p.add_argument("--debug", action="store_true", help="Verbose logging")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Detect hardware, create config, copy templates")

    check = sub.add_parser("check", help="Verify LUKS encryption and system requirements")
    check.add_argument("--verbose", action="store_true")

    reload = sub.add_parser("reload", help="Render all templates and overwrite live configs")
    reload.add_argument("--dry-run", action="store_true", help="Print rendered configs without writing")

    set_ = sub.add_parser("set", help="Set a palette/hardware value and reload")
    set_.add_argument("key", help="Dotted key, e.g. palette.accent")
    set_.add_argument("value")
    set_.add_argument("--dry-run", action="store_true", help="Print the new config without saving")

    wall = sub.add_parser("wall", help="Wallpaper management")
    wall_sub = wall.add_subparsers(dest="wall_action", required=True)
    wall_set = wall_sub.add_parser("set", help="Set a wallpaper and optionally regenerate palette")
    wall_set.add_argument("path", help="Path to the wallpaper image")

    return p


def run(args: argparse.Namespace) -> None:
    config_path = Path(os.path.expanduser(args.config))

    if args.command == "init":
        commands.init(config_path)
        return
    if args.command == "check":
        commands.check(verbose=args.verbose)
        return

    if not config_path.exists():
        raise SlateError(f"Config not found at {config_path}. Run 'slate init' to set up Slate for the first time.")

    if args.command == "reload":
        commands.reload(config_path, dry_run=args.dry_run)
    elif args.command == "set":
        commands.set_value(config_path, args.key, args.value, dry_run=args.dry_run)
    elif args.command == "wall":
        commands.wall_set(config_path, args.path)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_path=args.log, level=logging.DEBUG if args.debug else logging.INFO)

    try:
        run(args)
    except SlateError as e:
        logger.error("%s", e)
        return 1
    except Exception:
        logger.exception("slate %s failed", args.command)
        raise
    return 0
