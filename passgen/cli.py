"""
passgen CLI — entry point.

Usage:
    passgen                   # Unlock the vault and run the TUI
    passgen --vault PATH      # Same, against another vault file
    passgen path              # Show the vault file location
    passgen version           # Show version
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from passgen.errors import ConfigError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="passgen",
        description="passgen — password generator with an encrypted local vault.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--vault", type=str, help="Vault file (default: ~/.passgen_vault.enc)")

    subparsers = parser.add_subparsers(dest="command")

    # run (default)
    subparsers.add_parser("run", help="Unlock the vault and start the TUI")

    # path
    subparsers.add_parser("path", help="Show the vault file location")

    # version
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from passgen import __version__

        print(f"passgen {__version__}")
        return 0

    if args.command == "path":
        return _cmd_path(args)
    return _cmd_run(args)


def _load_config(args: argparse.Namespace):
    from passgen.config import get_config

    cfg = get_config()
    if args.vault:
        cfg = dataclasses.replace(cfg, vault_path=Path(args.vault).expanduser())
    return cfg


def _configure_logging(cfg) -> None:
    if cfg.log_file is None:
        return
    cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(cfg.log_file),
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _cmd_path(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
    except (RuntimeError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 0
    exists = "exists" if cfg.vault_path.exists() else "not created yet"
    print(f"{cfg.vault_path} ({exists})")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    # Startup failures are reported on stderr; the exit status stays 0
    try:
        cfg = _load_config(args)
        _configure_logging(cfg)
    except (RuntimeError, OSError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 0

    from passgen.tui.app import PassgenApp

    logger.info("Starting passgen (vault: %s)", cfg.vault_path)
    try:
        PassgenApp(config=cfg).run()
    except Exception as e:
        logger.exception("TUI terminated abnormally")
        print(f"Error: {e!r}", file=sys.stderr)
    return 0
