#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""BL2 Patcher - command line entry point.

Without arguments the patcher finds Borderlands 2 through Steam, applies the
patch to an unpatched executable or reverts a patched one, and verifies the
result. ``--check`` only reports the current state.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .app import check_executable, run_patcher
from .config import load_config
from .exceptions import BaseError, PatchIntegrityError
from .logging_config import cleanup_logging, get_logger, setup_logging
from .version import load_version

logger = get_logger("cli")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(
        prog="bl2patch",
        description="BL2 Patcher - toggles the Borderlands 2 console/dev-command patch",
    )
    parser.add_argument("--check", action="store_true", help="Only report whether the executable is patched")
    parser.add_argument("--exe", metavar="PATH", help="Patch this executable instead of locating it through Steam")
    parser.add_argument("--steam-path", metavar="PATH", help="Steam installation directory")
    parser.add_argument("--config", metavar="PATH", help="Configuration file (JSON)")
    parser.add_argument("--no-backup", action="store_true", help="Do not copy the executable before writing")
    parser.add_argument("--json-logs", action="store_true", help="Emit log records as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="store_true", help="Show version information")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function. Returns the process exit code."""
    args = parse_arguments(argv)

    if args.version:
        print(f"BL2 Patcher v{load_version()}")
        return 0

    try:
        config = load_config(args.config)
    except BaseError as e:
        setup_logging(structured_json=args.json_logs or None)
        logger.error("%s", e, extra={"error": e.to_dict()})
        cleanup_logging()
        return e.exit_code

    log_cfg = config.logging
    setup_logging(
        log_level="DEBUG" if args.debug else log_cfg.level,
        log_dir=log_cfg.log_dir,
        max_log_size=log_cfg.max_log_size,
        backup_count=log_cfg.backup_count,
        structured_json=True if args.json_logs else log_cfg.json_output,
    )
    if args.steam_path:
        config.steam.steam_path = args.steam_path

    try:
        if args.check:
            report = check_executable(config, exe_path=args.exe)
            logger.info("%s", report.summary())
        else:
            report = run_patcher(config, exe_path=args.exe, backup=False if args.no_backup else None)
            logger.info("%s", report.summary())
        return 0
    except PatchIntegrityError as e:
        logger.error("%s\n%s", e, e.restore_hint(), extra={"error": e.to_dict()})
        return e.exit_code
    except BaseError as e:
        logger.error("%s", e, extra={"error": e.to_dict()})
        return e.exit_code
    finally:
        cleanup_logging()


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
