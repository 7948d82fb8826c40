#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the dotfiles setup.

Installs Homebrew, Oh My Zsh with two plugins, Starship and uv, then makes
zsh the login shell. Safe to run repeatedly.
"""

import argparse
import logging
import sys
from typing import List, Optional

from common.core_utils import setup_logging
from installer.main_installer import run_setup
from setup.cli_handler import view_configuration
from setup.config_loader import DEFAULT_CONFIG_FILE, load_app_settings


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Set up zsh, Oh My Zsh, Starship, Homebrew and uv on macOS or Linux."
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"YAML configuration file (default: ./{DEFAULT_CONFIG_FILE} if present).",
    )
    parser.add_argument(
        "--log-file", default=None, help="Also write the log to this file."
    )
    parser.add_argument(
        "--log-prefix", default=None, help="Prefix for every log line."
    )
    parser.add_argument(
        "--zsh-custom",
        default=None,
        help="Oh My Zsh custom directory (overrides $ZSH_CUSTOM).",
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    parsed_args = parse_args(args)

    # Settings drive the log format, so a plain configuration comes first.
    setup_logging(log_level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    logger = logging.getLogger("dotfiles_setup")

    app_settings = load_app_settings(parsed_args, current_logger=logger)
    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=parsed_args.log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )

    if parsed_args.view_config:
        view_configuration(app_settings, logger)
        return 0

    try:
        return run_setup(app_settings, logger)
    except KeyboardInterrupt:
        logger.error("Setup interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
