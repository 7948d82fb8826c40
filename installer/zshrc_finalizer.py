# installer/zshrc_finalizer.py
# -*- coding: utf-8 -*-
"""
Last touches to ~/.zshrc: the convenience alias and a reload check.
"""

import logging
import re
import subprocess
from typing import Any, Dict, Optional

from common.command_utils import command_exists, get_symbols, log_setup, run_command
from common.file_utils import append_line_if_absent
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def alias_pattern(alias_line: str) -> str:
    """Detection pattern for `alias NAME=...`: any definition of NAME counts."""
    match = re.match(r"\s*alias\s+([^=\s]+)=", alias_line)
    if match:
        return rf"^\s*alias\s+{re.escape(match.group(1))}="
    return f"^{re.escape(alias_line)}$"


def reload_zshrc(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Source ~/.zshrc in a zsh child process so broken edits surface now.

    The calling shell cannot be changed from here; a failure is a warning.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not command_exists("zsh"):
        log_setup(
            f"{symbols.get('warning', '⚠️')} zsh not on PATH; skipping .zshrc reload.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False

    result = run_command(
        ["zsh", "-c", f"source {app_settings.zshrc}"],
        app_settings,
        check=False,
        capture_output=True,
        current_logger=logger_to_use,
    )
    if result.returncode != 0:
        log_setup(
            f"{symbols.get('warning', '⚠️')} Sourcing {app_settings.zshrc} exited with {result.returncode}: "
            f"{(result.stderr or '').strip()}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
    return True


def adjust_zshrc(
    app_settings: AppSettings,
    context: Optional[Dict[str, Any]] = None,
    current_logger: Optional[logging.Logger] = None,
    **kwargs: Any,
) -> bool:
    """
    Ensure the alias line and reload ~/.zshrc.

    Returns:
        bool: Whether the reload check passed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_setup(
        f"{symbols.get('step', '➡️')} Adjusting .zshrc...",
        "info",
        logger_to_use,
        app_settings,
    )
    append_line_if_absent(
        app_settings.zshrc,
        app_settings.zshrc_alias_line,
        app_settings,
        pattern=alias_pattern(app_settings.zshrc_alias_line),
        current_logger=logger_to_use,
    )
    try:
        return reload_zshrc(app_settings, logger_to_use)
    except (subprocess.SubprocessError, OSError) as e:
        log_setup(
            f"{symbols.get('warning', '⚠️')} Could not reload .zshrc: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
