# setup/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the dotfiles setup.
"""

import logging
from typing import Optional

from common.command_utils import log_setup
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def format_configuration(app_config: AppSettings) -> str:
    """Render the effective settings as an aligned, human-readable block."""
    symbols = app_config.symbols
    rows = [
        ("Platform identifier", app_config.ostype),
        ("Home directory", app_config.home),
        ("User", app_config.user),
        ("Current login shell", app_config.shell or "(unset)"),
        ("Oh My Zsh custom dir", app_config.zsh_custom_dir),
        ("Homebrew installer", app_config.urls.homebrew),
        ("Oh My Zsh installer", app_config.urls.oh_my_zsh),
        ("Starship installer", app_config.urls.starship),
        ("UV installer", app_config.urls.uv),
        ("Plugins", ", ".join(p.name for p in app_config.plugins)),
        ("Starship preset", app_config.starship.preset),
        ("Sudoers fragment", app_config.sudoers_fragment_path),
        ("Login shells file", app_config.login_shells_file),
    ]
    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    for label, value in rows:
        config_text += f"  {label + ':':<30}{value}\n"

    config_text += "\n  Step policies (unlisted steps are hard_fail):\n"
    for step, policy in sorted(app_config.step_policies.items()):
        config_text += f"    {step + ':':<28}{policy.value}\n"
    return config_text


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Displays the current effective configuration values.

    Parameters:
        app_config (AppSettings): The resolved settings.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to the module logger.
    """
    logger_to_use = current_logger if current_logger else module_logger
    log_setup(
        format_configuration(app_config), "info", logger_to_use, app_config
    )
