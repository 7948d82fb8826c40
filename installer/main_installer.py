# installer/main_installer.py
# -*- coding: utf-8 -*-
"""
The dotfiles setup pipeline.

Steps run in a fixed order inside a temporary sudo grant. Each step has a
failure policy from AppSettings.step_policies: hard_fail (the default)
aborts the run, soft_warn reports a warning and continues.
"""

import logging
import subprocess
from typing import Optional

from common.command_utils import get_symbols, log_setup
from common.exceptions import UnsupportedPlatformError
from common.orchestrator import Orchestrator, exit_code_for
from common.system_utils import detect_os
from installer.default_shell import DefaultShellChanger
from installer.homebrew_installer import HomebrewInstaller
from installer.ohmyzsh_installer import OhMyZshInstaller
from installer.starship_installer import StarshipInstaller
from installer.uv_installer import UvInstaller
from installer.zsh_plugins import ZshPluginInstaller, configure_zsh_plugins
from installer.zshrc_finalizer import adjust_zshrc
from setup.config_models import AppSettings
from setup.privileges import TemporarySudoGrant

module_logger = logging.getLogger(__name__)


def plugin_step_tag(plugin_name: str) -> str:
    return f"install_{plugin_name.replace('-', '_')}"


def build_pipeline(
    app_settings: AppSettings,
    os_tag: str,
    current_logger: Optional[logging.Logger] = None,
) -> Orchestrator:
    """
    Queue every provisioning step, in order, on a new Orchestrator.
    """
    logger_to_use = current_logger if current_logger else module_logger
    orchestrator = Orchestrator(app_settings, logger_to_use)

    def add(tag, func, **kwargs):
        orchestrator.add_task(
            tag, func, kwargs=kwargs, policy=app_settings.policy_for(tag)
        )

    add(
        "install_homebrew",
        HomebrewInstaller(app_settings, os_tag, logger_to_use),
    )
    add(
        "install_oh_my_zsh",
        OhMyZshInstaller(app_settings, os_tag, logger_to_use),
    )
    for plugin in app_settings.plugins:
        add(
            plugin_step_tag(plugin.name),
            ZshPluginInstaller(app_settings, os_tag, plugin, logger_to_use),
        )
    add(
        "configure_zsh_plugins",
        configure_zsh_plugins,
        current_logger=logger_to_use,
    )
    add(
        "install_starship",
        StarshipInstaller(app_settings, os_tag, logger_to_use),
    )
    add("install_uv", UvInstaller(app_settings, os_tag, logger_to_use))

    shell_changer = DefaultShellChanger(app_settings, os_tag, logger_to_use)
    add("locate_zsh", shell_changer.locate_step)
    add("change_default_shell", shell_changer.change_step)

    add("adjust_zshrc", adjust_zshrc, current_logger=logger_to_use)
    return orchestrator


def run_setup(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """
    Detect the platform and run the whole pipeline under a sudo grant.

    Returns:
        int: 0 on success (soft-warn steps may have failed).

    Raises:
        SystemExit: Unsupported platform (code 1), the sudo grant could not be
            set up, or a hard-fail step failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_setup(
        f"{symbols.get('rocket', '🚀')} Starting dotfiles setup...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        os_tag = detect_os(app_settings.ostype, app_settings, logger_to_use)
    except UnsupportedPlatformError as e:
        log_setup(
            f"{symbols.get('error', '❌')} {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise SystemExit(1) from e

    orchestrator = build_pipeline(app_settings, os_tag, logger_to_use)
    # Task errors are handled by the orchestrator; what reaches here is the grant
    try:
        with TemporarySudoGrant(app_settings, logger_to_use):
            all_succeeded = orchestrator.run()
    except (subprocess.CalledProcessError, OSError) as e:
        log_setup(
            f"{symbols.get('critical', '🔥')} Could not set up temporary sudo access: {e}",
            "critical",
            logger_to_use,
            app_settings,
        )
        raise SystemExit(exit_code_for(e)) from e

    if all_succeeded:
        log_setup(
            f"{symbols.get('success', '✅')} Dotfiles setup completed successfully!",
            "success",
            logger_to_use,
            app_settings,
        )
    else:
        log_setup(
            f"{symbols.get('warning', '⚠️')} Dotfiles setup completed with warnings:",
            "warning",
            logger_to_use,
            app_settings,
        )
        for warning in orchestrator.warnings:
            log_setup(f"   - {warning}", "warning", logger_to_use, app_settings)
    log_setup(
        "Please restart your terminal or run 'exec zsh' to apply all changes",
        "info",
        logger_to_use,
        app_settings,
    )
    log_setup(
        "You may also want to install a Nerd Font for better Starship theme support",
        "info",
        logger_to_use,
        app_settings,
    )
    return 0
