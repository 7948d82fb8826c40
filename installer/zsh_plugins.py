# installer/zsh_plugins.py
# -*- coding: utf-8 -*-
"""
Git-hosted Oh My Zsh plugins and the `plugins=(...)` line of ~/.zshrc.
"""

import logging
from typing import Any, Dict, List, Optional

from common.command_utils import get_symbols, log_setup, run_command
from common.file_utils import replace_line_or_append
from installer.base_installer import BaseInstaller
from setup.config_models import AppSettings, PluginSpec

module_logger = logging.getLogger(__name__)

PLUGINS_LINE_PATTERN = r"^plugins="


class ZshPluginInstaller(BaseInstaller):
    """Clones one plugin into $ZSH_CUSTOM/plugins/<name> if absent."""

    def __init__(
        self,
        app_settings: AppSettings,
        os_tag: str,
        plugin: PluginSpec,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, os_tag, logger)
        self.plugin = plugin
        self.name = plugin.name

    @property
    def plugin_dir(self):
        return self.app_settings.plugin_dir(self.plugin.name)

    def is_installed(self) -> bool:
        return self.plugin_dir.is_dir()

    def install(self) -> None:
        self.plugin_dir.parent.mkdir(parents=True, exist_ok=True)
        run_command(
            ["git", "clone", self.plugin.repo_url, str(self.plugin_dir)],
            self.app_settings,
            current_logger=self.logger,
        )


def plugins_line(app_settings: AppSettings) -> str:
    names: List[str] = list(app_settings.base_plugins)
    names += [p.name for p in app_settings.plugins if p.name not in names]
    return f"plugins=({' '.join(names)})"


def configure_zsh_plugins(
    app_settings: AppSettings,
    context: Optional[Dict[str, Any]] = None,
    current_logger: Optional[logging.Logger] = None,
    **kwargs: Any,
) -> Optional[str]:
    """
    Enable the plugins in ~/.zshrc by rewriting (or appending) the
    `plugins=(...)` line. The previous file is backed up.

    Returns:
        Optional[str]: The backup path, if a backup was taken.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    log_setup(
        f"{symbols.get('step', '➡️')} Configuring zsh plugins...",
        "info",
        logger_to_use,
        app_settings,
    )
    backup_path = replace_line_or_append(
        app_settings.zshrc,
        PLUGINS_LINE_PATTERN,
        plugins_line(app_settings),
        app_settings,
        logger_to_use,
    )
    log_setup(
        f"{symbols.get('success', '✅')} zsh plugins configured",
        "success",
        logger_to_use,
        app_settings,
    )
    return str(backup_path) if backup_path else None
