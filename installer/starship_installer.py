# installer/starship_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of the Starship prompt and its theme.
"""

from typing import Any, Dict, Optional

from common.command_utils import command_exists, run_command
from common.file_utils import append_line_if_absent, ensure_directory
from common.network_utils import run_remote_installer
from common.system_utils import find_first_executable, which
from installer.base_installer import BaseInstaller

STARSHIP_INIT_LINE = 'eval "$(starship init zsh)"'
STARSHIP_INIT_PATTERN = r"starship init zsh"


class StarshipInstaller(BaseInstaller):
    name = "Starship"

    def is_installed(self) -> bool:
        return command_exists("starship")

    def install(self) -> None:
        # --yes answers the installer's confirmation prompt
        run_remote_installer(
            self.app_settings.urls.starship,
            self.app_settings,
            interpreter="sh",
            script_args=["--yes"],
            from_stdin=True,
            current_logger=self.logger,
        )

    def configure_zshrc(self) -> bool:
        added = append_line_if_absent(
            self.app_settings.zshrc,
            STARSHIP_INIT_LINE,
            self.app_settings,
            pattern=STARSHIP_INIT_PATTERN,
            current_logger=self.logger,
        )
        if added:
            self.log(
                f"{self.symbols.get('info', 'ℹ️')} Added Starship initialization to .zshrc"
            )
        return added

    def apply_theme(self) -> bool:
        """
        Regenerate the theme file from the configured preset.

        Returns:
            False (with a warning) when no starship binary is available yet.
        """
        preset = self.app_settings.starship.preset
        config_path = self.app_settings.starship_config
        self.log(
            f"{self.symbols.get('info', 'ℹ️')} Installing {preset} theme for Starship..."
        )
        ensure_directory(config_path.parent, self.app_settings, self.logger)

        starship = find_first_executable(
            [which("starship"), self.app_settings.starship.fallback_binary]
        )
        if not starship:
            self.log(
                f"{self.symbols.get('warning', '⚠️')} Starship not found in PATH. You may need to restart "
                f"your shell and run: starship preset {preset} -o {config_path}",
                "warning",
            )
            return False

        run_command(
            [starship, "preset", preset, "-o", str(config_path)],
            self.app_settings,
            current_logger=self.logger,
        )
        self.log(
            f"{self.symbols.get('success', '✅')} Starship {preset} theme configured",
            "success",
        )
        return True

    def __call__(self, context: Optional[Dict[str, Any]] = None, **kwargs: Any) -> bool:
        installed = self.ensure()
        self.configure_zshrc()
        self.apply_theme()
        return installed
