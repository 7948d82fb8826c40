# installer/ohmyzsh_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of Oh My Zsh and of zsh itself.
"""

from common.command_utils import command_exists
from common.network_utils import run_remote_installer
from installer.base_installer import BaseInstaller
from installer.package_manager import install_system_package


class OhMyZshInstaller(BaseInstaller):
    name = "Oh My Zsh"

    def is_installed(self) -> bool:
        return self.app_settings.oh_my_zsh_dir.is_dir()

    def ensure_zsh(self) -> bool:
        """Install zsh with the system package manager if it is missing."""
        if command_exists("zsh"):
            return False
        self.log(f"{self.symbols.get('info', 'ℹ️')} Installing zsh...")
        install_system_package(
            "zsh", self.os_tag, self.app_settings, self.logger
        )
        return True

    def install(self) -> None:
        self.ensure_zsh()
        # --unattended: do not change the login shell or start zsh
        run_remote_installer(
            self.app_settings.urls.oh_my_zsh,
            self.app_settings,
            interpreter="sh",
            script_args=["--unattended"],
            current_logger=self.logger,
        )
