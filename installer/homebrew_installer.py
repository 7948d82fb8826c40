# installer/homebrew_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of Homebrew (Linuxbrew on Linux).
"""

import logging
from typing import List, Optional

from common.command_utils import command_exists, run_command
from common.file_utils import append_block_if_absent
from common.network_utils import run_remote_installer
from common.system_utils import (
    LINUX,
    expand_home,
    find_first_executable,
    load_shell_environment,
    wait_until,
)
from installer.base_installer import BaseInstaller
from setup.config_models import AppSettings

HOMEBREW_MARKER = "# Homebrew"


class HomebrewInstaller(BaseInstaller):
    name = "Homebrew"

    def __init__(
        self,
        app_settings: AppSettings,
        os_tag: str,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, os_tag, logger)
        self.brew_path: Optional[str] = None

    def is_installed(self) -> bool:
        return command_exists("brew")

    def install(self) -> None:
        label = "Linuxbrew for Linux" if self.os_tag == LINUX else "Homebrew for macOS"
        self.log(f"{self.symbols.get('info', 'ℹ️')} Installing {label}...")
        run_remote_installer(
            self.app_settings.urls.homebrew,
            self.app_settings,
            interpreter="/bin/bash",
            extra_env={"NONINTERACTIVE": "1"},
            current_logger=self.logger,
        )
        if self.os_tag == LINUX:
            self.configure_linux_path()

    def brew_candidates(self) -> List[str]:
        return [
            expand_home(candidate, self.app_settings.home)
            for candidate in self.app_settings.linux_brew_candidates
        ]

    def locate_brew(self) -> Optional[str]:
        """Poll the candidate locations until the installer's brew appears."""
        return wait_until(
            lambda: find_first_executable(self.brew_candidates()),
            self.app_settings.readiness,
            "the Homebrew binary",
            self.app_settings,
            self.logger,
        )

    def configure_linux_path(self) -> None:
        """
        Put Linuxbrew on PATH: persist `brew shellenv` in the shell resource
        files that exist and apply it to this process.
        """
        self.brew_path = self.locate_brew()
        if not self.brew_path:
            self.log(
                f"{self.symbols.get('warning', '⚠️')} Could not find Homebrew installation after install attempt",
                "warning",
            )
            self.log(
                "You may need to manually add Homebrew to your PATH:\n"
                "  echo 'eval \"$(/home/linuxbrew/.linuxbrew/bin/brew shellenv)\"' >> ~/.bashrc\n"
                "  echo 'eval \"$(/home/linuxbrew/.linuxbrew/bin/brew shellenv)\"' >> ~/.zshrc"
            )
            return

        self.log(f"{self.symbols.get('info', 'ℹ️')} Found Homebrew at: {self.brew_path}")
        shellenv = run_command(
            [self.brew_path, "shellenv"],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
        ).stdout.strip()

        block = [HOMEBREW_MARKER] + shellenv.splitlines()
        for rc_file in (self.app_settings.bashrc, self.app_settings.zshrc):
            if append_block_if_absent(
                rc_file,
                f"^{HOMEBREW_MARKER}$",
                block,
                self.app_settings,
                create_missing=False,
                current_logger=self.logger,
            ):
                self.log(
                    f"{self.symbols.get('info', 'ℹ️')} Added Homebrew configuration to {rc_file.name}"
                )

        load_shell_environment(
            f'eval "$({self.brew_path} shellenv)"',
            self.app_settings,
            self.logger,
        )
        if command_exists("brew"):
            self.log(
                f"{self.symbols.get('success', '✅')} Linuxbrew PATH configured successfully",
                "success",
            )
        else:
            self.log(
                f"{self.symbols.get('warning', '⚠️')} Homebrew installed but not yet in PATH. Please restart your shell.",
                "warning",
            )
