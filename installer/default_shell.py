# installer/default_shell.py
# -*- coding: utf-8 -*-
"""
Makes zsh the invoking user's login shell.

Locating zsh and changing the shell are separate pipeline steps: a zsh
that cannot be found is fatal, a shell change that every mechanism
refused is reported as a warning with manual instructions.
"""

import logging
import os
import subprocess
from typing import Any, Dict, List, Optional

from common.command_utils import (
    command_exists,
    get_symbols,
    log_setup,
    run_command,
    run_elevated_command,
)
from common.exceptions import ExecutableNotFoundError, ShellChangeError
from common.file_utils import append_line_to_system_file
from common.system_utils import LINUX, find_first_executable, which
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

TARGET_SHELL = "zsh"
ZSH_PATH_CONTEXT_KEY = "zsh_path"


class DefaultShellChanger:
    def __init__(
        self,
        app_settings: AppSettings,
        os_tag: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.os_tag = os_tag
        self.logger = logger or module_logger
        self.symbols = get_symbols(app_settings)

    def log(self, message: str, level: str = "info") -> None:
        log_setup(message, level, self.logger, self.app_settings)

    def is_target_shell(self) -> bool:
        """True if $SHELL already points at zsh."""
        return os.path.basename(self.app_settings.shell) == TARGET_SHELL

    def candidates(self) -> List[Optional[str]]:
        return [which(TARGET_SHELL)] + list(self.app_settings.zsh_candidates)

    def locate(self) -> str:
        """
        Returns:
            str: The first existing zsh executable among the candidates.

        Raises:
            ExecutableNotFoundError: No candidate exists.
        """
        zsh_path = find_first_executable(self.candidates())
        if not zsh_path:
            raise ExecutableNotFoundError(
                "zsh not found in any expected location",
                remediation="Please ensure zsh is installed and try running the script again",
            )
        self.log(f"{self.symbols.get('info', 'ℹ️')} Found zsh at: {zsh_path}")
        return zsh_path

    def register_login_shell(self, zsh_path: str) -> None:
        """Add zsh_path to /etc/shells. Problems are warnings only."""
        shells_file = self.app_settings.login_shells_file
        if not shells_file.is_file():
            self.log(
                f"{self.symbols.get('warning', '⚠️')} {shells_file} not found, skipping shell validation",
                "warning",
            )
            return
        try:
            if append_line_to_system_file(
                shells_file, zsh_path, self.app_settings, self.logger
            ):
                self.log(
                    f"{self.symbols.get('success', '✅')} Added zsh to {shells_file}",
                    "success",
                )
        except (subprocess.CalledProcessError, OSError):
            self.log(
                f"{self.symbols.get('warning', '⚠️')} Could not add zsh to {shells_file} (may need manual intervention)",
                "warning",
            )

    def _try(self, command: List[str], elevated: bool = False) -> bool:
        try:
            if elevated:
                run_elevated_command(
                    command, self.app_settings, current_logger=self.logger
                )
            else:
                run_command(
                    command, self.app_settings, current_logger=self.logger
                )
            return True
        except (subprocess.CalledProcessError, OSError):
            return False

    def change_login_shell(self, zsh_path: str) -> str:
        """
        Switch the login shell: chsh first, then usermod (Linux only).

        Returns:
            str: The mechanism that worked.

        Raises:
            ShellChangeError: Every mechanism failed.
        """
        self.log(f"{self.symbols.get('info', 'ℹ️')} Changing default shell to zsh...")
        if self._try(["chsh", "-s", zsh_path]):
            mechanism = "chsh"
        elif self.os_tag == LINUX and command_exists("usermod"):
            self.log(
                f"{self.symbols.get('warning', '⚠️')} chsh command failed, trying alternative method...",
                "warning",
            )
            if not self._try(
                ["usermod", "-s", zsh_path, self.app_settings.user],
                elevated=True,
            ):
                raise ShellChangeError(
                    "Failed to change default shell",
                    remediation=f"You can manually change it by running: chsh -s {zsh_path}",
                )
            mechanism = "usermod"
        else:
            raise ShellChangeError(
                "Failed to change default shell automatically",
                remediation=(
                    f"Please manually run: chsh -s {zsh_path}\n"
                    "Or contact your system administrator if you don't have permission"
                ),
            )

        self.log(
            f"{self.symbols.get('success', '✅')} Default shell changed to zsh"
            + (" using usermod" if mechanism == "usermod" else ""),
            "success",
        )
        self.log(
            f"{self.symbols.get('warning', '⚠️')} Please restart your terminal or run 'exec zsh' to use the new shell",
            "warning",
        )
        return mechanism

    # --- pipeline steps ---

    def locate_step(
        self, context: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Optional[str]:
        self.log(f"{self.symbols.get('step', '➡️')} Setting zsh as default shell...")
        if self.is_target_shell():
            return None
        zsh_path = self.locate()
        if context is not None:
            context[ZSH_PATH_CONTEXT_KEY] = zsh_path
        return zsh_path

    def change_step(
        self, context: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Optional[str]:
        if self.is_target_shell():
            self.log(
                f"{self.symbols.get('success', '✅')} zsh is already the default shell",
                "success",
            )
            return None
        zsh_path = (context or {}).get(ZSH_PATH_CONTEXT_KEY) or self.locate()
        self.register_login_shell(zsh_path)
        return self.change_login_shell(zsh_path)

    def __call__(
        self, context: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Optional[str]:
        context = {} if context is None else context
        self.locate_step(context)
        return self.change_step(context)
