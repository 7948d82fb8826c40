# installer/uv_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of uv for Python package management.
"""

import re
from typing import Any, Dict, List, Optional

from common.command_utils import command_exists
from common.file_utils import append_line_if_absent
from common.network_utils import run_remote_installer
from installer.base_installer import BaseInstaller


class UvInstaller(BaseInstaller):
    name = "UV"

    def is_installed(self) -> bool:
        return command_exists("uv")

    def install(self) -> None:
        run_remote_installer(
            self.app_settings.urls.uv,
            self.app_settings,
            interpreter="sh",
            from_stdin=True,
            current_logger=self.logger,
        )

    def configure_shells(self) -> List[str]:
        """Ensure the uv env line in ~/.zshrc and ~/.bashrc, exactly once each."""
        env_line = self.app_settings.uv_env_line
        changed = []
        for rc_file in (self.app_settings.zshrc, self.app_settings.bashrc):
            if append_line_if_absent(
                rc_file,
                env_line,
                self.app_settings,
                pattern=f"^\\s*{re.escape(env_line)}\\s*$",
                current_logger=self.logger,
            ):
                changed.append(rc_file.name)
        return changed

    def __call__(self, context: Optional[Dict[str, Any]] = None, **kwargs: Any) -> bool:
        installed = self.ensure()
        self.configure_shells()
        return installed
