# installer/package_manager.py
# -*- coding: utf-8 -*-
"""
Installs system packages with whatever package manager the platform has.

macOS always uses Homebrew. On Linux the first available of apt-get, yum
and pacman is used, with Homebrew as the last resort.
"""

import logging
from typing import List, Optional

from common.command_utils import (
    command_exists,
    get_symbols,
    log_setup,
    run_command,
    run_elevated_command,
)
from common.exceptions import ExecutableNotFoundError
from common.system_utils import MACOS
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

LINUX_PACKAGE_MANAGERS: List[str] = ["apt-get", "yum", "pacman"]


def detect_package_manager(os_tag: str) -> Optional[str]:
    """
    Return the package manager to use on this platform, or None.
    """
    if os_tag == MACOS:
        return "brew" if command_exists("brew") else None
    for manager in LINUX_PACKAGE_MANAGERS:
        if command_exists(manager):
            return manager
    return "brew" if command_exists("brew") else None


def install_system_package(
    package_name: str,
    os_tag: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Install a package non-interactively.

    Returns:
        str: The package manager that was used.

    Raises:
        ExecutableNotFoundError: No supported package manager is available.
        subprocess.CalledProcessError: The package manager failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    manager = detect_package_manager(os_tag)

    if manager is None:
        raise ExecutableNotFoundError(
            f"No supported package manager found to install {package_name}",
            remediation=f"Install {package_name} manually and re-run the setup.",
        )

    log_setup(
        f"{symbols.get('package', '📦')} Installing {package_name} with {manager}...",
        "info",
        logger_to_use,
        app_settings,
    )

    if manager == "apt-get":
        run_elevated_command(
            ["apt-get", "update"], app_settings, current_logger=logger_to_use
        )
        run_elevated_command(
            ["apt-get", "install", "-y", package_name],
            app_settings,
            current_logger=logger_to_use,
        )
    elif manager == "yum":
        run_elevated_command(
            ["yum", "install", "-y", package_name],
            app_settings,
            current_logger=logger_to_use,
        )
    elif manager == "pacman":
        run_elevated_command(
            ["pacman", "-S", "--noconfirm", package_name],
            app_settings,
            current_logger=logger_to_use,
        )
    else:
        # Homebrew refuses to run as root
        run_command(
            ["brew", "install", package_name],
            app_settings,
            current_logger=logger_to_use,
        )
    return manager
