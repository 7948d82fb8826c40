# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the dotfiles setup.

This module detects the platform, probes ordered lists of candidate
executables, polls for the result of asynchronous installers and imports
environment exported by shell snippets into the running process.
"""

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, TypeVar, Union

from common.command_utils import get_symbols, log_setup, run_command
from common.exceptions import UnsupportedPlatformError
from setup.config_models import AppSettings, ReadinessSettings

module_logger = logging.getLogger(__name__)

MACOS = "macos"
LINUX = "linux"

T = TypeVar("T")


def detect_os(
    platform_id: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Map a platform identifier to "macos" or "linux".

    Accepts both sys.platform values ("darwin", "linux") and bash $OSTYPE
    values ("darwin23", "linux-gnu").

    Raises:
        UnsupportedPlatformError: For any other identifier.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if platform_id.startswith("darwin"):
        os_tag = MACOS
    elif platform_id.startswith("linux"):
        os_tag = LINUX
    else:
        raise UnsupportedPlatformError(
            f"Unsupported operating system: {platform_id}"
        )

    log_setup(
        f"{symbols.get('info', 'ℹ️')} Detected OS: {os_tag}",
        "info",
        logger_to_use,
        app_settings,
    )
    return os_tag


def is_executable_file(path: Union[str, Path]) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_first_executable(
    candidates: Iterable[Optional[Union[str, Path]]],
) -> Optional[str]:
    """
    Return the first candidate that is an existing executable file.

    Empty or None entries (e.g. a failed shutil.which lookup) are skipped.
    When several candidates exist the first one wins, even if they are
    different versions.
    """
    for candidate in candidates:
        if candidate and is_executable_file(candidate):
            return str(candidate)
    return None


def expand_home(path: str, home: Path) -> str:
    """Expand a leading "~" against the given home directory."""
    if path == "~":
        return str(home)
    if path.startswith("~/"):
        return str(home / path[2:])
    return path


def which(command_name: str) -> Optional[str]:
    return shutil.which(command_name)


def wait_until(
    probe: Callable[[], Optional[T]],
    readiness: ReadinessSettings,
    description: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Optional[T]:
    """
    Call probe until it returns a truthy value or the timeout expires.

    The delay between probes starts at readiness.initial_interval and is
    multiplied by readiness.backoff_factor each round, capped at
    readiness.max_interval. The probe always runs at least once, and once
    more after the last delay.

    Returns:
        The first truthy probe result, or None on timeout.
    """
    logger_to_use = current_logger if current_logger else module_logger
    deadline = clock() + readiness.timeout
    interval = readiness.initial_interval
    attempt = 1

    while True:
        result = probe()
        if result:
            return result

        remaining = deadline - clock()
        if remaining <= 0:
            log_setup(
                f"Gave up waiting for {description} after {attempt} attempt(s).",
                "debug",
                logger_to_use,
                app_settings,
            )
            return None

        delay = min(interval, remaining, readiness.max_interval)
        log_setup(
            f"Waiting {delay:.1f}s for {description} (attempt {attempt})...",
            "debug",
            logger_to_use,
            app_settings,
        )
        sleep(delay)
        interval *= readiness.backoff_factor
        attempt += 1


def load_shell_environment(
    snippet: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, str]:
    """
    Evaluate a shell snippet (e.g. `eval "$(brew shellenv)"`) in bash and
    import the variables it changed into os.environ.

    Returns:
        Dict[str, str]: The variables that were added or changed.
    """
    result = run_command(
        ["bash", "-c", f"{snippet}\nenv -0"],
        app_settings,
        capture_output=True,
        current_logger=current_logger,
        log_output=False,
    )
    changed: Dict[str, str] = {}
    for entry in result.stdout.split("\0"):
        name, sep, value = entry.partition("=")
        if not sep or not name or name in ("_", "SHLVL", "PWD", "OLDPWD"):
            continue
        if os.environ.get(name) != value:
            changed[name] = value

    os.environ.update(changed)
    return changed
