# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Fetching and running remote installer scripts.

This replaces the `curl -fsSL <url> | sh` idiom: the script is downloaded
with requests and handed to the interpreter either as a `-c` argument, so
the installer keeps the terminal as its stdin, or on stdin via `-s` for
non-interactive installers, which keeps large scripts off the argument
list.
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional

import requests

from common.command_utils import get_symbols, log_setup, run_command
from common.exceptions import InstallerDownloadError
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def fetch_installer_script(
    url: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Download an installer script and return its text.

    Raises:
        InstallerDownloadError: On any HTTP, connection or timeout error, or
            when the response body is empty or not UTF-8.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    effective_timeout = timeout or (
        app_settings.download_timeout if app_settings else 120.0
    )

    log_setup(
        f"{symbols.get('gear', '⚙️')} Downloading installer script from {url}...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        response = requests.get(url, timeout=effective_timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as http_err:
        raise InstallerDownloadError(
            f"HTTP error while downloading {url}: {http_err}"
        ) from http_err
    except requests.exceptions.Timeout as timeout_err:
        raise InstallerDownloadError(
            f"Timed out downloading {url}: {timeout_err}"
        ) from timeout_err
    except requests.exceptions.RequestException as req_err:
        raise InstallerDownloadError(
            f"Could not download {url}: {req_err}"
        ) from req_err

    # Shell scripts are UTF-8 whatever charset the server declares
    try:
        script = response.content.decode("utf-8")
    except UnicodeDecodeError as decode_err:
        raise InstallerDownloadError(
            f"Installer script at {url} is not valid UTF-8: {decode_err}"
        ) from decode_err
    if not script.strip():
        raise InstallerDownloadError(f"Installer script at {url} is empty.")
    return script


def run_remote_installer(
    url: str,
    app_settings: Optional[AppSettings],
    interpreter: str = "sh",
    script_args: Optional[List[str]] = None,
    extra_env: Optional[Dict[str, str]] = None,
    from_stdin: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Download the script at url and run it with the interpreter.

    By default this runs `<interpreter> -c <script> "" <args>`, where the
    empty argument fills $0 as in `sh -c "$(curl ...)" "" --flag`. With
    from_stdin=True it runs `<interpreter> -s -- <args>` and feeds the
    script on stdin, as `curl ... | sh -s -- --flag` does.

    Raises:
        InstallerDownloadError: The script could not be fetched.
        subprocess.CalledProcessError: The installer exited non-zero.
    """
    script = fetch_installer_script(url, app_settings, current_logger)
    args = list(script_args or [])
    if from_stdin:
        command = [interpreter, "-s"] + (["--"] + args if args else [])
        log_command = " ".join(command + [f"< <{url}>"])
        cmd_input: Optional[str] = script
    else:
        command = [interpreter, "-c", script] + ([""] + args if args else [])
        log_command = " ".join([interpreter, "-c", f"<{url}>"] + args)
        cmd_input = None

    env = None
    if extra_env:
        env = dict(os.environ)
        env.update(extra_env)

    return run_command(
        command,
        app_settings,
        cmd_input=cmd_input,
        current_logger=current_logger,
        env=env,
        log_command=log_command,
    )
