# setup/privileges.py
# -*- coding: utf-8 -*-
"""
Temporary passwordless sudo for the duration of a setup run.

The grant is a one-line sudoers fragment. TemporarySudoGrant is a context
manager: the fragment is removed when the block exits for any reason,
including exceptions, Ctrl-C, SIGTERM and SIGHUP.
"""

import logging
import os
import signal
import subprocess
from pathlib import Path
from types import FrameType
from typing import Any, Dict, Optional

from common.command_utils import get_symbols, log_setup, run_elevated_command
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

HANDLED_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None))
    if sig is not None
)


def sudoers_rule(user: str) -> str:
    return f"{user} ALL=(ALL) NOPASSWD: ALL\n"


class TemporarySudoGrant:
    """
    Grants `user` passwordless sudo until the context exits.

    States: not-elevated -> grant() -> elevated -> revoke() -> not-elevated.
    revoke() runs at most once per grant.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        current_logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = current_logger or module_logger
        self.fragment_path: Path = app_settings.sudoers_fragment_path
        self.active = False
        self._previous_handlers: Dict[int, Any] = {}

    def grant(self) -> None:
        symbols = get_symbols(self.app_settings)
        if os.geteuid() == 0:
            log_setup(
                f"{symbols.get('info', 'ℹ️')} Running as root, no sudo grant needed.",
                "info",
                self.logger,
                self.app_settings,
            )
            return

        log_setup(
            f"{symbols.get('step', '➡️')} Setting up passwordless sudo for this run...",
            "info",
            self.logger,
            self.app_settings,
        )
        # Mark active before writing so a failure after tee still cleans up.
        self.active = True
        run_elevated_command(
            ["tee", str(self.fragment_path)],
            self.app_settings,
            cmd_input=sudoers_rule(self.app_settings.user),
            capture_output=True,
            current_logger=self.logger,
        )
        run_elevated_command(
            ["chmod", "0440", str(self.fragment_path)],
            self.app_settings,
            current_logger=self.logger,
        )

    def revoke(self) -> bool:
        """Remove the fragment. Returns False if removal failed."""
        if not self.active:
            return True
        self.active = False
        symbols = get_symbols(self.app_settings)

        log_setup(
            f"{symbols.get('step', '➡️')} Resetting passwordless sudo access...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_elevated_command(
                ["rm", "-f", str(self.fragment_path)],
                self.app_settings,
                current_logger=self.logger,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            log_setup(
                f"{symbols.get('error', '❌')} Could not remove {self.fragment_path}: {e}. "
                f"Remove it manually: sudo rm {self.fragment_path}",
                "error",
                self.logger,
                self.app_settings,
            )
            return False
        return True

    def _raise_system_exit(self, signum: int, frame: Optional[FrameType]) -> None:
        raise SystemExit(128 + signum)

    def _install_signal_handlers(self) -> None:
        for sig in HANDLED_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(
                    sig, self._raise_system_exit
                )
            except ValueError:
                # Not the main thread; the finally clause still applies.
                pass

    def _restore_signal_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()

    def __enter__(self) -> "TemporarySudoGrant":
        self._install_signal_handlers()
        try:
            self.grant()
        except BaseException:
            self.revoke()
            self._restore_signal_handlers()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        try:
            self.revoke()
        finally:
            self._restore_signal_handlers()
        return False
