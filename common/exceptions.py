# common/exceptions.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the setup steps.

External command failures are not wrapped: they propagate as
subprocess.CalledProcessError so the orchestrator can exit with the
failing command's return code.
"""

from typing import Optional


class SetupError(Exception):
    """Base class for errors raised by the dotfiles setup."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.remediation = remediation


class UnsupportedPlatformError(SetupError):
    """The platform identifier is neither macOS nor Linux."""


class ExecutableNotFoundError(SetupError):
    """An executable expected after installation was not found."""


class InstallerDownloadError(SetupError):
    """A remote installer script could not be fetched."""


class ShellChangeError(SetupError):
    """Every mechanism for changing the login shell failed."""
