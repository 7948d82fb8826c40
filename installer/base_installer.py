"""
Base installer class for all installer modules.

Every installer is an idempotent "ensure" operation: a presence check
guarding an install action. Install failures are not caught here; they
propagate to the orchestrator, which applies the step's failure policy.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from common.command_utils import get_symbols, log_setup
from setup.config_models import AppSettings


class BaseInstaller(ABC):
    """
    Base class for all installer modules.

    Subclasses implement is_installed() and install(); callers use ensure().
    """

    #: Human-readable component name used in log messages.
    name: str = ""

    def __init__(
        self,
        app_settings: AppSettings,
        os_tag: str,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the installer.

        Args:
            app_settings: The application settings.
            os_tag: "macos" or "linux", as returned by detect_os().
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.os_tag = os_tag
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.symbols = get_symbols(app_settings)

    @abstractmethod
    def is_installed(self) -> bool:
        """
        Check if the component is installed.

        Returns:
            True if the component is installed, False otherwise.
        """

    @abstractmethod
    def install(self) -> None:
        """
        Install the component.

        Raises:
            Exception: Any failure of the underlying installer.
        """

    def log(self, message: str, level: str = "info") -> None:
        log_setup(message, level, self.logger, self.app_settings)

    def ensure(self) -> bool:
        """
        Install the component unless it is already present.

        Returns:
            True if an install was performed, False if it was already present.
        """
        self.log(f"{self.symbols.get('step', '➡️')} Installing {self.name}...")
        if self.is_installed():
            self.log(
                f"{self.symbols.get('success', '✅')} {self.name} is already installed",
                "success",
            )
            return False

        self.install()
        self.log(
            f"{self.symbols.get('success', '✅')} {self.name} installed successfully",
            "success",
        )
        return True

    def __call__(self, context: Optional[Dict[str, Any]] = None, **kwargs: Any) -> bool:
        """Orchestrator entry point."""
        return self.ensure()
