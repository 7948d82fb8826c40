"""
Installers for the dotfiles setup.

Each component is an idempotent "ensure" operation built on BaseInstaller.
"""

from installer.base_installer import BaseInstaller

__all__ = ["BaseInstaller"]
