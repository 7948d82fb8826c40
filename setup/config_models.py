# setup/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the dotfiles setup,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
Values are resolved from model defaults, the environment (HOME, USER,
SHELL, ZSH_CUSTOM, OSTYPE), an optional YAML file and CLI flags.
"""

import getpass
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[DOTFILES]"

HOMEBREW_INSTALL_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
)
OH_MY_ZSH_INSTALL_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
)
STARSHIP_INSTALL_URL_DEFAULT: str = "https://starship.rs/install.sh"
UV_INSTALL_URL_DEFAULT: str = "https://astral.sh/uv/install.sh"

STARSHIP_PRESET_DEFAULT: str = "catppuccin-powerline"
STARSHIP_FALLBACK_BINARY_DEFAULT: str = "/usr/local/bin/starship"

UV_ENV_LINE_DEFAULT: str = "source $HOME/.local/bin/env"
ZSHRC_ALIAS_LINE_DEFAULT: str = "alias c='clear&&clear'"

SUDOERS_FRAGMENT_PATH_DEFAULT: str = "/etc/sudoers.d/setup_temp"
LOGIN_SHELLS_FILE_DEFAULT: str = "/etc/shells"

LINUX_BREW_CANDIDATES_DEFAULT: List[str] = [
    "/home/linuxbrew/.linuxbrew/bin/brew",
    "~/.linuxbrew/bin/brew",
    "/opt/homebrew/bin/brew",
]
ZSH_CANDIDATES_DEFAULT: List[str] = [
    "/usr/bin/zsh",
    "/bin/zsh",
    "/usr/local/bin/zsh",
    "/home/linuxbrew/.linuxbrew/bin/zsh",
    "/opt/homebrew/bin/zsh",
]

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class StepPolicy(str, Enum):
    """What the orchestrator does when a step raises."""

    HARD_FAIL = "hard_fail"
    SOFT_WARN = "soft_warn"


STEP_POLICIES_DEFAULT: Dict[str, StepPolicy] = {
    "change_default_shell": StepPolicy.SOFT_WARN,
}


class PluginSpec(BaseModel):
    """A git-hosted Oh My Zsh plugin."""

    name: str = Field(description="Plugin name, also its directory name.")
    repo_url: str = Field(description="Git URL to clone the plugin from.")


PLUGINS_DEFAULT: List[PluginSpec] = [
    PluginSpec(
        name="zsh-syntax-highlighting",
        repo_url="https://github.com/zsh-users/zsh-syntax-highlighting.git",
    ),
    PluginSpec(
        name="zsh-autosuggestions",
        repo_url="https://github.com/zsh-users/zsh-autosuggestions",
    ),
]


class InstallerUrls(BaseModel):
    """Remote installer scripts executed as black boxes."""

    homebrew: str = Field(default=HOMEBREW_INSTALL_URL_DEFAULT)
    oh_my_zsh: str = Field(default=OH_MY_ZSH_INSTALL_URL_DEFAULT)
    starship: str = Field(default=STARSHIP_INSTALL_URL_DEFAULT)
    uv: str = Field(default=UV_INSTALL_URL_DEFAULT)


class StarshipSettings(BaseModel):
    preset: str = Field(
        default=STARSHIP_PRESET_DEFAULT,
        description="Name of the preset passed to 'starship preset'.",
    )
    fallback_binary: str = Field(
        default=STARSHIP_FALLBACK_BINARY_DEFAULT,
        description="Where the Starship installer puts the binary when it is not yet on PATH.",
    )


class ReadinessSettings(BaseModel):
    """Bounded backoff used while waiting for an installer's result to appear."""

    timeout: float = Field(default=30.0, description="Give up after this many seconds.")
    initial_interval: float = Field(default=0.5, description="First delay between probes.")
    backoff_factor: float = Field(default=2.0, description="Delay multiplier per probe.")
    max_interval: float = Field(default=5.0, description="Upper bound for a single delay.")


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(extra="ignore")

    ostype: str = Field(
        default_factory=lambda: sys.platform,
        description="Platform identifier (sys.platform, or $OSTYPE when exported).",
    )
    home: Path = Field(
        default_factory=Path.home, description="Home directory of the invoking user."
    )
    user: str = Field(
        default_factory=getpass.getuser, description="Name of the invoking user."
    )
    shell: str = Field(
        default="", description="Current login shell of the invoking user ($SHELL)."
    )
    zsh_custom: Optional[Path] = Field(
        default=None,
        description="Oh My Zsh custom directory override ($ZSH_CUSTOM).",
    )

    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT, description="Prefix for log messages."
    )

    urls: InstallerUrls = Field(default_factory=InstallerUrls)
    download_timeout: float = Field(
        default=120.0, description="Timeout in seconds for fetching installer scripts."
    )

    base_plugins: List[str] = Field(
        default_factory=lambda: ["git"],
        description="Oh My Zsh plugins enabled ahead of the cloned ones.",
    )
    plugins: List[PluginSpec] = Field(
        default_factory=lambda: [p.model_copy() for p in PLUGINS_DEFAULT]
    )

    starship: StarshipSettings = Field(default_factory=StarshipSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)

    uv_env_line: str = Field(default=UV_ENV_LINE_DEFAULT)
    zshrc_alias_line: str = Field(default=ZSHRC_ALIAS_LINE_DEFAULT)

    sudoers_fragment_path: Path = Field(
        default=Path(SUDOERS_FRAGMENT_PATH_DEFAULT),
        description="Temporary passwordless-sudo policy fragment.",
    )
    login_shells_file: Path = Field(default=Path(LOGIN_SHELLS_FILE_DEFAULT))
    linux_brew_candidates: List[str] = Field(
        default_factory=lambda: list(LINUX_BREW_CANDIDATES_DEFAULT)
    )
    zsh_candidates: List[str] = Field(
        default_factory=lambda: list(ZSH_CANDIDATES_DEFAULT)
    )

    step_policies: Dict[str, StepPolicy] = Field(
        default_factory=lambda: dict(STEP_POLICIES_DEFAULT),
        description="Per-step failure policy; steps not listed are hard_fail.",
    )

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )

    @property
    def zshrc(self) -> Path:
        return self.home / ".zshrc"

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"

    @property
    def oh_my_zsh_dir(self) -> Path:
        return self.home / ".oh-my-zsh"

    @property
    def zsh_custom_dir(self) -> Path:
        return self.zsh_custom or (self.oh_my_zsh_dir / "custom")

    @property
    def starship_config(self) -> Path:
        return self.home / ".config" / "starship.toml"

    def plugin_dir(self, plugin_name: str) -> Path:
        return self.zsh_custom_dir / "plugins" / plugin_name

    def policy_for(self, step_tag: str) -> StepPolicy:
        return self.step_policies.get(step_tag, StepPolicy.HARD_FAIL)

    @field_validator("zsh_custom", mode="before")
    @classmethod
    def _blank_zsh_custom_is_unset(cls, value):
        # ${ZSH_CUSTOM:-...} treats an empty variable as unset
        if isinstance(value, str) and not value.strip():
            return None
        return value
