# setup/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the dotfiles setup.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file and command-line arguments, in this order of
precedence (later wins):
1. Pydantic Model Defaults
2. Environment Variables (HOME, USER, SHELL, ZSH_CUSTOM, OSTYPE)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "dotfiles.yaml"

# CLI argument name -> settings field
CLI_SETTING_FIELDS = {
    "log_prefix": "log_prefix",
    "zsh_custom": "zsh_custom",
}


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`. Nested
    dictionaries are merged; None values in `overrides` do not replace
    existing values.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping from disk.

    A missing file yields {}; unreadable or malformed files are reported
    and ignored.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path).expanduser()

    if not yaml_config_path.is_file():
        logger_to_use.debug(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except OSError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[Union[str, Path]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings (defaults < environment < YAML < CLI).

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: YAML configuration file. Defaults to
            `cli_args.config`, then DEFAULT_CONFIG_FILE in the current directory.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: The merged configuration does not validate.
    """
    logger_to_use = current_logger if current_logger else module_logger

    if config_file_path is None:
        config_file_path = (
            getattr(cli_args, "config", None) if cli_args else None
        ) or DEFAULT_CONFIG_FILE

    try:
        # Model defaults < environment variables
        current_values_dict = AppSettings().model_dump(exclude_defaults=False)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    yaml_data = load_yaml_config(config_file_path, logger_to_use)
    if yaml_data:
        current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args:
        mapped_cli_values: Dict[str, Any] = {}
        for cli_key, cli_value in vars(cli_args).items():
            if cli_value is None or cli_key not in CLI_SETTING_FIELDS:
                continue
            mapped_cli_values[CLI_SETTING_FIELDS[cli_key]] = cli_value
        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug(
        "Successfully loaded and validated application settings"
    )
    return final_settings
