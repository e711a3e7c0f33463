#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr, stdout carries the version
    ]
)
logger = logging.getLogger("ghsemver")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GHSEMVER_CONFIG environment variable
    2. ~/.ghsemver/ directory
    """
    if 'GHSEMVER_CONFIG' in os.environ:
        path = Path(os.environ['GHSEMVER_CONFIG'])
        if path.exists():
            return path
        logger.debug(f"GHSEMVER_CONFIG points at missing file {path}")

    config_dir = Path.home() / '.ghsemver'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return config_dir / 'config.json'


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    try:
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ('.yaml', '.yml'):
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
        else:
            # Default to JSON format
            with open(config_path, 'r') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # tomllib.TOMLDecodeError and json.JSONDecodeError are ValueErrors
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return file_config


def load_config():
    """
    Load configuration from file.

    Raises:
        ConfigError: If the config file cannot be read or parsed
    """
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        config = merge_configs(config, _read_config_file(config_path))

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "max_retries": 3,
            "base_delay": 1.0,
            "max_delay": 60.0,
            "page_size": 100,
            "max_pages": 10,
            "use_gh_cli": True
        },
        "git": {
            "remote": "origin",
            "timeout": 30
        },
        "versioning": {
            "default_suffix": "dev"
        },
        "logging": {
            "level": "WARNING"
        }
    }


def configure_logging(config):
    """Set the package log level from the logging.level setting."""
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigError(f"Invalid logging level: {level_name}")
    logger.setLevel(level)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def _convert_env_value(value):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GHSEMVER_SECTION_KEY
    For example: GHSEMVER_GITHUB_MAX_PAGES=20
    """
    env_prefix = "GHSEMVER_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')
        typed_value = _convert_env_value(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            # End of the env var: this is the key to set
            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                # Path conflict, env var is longer than the config path
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config
