#!/usr/bin/env python3
"""
Configuration loader for conceptgraph

Loads the YAML configuration file, substitutes ${VAR} environment references,
merges file values over the built-in defaults and validates the result.
"""

import copy
import os
import re
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .config_validator import ConfigurationValidator, validate_config_file
from ..errors import ConfigError, GraphIOError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CONCEPTGRAPH_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    'project_name': 'conceptgraph',
    'base_path': '.',
    'content': {
        'path': 'content',
        'glob': '**/*.md'
    },
    'graph': {
        'output_path': 'data/graphs/graph.json',
        'error_handling': 'collect',
        'use_cache': True
    },
    'validation': {
        'include_summary': True
    },
    'logging': {
        'level': 'INFO',
        'file': None
    }
}


def substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in configuration values.

    Supports ${VAR_NAME} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'
        matches = re.findall(pattern, value)

        for var_name in matches:
            env_value = os.getenv(var_name)
            if env_value is None:
                logger.warning(f"Environment variable {var_name} not set")
                env_value = ""

            value = value.replace(f"${{{var_name}}}", env_value)

        return value

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(item) for item in value]

    else:
        return value


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge overrides into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config_path() -> Path:
    """Per-user configuration file location."""
    return Path.home() / '.config' / 'conceptgraph' / 'config.yaml'


def resolve_config_path(explicit: Optional[str] = None) -> Path:
    """
    Resolve which configuration file to use.

    Order: explicit path, then $CONCEPTGRAPH_CONFIG, then the per-user default.
    """
    if explicit:
        return Path(explicit)

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    return default_config_path()


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration, falling back to defaults when no file exists.

    Args:
        config_path: Explicit configuration file (overrides the environment)

    Returns:
        Merged and validated configuration dictionary

    Raises:
        ConfigError: If the file is unreadable, malformed or invalid
    """
    path = resolve_config_path(config_path)

    if not path.exists():
        if config_path:
            raise ConfigError(f"Configuration file not found: {path}")
        logger.debug(f"No configuration file at {path}, using defaults")
        config = copy.deepcopy(DEFAULT_CONFIG)
    else:
        is_valid, file_issues = validate_config_file(str(path))
        if not is_valid:
            for issue in file_issues:
                logger.error(f"Config file validation: {issue}")
            raise ConfigError(f"Configuration file validation failed: {'; '.join(file_issues)}")

        with open(path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}

        config = merge_config(DEFAULT_CONFIG, substitute_env_vars(raw_config))
        logger.debug(f"Configuration loaded from {path}")

    validator = ConfigurationValidator()
    is_valid, config_issues = validator.validate_config(config)

    for issue in validator.warnings:
        logger.warning(f"Config validation warning: {issue}")
    for issue in validator.errors:
        logger.error(f"Config validation error: {issue}")

    if not is_valid:
        raise ConfigError(f"Configuration validation failed: {'; '.join(validator.errors)}")

    return config


def get_config_value(config: Dict[str, Any], key: str) -> Any:
    """Look up a dotted key such as "graph.output_path"."""
    value: Any = config
    for part in key.split('.'):
        if not isinstance(value, dict) or part not in value:
            raise ConfigError(f"Key '{key}' not found in configuration")
        value = value[part]
    return value


def base_path(config: Dict[str, Any]) -> Path:
    return Path(config.get('base_path') or '.')


def _under_base(config: Dict[str, Any], value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return base_path(config) / path


def content_path(config: Dict[str, Any]) -> Path:
    """Content root; relative paths are resolved against base_path."""
    return _under_base(config, config['content']['path'])


def graph_output_path(config: Dict[str, Any]) -> Path:
    """Graph snapshot location; relative paths are resolved against base_path."""
    return _under_base(config, config['graph']['output_path'])


def dump_config(config: Dict[str, Any]) -> str:
    return yaml.safe_dump(config, sort_keys=False, default_flow_style=False)


def write_default_config(path: Union[str, Path], force: bool = False) -> Path:
    """
    Write the default configuration to path.

    Raises:
        ConfigError: If the file exists and force is not set
        GraphIOError: If the file cannot be written
    """
    path = Path(path)
    if path.exists() and not force:
        raise ConfigError(f"Configuration file already exists: {path} (use --force to overwrite)")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_config(DEFAULT_CONFIG), encoding='utf-8')
    except OSError as e:
        raise GraphIOError(f"Failed to write configuration: {e}", path) from e

    logger.info(f"Default configuration written to {path}")
    return path
