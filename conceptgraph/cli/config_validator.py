"""
Configuration validation for conceptgraph.
Validates configuration before a build starts to catch common mistakes early.
"""

import os
from pathlib import Path
from typing import Dict, List, Tuple, Any
import logging

import yaml

logger = logging.getLogger(__name__)

VALID_ERROR_HANDLING = ['collect', 'fail_fast']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ConfigurationValidator:
    """Validates conceptgraph configuration to prevent runtime errors."""

    def __init__(self):
        self.errors = []
        self.warnings = []

    def validate_config(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate a merged configuration dictionary.

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        self.errors = []
        self.warnings = []

        project_name = config.get('project_name')
        if not isinstance(project_name, str) or not project_name:
            self.errors.append(f"project_name must be a non-empty string, got: {project_name}")

        base_path = config.get('base_path')
        if not isinstance(base_path, str):
            self.errors.append(f"base_path must be a string, got: {base_path}")

        self._validate_content_config(config.get('content', {}))
        self._validate_graph_config(config.get('graph', {}))
        self._validate_validation_config(config.get('validation', {}))
        self._validate_logging_config(config.get('logging', {}))

        all_issues = self.errors + self.warnings
        is_valid = len(self.errors) == 0

        return is_valid, all_issues

    def _validate_content_config(self, content_config: Any):
        """Validate content discovery settings."""
        if not isinstance(content_config, dict):
            self.errors.append("content section must be a dictionary")
            return

        path = content_config.get('path')
        if not isinstance(path, str) or not path:
            self.errors.append(f"content.path must be a non-empty string, got: {path}")

        glob = content_config.get('glob')
        if not isinstance(glob, str) or not glob:
            self.errors.append(f"content.glob must be a non-empty string, got: {glob}")

    def _validate_graph_config(self, graph_config: Any):
        """Validate graph build settings."""
        if not isinstance(graph_config, dict):
            self.errors.append("graph section must be a dictionary")
            return

        output_path = graph_config.get('output_path')
        if not isinstance(output_path, str) or not output_path:
            self.errors.append(f"graph.output_path must be a non-empty string, got: {output_path}")
        elif not output_path.endswith('.json'):
            self.warnings.append(f"graph.output_path does not end in .json: {output_path}")

        error_handling = graph_config.get('error_handling')
        if error_handling not in VALID_ERROR_HANDLING:
            self.errors.append(f"Invalid graph.error_handling '{error_handling}'. Valid: {VALID_ERROR_HANDLING}")

        use_cache = graph_config.get('use_cache')
        if not isinstance(use_cache, bool):
            self.errors.append(f"graph.use_cache must be boolean, got: {use_cache}")

    def _validate_validation_config(self, validation_config: Any):
        if not isinstance(validation_config, dict):
            self.errors.append("validation section must be a dictionary")
            return

        include_summary = validation_config.get('include_summary', True)
        if not isinstance(include_summary, bool):
            self.errors.append(f"validation.include_summary must be boolean, got: {include_summary}")

    def _validate_logging_config(self, logging_config: Any):
        if not isinstance(logging_config, dict):
            self.errors.append("logging section must be a dictionary")
            return

        level = logging_config.get('level')
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            self.errors.append(f"Invalid logging.level '{level}'. Valid: {VALID_LOG_LEVELS}")

        log_file = logging_config.get('file')
        if log_file is not None and not isinstance(log_file, str):
            self.errors.append(f"logging.file must be a string or null, got: {log_file}")


def validate_content_directory(content_path: Path) -> Tuple[bool, List[str]]:
    """
    Check that a content directory can be built from.

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues = []

    if not content_path.exists():
        issues.append(f"Content directory does not exist: {content_path}")
        return False, issues

    if not content_path.is_dir():
        issues.append(f"Content path is not a directory: {content_path}")
        return False, issues

    if not os.access(content_path, os.R_OK):
        issues.append(f"Content directory is not readable: {content_path}")
        return False, issues

    return True, issues


def validate_config_file(config_path: str) -> Tuple[bool, List[str]]:
    """
    Validate configuration file syntax and basic structure.

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues = []

    config_file = Path(config_path)

    if not config_file.exists():
        issues.append(f"Configuration file not found: {config_path}")
        return False, issues

    if not os.access(config_file, os.R_OK):
        issues.append(f"Configuration file is not readable: {config_path}")
        return False, issues

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        issues.append(f"Invalid YAML syntax in config file: {e}")
        return False, issues
    except OSError as e:
        issues.append(f"Error reading config file: {e}")
        return False, issues

    if config is None:
        return True, issues

    if not isinstance(config, dict):
        issues.append("Configuration file must contain a dictionary at root level")
        return False, issues

    return True, issues
