#!/usr/bin/env python3
"""
CLI Interface for conceptgraph

Provides the command-line interface for building, validating and querying
concept graphs, and the YAML configuration it runs from.
"""

import logging

from .main import main, cli
from .config import load_config, resolve_config_path, DEFAULT_CONFIG
from .config_validator import ConfigurationValidator

logger = logging.getLogger(__name__)

__all__ = [
    'main',
    'cli',
    'load_config',
    'resolve_config_path',
    'DEFAULT_CONFIG',
    'ConfigurationValidator'
]
