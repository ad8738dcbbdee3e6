#!/usr/bin/env python3
"""
Concept Graph Engine

Builds, persists, validates and queries directed knowledge graphs of
concepts and relationships extracted from content files.
"""

__version__ = "0.1.0"
__description__ = "Domain-agnostic knowledge graph engine for concept content"

import logging
import sys
from typing import Optional

# Get package logger
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Version info
VERSION_INFO = tuple(map(int, __version__.split('.')))

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_version() -> str:
    """Get the current version string."""
    return __version__


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    logger.debug(f"Logging configured at {level} level")


from .errors import (
    ConceptGraphError,
    GraphIOError,
    ConfigError,
    NotFoundError,
    GraphFileNotFoundError,
    InvalidPathError,
    ParseError,
    InvalidDataError,
    OperationError
)
from .graph import (
    Node,
    Edge,
    Relationship,
    EdgeOrigin,
    GraphData,
    GraphExtractor,
    FrontmatterExtractor,
    GraphBuilder,
    BuildStats,
    ErrorHandling,
    ManualEdge
)

__all__ = [
    'ConceptGraphError',
    'GraphIOError',
    'ConfigError',
    'NotFoundError',
    'GraphFileNotFoundError',
    'InvalidPathError',
    'ParseError',
    'InvalidDataError',
    'OperationError',
    'Node',
    'Edge',
    'Relationship',
    'EdgeOrigin',
    'GraphData',
    'GraphExtractor',
    'FrontmatterExtractor',
    'GraphBuilder',
    'BuildStats',
    'ErrorHandling',
    'ManualEdge',
    'get_version',
    'setup_logging',
    '__version__'
]
