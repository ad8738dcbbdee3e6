#!/usr/bin/env python3
"""
Service Layer for the Concept Graph Engine

Services that sit between the graph engine and the file system:
- file_service: content discovery and reading
- content_service: frontmatter/body splitting
"""

from .file_service import (
    FindOptions,
    FileInfo,
    id_from_path,
    discover_files,
    find_all_files,
    find_file_by_id,
    count_files,
    list_subdirectories,
    read_file,
    read_text
)
from .content_service import split_frontmatter

__all__ = [
    'FindOptions',
    'FileInfo',
    'id_from_path',
    'discover_files',
    'find_all_files',
    'find_file_by_id',
    'count_files',
    'list_subdirectories',
    'read_file',
    'read_text',
    'split_frontmatter'
]
