#!/usr/bin/env python3
"""
File Service for the Concept Graph Engine

Content discovery and reading. Discovery walks a content root, applies the
glob, extension and depth filters, and returns files in sorted order so that
two walks over unchanged content yield identical results.
"""

import asyncio
import fnmatch
import logging
from pathlib import Path
from typing import List, Optional, Union
from dataclasses import dataclass, field

from ..errors import GraphIOError, InvalidPathError, NotFoundError, GraphFileNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class FindOptions:
    """Options for discovering content files."""
    extension: Optional[str] = None
    max_depth: Optional[int] = None
    patterns: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=lambda: [
        '.git/**', '__pycache__/**', 'node_modules/**'
    ])

    @classmethod
    def markdown(cls) -> 'FindOptions':
        """Options for finding markdown files."""
        return cls(extension="md")

    def with_patterns(self, patterns: List[str]) -> 'FindOptions':
        """Add "{id}" filename patterns tried before a recursive search."""
        self.patterns = list(patterns)
        return self

    def with_max_depth(self, depth: int) -> 'FindOptions':
        self.max_depth = depth
        return self


@dataclass
class FileInfo:
    """A discovered content file."""
    path: Path
    stem: str
    relative_path: Path


def id_from_path(path: Union[str, Path]) -> Optional[str]:
    """Derive a concept id from a file path (its stem)."""
    stem = Path(path).stem
    return stem or None


def validate_content_root(base_path: Union[str, Path]) -> Path:
    """Check that a content root exists and is a directory."""
    base_path = Path(base_path)
    if not base_path.exists():
        logger.error(f"Content path does not exist: {base_path}")
        raise NotFoundError("content directory", str(base_path))
    if not base_path.is_dir():
        logger.error(f"Content path is not a directory: {base_path}")
        raise InvalidPathError(base_path, "not a directory")
    return base_path


def discover_files(base_path: Union[str, Path], glob: str = "**/*",
                   options: Optional[FindOptions] = None) -> List[FileInfo]:
    """
    Find all content files under base_path.

    Args:
        base_path: Content root directory
        glob: Glob pattern relative to the root
        options: Extension, depth and exclusion filters

    Returns:
        FileInfo records sorted by relative path

    Raises:
        NotFoundError: If the root does not exist
        InvalidPathError: If the root is not a directory
        GraphIOError: If the directory tree cannot be read
    """
    base_path = validate_content_root(base_path)
    options = options or FindOptions()

    try:
        candidates = sorted(base_path.glob(glob))
    except OSError as e:
        raise GraphIOError(f"Failed to walk content directory: {e}", base_path) from e

    files = []
    for path in candidates:
        if not path.is_file():
            continue

        relative_path = path.relative_to(base_path)

        if options.max_depth is not None and len(relative_path.parts) > options.max_depth:
            continue

        if options.extension and path.suffix.lstrip('.') != options.extension:
            continue

        if _is_excluded(relative_path, options.exclude_patterns):
            logger.debug(f"Excluding file {relative_path}")
            continue

        files.append(FileInfo(
            path=path,
            stem=path.stem or "unknown",
            relative_path=relative_path
        ))

    logger.debug(f"Discovered {len(files)} files in {base_path}")
    return files


def _is_excluded(relative_path: Path, exclude_patterns: List[str]) -> bool:
    """Check a relative path and its parent directories against exclude patterns."""
    relative_str = relative_path.as_posix()
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(relative_str, pattern):
            return True
        directory_pattern = pattern[:-3] if pattern.endswith('/**') else pattern
        for parent in relative_path.parents:
            if parent != Path('.') and fnmatch.fnmatch(parent.as_posix(), directory_pattern):
                return True
    return False


async def find_all_files(base_path: Union[str, Path], options: Optional[FindOptions] = None,
                         glob: str = "**/*") -> List[FileInfo]:
    """Awaitable form of discover_files."""
    return await asyncio.to_thread(discover_files, base_path, glob, options)


async def count_files(base_path: Union[str, Path], options: Optional[FindOptions] = None,
                      glob: str = "**/*") -> int:
    files = await find_all_files(base_path, options, glob)
    return len(files)


async def list_subdirectories(base_path: Union[str, Path]) -> List[Path]:
    """List the immediate subdirectories of base_path, sorted."""
    base_path = validate_content_root(base_path)

    def _list() -> List[Path]:
        try:
            return sorted(p for p in base_path.iterdir() if p.is_dir())
        except OSError as e:
            raise GraphIOError(f"Failed to list directory: {e}", base_path) from e

    return await asyncio.to_thread(_list)


async def find_file_by_id(base_path: Union[str, Path], file_id: str,
                          options: Optional[FindOptions] = None) -> Path:
    """
    Locate the file for a concept id.

    Tries each "{id}" pattern first, then "<id>.<extension>", then a
    recursive search for a file whose stem is the id or starts with
    "<id>-" / "<id>_".
    """
    base_path = Path(base_path)
    options = options or FindOptions()

    for pattern in options.patterns:
        candidate = base_path / pattern.replace("{id}", file_id)
        if candidate.exists():
            return candidate

    if options.extension:
        candidate = base_path / f"{file_id}.{options.extension}"
        if candidate.exists():
            return candidate

    for info in await find_all_files(base_path, options):
        stem = info.stem
        if stem == file_id or stem.startswith(f"{file_id}-") or stem.startswith(f"{file_id}_"):
            return info.path

    raise NotFoundError("file", file_id, f"File with id '{file_id}' not found in {base_path}")


def read_text(path: Union[str, Path]) -> str:
    """Read a UTF-8 text file."""
    path = Path(path)
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError as e:
        raise GraphFileNotFoundError(path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise GraphIOError(f"Failed to read file: {e}", path) from e


async def read_file(path: Union[str, Path]) -> str:
    """Awaitable form of read_text."""
    return await asyncio.to_thread(read_text, path)
