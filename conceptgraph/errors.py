#!/usr/bin/env python3
"""
Error types for the Concept Graph Engine

All engine failures derive from ConceptGraphError. Callers classify errors
with the is_* inspectors instead of matching on messages.
"""

from pathlib import Path
from typing import Optional, Union


class ConceptGraphError(Exception):
    """Base class for all engine errors."""

    kind = "operation"

    def is_io(self) -> bool:
        return self.kind == "io"

    def is_config(self) -> bool:
        return self.kind == "config"

    def is_not_found(self) -> bool:
        return self.kind == "not_found"

    def is_invalid_path(self) -> bool:
        return self.kind == "invalid_path"

    def is_parse(self) -> bool:
        return self.kind == "parse"

    def is_invalid_data(self) -> bool:
        return self.kind == "invalid_data"

    def is_operation(self) -> bool:
        return self.kind == "operation"


class GraphIOError(ConceptGraphError):
    """I/O failure, optionally carrying the path it happened on."""

    kind = "io"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{message} ({self.path})"
        super().__init__(f"I/O error: {message}")


class ConfigError(ConceptGraphError):
    """Invalid or missing configuration."""

    kind = "config"

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class NotFoundError(ConceptGraphError):
    """A named resource (node, file, ...) does not exist."""

    kind = "not_found"

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message or f"{resource_type} not found: {resource_id}")


class GraphFileNotFoundError(NotFoundError):
    """A file required by the engine does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__("file", str(self.path), f"File not found: {self.path}")


class InvalidPathError(ConceptGraphError):
    """A path exists but cannot be used (wrong type, outside the root, ...)."""

    kind = "invalid_path"

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid path {self.path}: {reason}")


class ParseError(ConceptGraphError):
    """Malformed content, frontmatter or JSON."""

    kind = "parse"

    def __init__(self, message: str):
        super().__init__(f"Parse error: {message}")


class InvalidDataError(ConceptGraphError):
    """Data that is well-formed but violates a graph invariant."""

    kind = "invalid_data"

    def __init__(self, message: str):
        super().__init__(f"Invalid data: {message}")


class OperationError(ConceptGraphError):
    """Generic failure raised by domain code and command handlers."""

    kind = "operation"
