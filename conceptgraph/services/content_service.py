#!/usr/bin/env python3
"""
Content Service for the Concept Graph Engine

Splits content files into YAML frontmatter and body text. Files without a
frontmatter block yield an empty mapping and the whole text as body.
"""

import logging
from typing import Dict, Tuple, Any

import yaml

from ..errors import ParseError

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into (frontmatter, body).

    Raises:
        ParseError: If the frontmatter block is unterminated, is not valid
            YAML, or is not a mapping
    """
    if text.startswith('\ufeff'):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONTMATTER_DELIMITER:
            break
    else:
        raise ParseError("Unterminated frontmatter block")

    raw = "".join(lines[1:end])
    body = "".join(lines[end + 1:])

    try:
        frontmatter = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML frontmatter: {e}") from e

    if frontmatter is None:
        return {}, body
    if not isinstance(frontmatter, dict):
        raise ParseError(f"Frontmatter must be a mapping, got {type(frontmatter).__name__}")

    return frontmatter, body
