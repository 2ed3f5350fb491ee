#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Front-matter Extractor

Isolates the leading ``---`` block of a document and parses it with PyYAML.
Parse failures are returned as an ExtractionFailed value instead of raised,
so every caller reports them the same way.

Keys are kept exactly as written; multi-word keys use camelCase (``localRoot``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import yaml
from rulesync_documents import Document
from rulesync_validation_common import ValidationReport

# Opening --- at the very start of the text, closing --- on a line of its own
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$",
    re.DOTALL | re.MULTILINE,
)

MISSING_FRONTMATTER_MESSAGE = "Missing or invalid YAML frontmatter"


@dataclass(frozen=True)
class ExtractionFailed:
    """Front-matter could not be extracted; terminal for the document."""

    message: str


def frontmatter_block(content: str) -> str | None:
    """Return the raw text between the front-matter delimiters, or None."""
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None
    return match.group(1)


def extract_frontmatter(content: str) -> dict[str, Any] | ExtractionFailed:
    """Extract and parse the front-matter mapping of a document.

    Returns:
        The ordered key -> value mapping, or ExtractionFailed describing why
        no mapping could be produced
    """
    block = frontmatter_block(content)
    if block is None:
        return ExtractionFailed(MISSING_FRONTMATTER_MESSAGE)

    try:
        frontmatter = yaml.safe_load(block)
    except (yaml.YAMLError, ValueError, RecursionError) as e:
        # SafeLoader raises plain ValueError for impossible dates such as 2024-13-45
        return ExtractionFailed(f"YAML parsing error: {e}")

    if frontmatter is None:
        return {}
    if not isinstance(frontmatter, dict):
        return ExtractionFailed("Frontmatter is not a YAML mapping")

    return {str(key): value for key, value in frontmatter.items()}


def load_frontmatter(document: Document, report: ValidationReport, *, strict: bool) -> dict[str, Any] | None:
    """Extract front-matter and record a failure once.

    Linting runs strict (failure is an error); manifest building runs
    best-effort (failure is a warning and the document is skipped).

    Returns:
        The front-matter mapping, or None when extraction failed
    """
    result = extract_frontmatter(document.raw_text)
    if isinstance(result, ExtractionFailed):
        if strict:
            report.error(result.message, document.display_name, phase="parse")
        else:
            report.warning(f"Skipped: {result.message}", document.display_name, phase="parse")
        return None

    return result
