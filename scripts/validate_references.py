#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Reference Validator

Validates inline reference tokens anywhere in a document (front-matter and body):
1. [skill:NAME] must name an existing skill directory (or subagent)
2. [subagent:NAME] must name an existing subagents/NAME.md

Matching is non-overlapping and left to right; nested brackets and escaped
tokens are not interpreted.
"""

from __future__ import annotations

import re

from rulesync_documents import ReferenceCatalog
from rulesync_validation_common import ValidationReport

# =============================================================================
# Regex Patterns for Reference Detection
# =============================================================================

SKILL_REF_PATTERN = re.compile(r"\[skill:([^\]]+)\]")
SUBAGENT_REF_PATTERN = re.compile(r"\[subagent:([^\]]+)\]")


def find_skill_refs(content: str) -> list[str]:
    """Every [skill:NAME] occurrence, in order, duplicates included."""
    return SKILL_REF_PATTERN.findall(content)


def find_subagent_refs(content: str) -> list[str]:
    """Every [subagent:NAME] occurrence, in order, duplicates included."""
    return SUBAGENT_REF_PATTERN.findall(content)


def validate_references(content: str, catalog: ReferenceCatalog, report: ValidationReport, rel_path: str) -> None:
    """Report one error per dangling reference token.

    Args:
        content: Full raw text of the document
        catalog: Names built from the skills/ and subagents/ listings
        report: Report to add results to
        rel_path: Display path of the document
    """
    valid_refs = catalog.all_names
    for name in find_skill_refs(content):
        if name not in valid_refs:
            report.error(f"Invalid skill/subagent reference '[skill:{name}]'", rel_path, phase="references")

    for name in find_subagent_refs(content):
        if name not in catalog.subagents:
            report.error(f"Invalid subagent reference '[subagent:{name}]'", rel_path, phase="references")
