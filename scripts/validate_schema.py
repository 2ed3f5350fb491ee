#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Schema Validator

Checks a parsed front-matter mapping against the schema of its document kind:
1. Every required field is present
2. No banned top-level field is present (whatever its value)
3. Adjacent fields of the recommended order are not reversed (warning only)
4. Skill directory names and subagent file stems are kebab-case (warning only)

Only adjacent pairs of the recommended order are compared, so unrelated
fields may be interleaved anywhere without triggering a warning.
"""

from __future__ import annotations

from typing import Any

from rulesync_documents import Document
from rulesync_validation_common import (
    SCHEMAS,
    SKILLS_DIR_NAME,
    SUBAGENTS_DIR_NAME,
    Schema,
    ValidationReport,
    is_valid_kebab_case,
)


def validate_required_fields(frontmatter: dict[str, Any], schema: Schema, report: ValidationReport, rel_path: str) -> None:
    """One error per required field absent from the mapping."""
    for field_name in schema.required_fields:
        if field_name not in frontmatter:
            report.error(f"Missing required field: {field_name}", rel_path, phase="schema")


def validate_banned_fields(frontmatter: dict[str, Any], schema: Schema, report: ValidationReport, rel_path: str) -> None:
    """One error per banned field present, including null or empty values."""
    for field_name in schema.banned_fields:
        if field_name in frontmatter:
            report.error(
                f"Banned field '{field_name}' at top level (move it into a platform block)",
                rel_path,
                phase="schema",
            )


def validate_field_order(frontmatter: dict[str, Any], schema: Schema, report: ValidationReport, rel_path: str) -> None:
    """Warn when two adjacent recommended fields are both present but reversed."""
    actual = [key for key in frontmatter if not key.startswith("_")]
    expected = schema.recommended_order

    for current, following in zip(expected, expected[1:]):
        if current not in actual or following not in actual:
            continue
        if actual.index(current) > actual.index(following):
            report.warning(
                f"Field '{current}' should come before '{following}' "
                f"(recommended order: {', '.join(expected)})",
                rel_path,
                phase="schema",
            )


def validate_name_convention(document: Document, report: ValidationReport) -> None:
    """Skill directory names and subagent file stems should be kebab-case."""
    if document.kind == SKILLS_DIR_NAME:
        name = document.path.parent.name
    elif document.kind == SUBAGENTS_DIR_NAME:
        name = document.path.stem
    else:
        return

    if not is_valid_kebab_case(name):
        report.warning(f"Name '{name}' should be kebab-case", document.display_name, phase="schema")


def validate_schema(frontmatter: dict[str, Any], document: Document, report: ValidationReport) -> None:
    """Run every schema check for one document.

    Args:
        frontmatter: Successfully extracted front-matter mapping
        document: The document it came from (kind selects the schema)
        report: Report to add results to
    """
    schema = SCHEMAS[document.kind]
    rel_path = document.display_name

    validate_required_fields(frontmatter, schema, report, rel_path)
    validate_banned_fields(frontmatter, schema, report, rel_path)
    validate_field_order(frontmatter, schema, report, rel_path)
    validate_name_convention(document, report)
