#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Common Module

Shared validation infrastructure for the .rulesync linters and the manifest builder.
This module contains:
- Type definitions (Level, ValidationResult, ValidationReport)
- Document schemas and per-platform tool whitelists
- Utility functions (formatting, exit codes, encoding checks)

All individual validators should import from this module to ensure consistency.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

# Validation result levels
# - ERROR: always fails the lint run (non-zero exit code)
# - WARNING: never fails, always reported (field order, naming, skipped skills)
# - INFO: informational only, shown in verbose mode
# - PASSED: check passed, shown in verbose mode
Level = Literal["ERROR", "WARNING", "INFO", "PASSED"]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No errors (warnings allowed)
EXIT_ERROR = 1  # One or more errors, or manifest could not be written

# =============================================================================
# Repository Layout
# =============================================================================

RULESYNC_DIR_NAME = ".rulesync"
RULESYNC_DIR_ENV = "RULESYNC_DIR"

SKILLS_DIR_NAME = "skills"
SUBAGENTS_DIR_NAME = "subagents"
RULES_DIR_NAME = "rules"
COMMANDS_DIR_NAME = "commands"
MANIFEST_DIR_NAME = "manifest"
MANIFEST_FILE_NAME = "skill-manifest.json"

# Canonical front-matter file inside every skill directory
SKILL_FILE_NAME = "SKILL.md"

# =============================================================================
# Document Schemas
# =============================================================================


@dataclass(frozen=True)
class Schema:
    """Front-matter schema for one document kind.

    Attributes:
        required_fields: Keys that must be present
        banned_fields: Keys that must not appear at top level, whatever their value
        recommended_order: Preferred key order; only adjacent pairs are checked
    """

    required_fields: tuple[str, ...]
    banned_fields: tuple[str, ...]
    recommended_order: tuple[str, ...]


# Platform-specific settings belong in the platform blocks, never at top level
BANNED_TOP_LEVEL_FIELDS = ("tools", "model", "mode")

SCHEMAS: dict[str, Schema] = {
    SKILLS_DIR_NAME: Schema(
        required_fields=("name", "description", "targets"),
        banned_fields=BANNED_TOP_LEVEL_FIELDS,
        recommended_order=("name", "description", "targets", "tags", "version", "author"),
    ),
    SUBAGENTS_DIR_NAME: Schema(
        required_fields=("name", "description", "targets"),
        banned_fields=BANNED_TOP_LEVEL_FIELDS,
        recommended_order=("name", "description", "targets", "tags", "version", "author"),
    ),
    RULES_DIR_NAME: Schema(
        required_fields=("targets", "description"),
        banned_fields=BANNED_TOP_LEVEL_FIELDS,
        recommended_order=("root", "localRoot", "targets", "description", "globs"),
    ),
    COMMANDS_DIR_NAME: Schema(
        required_fields=("description", "targets"),
        banned_fields=BANNED_TOP_LEVEL_FIELDS,
        recommended_order=("description", "targets"),
    ),
}

# =============================================================================
# Tool Whitelists
# =============================================================================

CLAUDECODE = "claudecode"
OPENCODE = "opencode"
COPILOT = "copilot"

# Platforms whose tool blocks are linted, in check order
TOOL_PLATFORMS = (CLAUDECODE, OPENCODE, COPILOT)

# Valid tool identifiers per platform (case-sensitive)
VALID_TOOLS: dict[str, frozenset[str]] = {
    CLAUDECODE: frozenset({"Read", "Grep", "Glob", "Bash", "Edit", "Write"}),
    OPENCODE: frozenset({"bash", "edit", "write"}),
    COPILOT: frozenset({"read", "search", "execute", "edit"}),
}

# Every platform block the manifest reports on
KNOWN_PLATFORMS = (CLAUDECODE, OPENCODE, COPILOT, "codexcli", "geminicli")

# Kebab-case pattern for skill directory names and subagent file stems
NAME_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Single validation check result.

    Attributes:
        level: Severity level (ERROR, WARNING, INFO, PASSED)
        message: Human-readable description of the result
        file: Optional file path related to the result
        phase: Optional validation phase (load, parse, schema, tools, references, profiles, manifest)
    """

    level: Level
    message: str
    file: str | None = None
    phase: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, str | None] = {"level": self.level, "message": self.message}
        if self.file is not None:
            result["file"] = self.file
        if self.phase is not None:
            result["phase"] = self.phase
        return result


@dataclass
class ValidationReport:
    """Validation report shared by every validator in a run.

    Results are kept in the order they were recorded. Errors and warnings are
    views over the same list, so merging per-document reports in document order
    reproduces the sequential output exactly.
    """

    results: list[ValidationResult] = field(default_factory=list)

    def add(self, level: Level, message: str, file: str | None = None, phase: str | None = None) -> None:
        """Add a validation result."""
        self.results.append(ValidationResult(level, message, file, phase))

    def passed(self, message: str, file: str | None = None, phase: str | None = None) -> None:
        """Add a passed check."""
        self.add("PASSED", message, file, phase)

    def info(self, message: str, file: str | None = None, phase: str | None = None) -> None:
        """Add an info message."""
        self.add("INFO", message, file, phase)

    def warning(self, message: str, file: str | None = None, phase: str | None = None) -> None:
        """Add a warning (reported, never fails the run)."""
        self.add("WARNING", message, file, phase)

    def error(self, message: str, file: str | None = None, phase: str | None = None) -> None:
        """Add an error."""
        self.add("ERROR", message, file, phase)

    @property
    def errors(self) -> list[ValidationResult]:
        return [r for r in self.results if r.level == "ERROR"]

    @property
    def warnings(self) -> list[ValidationResult]:
        return [r for r in self.results if r.level == "WARNING"]

    @property
    def has_errors(self) -> bool:
        """Check if any ERROR results exist."""
        return any(r.level == "ERROR" for r in self.results)

    @property
    def exit_code(self) -> int:
        """Exit code for the run. Warnings never affect it."""
        return EXIT_ERROR if self.has_errors else EXIT_OK

    def count_by_level(self) -> dict[str, int]:
        """Get count of results by level."""
        counts: dict[str, int] = {"ERROR": 0, "WARNING": 0, "INFO": 0, "PASSED": 0}
        for r in self.results:
            counts[r.level] = counts.get(r.level, 0) + 1
        return counts

    def merge(self, other: ValidationReport) -> None:
        """Merge results from another report into this one."""
        self.results.extend(other.results)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "counts": self.count_by_level(),
            "results": [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# =============================================================================
# Utility Functions
# =============================================================================


def get_rulesync_dir(override: str | os.PathLike[str] | None = None) -> Path:
    """Resolve the .rulesync root directory.

    Precedence: explicit override (CLI flag), then the RULESYNC_DIR
    environment variable, then ``.rulesync`` under the current directory.
    """
    if override:
        return Path(override)
    from_env = os.environ.get(RULESYNC_DIR_ENV, "").strip()
    if from_env:
        return Path(from_env)
    return Path.cwd() / RULESYNC_DIR_NAME


def display_path(path: Path, root: Path | None = None) -> str:
    """Render a path relative to root (or the cwd) with forward slashes."""
    base = root if root is not None else Path.cwd()
    try:
        return path.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def is_valid_kebab_case(name: str) -> bool:
    """Check if name follows kebab-case convention."""
    return bool(NAME_PATTERN.match(name))


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "WARNING": "\033[93m",  # Yellow
    "INFO": "\033[90m",  # Gray
    "PASSED": "\033[92m",  # Green
    "RESET": "\033[0m",  # Reset
    "BOLD": "\033[1m",  # Bold
}


def colorize(text: str, level: str) -> str:
    """Apply color to text based on level."""
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def format_result(result: ValidationResult, show_file: bool = True) -> str:
    """Format a single validation result for terminal output."""
    if show_file and result.file:
        return f"{result.file}: {result.message}"
    return result.message


# =============================================================================
# File Encoding Utilities
# =============================================================================


def decode_utf8(content: bytes, report: ValidationReport, filename: str) -> str | None:
    """Decode file bytes as UTF-8, stripping (and reporting) a BOM.

    Args:
        content: Raw file bytes
        report: ValidationReport to add results to
        filename: Name of file for error messages

    Returns:
        Decoded text, or None if the bytes are not valid UTF-8
    """
    if content.startswith(b"\xef\xbb\xbf"):
        report.warning("File has UTF-8 BOM (should be UTF-8 without BOM)", filename, phase="load")
        content = content[3:]

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        report.error(f"File is not valid UTF-8: {e}", filename, phase="load")
        return None
