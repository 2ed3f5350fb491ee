#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Tool Profile Validator

Validates the platform-specific tool permission blocks of subagent documents:

    claudecode:
      allowed-tools: [Read, Grep, Glob]      # list, whitelist is case-sensitive
    opencode:
      tools: {bash: false, edit: false}      # mapping, only key names are checked
    copilot:
      tools: [read, search]                  # list

Each tool name outside its platform's whitelist is one error. Whether the
three blocks describe the same capabilities is checked separately, by
validate_profile_consistency.py.
"""

from __future__ import annotations

from typing import Any

from rulesync_validation_common import (
    CLAUDECODE,
    COPILOT,
    OPENCODE,
    TOOL_PLATFORMS,
    VALID_TOOLS,
    ValidationReport,
)

# Where each platform keeps its tool declaration, and the shape expected there
TOOL_KEYS: dict[str, str] = {
    CLAUDECODE: "allowed-tools",
    OPENCODE: "tools",
    COPILOT: "tools",
}
TOOL_CONTAINER_TYPES: dict[str, type] = {
    CLAUDECODE: list,
    OPENCODE: dict,
    COPILOT: list,
}


def _type_label(expected: type) -> str:
    return "list" if expected is list else "mapping"


def check_tool_names(platform: str, tools: list[Any], report: ValidationReport, rel_path: str) -> None:
    """One error per tool name missing from the platform whitelist."""
    valid = VALID_TOOLS[platform]
    location = f"{platform}.{TOOL_KEYS[platform]}"
    for tool in tools:
        name = str(tool)
        if name not in valid:
            report.error(
                f"Invalid tool '{name}' in {location} (valid: {', '.join(sorted(valid))})",
                rel_path,
                phase="tools",
            )


def validate_platform_block(platform: str, block: Any, report: ValidationReport, rel_path: str) -> None:
    """Validate one platform's tool declaration."""
    if not isinstance(block, dict):
        report.error(
            f"Unexpected shape for '{platform}': expected mapping, got {type(block).__name__}",
            rel_path,
            phase="tools",
        )
        return

    key = TOOL_KEYS[platform]
    if key not in block:
        return

    tools = block[key]
    expected = TOOL_CONTAINER_TYPES[platform]
    if not isinstance(tools, expected):
        report.error(
            f"Unexpected shape for '{platform}.{key}': expected {_type_label(expected)}, got {type(tools).__name__}",
            rel_path,
            phase="tools",
        )
        return

    # opencode declares tools as {name: enabled}; only the names are checked here
    names = list(tools.keys()) if isinstance(tools, dict) else tools
    check_tool_names(platform, names, report, rel_path)


def validate_tool_profiles(frontmatter: dict[str, Any], report: ValidationReport, rel_path: str) -> None:
    """Validate every platform tool block present in a subagent's front-matter.

    Args:
        frontmatter: Successfully extracted front-matter mapping
        report: Report to add results to
        rel_path: Display path of the subagent file
    """
    for platform in TOOL_PLATFORMS:
        if platform in frontmatter:
            validate_platform_block(platform, frontmatter[platform], report, rel_path)
