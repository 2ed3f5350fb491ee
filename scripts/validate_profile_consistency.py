#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Profile Consistency Checker (opt-in)

Tool names are platform-specific synonyms for the same capability
(Bash ~ bash ~ execute, Edit ~ edit, Write ~ write). This checker derives a
profile from the opencode booleans and verifies the other platforms agree:

    profile     opencode bash/edit/write   claudecode            copilot
    read-only   false/false/false          no Bash, Edit, Write  no execute, edit
    standard    true/false/false           Bash only             execute, no edit
    full        true/true/true             Bash, Edit, Write     execute, edit

A read-only profile also requires codexcli.sandbox_mode == "read-only", and
only a read-only profile may set it.

Before comparing profiles it checks the declarations are complete: the
claudecode, opencode and copilot blocks exist, claudecode.allowed-tools and
copilot.tools are present, opencode.mode is "primary" or "subagent", and
opencode.tools.bash, edit and write are each true or false.

Enabled with ``rulesync-tools lint-frontmatter --check-profiles``.
"""

from __future__ import annotations

from typing import Any

from rulesync_validation_common import CLAUDECODE, COPILOT, OPENCODE, ValidationReport

READ_ONLY = "read-only"
STANDARD = "standard"
FULL = "full"
UNKNOWN = "unknown"

OPENCODE_MODES = ("primary", "subagent")
PROFILE_TOOL_KEYS = ("bash", "edit", "write")

# (bash, edit, write) as declared in opencode.tools
PROFILES: dict[tuple[bool, bool, bool], str] = {
    (False, False, False): READ_ONLY,
    (True, False, False): STANDARD,
    (True, True, True): FULL,
}

# Tools each profile must grant (True) or must not grant (False), per platform
CLAUDECODE_EXPECTATIONS: dict[str, dict[str, bool]] = {
    READ_ONLY: {"Bash": False, "Edit": False, "Write": False},
    STANDARD: {"Bash": True, "Edit": False, "Write": False},
    FULL: {"Bash": True, "Edit": True, "Write": True},
}
COPILOT_EXPECTATIONS: dict[str, dict[str, bool]] = {
    READ_ONLY: {"execute": False, "edit": False},
    STANDARD: {"execute": True, "edit": False},
    FULL: {"execute": True, "edit": True},
}


def _block(frontmatter: dict[str, Any], platform: str) -> dict[str, Any]:
    value = frontmatter.get(platform)
    return value if isinstance(value, dict) else {}


def _tool_list(block: dict[str, Any], key: str) -> list[str] | None:
    value = block.get(key)
    if not isinstance(value, list):
        return None
    return [str(v) for v in value]


def classify_profile(frontmatter: dict[str, Any]) -> str | None:
    """Derive the profile from opencode.tools, or None if it matches none."""
    tools = _block(frontmatter, OPENCODE).get("tools")
    if not isinstance(tools, dict):
        return None

    flags = tuple(tools.get(name) for name in PROFILE_TOOL_KEYS)
    if not all(isinstance(flag, bool) for flag in flags):
        return None
    return PROFILES.get(flags)  # type: ignore[arg-type]


def _check_expectations(
    platform: str,
    granted: list[str],
    profile: str,
    expectations: dict[str, bool],
    report: ValidationReport,
    rel_path: str,
) -> None:
    for tool, required in expectations.items():
        if required and tool not in granted:
            report.error(f"Profile mismatch: {profile} profile but {platform} missing {tool}", rel_path, phase="profiles")
        elif not required and tool in granted:
            report.error(f"Profile mismatch: {profile} profile but {platform} has {tool}", rel_path, phase="profiles")


def validate_platform_presence(frontmatter: dict[str, Any], report: ValidationReport, rel_path: str) -> None:
    """Every subagent carries all three platform blocks and their tool declarations."""
    for platform in (CLAUDECODE, OPENCODE, COPILOT):
        if frontmatter.get(platform) is None:
            report.error(f"Missing platform block: {platform}", rel_path, phase="profiles")

    if _block(frontmatter, CLAUDECODE).get("allowed-tools") is None:
        report.error("claudecode.allowed-tools is missing", rel_path, phase="profiles")
    if _block(frontmatter, COPILOT).get("tools") is None:
        report.error("copilot.tools is missing", rel_path, phase="profiles")


def validate_opencode_settings(frontmatter: dict[str, Any], report: ValidationReport, rel_path: str) -> None:
    """opencode.mode is primary or subagent; bash, edit and write are explicit booleans."""
    opencode = _block(frontmatter, OPENCODE)

    mode = opencode.get("mode")
    if mode is None or mode == "":
        report.error("opencode.mode is missing (must be 'primary' or 'subagent')", rel_path, phase="profiles")
    elif mode not in OPENCODE_MODES:
        report.error(f"opencode.mode='{mode}' is invalid (must be 'primary' or 'subagent')", rel_path, phase="profiles")

    tools = opencode.get("tools")
    tools = tools if isinstance(tools, dict) else {}
    for name in PROFILE_TOOL_KEYS:
        value = tools.get(name)
        if value is None:
            report.error(f"opencode.tools.{name} is missing (must be true or false)", rel_path, phase="profiles")
        elif not isinstance(value, bool):
            report.error(
                f"opencode.tools.{name}='{value}' is invalid (must be true or false)",
                rel_path,
                phase="profiles",
            )


def validate_profile_consistency(frontmatter: dict[str, Any], report: ValidationReport, rel_path: str) -> None:
    """Check a subagent's platform blocks are complete and agree with its opencode profile."""
    validate_platform_presence(frontmatter, report, rel_path)
    validate_opencode_settings(frontmatter, report, rel_path)

    opencode_tools = _block(frontmatter, OPENCODE).get("tools")
    profile = classify_profile(frontmatter)

    if profile is None:
        if isinstance(opencode_tools, dict) and opencode_tools.get("bash") is not None:
            flags = ", ".join(f"{name}={opencode_tools.get(name)}" for name in PROFILE_TOOL_KEYS)
            report.error(
                f"OpenCode tools do not match any known profile (read-only|standard|full): {flags}",
                rel_path,
                phase="profiles",
            )
    else:
        claudecode_tools = _tool_list(_block(frontmatter, CLAUDECODE), "allowed-tools")
        if claudecode_tools is not None:
            _check_expectations(
                CLAUDECODE, claudecode_tools, profile, CLAUDECODE_EXPECTATIONS[profile], report, rel_path
            )

        copilot_tools = _tool_list(_block(frontmatter, COPILOT), "tools")
        if copilot_tools is not None:
            _check_expectations(COPILOT, copilot_tools, profile, COPILOT_EXPECTATIONS[profile], report, rel_path)

    sandbox_mode = _block(frontmatter, "codexcli").get("sandbox_mode")
    if profile == READ_ONLY and sandbox_mode != READ_ONLY:
        report.error(
            f"Profile mismatch: read-only profile but codexcli.sandbox_mode is not 'read-only' (got: {sandbox_mode})",
            rel_path,
            phase="profiles",
        )
    elif profile != READ_ONLY and sandbox_mode == READ_ONLY:
        report.error(
            f"Profile mismatch: {profile or UNKNOWN} profile but codexcli.sandbox_mode is 'read-only'",
            rel_path,
            phase="profiles",
        )
