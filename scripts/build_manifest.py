#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Skill Manifest Builder

Walks .rulesync/skills/ and summarizes every skill into a JSON array written to
.rulesync/manifest/skill-manifest.json. Each entry carries:
- name, description, tags (from front-matter; name falls back to the directory name)
- path (SKILL.md relative to the repository root)
- version, dependsOn, optional, conflictsWith (declared relationships)
- referencedSkills / inferredDependencies (from inline [skill:...] tokens)
- platforms (declared platform blocks, or ["*"] when none)
- lineCount

Building is best-effort: a skill whose front-matter cannot be parsed is skipped
with a warning. Skills are emitted in directory-name order and no timestamp is
written, so unchanged inputs always produce byte-identical output.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rulesync_documents import load_document
from rulesync_frontmatter import load_frontmatter
from rulesync_validation_common import (
    KNOWN_PLATFORMS,
    MANIFEST_DIR_NAME,
    MANIFEST_FILE_NAME,
    SKILL_FILE_NAME,
    ValidationReport,
    display_path,
)

DEFAULT_SKILL_VERSION = "0.0.1"

# Skill references counted as dependencies; stricter than the lint pattern
MANIFEST_SKILL_REF_PATTERN = re.compile(r"\[skill:([a-z0-9-]+)\]")


@dataclass
class ManifestEntry:
    """Summary of one skill as written to the manifest."""

    name: str
    description: str
    path: str
    tags: list[str] = field(default_factory=list)
    version: str = DEFAULT_SKILL_VERSION
    depends_on: list[str] = field(default_factory=list)
    optional: list[str] = field(default_factory=list)
    conflicts_with: list[str] = field(default_factory=list)
    referenced_skills: list[str] = field(default_factory=list)
    inferred_dependencies: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)
    line_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (camelCase keys)."""
        return {
            "name": self.name,
            "description": self.description,
            "tags": self.tags,
            "path": self.path,
            "version": self.version,
            "dependsOn": self.depends_on,
            "optional": self.optional,
            "conflictsWith": self.conflicts_with,
            "referencedSkills": self.referenced_skills,
            "inferredDependencies": self.inferred_dependencies,
            "platforms": self.platforms,
            "lineCount": self.line_count,
        }


# =============================================================================
# Field Helpers
# =============================================================================


def get_string(frontmatter: dict[str, Any], key: str) -> str | None:
    value = frontmatter.get(key)
    if value is None:
        return None
    return str(value)


def get_string_list(frontmatter: dict[str, Any], key: str) -> list[str]:
    """Return a list field as non-blank strings; anything else is an empty list."""
    value = frontmatter.get(key)
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None and str(v).strip()]


def _distinct(values: list[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping first occurrence order."""
    seen: set[str] = set()
    result = []
    for value in values:
        if value.lower() not in seen:
            seen.add(value.lower())
            result.append(value)
    return result


def detect_platforms(frontmatter: dict[str, Any]) -> list[str]:
    platforms = [p for p in KNOWN_PLATFORMS if p in frontmatter]
    return platforms or ["*"]


def build_entry(folder_name: str, rel_path: str, content: str, frontmatter: dict[str, Any]) -> ManifestEntry:
    """Build the manifest entry for one parsed skill."""
    name = get_string(frontmatter, "name") or folder_name
    depends_on = get_string_list(frontmatter, "depends_on")
    referenced = _distinct(MANIFEST_SKILL_REF_PATTERN.findall(content))
    declared = {d.lower() for d in depends_on}

    return ManifestEntry(
        name=name,
        description=get_string(frontmatter, "description") or "",
        path=rel_path,
        tags=get_string_list(frontmatter, "tags"),
        version=get_string(frontmatter, "version") or DEFAULT_SKILL_VERSION,
        depends_on=depends_on,
        optional=get_string_list(frontmatter, "optional"),
        conflicts_with=get_string_list(frontmatter, "conflicts_with"),
        referenced_skills=referenced,
        inferred_dependencies=[s for s in referenced if s.lower() != name.lower() and s.lower() not in declared],
        platforms=detect_platforms(frontmatter),
        line_count=len(content.split("\n")),
    )


# =============================================================================
# Building
# =============================================================================


def build_manifest(skills_dir: Path, report: ValidationReport, root: Path | None = None) -> list[ManifestEntry]:
    """Summarize every skill directory under skills_dir.

    Args:
        skills_dir: Path to .rulesync/skills
        report: Report receiving warnings for skipped skills
        root: Repository root that entry paths are made relative to
              (defaults to the parent of the .rulesync directory)

    Returns:
        Manifest entries sorted by skill directory name
    """
    if root is None:
        root = skills_dir.parent.parent

    if not skills_dir.is_dir():
        report.warning(f"Skills directory not found: {skills_dir}", phase="manifest")
        return []

    entries = []
    for skill_dir in sorted(d for d in skills_dir.iterdir() if d.is_dir() and not d.name.startswith(".")):
        skill_file = skill_dir / SKILL_FILE_NAME
        rel_path = display_path(skill_file, root)

        if not skill_file.is_file():
            report.warning(f"Skipped: missing {SKILL_FILE_NAME}", display_path(skill_dir, root), phase="manifest")
            continue

        document = load_document(skill_file, "skills", report, rel_path)
        if document is None:
            continue

        frontmatter = load_frontmatter(document, report, strict=False)
        if frontmatter is None:
            continue

        entries.append(build_entry(skill_dir.name, rel_path, document.raw_text, frontmatter))

    return entries


# =============================================================================
# Relationship Analysis
# =============================================================================


def find_circular_dependencies(entries: list[ManifestEntry]) -> list[list[str]]:
    """Find dependsOn cycles between skills (each cycle reported once)."""
    graph = {e.name.lower(): [d.lower() for d in e.depends_on] for e in entries}
    visited: set[str] = set()
    cycles: list[list[str]] = []
    seen_cycles: set[frozenset[str]] = set()

    def visit(node: str, stack: list[str]) -> None:
        if node in stack:
            cycle = stack[stack.index(node) :] + [node]
            key = frozenset(cycle)
            if key not in seen_cycles:
                seen_cycles.add(key)
                cycles.append(cycle)
            return
        if node in visited:
            return
        visited.add(node)
        stack.append(node)
        for dep in graph.get(node, []):
            visit(dep, stack)
        stack.pop()

    for name in graph:
        visit(name, [])

    return cycles


def analyze_manifest(entries: list[ManifestEntry], report: ValidationReport) -> None:
    """Warn about circular dependencies and inconsistent conflict declarations."""
    for cycle in find_circular_dependencies(entries):
        report.warning(f"Circular dependency: {' -> '.join(cycle)}", phase="manifest")

    by_name = {e.name.lower(): e for e in entries}
    for entry in entries:
        for conflict in entry.conflicts_with:
            other = by_name.get(conflict.lower())
            if other is None:
                report.warning(f"{entry.name} conflicts with unknown skill '{conflict}'", entry.path, phase="manifest")
            elif entry.name.lower() not in {c.lower() for c in other.conflicts_with}:
                report.warning(
                    f"{entry.name} conflicts with {conflict} but not vice versa",
                    entry.path,
                    phase="manifest",
                )


# =============================================================================
# Output
# =============================================================================


def manifest_output_path(rulesync_dir: Path) -> Path:
    return rulesync_dir / MANIFEST_DIR_NAME / MANIFEST_FILE_NAME


def render_manifest(entries: list[ManifestEntry]) -> str:
    """Serialize entries as indented JSON with a trailing newline."""
    return json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False) + "\n"


def write_manifest(entries: list[ManifestEntry], output_path: Path) -> Path:
    """Write the manifest, creating the manifest/ directory if needed.

    Raises:
        OSError: If the directory cannot be created or the file written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(render_manifest(entries))
    return output_path
