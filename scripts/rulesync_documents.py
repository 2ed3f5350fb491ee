#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Document Loader

Enumerates the documents under .rulesync/ and builds the reference catalog
that inline [skill:...] / [subagent:...] tokens are resolved against.

Layout:
    .rulesync/skills/<skill-name>/SKILL.md
    .rulesync/subagents/<subagent-name>.md
    .rulesync/rules/**/*.md
    .rulesync/commands/**/*.md

A missing kind directory is not an error: every kind is optional.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from rulesync_validation_common import (
    COMMANDS_DIR_NAME,
    RULES_DIR_NAME,
    SKILL_FILE_NAME,
    SKILLS_DIR_NAME,
    SUBAGENTS_DIR_NAME,
    ValidationReport,
    decode_utf8,
    display_path,
)

DocumentKind = Literal["skills", "subagents", "rules", "commands"]

# Lint order for `lint-frontmatter`
DOCUMENT_KINDS: tuple[DocumentKind, ...] = ("skills", "subagents", "rules", "commands")

# File-name suffix selecting documents of each kind (compared case-insensitively)
KIND_FILE_SUFFIXES: dict[str, str] = {
    SKILLS_DIR_NAME: SKILL_FILE_NAME,
    SUBAGENTS_DIR_NAME: ".md",
    RULES_DIR_NAME: ".md",
    COMMANDS_DIR_NAME: ".md",
}


@dataclass(frozen=True)
class Document:
    """A loaded document. Immutable once created by the loader."""

    path: Path
    raw_text: str
    kind: DocumentKind
    rel_path: str = ""

    @property
    def display_name(self) -> str:
        return self.rel_path or self.path.as_posix()


@dataclass(frozen=True)
class ReferenceCatalog:
    """Names that inline reference tokens may point at.

    Attributes:
        skills: Directory names under the skills root
        subagents: File stems of *.md files under the subagents root
    """

    skills: frozenset[str]
    subagents: frozenset[str]

    @property
    def all_names(self) -> frozenset[str]:
        return self.skills | self.subagents


def kind_directory(rulesync_dir: Path, kind: DocumentKind) -> Path:
    return rulesync_dir / kind


def iter_document_paths(directory: Path, suffix: str) -> list[Path]:
    """Recursively list files under directory whose name ends with suffix.

    Returns:
        Sorted list of matching file paths (empty if the directory is missing)
    """
    if not directory.is_dir():
        return []

    suffix = suffix.lower()
    return sorted(p for p in directory.rglob("*") if p.is_file() and p.name.lower().endswith(suffix))


def load_document(path: Path, kind: DocumentKind, report: ValidationReport, rel_path: str) -> Document | None:
    """Read one document as UTF-8 text.

    Unreadable files are recorded as a load error and return None so the
    caller can exclude them without aborting the run.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        report.error(f"Cannot read file: {e}", rel_path, phase="load")
        return None

    content = decode_utf8(raw, report, rel_path)
    if content is None:
        return None

    return Document(path=path, raw_text=content, kind=kind, rel_path=rel_path)


def load_documents(rulesync_dir: Path, kind: DocumentKind, report: ValidationReport) -> list[Document]:
    """Load every document of one kind.

    Args:
        rulesync_dir: Path to the .rulesync root
        kind: Which document kind to load
        report: Report receiving load errors

    Returns:
        Documents in sorted path order
    """
    directory = kind_directory(rulesync_dir, kind)
    if not directory.is_dir():
        report.info(f"No {kind}/ directory found", phase="load")
        return []

    documents = []
    for path in iter_document_paths(directory, KIND_FILE_SUFFIXES[kind]):
        document = load_document(path, kind, report, display_path(path, rulesync_dir.parent))
        if document is not None:
            documents.append(document)

    report.info(f"Found {len(documents)} {kind} file(s)", phase="load")
    return documents


def get_available_skills(skills_dir: Path) -> set[str]:
    """Get set of available skill names (directory names in skills/)."""
    if not skills_dir.is_dir():
        return set()

    return {d.name for d in skills_dir.iterdir() if d.is_dir() and not d.name.startswith(".")}


def get_available_subagents(subagents_dir: Path) -> set[str]:
    """Get set of available subagent names (file stems of subagents/*.md)."""
    if not subagents_dir.is_dir():
        return set()

    return {f.stem for f in subagents_dir.glob("*.md") if f.is_file()}


def build_reference_catalog(rulesync_dir: Path) -> ReferenceCatalog:
    """Build the catalog from directory listings. Must complete before reference checks."""
    return ReferenceCatalog(
        skills=frozenset(get_available_skills(rulesync_dir / SKILLS_DIR_NAME)),
        subagents=frozenset(get_available_subagents(rulesync_dir / SUBAGENTS_DIR_NAME)),
    )
