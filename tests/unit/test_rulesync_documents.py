#!/usr/bin/env python3
"""Tests for rulesync_documents.py - document loading and the reference catalog."""

from pathlib import Path
from typing import Callable

from rulesync_documents import build_reference_catalog, iter_document_paths, load_documents
from rulesync_validation_common import ValidationReport


class TestLoadDocuments:
    """Tests for enumerating and reading documents."""

    def test_missing_directory_is_empty_not_error(self, rulesync_dir: Path) -> None:
        report = ValidationReport()
        assert load_documents(rulesync_dir, "commands", report) == []
        assert report.errors == []

    def test_skills_select_skill_md_only(self, write_doc: Callable[[str, str], Path], rulesync_dir: Path) -> None:
        """Only SKILL.md files are skill documents; other files are ignored."""
        write_doc("skills/alpha/SKILL.md", "---\nname: alpha\n---\n")
        write_doc("skills/alpha/reference.md", "notes")
        write_doc("skills/alpha/templates/example.cs", "class X {}")
        report = ValidationReport()
        documents = load_documents(rulesync_dir, "skills", report)
        assert [d.rel_path for d in documents] == [".rulesync/skills/alpha/SKILL.md"]
        assert documents[0].kind == "skills"

    def test_rules_are_recursive_and_sorted(self, write_doc: Callable[[str, str], Path], rulesync_dir: Path) -> None:
        write_doc("rules/b.md", "b")
        write_doc("rules/nested/a.md", "a")
        write_doc("rules/a.md", "a")
        write_doc("rules/readme.txt", "not a rule")
        documents = load_documents(rulesync_dir, "rules", ValidationReport())
        assert [d.rel_path for d in documents] == [
            ".rulesync/rules/a.md",
            ".rulesync/rules/b.md",
            ".rulesync/rules/nested/a.md",
        ]

    def test_suffix_match_is_case_insensitive(self, rulesync_dir: Path) -> None:
        directory = rulesync_dir / "commands"
        directory.mkdir()
        (directory / "Deploy.MD").write_text("x", encoding="utf-8")
        assert [p.name for p in iter_document_paths(directory, ".md")] == ["Deploy.MD"]

    def test_invalid_utf8_is_load_error_and_excluded(self, rulesync_dir: Path, write_doc: Callable[[str, str], Path]) -> None:
        """A non-UTF-8 file is reported once and the rest still load."""
        write_doc("commands/good.md", "---\ndescription: d\n---\n")
        bad = rulesync_dir / "commands" / "bad.md"
        bad.write_bytes(b"---\ndescription: \xff\xfe\n---\n")
        report = ValidationReport()
        documents = load_documents(rulesync_dir, "commands", report)
        assert [d.path.name for d in documents] == ["good.md"]
        assert len(report.errors) == 1
        assert report.errors[0].phase == "load"
        assert report.errors[0].file == ".rulesync/commands/bad.md"

    def test_bom_is_stripped_with_warning(self, rulesync_dir: Path) -> None:
        directory = rulesync_dir / "commands"
        directory.mkdir()
        (directory / "bom.md").write_bytes(b"\xef\xbb\xbf---\ndescription: d\n---\n")
        report = ValidationReport()
        documents = load_documents(rulesync_dir, "commands", report)
        assert documents[0].raw_text.startswith("---")
        assert len(report.warnings) == 1


class TestReferenceCatalog:
    """Tests for the catalog built from directory listings."""

    def test_catalog_names(self, write_doc: Callable[[str, str], Path], rulesync_dir: Path) -> None:
        write_doc("skills/alpha/SKILL.md", "x")
        write_doc("skills/beta/SKILL.md", "x")
        (rulesync_dir / "skills" / ".hidden").mkdir()
        write_doc("subagents/code-reviewer.md", "x")
        write_doc("subagents/notes.txt", "x")
        catalog = build_reference_catalog(rulesync_dir)
        assert catalog.skills == {"alpha", "beta"}
        assert catalog.subagents == {"code-reviewer"}
        assert catalog.all_names == {"alpha", "beta", "code-reviewer"}

    def test_skill_directory_without_skill_md_still_listed(self, rulesync_dir: Path) -> None:
        (rulesync_dir / "skills" / "draft").mkdir(parents=True)
        assert build_reference_catalog(rulesync_dir).skills == {"draft"}

    def test_empty_repository(self, rulesync_dir: Path) -> None:
        catalog = build_reference_catalog(rulesync_dir)
        assert catalog.skills == frozenset()
        assert catalog.subagents == frozenset()
