#!/usr/bin/env python3
"""Tests for rulesync_frontmatter.py - front-matter extraction."""

from pathlib import Path

import pytest
from rulesync_documents import Document
from rulesync_frontmatter import (
    MISSING_FRONTMATTER_MESSAGE,
    ExtractionFailed,
    extract_frontmatter,
    frontmatter_block,
    load_frontmatter,
)
from rulesync_validation_common import ValidationReport


def make_document(content: str) -> Document:
    return Document(path=Path("skills/demo/SKILL.md"), raw_text=content, kind="skills", rel_path="skills/demo/SKILL.md")


class TestFrontmatterBlock:
    """Tests for locating the --- delimited block."""

    def test_captures_text_between_delimiters(self) -> None:
        """The block is everything between the opening and closing --- lines."""
        content = "---\nname: x\ndescription: y\n---\n# Body\n"
        assert frontmatter_block(content) == "name: x\ndescription: y\n"

    def test_requires_block_at_start_of_file(self) -> None:
        """A --- block that does not start at byte 0 is not front-matter."""
        content = "# Title\n---\nname: x\n---\n"
        assert frontmatter_block(content) is None

    def test_closing_delimiter_must_be_whole_line(self) -> None:
        """A line such as '----' or '--- x' does not close the block."""
        content = "---\nname: x\n----\n--- x\n---\nbody\n"
        assert frontmatter_block(content) == "name: x\n----\n--- x\n"

    def test_crlf_line_endings(self) -> None:
        """Windows line endings are tolerated."""
        content = "---\r\nname: x\r\n---\r\nbody\r\n"
        block = frontmatter_block(content)
        assert block is not None
        assert "name: x" in block

    def test_empty_block(self) -> None:
        """Two adjacent delimiter lines form an empty block."""
        assert frontmatter_block("---\n---\nbody\n") == ""


class TestExtractFrontmatter:
    """Tests for parsing the block into a mapping."""

    def test_returns_mapping_in_source_order(self) -> None:
        """Keys come back in the order they were written."""
        content = "---\ntargets: ['*']\nname: x\ndescription: y\n---\n"
        result = extract_frontmatter(content)
        assert isinstance(result, dict)
        assert list(result) == ["targets", "name", "description"]

    def test_nested_values(self) -> None:
        """Nested mappings and sequences are preserved."""
        content = "---\nname: x\nopencode:\n  tools:\n    bash: true\ntags: [a, b]\n---\n"
        result = extract_frontmatter(content)
        assert isinstance(result, dict)
        assert result["opencode"] == {"tools": {"bash": True}}
        assert result["tags"] == ["a", "b"]

    def test_camel_case_keys_kept_verbatim(self) -> None:
        """Multi-word keys such as localRoot are not renamed."""
        result = extract_frontmatter("---\nlocalRoot: true\n---\n")
        assert result == {"localRoot": True}

    def test_missing_block_is_extraction_failure(self) -> None:
        """No front-matter yields ExtractionFailed, not an exception."""
        result = extract_frontmatter("# Just a heading\n")
        assert result == ExtractionFailed(MISSING_FRONTMATTER_MESSAGE)

    def test_unterminated_block_is_extraction_failure(self) -> None:
        """An opening --- without a closing line is reported as missing."""
        result = extract_frontmatter("---\nname: x\n")
        assert isinstance(result, ExtractionFailed)

    def test_invalid_yaml_is_extraction_failure(self) -> None:
        """YAML syntax errors are caught and described."""
        result = extract_frontmatter("---\nname: [unclosed\n---\n")
        assert isinstance(result, ExtractionFailed)
        assert result.message.startswith("YAML parsing error:")

    @pytest.mark.parametrize("value", ["2024-13-45", "2024-02-30"])
    def test_impossible_date_is_extraction_failure(self, value: str) -> None:
        """Date-shaped scalars that are not real dates fail to parse instead of raising."""
        result = extract_frontmatter(f"---\nname: x\nupdated: {value}\n---\n")
        assert isinstance(result, ExtractionFailed)
        assert result.message.startswith("YAML parsing error:")

    def test_real_date_parses(self) -> None:
        result = extract_frontmatter("---\nupdated: 2024-02-29\n---\n")
        assert isinstance(result, dict)
        assert str(result["updated"]) == "2024-02-29"

    def test_non_mapping_is_extraction_failure(self) -> None:
        """A block that parses to a list is not a front-matter mapping."""
        result = extract_frontmatter("---\n- a\n- b\n---\n")
        assert result == ExtractionFailed("Frontmatter is not a YAML mapping")

    def test_empty_block_is_empty_mapping(self) -> None:
        """An empty block parses to an empty mapping."""
        assert extract_frontmatter("---\n---\nbody\n") == {}


class TestLoadFrontmatter:
    """Tests for the strict / best-effort failure policies."""

    def test_strict_failure_records_one_error(self) -> None:
        """Strict mode reports a parse failure as exactly one error."""
        report = ValidationReport()
        assert load_frontmatter(make_document("no front-matter"), report, strict=True) is None
        assert len(report.errors) == 1
        assert report.errors[0].phase == "parse"
        assert report.errors[0].file == "skills/demo/SKILL.md"
        assert not report.warnings

    def test_best_effort_failure_records_one_warning(self) -> None:
        """Best-effort mode reports a parse failure as a warning instead."""
        report = ValidationReport()
        assert load_frontmatter(make_document("---\nname: [x\n---\n"), report, strict=False) is None
        assert not report.errors
        assert len(report.warnings) == 1
        assert report.warnings[0].message.startswith("Skipped:")

    def test_success_records_nothing(self) -> None:
        """A valid block returns the mapping and leaves the report empty."""
        report = ValidationReport()
        result = load_frontmatter(make_document("---\nname: x\n---\n"), report, strict=True)
        assert result == {"name": "x"}
        assert report.results == []
