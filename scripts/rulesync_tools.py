#!/usr/bin/env python3
"""
Rulesync Frontmatter Tools - Command Line Entry Point

Lints the front-matter of every document under .rulesync/ and builds the
skill manifest.

Usage:
    uv run python scripts/rulesync_tools.py lint-frontmatter
    uv run python scripts/rulesync_tools.py lint-frontmatter --jobs 4 --check-profiles
    uv run python scripts/rulesync_tools.py lint-frontmatter --json
    uv run python scripts/rulesync_tools.py build-manifest

Environment:
    RULESYNC_DIR  Use this directory instead of ./.rulesync (--rulesync-dir wins)

Exit codes:
    0 - No errors (warnings never fail the run) / manifest written
    1 - Errors found / manifest could not be written / bad usage
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from build_manifest import analyze_manifest, build_manifest, manifest_output_path, write_manifest
from rulesync_documents import (
    DOCUMENT_KINDS,
    Document,
    ReferenceCatalog,
    build_reference_catalog,
    load_documents,
)
from rulesync_frontmatter import load_frontmatter
from rulesync_validation_common import (
    COLORS,
    EXIT_ERROR,
    EXIT_OK,
    SKILLS_DIR_NAME,
    SUBAGENTS_DIR_NAME,
    ValidationReport,
    colorize,
    format_result,
    get_rulesync_dir,
)
from validate_profile_consistency import validate_profile_consistency
from validate_references import validate_references
from validate_schema import validate_schema
from validate_tool_profiles import validate_tool_profiles

LINT_FRONTMATTER = "lint-frontmatter"
BUILD_MANIFEST = "build-manifest"
COMMANDS = (LINT_FRONTMATTER, BUILD_MANIFEST)

USAGE = f"Usage: rulesync-tools <{'|'.join(COMMANDS)}> [options]"

RULE_WIDTH = 70

# =============================================================================
# lint-frontmatter
# =============================================================================


def validate_document(document: Document, catalog: ReferenceCatalog, check_profiles: bool = False) -> ValidationReport:
    """Run every check for one document into a private report.

    A front-matter parse failure is reported once and ends the checks for
    that document.
    """
    report = ValidationReport()
    rel_path = document.display_name

    frontmatter = load_frontmatter(document, report, strict=True)
    if frontmatter is None:
        return report

    validate_schema(frontmatter, document, report)

    if document.kind == SUBAGENTS_DIR_NAME:
        validate_tool_profiles(frontmatter, report, rel_path)
        if check_profiles:
            validate_profile_consistency(frontmatter, report, rel_path)

    validate_references(document.raw_text, catalog, report, rel_path)

    if not report.has_errors:
        report.passed("Frontmatter valid", rel_path)
    return report


def lint_frontmatter(
    rulesync_dir: Path,
    jobs: int = 1,
    check_profiles: bool = False,
) -> tuple[ValidationReport, ReferenceCatalog]:
    """Lint every document under rulesync_dir.

    Args:
        rulesync_dir: Path to the .rulesync root
        jobs: Worker threads for per-document checks (1 = sequential)
        check_profiles: Also check cross-platform tool profile consistency

    Returns:
        Tuple of (report, catalog). Result order does not depend on jobs.
    """
    report = ValidationReport()
    catalog = build_reference_catalog(rulesync_dir)

    documents: list[Document] = []
    for kind in DOCUMENT_KINDS:
        documents.extend(load_documents(rulesync_dir, kind, report))

    def check(document: Document) -> ValidationReport:
        return validate_document(document, catalog, check_profiles)

    if jobs > 1 and len(documents) > 1:
        # map() yields in submission order, keeping the merged output deterministic
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            document_reports = list(executor.map(check, documents))
    else:
        document_reports = [check(document) for document in documents]

    for document_report in document_reports:
        report.merge(document_report)

    return report, catalog


def print_lint_report(report: ValidationReport, verbose: bool = False) -> None:
    """Print counts, then errors, then warnings, then the final verdict."""
    errors = report.errors
    warnings = report.warnings

    print("=" * RULE_WIDTH)
    print(f"Errors: {len(errors)}")
    print(f"Warnings: {len(warnings)}")
    print("=" * RULE_WIDTH)

    if errors:
        print(colorize("ERRORS:", "ERROR"))
        for result in errors:
            print(f"  {colorize('✗', 'ERROR')} {format_result(result)}")

    if warnings:
        print(colorize("WARNINGS:", "WARNING"))
        for result in warnings:
            print(f"  {colorize('!', 'WARNING')} {format_result(result)}")

    if verbose:
        for level in ("INFO", "PASSED"):
            results = [r for r in report.results if r.level == level]
            if results:
                print(colorize(f"{level}:", level))
                for result in results:
                    print(f"  {format_result(result)}")

    if report.has_errors:
        print(f"{COLORS['ERROR']}✗ Frontmatter validation failed.{COLORS['RESET']}")
    else:
        print(f"{COLORS['PASSED']}✓ Frontmatter validation passed.{COLORS['RESET']}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_lint_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"rulesync-tools {LINT_FRONTMATTER}",
        description="Validate front-matter of skills, subagents, rules and commands",
    )
    parser.add_argument("--rulesync-dir", help="Path to the .rulesync directory (default: ./.rulesync)")
    parser.add_argument("--jobs", "-j", type=_positive_int, default=1, help="Validate documents on N threads")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show INFO and PASSED results")
    parser.add_argument(
        "--check-profiles",
        action="store_true",
        help="Also require subagent tool profiles to agree across platforms",
    )
    return parser


def run_lint_frontmatter(argv: Sequence[str]) -> int:
    args = build_lint_parser().parse_args(list(argv))
    rulesync_dir = get_rulesync_dir(args.rulesync_dir)

    report, catalog = lint_frontmatter(rulesync_dir, jobs=args.jobs, check_profiles=args.check_profiles)

    if args.json:
        print(report.to_json())
    else:
        print(f"Found {len(catalog.skills)} skills in catalog")
        print(f"Found {len(catalog.subagents)} subagents in catalog\n")
        print_lint_report(report, verbose=args.verbose)

    return report.exit_code


# =============================================================================
# build-manifest
# =============================================================================


def run_build_manifest(argv: Sequence[str]) -> int:
    """Build the skill manifest. Arguments other than --rulesync-dir are ignored."""
    parser = argparse.ArgumentParser(prog=f"rulesync-tools {BUILD_MANIFEST}", add_help=False, allow_abbrev=False)
    # a bare --rulesync-dir falls back to RULESYNC_DIR or ./.rulesync
    parser.add_argument("--rulesync-dir", nargs="?")
    args, _ignored = parser.parse_known_args(list(argv))
    rulesync_dir = get_rulesync_dir(args.rulesync_dir)

    report = ValidationReport()
    entries = build_manifest(rulesync_dir / SKILLS_DIR_NAME, report, root=rulesync_dir.parent)
    analyze_manifest(entries, report)

    for result in report.warnings:
        print(f"  {colorize('!', 'WARNING')} {format_result(result)}", file=sys.stderr)

    output_path = manifest_output_path(rulesync_dir)
    try:
        write_manifest(entries, output_path)
    except OSError as e:
        print(f"Error: cannot write manifest {output_path}: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(f"Manifest written to {output_path} ({len(entries)} skill(s))")
    return EXIT_OK


# =============================================================================
# Main
# =============================================================================


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0].lower() not in COMMANDS:
        print(USAGE, file=sys.stderr)
        return EXIT_ERROR

    command, rest = args[0].lower(), args[1:]
    if command == BUILD_MANIFEST:
        return run_build_manifest(rest)
    return run_lint_frontmatter(rest)


if __name__ == "__main__":
    sys.exit(main())
