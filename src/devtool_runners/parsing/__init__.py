"""Diagnostic extraction for tool output.

This module provides:
- Pydantic result models shared by every parser
- tsc text parser
- Biome JSON report normalizer with a fail-safe degrade path
- bun test failure block parser and trailer-count authority

All parsers are pure functions over fully buffered output and never raise
for malformed input.
"""

from devtool_runners.parsing.biome import (
    INTERNAL_ERROR_CODE,
    parse_biome_output,
    parse_changed_count,
    parse_unformatted_files,
)
from devtool_runners.parsing.bun import (
    LineKind,
    classify_line,
    parse_bun_test_output,
    parse_coverage,
    parse_failure_blocks,
    parse_summary_counts,
)
from devtool_runners.parsing.locations import SourceLocation, extract_location
from devtool_runners.parsing.models import (
    CoverageReport,
    Diagnostic,
    FormatCheckResult,
    LintFixResult,
    LintSummary,
    SummaryCounts,
    TestFailure,
    TestSummary,
    TscParseResult,
)
from devtool_runners.parsing.tsc import parse_tsc_output

__all__ = [
    # Models
    "Diagnostic",
    "TscParseResult",
    "LintSummary",
    "LintFixResult",
    "FormatCheckResult",
    "TestFailure",
    "TestSummary",
    "SummaryCounts",
    "CoverageReport",
    "SourceLocation",
    # tsc
    "parse_tsc_output",
    # biome
    "INTERNAL_ERROR_CODE",
    "parse_biome_output",
    "parse_changed_count",
    "parse_unformatted_files",
    # bun
    "LineKind",
    "classify_line",
    "parse_bun_test_output",
    "parse_coverage",
    "parse_failure_blocks",
    "parse_summary_counts",
    # Locations
    "extract_location",
]
