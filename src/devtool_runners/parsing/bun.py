"""Bun test console output parsing.

Bun has printed failures in two layouts over time:

Legacy, where a marker line opens each failure block::

    ✗ should add numbers [1.23ms]
      error: expect(received).toBe(expected)
          at /path/to/math.test.ts:10:5

Bun 1.3+, where the diagnostic comes first and a ``(fail)`` line closes the
block::

    error: expect(received).toEqual(expected)
          at <anonymous> (/path/to/fail.test.ts:4:38)
    (fail) should fail [0.21ms]

Both layouts are handled by one line classifier feeding one accumulator.
The ``<N> pass`` / ``<N> fail`` trailer is authoritative for the counts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from devtool_runners.parsing.locations import extract_location
from devtool_runners.parsing.models import (
    CoverageReport,
    SummaryCounts,
    TestFailure,
    TestSummary,
)

FAILURE_GLYPH = "✗"
UNKNOWN_FILE = "unknown"
DEFAULT_COVERAGE_THRESHOLD = 50.0

_PASS_COUNT = re.compile(r"\b(\d+) pass\b")
_FAIL_COUNT = re.compile(r"\b(\d+) fail\b")

# "(fail) test name [0.21ms]"; the name may itself contain brackets
_TERMINAL_MARKER = re.compile(r"\(fail\)\s+(.+)\s+\[[\d.]+\s*[µnm]?s\]")

# Echoed source excerpt: "3 | test(...)" or a bare "2 |"
_SOURCE_CONTEXT = re.compile(r"^\d+ \|(?: |$)")

_COVERAGE_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_COVERAGE_ROW = re.compile(r"^([^\s|]+)\s*\|\s*(\d+(?:\.\d+)?)\s*%")


# =============================================================================
# SUMMARY AUTHORITY
# =============================================================================


def parse_summary_counts(output: str) -> SummaryCounts:
    """Read the first ``<N> pass`` and ``<N> fail`` tokens from the output."""
    pass_match = _PASS_COUNT.search(output)
    fail_match = _FAIL_COUNT.search(output)
    return SummaryCounts(
        passed=int(pass_match.group(1)) if pass_match else None,
        failed=int(fail_match.group(1)) if fail_match else None,
    )


# =============================================================================
# LINE CLASSIFICATION
# =============================================================================


class LineKind(Enum):
    """What a single console line means to the failure block parser."""

    BLANK = "blank"
    TERMINAL_MARKER = "terminal_marker"
    START_MARKER = "start_marker"
    DIAGNOSTIC = "diagnostic"
    STACK_FRAME = "stack_frame"
    SOURCE_CONTEXT = "source_context"
    TEXT = "text"


class ClassifiedLine(NamedTuple):
    """A console line with its kind and, for terminal markers, the test name."""

    kind: LineKind
    raw: str
    text: str  # stripped line
    test_name: str | None = None  # set for terminal markers


def classify_line(line: str) -> ClassifiedLine:
    """Classify one line; earlier rules take priority over later ones."""
    text = line.strip()
    if not text:
        return ClassifiedLine(LineKind.BLANK, line, text)
    if terminal := _TERMINAL_MARKER.search(line):
        return ClassifiedLine(LineKind.TERMINAL_MARKER, line, text, terminal.group(1))
    if text.startswith(FAILURE_GLYPH) or line.startswith("FAIL "):
        return ClassifiedLine(LineKind.START_MARKER, line, text)
    if text.startswith("error:"):
        return ClassifiedLine(LineKind.DIAGNOSTIC, line, text)
    if text.startswith("at "):
        return ClassifiedLine(LineKind.STACK_FRAME, line, text)
    if _SOURCE_CONTEXT.match(line):
        return ClassifiedLine(LineKind.SOURCE_CONTEXT, line, text)
    return ClassifiedLine(LineKind.TEXT, line, text)


# =============================================================================
# FAILURE BLOCK PARSER
# =============================================================================


@dataclass
class _OpenFailure:
    """Accumulator for the failure block currently being read.

    ``confirmed`` blocks were opened by a start marker and survive to the end
    of input. Tentative blocks were opened by a bare ``error:`` line and only
    count once a terminal marker closes them.
    """

    message: str
    confirmed: bool
    file: str = UNKNOWN_FILE
    line: int | None = None
    stack_lines: list[str] = field(default_factory=list)
    location_resolved: bool = False

    def append_message(self, text: str) -> None:
        """Add a line to the message."""
        self.message = f"{self.message}\n{text}"

    def add_frame(self, raw: str) -> None:
        """Keep a stack frame; the first one with a location sets file and line."""
        if not self.location_resolved and (location := extract_location(raw)):
            self.file = location.path
            self.line = location.line
            self.location_resolved = True
        self.stack_lines.append(raw)

    def freeze(self, test_name: str | None = None) -> TestFailure:
        """Build the immutable failure, prefixing the message with the test name."""
        message = f"{test_name}: {self.message}" if test_name else self.message
        return TestFailure(
            file=self.file,
            message=message,
            line=self.line,
            stack="".join(f"{raw}\n" for raw in self.stack_lines) or None,
        )


def parse_failure_blocks(output: str) -> list[TestFailure]:
    """Extract failing test cases from bun's console output.

    Args:
        output: Complete combined stdout and stderr of a ``bun test`` run.

    Returns:
        Failures in the order they were printed.
    """
    failures: list[TestFailure] = []
    current: _OpenFailure | None = None

    for line in output.splitlines():
        classified = classify_line(line)
        kind = classified.kind

        if kind is LineKind.BLANK:
            continue

        if kind is LineKind.TERMINAL_MARKER:
            if current is not None:
                failures.append(current.freeze(classified.test_name))
                current = None
            continue

        if kind is LineKind.START_MARKER:
            if current is not None and current.confirmed:
                failures.append(current.freeze())
            current = _OpenFailure(message=classified.text, confirmed=True)
            continue

        if kind is LineKind.DIAGNOSTIC:
            if current is not None:
                current.append_message(classified.text)
            else:
                current = _OpenFailure(message=classified.text, confirmed=False)
            continue

        if current is None or kind is LineKind.SOURCE_CONTEXT:
            continue

        if kind is LineKind.STACK_FRAME:
            current.add_frame(classified.raw)
        else:
            current.append_message(classified.text)

    if current is not None and current.confirmed:
        failures.append(current.freeze())

    return failures


def parse_bun_test_output(output: str) -> TestSummary:
    """Parse ``bun test`` output into a test summary.

    An explicit ``0 fail`` trailer is conclusive: block parsing is skipped so
    that ``error:`` lines logged by the code under test are never reported as
    failures.

    Args:
        output: Complete combined stdout and stderr of a ``bun test`` run.

    Returns:
        The summary. Never raises.
    """
    counts = parse_summary_counts(output)
    passed = counts.passed or 0

    if counts.failed == 0:
        return TestSummary(passed=passed, failed=0, total=passed, failures=[])

    failures = parse_failure_blocks(output)
    failed = counts.failed if counts.failed is not None else len(failures)
    return TestSummary(
        passed=passed,
        failed=failed,
        total=passed + failed,
        failures=failures,
    )


# =============================================================================
# COVERAGE
# =============================================================================


def parse_coverage(output: str, threshold: float = DEFAULT_COVERAGE_THRESHOLD) -> CoverageReport:
    """Parse ``bun test --coverage`` output.

    Args:
        output: Combined output of the coverage run.
        threshold: Files covered below this percentage are listed.

    Returns:
        Overall percentage (first percentage printed) and low-coverage files.
    """
    percent_match = _COVERAGE_PERCENT.search(output)
    percent = float(percent_match.group(1)) if percent_match else 0.0

    uncovered: list[str] = []
    for line in output.splitlines():
        if not (row := _COVERAGE_ROW.match(line)):
            continue
        file = row.group(1).strip()
        file_percent = float(row.group(2))
        if file_percent < threshold and file.endswith(".ts"):
            uncovered.append(f"{file} ({file_percent:g}%)")

    return CoverageReport(percent=percent, uncovered=uncovered)
