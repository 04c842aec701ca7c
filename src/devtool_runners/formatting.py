"""Rendering of parsed results for the caller.

JSON output is the model dump; markdown output is a short summary that
leads with the failures.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from devtool_runners.parsing import (
    FormatCheckResult,
    LintFixResult,
    LintSummary,
    TestSummary,
)
from devtool_runners.tools import CoverageRunResult, TscRunResult


class ResponseFormat(str, Enum):
    """Output format requested by the caller."""

    MARKDOWN = "markdown"
    JSON = "json"


def _dump(payload: Any) -> str:
    """Serialize a payload as indented JSON."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _severity_tag(severity: str) -> str:
    """Short tag shown before a diagnostic."""
    return "[error]" if severity == "error" else "[warn]"


# =============================================================================
# TSC
# =============================================================================


def format_tsc_result(run: TscRunResult, fmt: ResponseFormat = ResponseFormat.JSON) -> str:
    """Render a tsc run."""
    parsed = run.result
    if fmt is ResponseFormat.JSON:
        return _dump(
            {
                "cwd": run.cwd,
                "config_path": run.config_path,
                "timed_out": run.timed_out,
                "exit_code": run.exit_code,
                "errors": [e.model_dump() for e in parsed.errors],
                "error_count": parsed.error_count,
            }
        )

    if run.timed_out:
        return f"TypeScript check timed out after {run.timeout:g}s in {run.cwd}."
    if run.exit_code == 0 or parsed.error_count == 0:
        return f"TypeScript passed (cwd: {run.cwd})"

    lines = [
        f"{parsed.error_count} type error(s) (cwd: {run.cwd})",
        f"Config: {run.config_path}",
    ]
    lines.extend(f"- {e.file}:{e.line}:{e.column} {e.code}: {e.message}" for e in parsed.errors)
    return "\n".join(lines)


# =============================================================================
# BIOME
# =============================================================================


def format_lint_summary(summary: LintSummary, fmt: ResponseFormat = ResponseFormat.JSON) -> str:
    """Render a lint check."""
    if fmt is ResponseFormat.JSON:
        return _dump(summary.model_dump())

    if summary.error_count == 0 and summary.warning_count == 0:
        return "No linting issues found."

    output = f"Found {summary.error_count} errors and {summary.warning_count} warnings:\n\n"
    for d in summary.diagnostics:
        output += f"{_severity_tag(d.severity)} {d.file}:{d.line} [{d.code}]\n"
        output += f"   {d.message}\n"
        if d.suggestion:
            output += "   Suggestion available\n"
        output += "\n"
    return output.strip()


def format_lint_fix_result(result: LintFixResult, fmt: ResponseFormat = ResponseFormat.JSON) -> str:
    """Render an auto-fix run."""
    if fmt is ResponseFormat.JSON:
        return _dump(result.model_dump())

    remaining = result.remaining
    output = f"Fixed {result.fixed} issue(s)\n\n" if result.fixed > 0 else ""

    if remaining.error_count == 0 and remaining.warning_count == 0:
        if result.fixed == 0:
            return "No issues to fix."
        return f"{output}All issues resolved.".strip()

    output += (
        f"{remaining.error_count} error(s) and {remaining.warning_count} warning(s) remain:\n\n"
    )
    for d in remaining.diagnostics:
        output += f"{_severity_tag(d.severity)} {d.file}:{d.line} [{d.code}]\n"
        output += f"   {d.message}\n\n"
    return output.strip()


def format_format_check(result: FormatCheckResult, fmt: ResponseFormat = ResponseFormat.JSON) -> str:
    """Render a format check."""
    if fmt is ResponseFormat.JSON:
        return _dump(result.model_dump())

    if result.formatted:
        return "All files are properly formatted."

    output = f"{len(result.unformatted_files)} file(s) need formatting:\n\n"
    for file in result.unformatted_files:
        output += f"   - {file}\n"
    output += "\nRun biome_lint_fix to auto-format these files."
    return output.strip()


# =============================================================================
# BUN
# =============================================================================


def _failure_lines(summary: TestSummary) -> str:
    """Numbered failure entries with their stacks."""
    output = ""
    for i, failure in enumerate(summary.failures, start=1):
        output += f"{i}. {failure.file}:{failure.line or '?'}\n"
        output += f"   {failure.message.splitlines()[0] if failure.message else ''}\n"
        if failure.stack:
            output += "\n".join(f"      {line}" for line in failure.stack.rstrip("\n").split("\n")) + "\n"
        output += "\n"
    return output


def format_test_summary(
    summary: TestSummary,
    fmt: ResponseFormat = ResponseFormat.JSON,
    context: str | None = None,
) -> str:
    """Render a test run, optionally naming what was run (e.g. a file)."""
    if fmt is ResponseFormat.JSON:
        return _dump({**summary.model_dump(), "context": context})

    where = f" in {context}" if context else ""
    if summary.failed == 0:
        return f"All {summary.passed} tests passed{where}."

    output = f"{summary.failed} tests failed{where} ({summary.passed} passed)\n\n"
    output += _failure_lines(summary)
    return output.strip()


def format_coverage_result(run: CoverageRunResult, fmt: ResponseFormat = ResponseFormat.JSON) -> str:
    """Render a coverage run."""
    if fmt is ResponseFormat.JSON:
        return _dump(run.model_dump())

    summary, coverage = run.summary, run.coverage
    if summary.failed == 0:
        output = f"All {summary.passed} tests passed.\n\n"
    else:
        output = f"{summary.failed} tests failed ({summary.passed} passed)\n\n"

    output += f"Coverage: {coverage.percent:g}%\n"
    if coverage.uncovered:
        output += "\nFiles with low coverage:\n"
        for file in coverage.uncovered:
            output += f"   - {file}\n"
    return output.strip()
