"""Tests for response rendering."""

from __future__ import annotations

import json

from devtool_runners.formatting import (
    ResponseFormat,
    format_coverage_result,
    format_format_check,
    format_lint_fix_result,
    format_lint_summary,
    format_test_summary,
    format_tsc_result,
)
from devtool_runners.parsing import (
    CoverageReport,
    Diagnostic,
    FormatCheckResult,
    LintFixResult,
    LintSummary,
    TestFailure,
    TestSummary,
    TscParseResult,
)
from devtool_runners.tools import CoverageRunResult, TscRunResult

MD = ResponseFormat.MARKDOWN


def _tsc_run(errors: list[Diagnostic], exit_code: int = 2, timed_out: bool = False) -> TscRunResult:
    return TscRunResult(
        cwd="/proj",
        config_path="/proj/tsconfig.json",
        exit_code=exit_code,
        timed_out=timed_out,
        timeout=30,
        result=TscParseResult(error_count=len(errors), errors=errors),
    )


TSC_ERROR = Diagnostic(
    file="src/a.ts", line=3, column=7, message="Cannot find name 'x'.", code="TS2304", severity="error"
)
LINT_ERROR = Diagnostic(
    file="src/a.ts", line=1, message="Use ===", code="lint/eq", severity="error", suggestion="{}"
)
LINT_WARNING = Diagnostic(file="src/b.ts", line=2, message="Unused", code="lint/unused", severity="warning")


class TestTscFormatting:
    """Tests for tsc rendering."""

    def test_json(self) -> None:
        """Test the JSON payload carries the run details."""
        payload = json.loads(format_tsc_result(_tsc_run([TSC_ERROR])))
        assert payload["cwd"] == "/proj"
        assert payload["config_path"] == "/proj/tsconfig.json"
        assert payload["error_count"] == 1
        assert payload["errors"][0]["code"] == "TS2304"
        assert payload["timed_out"] is False

    def test_markdown_errors(self) -> None:
        """Test markdown lists each error with its position."""
        text = format_tsc_result(_tsc_run([TSC_ERROR]), MD)
        assert text.startswith("1 type error(s) (cwd: /proj)")
        assert "- src/a.ts:3:7 TS2304: Cannot find name 'x'." in text

    def test_markdown_clean(self) -> None:
        """Test a clean run."""
        assert format_tsc_result(_tsc_run([], exit_code=0), MD) == "TypeScript passed (cwd: /proj)"

    def test_markdown_timeout(self) -> None:
        """Test a killed run."""
        text = format_tsc_result(_tsc_run([], exit_code=-1, timed_out=True), MD)
        assert "timed out after 30s" in text


class TestBiomeFormatting:
    """Tests for Biome rendering."""

    def test_lint_summary_markdown(self) -> None:
        """Test severity tags and suggestion hint."""
        summary = LintSummary(error_count=1, warning_count=1, diagnostics=[LINT_ERROR, LINT_WARNING])
        text = format_lint_summary(summary, MD)

        assert text.startswith("Found 1 errors and 1 warnings:")
        assert "[error] src/a.ts:1 [lint/eq]" in text
        assert "[warn] src/b.ts:2 [lint/unused]" in text
        assert text.count("Suggestion available") == 1

    def test_lint_summary_clean(self) -> None:
        """Test a clean lint."""
        summary = LintSummary(error_count=0, warning_count=0, diagnostics=[])
        assert format_lint_summary(summary, MD) == "No linting issues found."

    def test_lint_summary_json(self) -> None:
        """Test the JSON payload is the model dump."""
        summary = LintSummary(error_count=0, warning_count=1, diagnostics=[LINT_WARNING])
        payload = json.loads(format_lint_summary(summary))
        assert payload["warning_count"] == 1
        assert payload["diagnostics"][0]["severity"] == "warning"

    def test_lint_fix_all_resolved(self) -> None:
        """Test everything fixed."""
        clean = LintSummary(error_count=0, warning_count=0, diagnostics=[])
        text = format_lint_fix_result(LintFixResult(fixed=4, remaining=clean), MD)
        assert text == "Fixed 4 issue(s)\n\nAll issues resolved."

    def test_lint_fix_nothing_to_do(self) -> None:
        """Test nothing to fix."""
        clean = LintSummary(error_count=0, warning_count=0, diagnostics=[])
        assert format_lint_fix_result(LintFixResult(fixed=0, remaining=clean), MD) == "No issues to fix."

    def test_lint_fix_remaining(self) -> None:
        """Test issues left after fixing."""
        remaining = LintSummary(error_count=1, warning_count=0, diagnostics=[LINT_ERROR])
        text = format_lint_fix_result(LintFixResult(fixed=2, remaining=remaining), MD)
        assert "Fixed 2 issue(s)" in text
        assert "1 error(s) and 0 warning(s) remain:" in text
        assert "[error] src/a.ts:1 [lint/eq]" in text

    def test_format_check(self) -> None:
        """Test formatted and unformatted results."""
        assert format_format_check(FormatCheckResult(formatted=True), MD) == "All files are properly formatted."

        text = format_format_check(FormatCheckResult(formatted=False, unformatted_files=["a.ts", "b.ts"]), MD)
        assert text.startswith("2 file(s) need formatting:")
        assert "   - a.ts" in text
        assert text.endswith("Run biome_lint_fix to auto-format these files.")


class TestBunFormatting:
    """Tests for bun test rendering."""

    def test_all_passed(self) -> None:
        """Test a green run with context."""
        summary = TestSummary(passed=3, failed=0, total=3, failures=[])
        assert format_test_summary(summary, MD, context="a.test.ts") == "All 3 tests passed in a.test.ts."

    def test_failures_markdown(self) -> None:
        """Test failures are numbered with location, first message line and stack."""
        failures = [
            TestFailure(
                file="/p/a.test.ts",
                line=4,
                message="adds: error: expected 2\nExpected: 2",
                stack="at <anonymous> (/p/a.test.ts:4:3)\n",
            ),
            TestFailure(message="timed out"),
        ]
        summary = TestSummary(passed=1, failed=2, total=3, failures=failures)
        text = format_test_summary(summary, MD)

        assert text.startswith("2 tests failed (1 passed)")
        assert "1. /p/a.test.ts:4\n   adds: error: expected 2\n      at <anonymous> (/p/a.test.ts:4:3)" in text
        assert "Expected: 2" not in text
        assert "2. unknown:?" in text

    def test_json_includes_context(self) -> None:
        """Test the JSON payload names what was run."""
        summary = TestSummary(passed=1, failed=0, total=1, failures=[])
        payload = json.loads(format_test_summary(summary, context="x.test.ts"))
        assert payload["context"] == "x.test.ts"
        assert payload["total"] == 1

    def test_coverage_markdown(self) -> None:
        """Test coverage percentage and low-coverage files."""
        run = CoverageRunResult(
            summary=TestSummary(passed=4, failed=0, total=4, failures=[]),
            coverage=CoverageReport(percent=72.5, uncovered=["src/legacy.ts (25%)"]),
        )
        text = format_coverage_result(run, MD)

        assert text.startswith("All 4 tests passed.")
        assert "Coverage: 72.5%" in text
        assert "Files with low coverage:\n   - src/legacy.ts (25%)" in text

    def test_coverage_json(self) -> None:
        """Test the coverage JSON payload."""
        run = CoverageRunResult(
            summary=TestSummary(passed=0, failed=1, total=1, failures=[TestFailure(message="m")]),
            coverage=CoverageReport(),
        )
        payload = json.loads(format_coverage_result(run))
        assert payload["summary"]["failed"] == 1
        assert payload["coverage"]["percent"] == 0.0
