"""Bun test runner integration.

``bun test`` discovers tests across workspaces on its own, so a pattern is
passed straight through as a file filter.
"""

from __future__ import annotations

from pydantic import BaseModel

from devtool_runners.parsing import (
    CoverageReport,
    TestFailure,
    TestSummary,
    parse_bun_test_output,
    parse_coverage,
    parse_summary_counts,
)
from devtool_runners.runner import ProcessResult
from devtool_runners.tools.base import RunnerTool
from devtool_runners.validation import validate_path, validate_shell_safe_pattern

TIMEOUT_FILE = "timeout"


class CoverageRunResult(BaseModel):
    """Test results and coverage from one ``bun test --coverage`` run."""

    summary: TestSummary
    coverage: CoverageReport


def timeout_summary(message: str) -> TestSummary:
    """Summary reported when the test process had to be killed."""
    return TestSummary(
        passed=0,
        failed=1,
        total=1,
        failures=[TestFailure(file=TIMEOUT_FILE, message=message)],
    )


def _combined_output(process: ProcessResult) -> str:
    """Stdout and stderr joined; bun test writes its results to stderr."""
    return f"{process.stdout}\n{process.stderr}"


class BunTool(RunnerTool):
    """Test runs, single-file runs and coverage runs with bun."""

    tool_name = "bun"

    def _summarize(self, process: ProcessResult) -> TestSummary:
        """Turn a finished or killed test process into a summary."""
        settings = self.settings.bun
        if process.timed_out:
            return timeout_summary(
                f"Tests timed out after {settings.timeout:g} seconds. Possible causes: "
                "open handles, infinite loops, or watch mode accidentally enabled."
            )

        output = _combined_output(process)
        if process.exit_code == 0:
            passed = parse_summary_counts(output).passed or 0
            return TestSummary(passed=passed, failed=0, total=passed)

        summary = parse_bun_test_output(output)
        self.logger.debug(
            "bun test: %d passed, %d failed, %d failure block(s) recovered",
            summary.passed,
            summary.failed,
            len(summary.failures),
        )
        return summary

    def run_tests(self, pattern: str | None = None) -> TestSummary:
        """Run the test suite, optionally filtered by a file/name pattern."""
        if pattern:
            validate_shell_safe_pattern(pattern)
            if "/" in pattern or ".." in pattern:
                validate_path(pattern)

        cmd = [*self.settings.bun.command]
        if pattern:
            cmd.append(pattern)
        return self._summarize(self._execute(cmd, timeout=self.settings.bun.timeout))

    def test_file(self, file: str) -> TestSummary:
        """Run the tests of a single file."""
        validated = validate_path(file)
        cmd = [*self.settings.bun.command, validated]
        return self._summarize(self._execute(cmd, timeout=self.settings.bun.timeout))

    def test_coverage(self) -> CoverageRunResult:
        """Run the suite with coverage enabled."""
        settings = self.settings.bun
        process = self._execute(
            [*settings.command, "--coverage"],
            timeout=settings.coverage_timeout,
        )
        if process.timed_out:
            return CoverageRunResult(
                summary=timeout_summary(
                    f"Tests timed out after {settings.coverage_timeout:g} seconds."
                ),
                coverage=CoverageReport(),
            )

        output = _combined_output(process)
        summary = parse_bun_test_output(process.stdout if process.exit_code == 0 else output)
        coverage = parse_coverage(output, settings.low_coverage_threshold)
        self.logger.debug("bun coverage: %.2f%%, %d low file(s)", coverage.percent, len(coverage.uncovered))
        return CoverageRunResult(summary=summary, coverage=coverage)
