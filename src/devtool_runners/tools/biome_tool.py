"""Biome linting and formatting.

Biome exits 0 when only warnings are found, so its JSON report is always
parsed regardless of the exit code.
"""

from __future__ import annotations

from devtool_runners.parsing import (
    FormatCheckResult,
    LintFixResult,
    LintSummary,
    parse_biome_output,
    parse_changed_count,
    parse_unformatted_files,
)
from devtool_runners.tools.base import RunnerTool
from devtool_runners.validation import validate_path_or_default

REPORTER_ARG = "--reporter=json"


class BiomeTool(RunnerTool):
    """Lint checks, auto-fixes and format checks with Biome."""

    tool_name = "biome"

    def _biome(self, *args: str) -> list[str]:
        """Configured Biome command followed by ``args``."""
        return [*self.settings.biome.command, *args]

    def lint_check(self, path: str | None = None) -> LintSummary:
        """Lint ``path`` without changing anything."""
        target = validate_path_or_default(path)
        process = self._execute(
            self._biome("check", REPORTER_ARG, target),
            timeout=self.settings.biome.timeout,
        )
        summary = parse_biome_output(process.stdout)
        self.logger.debug(
            "biome check: %d error(s), %d warning(s)",
            summary.error_count,
            summary.warning_count,
        )
        return summary

    def _write_pass(self, subcommand: str, target: str) -> int:
        """Run ``biome <subcommand> --write`` and return the changed-file count."""
        process = self._execute(
            self._biome(subcommand, "--write", REPORTER_ARG, target),
            timeout=self.settings.biome.timeout,
        )
        changed = parse_changed_count(process.stdout)
        if changed is None:
            self.logger.warning(
                "Failed to parse Biome %s output (exit code %d): %s",
                subcommand,
                process.exit_code,
                process.stdout[:200],
            )
            return 0
        return changed

    def lint_fix(self, path: str | None = None) -> LintFixResult:
        """Apply formatting and safe lint fixes, then re-check.

        Formatting and lint fixes are separate Biome passes; both run.
        """
        target = validate_path_or_default(path)
        format_fixed = self._write_pass("format", target)
        lint_fixed = self._write_pass("check", target)
        self.logger.debug(
            "Biome fix completed: format=%d lint=%d total=%d",
            format_fixed,
            lint_fixed,
            format_fixed + lint_fixed,
        )
        return LintFixResult(fixed=format_fixed + lint_fixed, remaining=self.lint_check(target))

    def format_check(self, path: str | None = None) -> FormatCheckResult:
        """Report files whose formatting differs from Biome's."""
        target = validate_path_or_default(path)
        process = self._execute(
            self._biome("format", REPORTER_ARG, target),
            timeout=self.settings.biome.timeout,
        )
        if process.exit_code == 0:
            return FormatCheckResult(formatted=True)
        return FormatCheckResult(
            formatted=False,
            unformatted_files=parse_unformatted_files(process.stdout),
        )
