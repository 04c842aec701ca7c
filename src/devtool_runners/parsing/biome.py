"""Biome JSON report parsing.

Biome's ``--reporter=json`` output is validated against
:data:`~devtool_runners.parsing.schemas.BIOME_REPORT_SCHEMA` and read through
the models below. A report that cannot be read never raises: it degrades to a
single synthetic ``internal_error`` diagnostic.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from devtool_runners.parsing.models import Diagnostic, LintSummary
from devtool_runners.parsing.schemas import biome_report_errors

INTERNAL_ERROR_CODE = "internal_error"

# How much of an unreadable report is echoed back in the synthetic diagnostic
RAW_PREFIX_LENGTH = 200

_REPORTED_SEVERITIES = frozenset({"error", "warning"})


# =============================================================================
# REPORT MODELS
# =============================================================================


class BiomePath(BaseModel):
    """Path object of a diagnostic location."""

    file: str | None = None


class BiomePosition(BaseModel):
    """Line position inside a span."""

    line: int | None = None


class BiomeSpan(BaseModel):
    """Span given as a start position."""

    start: BiomePosition | None = None


class BiomeLocation(BaseModel):
    """Where a diagnostic points to."""

    path: BiomePath | None = None
    # Older reporters emit {"start": {...}}, newer ones a [start, end] offset pair
    span: BiomeSpan | list[Any] | None = None


class BiomeDiagnostic(BaseModel):
    """One entry of the report's ``diagnostics`` array."""

    severity: str | None = None
    category: str | None = None
    description: str | None = None
    message: str | list[Any] | None = None
    location: BiomeLocation | None = None
    advice: Any = None

    @property
    def file(self) -> str | None:
        """The reported file path, if any."""
        if self.location and self.location.path:
            return self.location.path.file
        return None

    @property
    def line(self) -> int:
        """The reported start line, 0 when unknown."""
        span = self.location.span if self.location else None
        if isinstance(span, BiomeSpan) and span.start and span.start.line:
            return span.start.line
        return 0

    @property
    def text(self) -> str:
        """Description, falling back to the (possibly markup) message."""
        if self.description:
            return self.description
        if isinstance(self.message, list):
            return "".join(
                str(part.get("content", "")) if isinstance(part, dict) else str(part)
                for part in self.message
            )
        return self.message or ""


class BiomeSummary(BaseModel):
    """Counts printed at the end of a report."""

    errors: int | None = None
    warnings: int | None = None
    changed: int | None = None


class BiomeReport(BaseModel):
    """Top-level Biome JSON report."""

    diagnostics: list[BiomeDiagnostic] | None = None
    summary: BiomeSummary | None = None


class BiomeReportError(ValueError):
    """Raised internally when a report does not have the expected shape."""


def load_biome_report(stdout: str) -> BiomeReport:
    """Decode, schema-check and model a Biome JSON report.

    Raises:
        BiomeReportError: If the text is not a readable Biome report.
    """
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise BiomeReportError(f"JSON decode error: {e}") from e

    if errors := biome_report_errors(data):
        raise BiomeReportError("; ".join(errors))

    try:
        return BiomeReport.model_validate(data)
    except ValidationError as e:
        raise BiomeReportError(str(e)) from e


# =============================================================================
# PARSERS
# =============================================================================


def _to_diagnostic(entry: BiomeDiagnostic) -> Diagnostic:
    """Normalize one kept report entry."""
    return Diagnostic(
        file=entry.file or "unknown",
        line=entry.line,
        message=entry.text,
        code=entry.category or "unknown",
        severity="error" if entry.severity == "error" else "warning",
        suggestion=json.dumps(entry.advice) if entry.advice else None,
    )


def internal_error_summary(stdout: str) -> LintSummary:
    """Build the fail-safe result for an unreadable report."""
    return LintSummary(
        error_count=1,
        warning_count=0,
        diagnostics=[
            Diagnostic(
                file="unknown",
                line=0,
                message=f"Failed to parse Biome JSON output: {stdout[:RAW_PREFIX_LENGTH]}",
                code=INTERNAL_ERROR_CODE,
                severity="error",
            )
        ],
    )


def parse_biome_output(stdout: str) -> LintSummary:
    """Parse Biome JSON output into lint diagnostics.

    Only ``error`` and ``warning`` diagnostics are kept. Counts come from the
    report's own summary when it has one.

    Args:
        stdout: The stdout of ``biome check --reporter=json``.

    Returns:
        The lint summary. Never raises.
    """
    try:
        report = load_biome_report(stdout)
    except BiomeReportError:
        return internal_error_summary(stdout)

    diagnostics = [
        _to_diagnostic(entry)
        for entry in report.diagnostics or []
        if entry.severity in _REPORTED_SEVERITIES
    ]

    summary = report.summary or BiomeSummary()
    error_count = summary.errors
    if error_count is None:
        error_count = sum(1 for d in diagnostics if d.severity == "error")
    warning_count = summary.warnings
    if warning_count is None:
        warning_count = sum(1 for d in diagnostics if d.severity == "warning")

    return LintSummary(
        error_count=error_count,
        warning_count=warning_count,
        diagnostics=diagnostics,
    )


def parse_changed_count(stdout: str) -> int | None:
    """Return ``summary.changed`` of a ``--write`` report.

    Returns:
        The number of changed files (0 when not reported), or None when the
        report is unreadable.
    """
    try:
        report = load_biome_report(stdout)
    except BiomeReportError:
        return None
    if report.summary is None:
        return 0
    return report.summary.changed or 0


def parse_unformatted_files(stdout: str) -> list[str]:
    """Return the unique files named in a format report, in report order."""
    try:
        report = load_biome_report(stdout)
    except BiomeReportError:
        return []

    files: list[str] = []
    for entry in report.diagnostics or []:
        if (file := entry.file) and file not in files:
            files.append(file)
    return files
