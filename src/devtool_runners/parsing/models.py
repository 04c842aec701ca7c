"""Pydantic models for parsed tool outputs.

Every parser in this package returns one of these models. They are built
fresh on each parse call and are immutable once returned.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Severity = Literal["error", "warning", "info"]


class _FrozenModel(BaseModel):
    """Base for immutable result models."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# TYPE CHECKER / LINTER DIAGNOSTICS
# =============================================================================


class Diagnostic(_FrozenModel):
    """A single issue reported by a type checker or linter."""

    file: str
    line: int  # 1-indexed, 0 when the tool did not report one
    column: int | None = None
    message: str
    code: str | None = None
    severity: Severity
    suggestion: str | None = None

    @field_validator("line", mode="before")
    @classmethod
    def ensure_non_negative_line(cls, v: int | None) -> int:
        """Clamp missing or negative line numbers to 0."""
        return max(0, v) if v else 0


class TscParseResult(_FrozenModel):
    """Errors extracted from one TypeScript compiler run."""

    error_count: int = 0
    errors: list[Diagnostic] = Field(default_factory=list)


class LintSummary(_FrozenModel):
    """Diagnostics and counts from one Biome report."""

    error_count: int = 0
    warning_count: int = 0
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class LintFixResult(_FrozenModel):
    """Outcome of an auto-fix run followed by a re-check."""

    fixed: int = 0
    remaining: LintSummary = Field(default_factory=LintSummary)


class FormatCheckResult(_FrozenModel):
    """Whether files are formatted, and which ones are not."""

    formatted: bool
    unformatted_files: list[str] = Field(default_factory=list)


# =============================================================================
# TEST RUNNER RESULTS
# =============================================================================


class TestFailure(_FrozenModel):
    """One failing test case as recovered from console output."""

    __test__ = False  # keep pytest from collecting this class

    file: str = "unknown"
    message: str
    line: int | None = None
    stack: str | None = None


class TestSummary(_FrozenModel):
    """Aggregate results of a test run.

    ``len(failures)`` is best-effort and may differ from ``failed``; the
    counts printed in the runner's trailer line are authoritative.
    """

    __test__ = False

    passed: int = 0
    failed: int = 0
    total: int = 0
    failures: list[TestFailure] = Field(default_factory=list)


class SummaryCounts(_FrozenModel):
    """Pass/fail counts read from a trailer line (None when absent)."""

    passed: int | None = None
    failed: int | None = None


class CoverageReport(_FrozenModel):
    """Overall coverage percentage and poorly covered files."""

    percent: float = 0.0
    uncovered: list[str] = Field(default_factory=list)
