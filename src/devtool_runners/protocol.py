"""Uniform request/response protocol over the tool adapters.

Requests name an operation and its arguments::

    {"tool": "bun_run_tests", "arguments": {"pattern": "auth"}, "response_format": "markdown"}

Every request gets exactly one response. Failing tests, bad arguments and
unknown operations come back as ``is_error`` responses instead of raising.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devtool_runners.config import RunnerSettings
from devtool_runners.exceptions import RunnerError
from devtool_runners.formatting import (
    ResponseFormat,
    format_coverage_result,
    format_format_check,
    format_lint_fix_result,
    format_lint_summary,
    format_test_summary,
    format_tsc_result,
)
from devtool_runners.runner import ProcessRunner
from devtool_runners.tools import BiomeTool, BunTool, TscTool

log = logging.getLogger(__name__)


class ToolRequest(BaseModel):
    """One operation to run, with its arguments."""

    tool: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    response_format: ResponseFormat = ResponseFormat.JSON


class ToolResponse(BaseModel):
    """Rendered result of one request."""

    tool: str
    text: str
    is_error: bool = False
    correlation_id: str


# =============================================================================
# ARGUMENT MODELS
# =============================================================================


class _Arguments(BaseModel):
    """Base for argument models; unknown arguments are rejected."""

    model_config = ConfigDict(extra="forbid")


class NoArguments(_Arguments):
    """Operations that take no arguments."""


class PathArguments(_Arguments):
    """Optional file or directory to run on."""

    path: str | None = None


class PatternArguments(_Arguments):
    """Optional test file/name filter."""

    pattern: str | None = None


class FileArguments(_Arguments):
    """A single test file."""

    file: str


# A handler turns validated arguments into (text, is_error)
Handler = Callable[[Any, ResponseFormat], tuple[str, bool]]


def create_correlation_id() -> str:
    """Short id tying together the log lines of one request."""
    return uuid.uuid4().hex[:8]


class ToolServer:
    """Dispatches requests to the tool adapters.

    Usage:
        server = ToolServer(load_settings())
        response = server.handle_request(ToolRequest(tool="tsc_check"))
        print(response.text)
    """

    def __init__(
        self,
        settings: RunnerSettings | None = None,
        *,
        runner: ProcessRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the server and its tools.

        Args:
            settings: Runner settings shared by all tools.
            runner: Process runner passed to every tool.
            logger: Logger for request handling; tools log to children of it.
        """
        self.logger = logger or log
        self.tsc = TscTool(settings, runner=runner, logger=self.logger.getChild("tsc"))
        self.biome = BiomeTool(settings, runner=runner, logger=self.logger.getChild("biome"))
        self.bun = BunTool(settings, runner=runner, logger=self.logger.getChild("bun"))

        self._handlers: dict[str, tuple[type[_Arguments], Handler]] = {
            "tsc_check": (PathArguments, self._handle_tsc_check),
            "biome_lint_check": (PathArguments, self._handle_lint_check),
            "biome_lint_fix": (PathArguments, self._handle_lint_fix),
            "biome_format_check": (PathArguments, self._handle_format_check),
            "bun_run_tests": (PatternArguments, self._handle_run_tests),
            "bun_test_file": (FileArguments, self._handle_test_file),
            "bun_test_coverage": (NoArguments, self._handle_test_coverage),
        }

    @property
    def tool_names(self) -> list[str]:
        """Names of all operations this server answers."""
        return list(self._handlers)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def handle_request(self, request: ToolRequest) -> ToolResponse:
        """Run one request and build its response."""
        cid = create_correlation_id()
        entry = self._handlers.get(request.tool)
        if entry is None:
            self.logger.warning("[%s] Unknown tool: %s", cid, request.tool)
            return ToolResponse(
                tool=request.tool,
                text=f"Unknown tool: {request.tool}",
                is_error=True,
                correlation_id=cid,
            )

        args_model, handler = entry
        self.logger.info("[%s] %s started", cid, request.tool)
        start = time.monotonic()
        try:
            args = args_model.model_validate(request.arguments)
            text, is_error = handler(args, request.response_format)
        except ValidationError as e:
            text, is_error = f"Invalid arguments for {request.tool}: {e}", True
        except RunnerError as e:
            text, is_error = str(e), True

        elapsed_ms = (time.monotonic() - start) * 1000
        self.logger.info(
            "[%s] %s finished in %.0fms (error=%s)", cid, request.tool, elapsed_ms, is_error
        )
        return ToolResponse(tool=request.tool, text=text, is_error=is_error, correlation_id=cid)

    def handle_payload(self, payload: Any) -> ToolResponse:
        """Validate a raw decoded request and run it."""
        try:
            request = ToolRequest.model_validate(payload)
        except ValidationError as e:
            tool = payload.get("tool", "") if isinstance(payload, dict) else ""
            return ToolResponse(
                tool=str(tool),
                text=f"Invalid request: {e}",
                is_error=True,
                correlation_id=create_correlation_id(),
            )
        return self.handle_request(request)

    def serve(self, stdin: IO[str], stdout: IO[str]) -> None:
        """Answer JSON-lines requests until ``stdin`` is exhausted."""
        for line in stdin:
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError as e:
                response = ToolResponse(
                    tool="",
                    text=f"Invalid JSON request: {e}",
                    is_error=True,
                    correlation_id=create_correlation_id(),
                )
            else:
                response = self.handle_payload(payload)
            stdout.write(response.model_dump_json() + "\n")
            stdout.flush()

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _handle_tsc_check(self, args: PathArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Type check and render the errors."""
        run = self.tsc.check(args.path)
        return format_tsc_result(run, fmt), False

    def _handle_lint_check(self, args: PathArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Lint and render the diagnostics."""
        summary = self.biome.lint_check(args.path)
        return format_lint_summary(summary, fmt), False

    def _handle_lint_fix(self, args: PathArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Apply fixes and render what remains."""
        result = self.biome.lint_fix(args.path)
        return format_lint_fix_result(result, fmt), False

    def _handle_format_check(self, args: PathArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Check formatting and list unformatted files."""
        result = self.biome.format_check(args.path)
        return format_format_check(result, fmt), False

    def _handle_run_tests(self, args: PatternArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Run the suite; failures make an error response."""
        summary = self.bun.run_tests(args.pattern)
        return format_test_summary(summary, fmt), summary.failed > 0

    def _handle_test_file(self, args: FileArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Run one test file; failures make an error response."""
        summary = self.bun.test_file(args.file)
        return format_test_summary(summary, fmt, context=args.file), summary.failed > 0

    def _handle_test_coverage(self, args: NoArguments, fmt: ResponseFormat) -> tuple[str, bool]:
        """Run with coverage; failures make an error response."""
        run = self.bun.test_coverage()
        return format_coverage_result(run, fmt), run.summary.failed > 0
