"""TypeScript type checking.

Runs ``tsc --noEmit --pretty false`` from the directory holding the nearest
tsconfig.json / jsconfig.json and parses the errors it prints.
"""

from __future__ import annotations

from pydantic import BaseModel

from devtool_runners.parsing import TscParseResult, parse_tsc_output
from devtool_runners.tools.base import RunnerTool
from devtool_runners.validation import resolve_tsc_workdir, validate_path_or_default

TSC_ARGS: list[str] = ["--noEmit", "--pretty", "false"]


class TscRunResult(BaseModel):
    """Parsed errors plus the facts of the run that produced them."""

    cwd: str
    config_path: str
    exit_code: int
    timed_out: bool
    timeout: float
    result: TscParseResult


class TscTool(RunnerTool):
    """Type checking with the TypeScript compiler."""

    tool_name = "tsc"

    def check(self, path: str | None = None) -> TscRunResult:
        """Type check the project that ``path`` belongs to.

        Args:
            path: File or directory used to pick the tsconfig (default: cwd).

        Returns:
            Parsed errors with the working directory and config used.
        """
        target = validate_path_or_default(path)
        cwd, config_path = resolve_tsc_workdir(target)

        settings = self.settings.tsc
        process = self._execute([*settings.command, *TSC_ARGS], timeout=settings.timeout, cwd=cwd)
        parsed = parse_tsc_output(process.output)
        self.logger.debug("tsc reported %d error(s) using %s", parsed.error_count, config_path)

        return TscRunResult(
            cwd=cwd,
            config_path=config_path,
            exit_code=process.exit_code,
            timed_out=process.timed_out,
            timeout=settings.timeout,
            result=parsed,
        )
