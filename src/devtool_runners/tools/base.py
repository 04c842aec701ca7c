"""Base class for devtool-runners tools.

Provides common infrastructure for tool implementations:
- Settings handling
- Injected process runner and logger
- Command execution with logging
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from devtool_runners.config import RunnerSettings
from devtool_runners.runner import ProcessResult, ProcessRunner, ci_environment, run_command


class RunnerTool:
    """Base class for tool adapters.

    Subclasses set ``tool_name`` and expose one method per operation. Output
    parsing is delegated to :mod:`devtool_runners.parsing`, which does no I/O
    and no logging; all logging happens here, through the injected logger.
    """

    tool_name: str = ""  # Override in subclasses

    def __init__(
        self,
        settings: RunnerSettings | None = None,
        *,
        runner: ProcessRunner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the tool.

        Args:
            settings: Runner settings (defaults when None).
            runner: Process runner, replaceable in tests.
            logger: Logger to report through.
        """
        self.settings = settings or RunnerSettings()
        self.runner: ProcessRunner = runner or run_command
        self.logger = logger or logging.getLogger(f"devtool_runners.{self.tool_name}")

    def _execute(
        self,
        cmd: Sequence[str],
        *,
        timeout: float,
        cwd: str | None = None,
    ) -> ProcessResult:
        """Run a command with ``CI=true`` and log how it went.

        Args:
            cmd: Executable and arguments.
            timeout: Seconds before the process is killed.
            cwd: Working directory.

        Returns:
            The buffered process result.
        """
        self.logger.debug("Running %s (cwd=%s, timeout=%ss)", " ".join(cmd), cwd or ".", timeout)
        result = self.runner(cmd, timeout, cwd=cwd, env=ci_environment())
        if result.timed_out:
            self.logger.warning("%s timed out after %ss", self.tool_name, timeout)
        else:
            self.logger.info("%s exited with code %d", self.tool_name, result.exit_code)
        return result
