"""Process execution for the tool adapters.

Tools are run to completion with a timeout and their output is fully
buffered before any parsing happens.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

# Exit status reported when the executable itself cannot be started
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126
EXIT_TIMED_OUT = -1


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of one finished (or killed) process."""

    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False

    @property
    def output(self) -> str:
        """Stdout followed by stderr."""
        return f"{self.stdout}{self.stderr}"


class ProcessRunner(Protocol):
    """Callable that runs a command and returns its buffered result."""

    def __call__(
        self,
        cmd: Sequence[str],
        timeout: float,
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult: ...


def _decode(data: str | bytes | None) -> str:
    """Partial output of a killed process may arrive as bytes."""
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def ci_environment(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the inherited environment with ``CI=true`` (plus any extras)."""
    env = dict(os.environ)
    env["CI"] = "true"
    if extra:
        env.update(extra)
    return env


def run_command(
    cmd: Sequence[str],
    timeout: float,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ProcessResult:
    """Run a command to completion, killing it after ``timeout`` seconds.

    Args:
        cmd: Executable and arguments.
        timeout: Seconds before the process is killed.
        cwd: Working directory.
        env: Full environment for the child (inherited when None).

    Returns:
        The buffered result. Partial output is kept on timeout, and a missing
        executable is reported with exit code 127 instead of raising.
    """
    try:
        completed = subprocess.run(
            list(cmd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return ProcessResult(
            stdout=_decode(e.stdout),
            stderr=_decode(e.stderr),
            exit_code=EXIT_TIMED_OUT,
            timed_out=True,
        )
    except FileNotFoundError as e:
        return ProcessResult(stdout="", stderr=str(e), exit_code=EXIT_NOT_FOUND)
    except PermissionError as e:
        return ProcessResult(stdout="", stderr=str(e), exit_code=EXIT_NOT_EXECUTABLE)

    return ProcessResult(
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        exit_code=completed.returncode,
    )
