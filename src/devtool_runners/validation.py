"""Validation of caller-supplied paths and patterns.

Also resolves which TypeScript project (tsconfig.json / jsconfig.json) a path
belongs to.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from devtool_runners.exceptions import ConfigNotFoundError, InvalidInputError

TSC_CONFIG_FILES: tuple[str, ...] = ("tsconfig.json", "jsconfig.json")

_SHELL_METACHARACTERS = re.compile(r"[;&|$`<>(){}\\'\"\n\r]")


def validate_shell_safe_pattern(pattern: str) -> str:
    """Reject patterns containing shell metacharacters.

    Raises:
        InvalidInputError: If the pattern is unsafe.
    """
    if _SHELL_METACHARACTERS.search(pattern):
        raise InvalidInputError(f"Pattern contains disallowed characters: {pattern!r}")
    return pattern


def validate_path(path: str, root: Path | None = None) -> str:
    """Resolve a path and ensure it stays inside ``root``.

    Args:
        path: Relative or absolute path.
        root: Project root (defaults to the current directory).

    Returns:
        The absolute path as a string.

    Raises:
        InvalidInputError: If the path is empty or escapes the root.
    """
    if not path or not path.strip():
        raise InvalidInputError("Path must not be empty")
    if "\x00" in path:
        raise InvalidInputError("Path must not contain NUL bytes")

    base = (root or Path.cwd()).resolve()
    resolved = (base / path).resolve()
    if not resolved.is_relative_to(base):
        raise InvalidInputError(f"Path escapes the project root: {path}")
    return str(resolved)


def validate_path_or_default(path: str | None, root: Path | None = None) -> str:
    """Validate ``path``, or return ``"."`` when none is given."""
    if not path:
        return "."
    return validate_path(path, root)


def find_nearest_config(start: Path, names: Sequence[str]) -> Path | None:
    """Walk upward from ``start`` looking for one of ``names``.

    Args:
        start: File or directory to start from.
        names: Candidate file names, in order of preference.

    Returns:
        Path of the first config found, or None.
    """
    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory, *directory.parents):
        for name in names:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None


def resolve_tsc_workdir(target: str | None = None) -> tuple[str, str]:
    """Find the working directory and config file for a tsc run.

    Args:
        target: File or directory (defaults to the current directory).

    Returns:
        ``(cwd, config_path)``.

    Raises:
        InvalidInputError: If the target does not exist.
        ConfigNotFoundError: If no tsconfig/jsconfig applies.
    """
    resolved = Path(target).resolve() if target else Path.cwd()
    if not resolved.exists():
        raise InvalidInputError(f"Path not found: {resolved}")

    config = find_nearest_config(resolved, TSC_CONFIG_FILES)
    if config is None:
        kind = "directory" if resolved.is_dir() else "file"
        raise ConfigNotFoundError(
            f"No tsconfig.json or jsconfig.json found for {kind} {resolved}"
        )
    return str(config.parent), str(config)
