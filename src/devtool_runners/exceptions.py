"""Errors raised to callers of the tool adapters.

Problems in tool *output* are never raised; they are reported as data by the
parsers. These exceptions cover bad caller input and configuration.
"""

from __future__ import annotations


class RunnerError(Exception):
    """Base class for devtool-runners errors."""


class InvalidInputError(RunnerError, ValueError):
    """A path or pattern supplied by the caller was rejected."""


class ConfigNotFoundError(RunnerError):
    """No tool configuration file (e.g. tsconfig.json) could be found."""


class ConfigError(RunnerError):
    """The devtool-runners settings file is missing or invalid."""
