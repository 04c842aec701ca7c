"""Source location extraction from stack-frame lines."""

from __future__ import annotations

import re
from typing import NamedTuple

# "at fn (/path/file.ts:10:5)" - location in parentheses anywhere on the line.
# The path is greedy so route groups like "/app/(auth)/page.ts" stay whole.
_PAREN_FRAME = re.compile(r"\((.+):(\d+):(\d+)\)")

# "at /path/file.ts:10:5" - bare location right after "at"
_BARE_FRAME = re.compile(r"^\s*at (.+):(\d+):(\d+)")


class SourceLocation(NamedTuple):
    """A (path, line, column) triple."""

    path: str
    line: int
    column: int


def extract_location(line: str) -> SourceLocation | None:
    """Extract a source location from a single stack-frame line.

    The parenthesised form is tried first, then the bare ``at path:line:col``
    form.

    Args:
        line: One line of console output.

    Returns:
        The location of the first matching form, or None.
    """
    match = _PAREN_FRAME.search(line) or _BARE_FRAME.match(line)
    if match is None:
        return None
    return SourceLocation(match.group(1), int(match.group(2)), int(match.group(3)))
