"""TypeScript compiler output parser.

``tsc --pretty false`` prints one diagnostic per line::

    src/index.ts(10,5): error TS2322: Type 'string' is not assignable to type 'number'.

Only ``error`` lines match; informational lines are ignored.
"""

from __future__ import annotations

import re

from devtool_runners.parsing.models import Diagnostic, TscParseResult

_TSC_ERROR_PATTERN = re.compile(
    r"^(.+?)\((\d+),(\d+)\):\s*error\s+(TS\d+):\s*(.+?)\r?$",
    re.MULTILINE,
)


def parse_tsc_output(output: str) -> TscParseResult:
    """Parse TypeScript compiler output into structured errors.

    Args:
        output: Combined stdout and stderr of a tsc run.

    Returns:
        Errors in input order with their count. Never raises.
    """
    errors = [
        Diagnostic(
            file=match.group(1),
            line=int(match.group(2)),
            column=int(match.group(3)),
            code=match.group(4),
            message=match.group(5),
            severity="error",
        )
        for match in _TSC_ERROR_PATTERN.finditer(output)
    ]
    return TscParseResult(error_count=len(errors), errors=errors)
