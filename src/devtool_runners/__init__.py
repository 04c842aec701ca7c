"""devtool-runners - structured output for TypeScript developer tools.

This package wraps three tools behind one request/response protocol:
- tsc: Type errors parsed from compiler output
- Biome: Lint diagnostics normalized from its JSON report
- bun test: Failures recovered from console output (legacy and 1.3+ layouts)

Usage:
    # Run via CLI
    devtool-runners --format markdown run-tests

    # Or use the parsers directly on buffered output
    from devtool_runners.parsing import parse_bun_test_output
    summary = parse_bun_test_output(output)

    # Or dispatch requests
    from devtool_runners import ToolRequest, ToolServer
    response = ToolServer().handle_request(ToolRequest(tool="tsc_check"))

Settings (.devtool-runners.yaml):
    tsc:
      timeout: 60

    bun:
      coverage_timeout: 120
      low_coverage_threshold: 80
"""

from devtool_runners.cli import main
from devtool_runners.protocol import ToolRequest, ToolResponse, ToolServer

__all__ = ["main", "ToolRequest", "ToolResponse", "ToolServer"]
__version__ = "0.1.0"
