"""Tool adapters.

Provides one adapter per wrapped developer tool:
- TscTool: TypeScript type checking
- BiomeTool: Linting, auto-fixing and format checks
- BunTool: Test runs and coverage

All adapters share RunnerTool for settings, process execution and logging.
"""

from devtool_runners.tools.base import RunnerTool
from devtool_runners.tools.biome_tool import BiomeTool
from devtool_runners.tools.bun_tool import BunTool, CoverageRunResult
from devtool_runners.tools.tsc_tool import TscRunResult, TscTool

__all__ = [
    "RunnerTool",
    "TscTool",
    "TscRunResult",
    "BiomeTool",
    "BunTool",
    "CoverageRunResult",
]
