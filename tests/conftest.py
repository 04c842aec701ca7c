"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from devtool_runners.runner import ProcessResult


class FakeRunner:
    """Process runner that replays canned results and records calls."""

    def __init__(self, *results: ProcessResult) -> None:
        """Initialize with the results to return, in call order."""
        self._results = list(results)
        self.calls: list[dict[str, object]] = []

    def __call__(
        self,
        cmd: Sequence[str],
        timeout: float,
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Record the call and return the next canned result."""
        self.calls.append({"cmd": list(cmd), "timeout": timeout, "cwd": cwd, "env": env})
        if len(self._results) > 1:
            return self._results.pop(0)
        return self._results[0]


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Return the fake process runner class."""
    return FakeRunner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures_exempt"


@pytest.fixture
def bun_legacy_output(fixtures_dir: Path) -> str:
    """Return bun test output in the legacy (✗ marker) layout."""
    return (fixtures_dir / "bun_legacy_output.txt").read_text(encoding="utf-8")


@pytest.fixture
def bun_v13_output(fixtures_dir: Path) -> str:
    """Return bun test output in the 1.3+ ((fail) marker) layout."""
    return (fixtures_dir / "bun_v13_output.txt").read_text(encoding="utf-8")


@pytest.fixture
def bun_noisy_green_output(fixtures_dir: Path) -> str:
    """Return a passing bun run whose tests log error: lines."""
    return (fixtures_dir / "bun_noisy_green_output.txt").read_text(encoding="utf-8")


@pytest.fixture
def bun_coverage_output(fixtures_dir: Path) -> str:
    """Return bun test --coverage output."""
    return (fixtures_dir / "bun_coverage_output.txt").read_text(encoding="utf-8")


@pytest.fixture
def tsc_output(fixtures_dir: Path) -> str:
    """Return tsc output with two errors."""
    return (fixtures_dir / "tsc_output.txt").read_text(encoding="utf-8")


@pytest.fixture
def biome_report(fixtures_dir: Path) -> str:
    """Return a Biome JSON report with an error, a warning and an info."""
    return (fixtures_dir / "biome_report.json").read_text(encoding="utf-8")


@pytest.fixture
def ts_project(tmp_path: Path) -> Path:
    """Return a temporary TypeScript project with a tsconfig.json."""
    (tmp_path / "tsconfig.json").write_text("{}", encoding="utf-8")
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.ts").write_text("export const x: number = 1;\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def in_ts_project(ts_project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change into the temporary TypeScript project."""
    monkeypatch.chdir(ts_project)
    return ts_project
