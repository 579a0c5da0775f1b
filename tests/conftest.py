"""Shared fixtures: a controllable clock and a fake Git runner."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from umb.memory.bank import MemoryBank
from umb.memory.git import CommandResult

START = datetime(2026, 2, 18, 9, 30, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeRunner:
    """CommandRunner returning canned output keyed by the argv prefix."""

    def __init__(self, outputs: dict[tuple[str, ...], CommandResult] | None = None) -> None:
        self.outputs = outputs or {}
        self.calls: list[list[str]] = []

    def run(self, argv: list[str]) -> CommandResult:
        self.calls.append(argv)
        for prefix, result in self.outputs.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return result
        return CommandResult(stdout="", exit_code=128)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runner() -> FakeRunner:
    """A runner with no Git repository: every command fails."""
    return FakeRunner()


@pytest.fixture
def bank(tmp_path: Path, clock: FakeClock, runner: FakeRunner) -> MemoryBank:
    b = MemoryBank(tmp_path / "memory-bank", runner=runner, clock=clock)
    assert b.initialize()
    return b
