"""Git access through a narrow command-runner interface.

Statistics and auto-update only need ``run(argv) -> CommandResult``, so tests
can swap in a fake runner instead of a real Git binary.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    stdout: str
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class CommandRunner(Protocol):
    """Anything that can run an argv list and return its output."""

    def run(self, argv: list[str]) -> CommandResult: ...


@dataclass
class SubprocessRunner:
    """Runs commands with ``subprocess.run`` in ``cwd``.

    A missing binary or a timeout is reported through the exit code, never
    raised.
    """

    cwd: Path | None = None
    timeout: float = 10.0

    def run(self, argv: list[str]) -> CommandResult:
        logger.debug("Running: %s", " ".join(argv[:4]) + (" ..." if len(argv) > 4 else ""))
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                cwd=self.cwd,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.debug("Command not found: %s", argv[0])
            return CommandResult(stdout="", exit_code=EXIT_NOT_FOUND)
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", self.timeout, argv[0])
            return CommandResult(stdout="", exit_code=EXIT_TIMEOUT)
        except OSError as e:
            logger.warning("Command failed to start: %s (%s)", argv[0], e)
            return CommandResult(stdout="", exit_code=EXIT_NOT_FOUND)

        if result.returncode != 0:
            logger.debug("%s exited %d: %s", argv[0], result.returncode, result.stderr.strip())
        return CommandResult(stdout=result.stdout, exit_code=result.returncode)


def _log_lines(runner: CommandRunner, argv: list[str]) -> list[str]:
    result = runner.run(argv)
    if not result.ok:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def recent_commits(runner: CommandRunner, days: int = 7) -> list[str]:
    """Non-merge commits of the last ``days`` days as ``<hash> - <subject>``."""
    return _log_lines(
        runner,
        ["git", "log", f"--since={days} days ago", "--pretty=format:%h - %s", "--no-merges"],
    )


def recent_merges(runner: CommandRunner, days: int = 7) -> list[str]:
    """Merge commits of the last ``days`` days, which usually stand for merged PRs."""
    return _log_lines(
        runner,
        ["git", "log", f"--since={days} days ago", "--merges", "--pretty=format:%h - %s"],
    )
