"""Elapsed time, cost estimate and Git change counts for an update."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from umb.clock import Clock, parse_marker, utc_now
from umb.memory.files import FileStore
from umb.memory.git import CommandRunner

logger = logging.getLogger(__name__)

_DIFF_FILES_RE = re.compile(r"(\d+) files? changed")
_DIFF_INSERT_RE = re.compile(r"(\d+) insertions?\(\+\)")
_DIFF_DELETE_RE = re.compile(r"(\d+) deletions?\(-\)")
_TOTAL_RE = re.compile(r"(\d+) total")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")

EXCLUDED_DIRS = frozenset(
    {"node_modules", "vendor", ".venv", "venv", "dist", "build", "__pycache__"}
)
WC_BATCH_SIZE = 200


@dataclass
class Statistics:
    time_spent: str = "0h 0m"
    estimated_cost: float = 0.0
    files_created: int = 0
    files_modified: int = 0
    files_deleted: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    total_lines: int = 0


def format_time_spent(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def estimate_cost(minutes: int, hourly_rate: float) -> float:
    return round(minutes / 60 * hourly_rate, 2)


def format_cost(cost: float) -> str:
    """``$12.5`` style: two decimals at most, no trailing zeros."""
    text = f"{cost:.2f}".rstrip("0").rstrip(".")
    return f"${text}"


def render_statistics(stats: Statistics) -> str:
    """Markdown body of a ``## Statistics`` section."""
    return (
        f"- Time Spent: {stats.time_spent}\n"
        f"- Estimated Cost: {format_cost(stats.estimated_cost)}\n"
        f"- Files Created: {stats.files_created}\n"
        f"- Files Modified: {stats.files_modified}\n"
        f"- Files Deleted: {stats.files_deleted}\n"
        f"- Lines of Code Added: {stats.lines_added}\n"
        f"- Lines of Code Removed: {stats.lines_removed}\n"
        f"- Total Lines of Code: {stats.total_lines}"
    )


def parse_diff_stat(output: str) -> tuple[int, int, int]:
    """(files changed, insertions, deletions) from ``git diff --stat``.

    Git omits a field when its count is zero, so each one is optional.
    """
    summary = ""
    for line in output.splitlines():
        if _DIFF_FILES_RE.search(line):
            summary = line
    if not summary:
        return 0, 0, 0

    def _count(pattern: re.Pattern[str]) -> int:
        match = pattern.search(summary)
        return int(match.group(1)) if match else 0

    return _count(_DIFF_FILES_RE), _count(_DIFF_INSERT_RE), _count(_DIFF_DELETE_RE)


def parse_status(output: str) -> tuple[int, int]:
    """(created, deleted) file counts from ``git status --porcelain``."""
    created = deleted = 0
    for line in output.splitlines():
        code = line[:2]
        if code == "??" or "A" in code:
            created += 1
        elif "D" in code:
            deleted += 1
    return created, deleted


def parse_line_count(output: str) -> int:
    """Line count from ``wc -l`` output: the ``N total`` trailer, or the lone entry."""
    match = _TOTAL_RE.search(output)
    if match:
        return int(match.group(1))
    match = _LEADING_INT_RE.match(output)
    return int(match.group(1)) if match else 0


def _is_excluded(path: str) -> bool:
    return any(part in EXCLUDED_DIRS for part in Path(path).parts)


class StatisticsTracker:
    """Derives a :class:`Statistics` record from ``.last_update`` and Git."""

    def __init__(
        self,
        last_update_path: Path,
        runner: CommandRunner,
        hourly_rate: float = 60.0,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.last_update_path = last_update_path
        self.runner = runner
        self.hourly_rate = hourly_rate
        self.store = store or FileStore()
        self.clock = clock

    def elapsed_minutes(self) -> int:
        """Minutes since the last update; 0 when the marker is missing or unreadable."""
        now = self.clock()
        last = None
        if self.store.exists(self.last_update_path):
            last = parse_marker(self.store.read(self.last_update_path))
            if last is None:
                logger.warning("Unreadable last update marker %s", self.last_update_path)
        if last is None:
            last = now
        return max(0, round((now - last).total_seconds() / 60))

    def track_statistics(self) -> Statistics:
        minutes = self.elapsed_minutes()
        stats = Statistics(
            time_spent=format_time_spent(minutes),
            estimated_cost=estimate_cost(minutes, self.hourly_rate),
        )
        self._collect_git(stats)
        return stats

    def _collect_git(self, stats: Statistics) -> None:
        diff = self.runner.run(["git", "diff", "--stat"])
        if not diff.ok:
            logger.warning("Git statistics not available (exit %d)", diff.exit_code)
            return
        stats.files_modified, stats.lines_added, stats.lines_removed = parse_diff_stat(
            diff.stdout
        )

        status = self.runner.run(["git", "status", "--porcelain"])
        if status.ok:
            stats.files_created, stats.files_deleted = parse_status(status.stdout)

        stats.total_lines = self._total_lines()

    def _total_lines(self) -> int:
        listing = self.runner.run(["git", "ls-files"])
        if not listing.ok:
            return 0
        files = [f for f in listing.stdout.splitlines() if f.strip() and not _is_excluded(f)]
        total = 0
        for start in range(0, len(files), WC_BATCH_SIZE):
            batch = files[start : start + WC_BATCH_SIZE]
            result = self.runner.run(["wc", "-l", "--", *batch])
            # wc exits non-zero when a listed file is gone but still prints the rest
            total += parse_line_count(result.stdout)
        return total
