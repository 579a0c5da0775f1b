"""Work-session files: ``sessions/session-<timestamp>.md``.

A session is open while its ``## End Time`` reads ``(In progress)``. It is
closed implicitly: once the last update is older than the session timeout,
the next update starts a new file and the old one is never touched again.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from umb.clock import Clock, parse_marker, session_stamp, timestamp, utc_now
from umb.memory import sections, templates
from umb.memory.daily import DailyFileManager
from umb.memory.files import FileStore
from umb.memory.stats import estimate_cost, format_cost, format_time_spent

logger = logging.getLogger(__name__)

SESSION_FILE_RE = re.compile(r"^session-.+\.md$")
_END_TIME_RE = re.compile(r"^## End Time\n.*$", re.MULTILINE)


class SessionManager:
    """Decides when sessions start and keeps the open one's end time current."""

    def __init__(
        self,
        sessions_dir: Path,
        last_update_path: Path,
        timeout_hours: float = 2.0,
        hourly_rate: float = 60.0,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.sessions_dir = sessions_dir
        self.last_update_path = last_update_path
        self.timeout_hours = timeout_hours
        self.hourly_rate = hourly_rate
        self.store = store or FileStore()
        self.clock = clock

    def should_start_new_session(self) -> bool:
        if not self.store.exists(self.last_update_path):
            return True
        last = parse_marker(self.store.read(self.last_update_path))
        if last is None:
            logger.warning("Unreadable last update marker, starting a new session")
            return True
        hours = (self.clock() - last).total_seconds() / 3600
        return hours > self.timeout_hours

    def list_session_files(self) -> list[Path]:
        names = sorted(n for n in self.store.list_names(self.sessions_dir) if SESSION_FILE_RE.match(n))
        return [self.sessions_dir / n for n in names]

    def get_current_session_file(self) -> Path | None:
        """The newest session file, if it is still in progress.

        Older files are never considered, even when they still carry the
        in-progress marker.
        """
        files = self.list_session_files()
        if not files:
            return None
        latest = files[-1]
        if f"## End Time\n{templates.IN_PROGRESS}" in self.store.read(latest):
            return latest
        return None

    def create_session_file(self) -> Path:
        now = self.clock()
        path = self.sessions_dir / f"session-{session_stamp(now)}.md"
        if self.store.write(path, templates.session(timestamp(now))):
            logger.debug("Created session file %s", path.name)
        return path

    def session_start(self, content: str) -> datetime | None:
        start = sections.extract_section(content, "## Start Time")
        return parse_marker(start.replace(" ", "T")) if start else None

    def update_session_end_time(self, path: Path) -> bool:
        """Stamp the end time with now and refresh the session's statistics."""
        content = self.store.read(path)
        if not content:
            return False
        now = self.clock()
        updated = _END_TIME_RE.sub(lambda _: f"## End Time\n{timestamp(now)}", content, count=1)

        start = self.session_start(content)
        if start is not None:
            minutes = max(0, round((now - start).total_seconds() / 60))
            updated = sections.update_section(
                updated,
                "## Statistics",
                f"- Time Spent: {format_time_spent(minutes)}\n"
                f"- Estimated Cost: {format_cost(estimate_cost(minutes, self.hourly_rate))}",
            )
        return self.store.write(path, updated)

    def begin_update(self, daily: DailyFileManager) -> Path | None:
        """Apply the per-update session policy and return the active session file.

        - Timed out (or never updated): carry context forward, open a new session.
        - Otherwise, refresh the end time of the in-progress session.
        - No in-progress session at all: open a new one.
        """
        if self.should_start_new_session():
            daily.load_context()
            path = self.create_session_file()
            logger.info("Started new session: %s", path.name)
            return path

        current = self.get_current_session_file()
        if current is not None:
            self.update_session_end_time(current)
            logger.info("Updated session: %s", current.name)
            return current

        path = self.create_session_file()
        logger.info("Created new session: %s", path.name)
        return path
