"""Per-day active context files: ``daily/activeContext-YYYY-MM-DD.md``."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from umb.clock import Clock, date_string, timestamp, utc_now
from umb.memory import sections, templates
from umb.memory.files import FileStore
from umb.memory.models import ActiveContextUpdate

logger = logging.getLogger(__name__)

DAILY_FILE_RE = re.compile(r"^activeContext-(\d{4}-\d{2}-\d{2})\.md$")

CARRIED_SECTIONS = ("## Current Focus", "## Open Questions/Issues")


def daily_file_name(date_str: str) -> str:
    return f"activeContext-{date_str}.md"


def daily_file_date(name: str) -> str | None:
    """Date string embedded in a daily file name, or None for other files."""
    match = DAILY_FILE_RE.match(name)
    return match.group(1) if match else None


def apply_active_context(content: str, update: ActiveContextUpdate, ts: str) -> str:
    """Apply an active-context update to a daily or master document."""
    if update.current_focus:
        content = sections.update_section(content, "## Current Focus", update.current_focus)
    if update.recent_changes:
        content = sections.prepend_entry(
            content, "## Recent Changes", f"[{ts}] - {update.recent_changes}"
        )
    if update.open_questions:
        content = sections.update_section(
            content, "## Open Questions/Issues", update.open_questions
        )
    return content


class DailyFileManager:
    """Creates, finds and carries forward daily context files."""

    def __init__(
        self,
        daily_dir: Path,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.daily_dir = daily_dir
        self.store = store or FileStore()
        self.clock = clock

    def today(self) -> str:
        return date_string(self.clock())

    def path_for(self, date_str: str) -> Path:
        return self.daily_dir / daily_file_name(date_str)

    def create_daily_file(self, moment: datetime | None = None) -> Path:
        """Return the daily file for ``moment`` (default today), creating it if needed."""
        date_str = date_string(moment or self.clock())
        path = self.path_for(date_str)
        if not self.store.exists(path):
            if self.store.write(path, templates.daily_context(date_str)):
                logger.info("Created daily file %s", path.name)
        return path

    def list_daily_files(self) -> list[Path]:
        names = sorted(n for n in self.store.list_names(self.daily_dir) if daily_file_date(n))
        return [self.daily_dir / n for n in names]

    def get_latest_daily_file(self, before: str | None = None) -> Path | None:
        """Most recent daily file, optionally restricted to dates before ``before``.

        ISO dates are zero-padded, so lexicographic order is chronological.
        """
        files = self.list_daily_files()
        if before is not None:
            files = [p for p in files if daily_file_date(p.name) < before]
        return files[-1] if files else None

    def load_context(self) -> bool:
        """Carry focus and open questions from the latest prior day into today.

        Only a freshly created today file is seeded; an existing one already
        holds the day's own context.
        """
        today = self.today()
        if self.store.exists(self.path_for(today)):
            logger.debug("Daily file for %s already exists, nothing to carry forward", today)
            return False

        latest = self.get_latest_daily_file(before=today)
        if latest is None:
            logger.debug("No previous daily file to load context from")
            return False

        previous = self.store.read(latest)
        today_file = self.create_daily_file()
        content = self.store.read(today_file)
        for heading in CARRIED_SECTIONS:
            content = sections.update_section(
                content, heading, sections.extract_section(previous, heading)
            )
        if not self.store.write(today_file, content):
            return False
        logger.info("Loaded context from %s into %s", latest.name, today_file.name)
        return True

    def update(self, update: ActiveContextUpdate) -> bool:
        """Apply an active-context update to today's daily file."""
        path = self.create_daily_file()
        content = self.store.read(path)
        if not content:
            return False
        updated = apply_active_context(content, update, timestamp(self.clock()))
        return self.store.write(path, updated)
