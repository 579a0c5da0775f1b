"""Move old daily files into ``archive/YYYY-MM/``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from umb.clock import Clock, date_string, utc_now
from umb.memory.daily import daily_file_date
from umb.memory.files import FileStore

logger = logging.getLogger(__name__)


@dataclass
class ArchiveResult:
    """Destinations of the files moved in one pass, and the sources that failed."""

    moved: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class Archiver:
    """Relocates daily files past the retention threshold. Never deletes."""

    def __init__(
        self,
        daily_dir: Path,
        archive_dir: Path,
        threshold_days: int = 7,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.daily_dir = daily_dir
        self.archive_dir = archive_dir
        self.threshold_days = threshold_days
        self.store = store or FileStore()
        self.clock = clock

    def cutoff(self) -> str:
        return date_string(self.clock() - timedelta(days=self.threshold_days))

    def destination(self, name: str, date_str: str) -> Path:
        """Archive path keyed by the file's own year-month."""
        return self.archive_dir / date_str[:7] / name

    def archive_files(self) -> ArchiveResult:
        """Archive daily files dated strictly before the cutoff.

        Each file is moved independently; a failed move is logged and the
        rest are still processed.
        """
        cutoff = self.cutoff()
        result = ArchiveResult()
        for name in sorted(self.store.list_names(self.daily_dir)):
            date_str = daily_file_date(name)
            if date_str is None or date_str >= cutoff:
                continue
            src = self.daily_dir / name
            dest = self.destination(name, date_str)
            if self.store.move(src, dest):
                logger.info("Archived %s", name)
                result.moved.append(dest)
            else:
                result.failed.append(src)
        return result

    def archive_old_files(self) -> bool:
        """Run :meth:`archive_files`. False when any move failed."""
        return self.archive_files().ok

    def archived_files(self) -> list[Path]:
        if not self.archive_dir.is_dir():
            return []
        return sorted(self.archive_dir.glob("*/*.md"))
