"""Tests for archiving old daily files."""

from __future__ import annotations

from pathlib import Path

import pytest

from umb.memory.archive import Archiver
from umb.memory.files import FileStore


@pytest.fixture
def archiver(tmp_path: Path, clock) -> Archiver:
    return Archiver(tmp_path / "daily", tmp_path / "archive", threshold_days=7, clock=clock)


def _daily(archiver: Archiver, *dates: str) -> None:
    archiver.daily_dir.mkdir(parents=True, exist_ok=True)
    for date_str in dates:
        (archiver.daily_dir / f"activeContext-{date_str}.md").write_text(date_str, encoding="utf-8")


class FailingStore(FileStore):
    """Refuses to move one named file."""

    def __init__(self, broken: str) -> None:
        self.broken = broken

    def move(self, src: Path, dest: Path) -> bool:
        if src.name == self.broken:
            return False
        return super().move(src, dest)


class TestArchiveOldFiles:
    def test_cutoff(self, archiver: Archiver):
        assert archiver.cutoff() == "2026-02-11"

    def test_moves_files_before_cutoff(self, archiver: Archiver):
        _daily(archiver, "2026-02-10", "2026-02-18")
        assert archiver.archive_old_files() is True
        moved = archiver.archive_dir / "2026-02" / "activeContext-2026-02-10.md"
        assert moved.read_text(encoding="utf-8") == "2026-02-10"
        assert not (archiver.daily_dir / "activeContext-2026-02-10.md").exists()
        assert (archiver.daily_dir / "activeContext-2026-02-18.md").exists()

    def test_cutoff_day_is_kept(self, archiver: Archiver):
        _daily(archiver, "2026-02-11")
        archiver.archive_old_files()
        assert (archiver.daily_dir / "activeContext-2026-02-11.md").exists()
        assert archiver.archived_files() == []

    def test_grouped_by_file_month(self, archiver: Archiver):
        _daily(archiver, "2025-12-31", "2026-01-30")
        archiver.archive_old_files()
        assert [p.relative_to(archiver.archive_dir).as_posix() for p in archiver.archived_files()] == [
            "2025-12/activeContext-2025-12-31.md",
            "2026-01/activeContext-2026-01-30.md",
        ]

    def test_ignores_other_files(self, archiver: Archiver):
        _daily(archiver, "2026-01-01")
        (archiver.daily_dir / "notes.md").write_text("keep", encoding="utf-8")
        archiver.archive_old_files()
        assert (archiver.daily_dir / "notes.md").exists()

    def test_missing_daily_dir(self, archiver: Archiver):
        assert archiver.archive_old_files() is True
        assert archiver.archived_files() == []

    def test_failed_move_does_not_stop_the_rest(self, tmp_path: Path, clock):
        archiver = Archiver(
            tmp_path / "daily",
            tmp_path / "archive",
            store=FailingStore("activeContext-2026-01-02.md"),
            clock=clock,
        )
        _daily(archiver, "2026-01-01", "2026-01-02", "2026-01-03")
        assert archiver.archive_old_files() is False
        assert (archiver.daily_dir / "activeContext-2026-01-02.md").exists()
        assert len(archiver.archived_files()) == 2

    def test_reports_moved_files(self, archiver: Archiver):
        _daily(archiver, "2026-01-05", "2026-02-18")
        result = archiver.archive_files()
        assert result.ok
        assert result.moved == [archiver.archive_dir / "2026-01" / "activeContext-2026-01-05.md"]
        assert result.failed == []

    def test_overwritten_archive_file_is_reported(self, archiver: Archiver):
        existing = archiver.archive_dir / "2026-01" / "activeContext-2026-01-05.md"
        existing.parent.mkdir(parents=True)
        existing.write_text("previous copy", encoding="utf-8")
        _daily(archiver, "2026-01-05")

        result = archiver.archive_files()
        assert result.moved == [existing]
        assert existing.read_text(encoding="utf-8") == "2026-01-05"

    def test_reports_failed_sources(self, tmp_path: Path, clock):
        archiver = Archiver(
            tmp_path / "daily",
            tmp_path / "archive",
            store=FailingStore("activeContext-2026-01-02.md"),
            clock=clock,
        )
        _daily(archiver, "2026-01-02")
        result = archiver.archive_files()
        assert not result.ok
        assert result.failed == [archiver.daily_dir / "activeContext-2026-01-02.md"]

    def test_custom_threshold(self, tmp_path: Path, clock):
        archiver = Archiver(tmp_path / "daily", tmp_path / "archive", threshold_days=1, clock=clock)
        _daily(archiver, "2026-02-16", "2026-02-17")
        archiver.archive_old_files()
        assert [p.name for p in archiver.archived_files()] == ["activeContext-2026-02-16.md"]
