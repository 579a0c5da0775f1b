"""Memory bank facade: whole-document updates and the ``umb`` update workflow.

Markdown files are the source of truth. Every master document is addressed
by its fixed ``## `` section headings; daily and session files are derived
views kept alongside them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import fields
from pathlib import Path

from umb.clock import Clock, format_marker, timestamp, utc_now
from umb.config import MemoryBankConfig
from umb.memory import sections, templates
from umb.memory.archive import Archiver
from umb.memory.daily import DailyFileManager, apply_active_context, daily_file_name
from umb.memory.files import FileStore
from umb.memory.git import CommandRunner, SubprocessRunner
from umb.memory.models import (
    ActiveContextUpdate,
    Decision,
    MemoryBankUpdate,
    ProductContextUpdate,
    ProgressUpdate,
    SystemPatternsUpdate,
    UpdateResult,
)
from umb.memory.sessions import SessionManager
from umb.memory.stats import Statistics, StatisticsTracker, render_statistics

logger = logging.getLogger(__name__)

DOCUMENTS = {
    "productContext": "productContext.md",
    "activeContext": "activeContext.md",
    "systemPatterns": "systemPatterns.md",
    "decisionLog": "decisionLog.md",
    "progress": "progress.md",
}

LAST_UPDATE_FILENAME = ".last_update"


def _has_changes(update: object) -> bool:
    """True when at least one field of an update record carries a value."""
    return any(getattr(update, f.name) for f in fields(update))


class MemoryBank:
    """Read/write access to one memory-bank directory."""

    def __init__(
        self,
        root: Path,
        *,
        session_timeout_hours: float = 2.0,
        archive_threshold_days: int = 7,
        hourly_rate: float = 60.0,
        runner: CommandRunner | None = None,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.root = root
        self.daily_dir = root / "daily"
        self.sessions_dir = root / "sessions"
        self.archive_dir = root / "archive"
        self.last_update_path = root / LAST_UPDATE_FILENAME
        self.store = store or FileStore()
        self.clock = clock
        runner = runner or SubprocessRunner(cwd=root.parent)

        self.daily = DailyFileManager(self.daily_dir, store=self.store, clock=clock)
        self.sessions = SessionManager(
            self.sessions_dir,
            self.last_update_path,
            timeout_hours=session_timeout_hours,
            hourly_rate=hourly_rate,
            store=self.store,
            clock=clock,
        )
        self.archiver = Archiver(
            self.daily_dir,
            self.archive_dir,
            threshold_days=archive_threshold_days,
            store=self.store,
            clock=clock,
        )
        self.stats = StatisticsTracker(
            self.last_update_path,
            runner,
            hourly_rate=hourly_rate,
            store=self.store,
            clock=clock,
        )

    @classmethod
    def from_config(
        cls,
        config: MemoryBankConfig,
        runner: CommandRunner | None = None,
        clock: Clock = utc_now,
    ) -> MemoryBank:
        return cls(
            config.memory_bank_dir,
            session_timeout_hours=config.session_timeout_hours,
            archive_threshold_days=config.archive_threshold_days,
            hourly_rate=config.developer_hourly_rate,
            runner=runner or SubprocessRunner(cwd=config.project_root, timeout=config.git_timeout),
            clock=clock,
        )

    def path(self, document: str) -> Path:
        """Path of a master document by its short name (``activeContext``)."""
        return self.root / DOCUMENTS[document]

    def _timestamp(self) -> str:
        return timestamp(self.clock())

    # ── Initialization ────────────────────────────────────────

    def initialize(self) -> bool:
        """Create directories, the last-update marker and master files. Idempotent."""
        for d in [self.root, self.daily_dir, self.sessions_dir, self.archive_dir]:
            if not self.store.ensure_dir(d):
                return False

        if not self.store.exists(self.last_update_path):
            self.touch_last_update()

        readme = self.root / "README.md"
        if not self.store.exists(readme):
            self.store.write(readme, templates.README)

        ts = self._timestamp()
        seeds = {
            "productContext": templates.product_context(ts),
            "activeContext": templates.active_context(),
            "systemPatterns": templates.system_patterns(ts),
            "decisionLog": templates.decision_log(),
            "progress": templates.progress(),
        }
        ok = True
        for name, content in seeds.items():
            path = self.path(name)
            if self.store.exists(path):
                continue
            if self.store.write(path, content):
                logger.info("Created %s", path.name)
            else:
                ok = False
        return ok

    def touch_last_update(self) -> bool:
        return self.store.write(self.last_update_path, format_marker(self.clock()))

    # ── Reading ───────────────────────────────────────────────

    def read_document(self, document: str) -> str:
        return self.store.read(self.path(document))

    def get_section(self, document: str, heading: str) -> str:
        return sections.extract_section(self.read_document(document), heading)

    # ── Document updates ──────────────────────────────────────

    def _replace_sections(
        self, content: str, document: str, changes: list[tuple[str, str | None]]
    ) -> str:
        for heading, value in changes:
            if not value:
                continue
            if not sections.has_section(content, heading):
                logger.warning("Section '%s' missing from %s, update skipped", heading, document)
                continue
            content = sections.update_section(content, heading, value)
        return content

    def _prepend(self, content: str, document: str, heading: str, entry: str) -> str:
        if not sections.has_section(content, heading):
            logger.warning("Section '%s' missing from %s, entry dropped", heading, document)
            return content
        return sections.prepend_entry(content, heading, entry)

    def _rewrite(self, document: str, transform: Callable[[str], str]) -> bool:
        path = self.path(document)
        content = self.store.read(path)
        if not content:
            logger.warning("%s is missing or empty; run `umb init` first", path.name)
            return False
        return self.store.write(path, transform(content))

    def update_product_context(self, update: ProductContextUpdate) -> bool:
        if not _has_changes(update):
            logger.info("Empty product context update, nothing written")
            return False

        def transform(content: str) -> str:
            content = self._replace_sections(
                content,
                "productContext",
                [
                    ("## Project Overview", update.project_overview),
                    ("## Goals and Objectives", update.goals_and_objectives),
                    ("## Core Features", update.core_features),
                    ("## Architecture Overview", update.architecture_overview),
                ],
            )
            return sections.replace_footer(
                content, f"[{self._timestamp()}] - Updated product context"
            )

        return self._rewrite("productContext", transform)

    def update_active_context(self, update: ActiveContextUpdate) -> list[str]:
        """Update today's daily file, then the master active context.

        Returns the files actually written, relative to the memory-bank root.
        Either write may fail on its own; the other is still reported.
        """
        if not _has_changes(update):
            logger.info("Empty active context update, nothing written")
            return []

        daily_ok = self.daily.update(update)

        def transform(content: str) -> str:
            missing = [
                h
                for h, v in [
                    ("## Current Focus", update.current_focus),
                    ("## Recent Changes", update.recent_changes),
                    ("## Open Questions/Issues", update.open_questions),
                ]
                if v and not sections.has_section(content, h)
            ]
            for heading in missing:
                logger.warning("Section '%s' missing from activeContext, update skipped", heading)
            return apply_active_context(content, update, self._timestamp())

        written = []
        if self._rewrite("activeContext", transform):
            written.append(DOCUMENTS["activeContext"])
        if daily_ok:
            written.append(f"daily/{daily_file_name(self.daily.today())}")
        return written

    def update_system_patterns(self, update: SystemPatternsUpdate) -> bool:
        if not _has_changes(update):
            logger.info("Empty system patterns update, nothing written")
            return False

        def transform(content: str) -> str:
            content = self._replace_sections(
                content,
                "systemPatterns",
                [
                    ("## Architectural Patterns", update.architectural_patterns),
                    ("## Design Patterns", update.design_patterns),
                    ("## Technical Decisions", update.technical_decisions),
                ],
            )
            return sections.replace_footer(
                content, f"[{self._timestamp()}] - Updated system patterns"
            )

        return self._rewrite("systemPatterns", transform)

    def add_decision(self, decision: Decision) -> bool:
        """Prepend a decision entry; the newest decision is listed first."""
        entry = (
            f"### [{self._timestamp()}] - {decision.title}\n"
            f"- **Status:** {decision.status}\n"
            f"- **Rationale:** {decision.rationale}\n"
            f"- **Implications:** {decision.implications}\n"
        )
        return self._rewrite(
            "decisionLog", lambda c: self._prepend(c, "decisionLog", "## Decisions", entry)
        )

    def update_progress(self, update: ProgressUpdate) -> bool:
        if not _has_changes(update):
            logger.info("Empty progress update, nothing written")
            return False

        ts = self._timestamp()

        def transform(content: str) -> str:
            content = self._replace_sections(
                content,
                "progress",
                [
                    (
                        "## Current Tasks",
                        sections.bullet_list(update.current_tasks) if update.current_tasks else None,
                    ),
                    (
                        "## Upcoming Tasks",
                        sections.bullet_list(update.upcoming_tasks) if update.upcoming_tasks else None,
                    ),
                ],
            )
            if update.completed_tasks:
                done = "\n".join(f"[{ts}] - {task}" for task in update.completed_tasks)
                content = self._prepend(content, "progress", "## Completed Tasks", done)
            if update.milestones:
                lines = []
                for m in update.milestones:
                    line = f"[{ts}] - **{m.title}**"
                    if m.description:
                        line += f": {m.description}"
                    lines.append(line)
                content = self._prepend(content, "progress", "## Milestones", "\n".join(lines))
            return content

        return self._rewrite("progress", transform)

    def record_statistics(self, stats: Statistics) -> bool:
        """Write ``stats`` into today's daily file and the master active context."""
        body = render_statistics(stats)
        ok = True
        for path in [self.daily.path_for(self.daily.today()), self.path("activeContext")]:
            if not self.store.exists(path):
                continue
            content = self.store.read(path)
            ok = self.store.write(path, sections.update_section(content, "## Statistics", body)) and ok
        return ok

    # ── The `umb` workflow ────────────────────────────────────

    def handle_update(self, updates: MemoryBankUpdate) -> UpdateResult:
        """Run one update: session bookkeeping, statistics, documents, archive.

        Sub-steps fail independently; the result lists what was written and
        succeeds when at least one requested update was applied.
        """
        updated_files: list[str] = []

        session_file = None
        try:
            session_file = self.sessions.begin_update(self.daily)
        except OSError as e:
            logger.error("Session bookkeeping failed: %s", e)

        stats = self.stats.track_statistics()
        logger.info(
            "Statistics tracked: %s spent, $%.2f estimated cost",
            stats.time_spent,
            stats.estimated_cost,
        )

        steps = [
            (updates.product_context, "productContext", self.update_product_context),
            (updates.active_context, "activeContext", self.update_active_context),
            (updates.system_patterns, "systemPatterns", self.update_system_patterns),
            (updates.decision, "decisionLog", self.add_decision),
            (updates.progress, "progress", self.update_progress),
        ]
        for update, document, apply in steps:
            if update is None:
                continue
            try:
                written = apply(update)
            except OSError as e:
                logger.error("Failed to update %s: %s", DOCUMENTS[document], e)
                continue
            # active context reports its daily and master files separately
            if isinstance(written, list):
                updated_files.extend(written)
            elif written:
                updated_files.append(DOCUMENTS[document])

        if session_file and updates.active_context and updates.active_context.current_focus:
            content = self.store.read(session_file)
            if content:
                self.store.write(
                    session_file,
                    sections.update_section(
                        content, "## Focus", updates.active_context.current_focus
                    ),
                )

        self.archiver.archive_old_files()

        if not updated_files:
            return UpdateResult(
                success=False,
                message="No updates provided. Memory bank remains unchanged.",
            )

        self.record_statistics(stats)
        self.touch_last_update()
        return UpdateResult(
            success=True,
            message=f"Memory bank updated successfully. Updated files: {', '.join(updated_files)}",
            updated_files=updated_files,
        )
