"""Roo-Code integration: publish memory-bank documents as Roo rule files.

Each master document becomes ``.roo/rules/0N-<name>.md`` with YAML
frontmatter describing where it came from. Rule files are overwritten on
every run and must not be edited by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import frontmatter
import yaml

from umb.clock import Clock, timestamp, utc_now
from umb.memory.bank import DOCUMENTS, MemoryBank
from umb.memory.files import FileStore

logger = logging.getLogger(__name__)

RULES = [
    ("productContext", "01-product-context.md", "Product Context"),
    ("activeContext", "02-active-context.md", "Active Development Context"),
    ("systemPatterns", "03-system-patterns.md", "System Patterns"),
    ("decisionLog", "04-decision-log.md", "Decision Log"),
    ("progress", "05-progress.md", "Progress"),
]

FOOTER = (
    "---\n"
    "This file is automatically generated from the memory bank. Do not edit directly.\n"
    "Last updated: {ts}\n"
)


@dataclass
class RuleFile:
    """A generated rule file and the metadata it was written with."""

    path: Path
    title: str
    source: str
    generated: str


class RooIntegration:
    """Writes Roo rule files from a memory-bank directory."""

    def __init__(
        self,
        memory_bank_dir: Path,
        rules_dir: Path,
        workspace_dir: Path | None = None,
        store: FileStore | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.memory_bank_dir = memory_bank_dir
        self.rules_dir = rules_dir
        self.workspace_dir = workspace_dir or rules_dir.parent.parent
        self.store = store or FileStore()
        self.clock = clock

    @classmethod
    def auto_configure(
        cls, workspace: Path, memory_bank_dir: Path | None = None
    ) -> RooIntegration | None:
        """Integration for a workspace that already has a ``.roo/`` directory."""
        roo_dir = workspace / ".roo"
        if not roo_dir.is_dir():
            return None
        return cls(
            memory_bank_dir or workspace / "memory-bank",
            roo_dir / "rules",
            workspace_dir=workspace,
        )

    def render_rule(self, document: str, title: str, content: str, ts: str) -> str:
        body = content.rstrip() + "\n\n" + FOOTER.format(ts=ts)
        post = frontmatter.Post(body, title=title, source=DOCUMENTS[document], generated=ts)
        return frontmatter.dumps(post) + "\n"

    def generate_rules(self) -> list[Path]:
        """Write one rule file per existing master document. Returns the paths written."""
        if not self.memory_bank_dir.is_dir():
            logger.error("Memory bank directory does not exist: %s", self.memory_bank_dir)
            return []
        if not self.store.ensure_dir(self.rules_dir):
            return []

        ts = timestamp(self.clock())
        written: list[Path] = []
        for document, filename, title in RULES:
            source = self.memory_bank_dir / DOCUMENTS[document]
            if not self.store.exists(source):
                logger.debug("Skipping rule for missing %s", source.name)
                continue
            content = self.store.read(source)
            if not content.strip():
                continue
            dest = self.rules_dir / filename
            if self.store.write(dest, self.render_rule(document, title, content, ts)):
                written.append(dest)
        logger.info("Generated %d Roo rule files in %s", len(written), self.rules_dir)
        return written

    def list_rules(self) -> list[RuleFile]:
        """Generated rule files with the metadata read back from their frontmatter."""
        if not self.rules_dir.is_dir():
            return []
        rules = []
        for path in sorted(self.rules_dir.glob("*.md")):
            try:
                post = frontmatter.load(str(path))
            except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
                logger.warning("Unreadable rule file %s: %s", path.name, e)
                continue
            rules.append(
                RuleFile(
                    path=path,
                    title=str(post.metadata.get("title", path.stem)),
                    source=str(post.metadata.get("source", "")),
                    generated=str(post.metadata.get("generated", "")),
                )
            )
        return rules

    def setup(self) -> bool:
        """Create the rules directory, initialize the memory bank and generate rules."""
        if not self.store.ensure_dir(self.rules_dir):
            return False
        if not MemoryBank(self.memory_bank_dir, clock=self.clock).initialize():
            return False
        return bool(self.generate_rules())
