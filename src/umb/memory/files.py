"""Thin filesystem wrapper that logs I/O errors instead of raising them."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileStore:
    """Existence checks, reads, writes and moves for memory-bank files.

    Failures are logged and reported as ``""`` / ``False`` so callers can
    treat them as "the operation did not happen".
    """

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error reading file %s: %s", path, e)
            return ""

    def write(self, path: Path, content: str) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            return True
        except OSError as e:
            logger.error("Error writing to file %s: %s", path, e)
            return False

    def move(self, src: Path, dest: Path) -> bool:
        """Move ``src`` to ``dest``, replacing any existing file there."""
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            src.replace(dest)
            return True
        except OSError as e:
            logger.error("Error moving %s to %s: %s", src, dest, e)
            return False

    def ensure_dir(self, path: Path) -> bool:
        try:
            path.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.error("Error creating directory %s: %s", path, e)
            return False

    def list_names(self, directory: Path) -> list[str]:
        """File names in ``directory``; empty when it is missing or unreadable."""
        if not directory.is_dir():
            return []
        try:
            return [p.name for p in directory.iterdir() if p.is_file()]
        except OSError as e:
            logger.error("Error listing %s: %s", directory, e)
            return []
