"""Configuration loading from environment variables and umb.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "umb.toml"
_MEMORY_BANK_DIRNAME = "memory-bank"


@dataclass
class MemoryBankConfig:
    """Top-level umb configuration."""

    project_root: Path = field(default_factory=Path.cwd)
    memory_bank_dir: Path | None = None
    session_timeout_hours: float = 2.0
    archive_threshold_days: int = 7
    developer_hourly_rate: float = 60.0
    git_timeout: float = 10.0
    rules_dir: Path | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        if self.memory_bank_dir is None:
            self.memory_bank_dir = self.project_root / _MEMORY_BANK_DIRNAME
        else:
            self.memory_bank_dir = Path(self.memory_bank_dir)
        if self.rules_dir is None:
            self.rules_dir = self.project_root / ".roo" / "rules"
        else:
            self.rules_dir = Path(self.rules_dir)


def _resolve(root: Path, value: str | None) -> Path | None:
    """Relative paths in config are taken from the project root."""
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def load_config(config_path: Path | None = None) -> MemoryBankConfig:
    """Load configuration from environment variables and optional umb.toml.

    Priority: environment variables > umb.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.umb/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".umb" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    bank_data = file_data.get("memory_bank", {})
    stats_data = file_data.get("statistics", {})
    roo_data = file_data.get("roo", {})

    root = Path(
        os.getenv("UMB_PROJECT_ROOT", file_data.get("project_root", str(Path.cwd())))
    ).expanduser()

    return MemoryBankConfig(
        project_root=root,
        memory_bank_dir=_resolve(root, os.getenv("UMB_MEMORY_BANK_DIR", bank_data.get("dir"))),
        session_timeout_hours=float(
            os.getenv("UMB_SESSION_TIMEOUT_HOURS", bank_data.get("session_timeout_hours", 2))
        ),
        archive_threshold_days=int(
            os.getenv("UMB_ARCHIVE_THRESHOLD_DAYS", bank_data.get("archive_threshold_days", 7))
        ),
        developer_hourly_rate=float(
            os.getenv("UMB_HOURLY_RATE", stats_data.get("hourly_rate", 60))
        ),
        git_timeout=float(os.getenv("UMB_GIT_TIMEOUT", stats_data.get("git_timeout", 10))),
        rules_dir=_resolve(root, os.getenv("UMB_RULES_DIR", roo_data.get("rules_dir"))),
        log_level=os.getenv("UMB_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
