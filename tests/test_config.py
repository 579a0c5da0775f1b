"""Tests for configuration loading."""

import pytest
from pathlib import Path

from umb.config import MemoryBankConfig, load_config

ENV_KEYS = [
    "UMB_PROJECT_ROOT",
    "UMB_MEMORY_BANK_DIR",
    "UMB_SESSION_TIMEOUT_HOURS",
    "UMB_ARCHIVE_THRESHOLD_DAYS",
    "UMB_HOURLY_RATE",
    "UMB_GIT_TIMEOUT",
    "UMB_RULES_DIR",
    "UMB_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self, tmp_path: Path):
        config = load_config()
        assert config.project_root == tmp_path
        assert config.memory_bank_dir == tmp_path / "memory-bank"
        assert config.rules_dir == tmp_path / ".roo" / "rules"
        assert config.session_timeout_hours == 2.0
        assert config.archive_threshold_days == 7
        assert config.developer_hourly_rate == 60.0
        assert config.git_timeout == 10.0
        assert config.log_level == "INFO"

    def test_env_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("UMB_SESSION_TIMEOUT_HOURS", "0.5")
        monkeypatch.setenv("UMB_ARCHIVE_THRESHOLD_DAYS", "30")
        monkeypatch.setenv("UMB_HOURLY_RATE", "85")
        monkeypatch.setenv("UMB_MEMORY_BANK_DIR", "docs/bank")

        config = load_config()
        assert config.session_timeout_hours == 0.5
        assert config.archive_threshold_days == 30
        assert config.developer_hourly_rate == 85.0
        assert config.memory_bank_dir == tmp_path / "docs" / "bank"

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "umb.toml"
        toml_path.write_text("""
log_level = "DEBUG"

[memory_bank]
dir = "notes/memory"
session_timeout_hours = 4
archive_threshold_days = 14

[statistics]
hourly_rate = 100
git_timeout = 5

[roo]
rules_dir = "/srv/roo/rules"
""")
        config = load_config(toml_path)
        assert config.memory_bank_dir == tmp_path / "notes" / "memory"
        assert config.session_timeout_hours == 4.0
        assert config.archive_threshold_days == 14
        assert config.developer_hourly_rate == 100.0
        assert config.git_timeout == 5.0
        assert config.rules_dir == Path("/srv/roo/rules")
        assert config.log_level == "DEBUG"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("UMB_HOURLY_RATE", "75")

        toml_path = tmp_path / "umb.toml"
        toml_path.write_text("""
[statistics]
hourly_rate = 100
""")
        config = load_config(toml_path)
        assert config.developer_hourly_rate == 75.0  # env wins

    def test_finds_toml_in_cwd(self, tmp_path: Path):
        (tmp_path / "umb.toml").write_text("[memory_bank]\narchive_threshold_days = 3\n")
        assert load_config().archive_threshold_days == 3

    def test_finds_toml_in_home(self, tmp_path: Path):
        home_config = tmp_path / "home" / ".umb" / "umb.toml"
        home_config.parent.mkdir(parents=True)
        home_config.write_text("[statistics]\nhourly_rate = 42\n")
        assert load_config().developer_hourly_rate == 42.0

    def test_project_root_env(self, tmp_path: Path, monkeypatch):
        project = tmp_path / "project"
        monkeypatch.setenv("UMB_PROJECT_ROOT", str(project))
        config = load_config()
        assert config.project_root == project
        assert config.memory_bank_dir == project / "memory-bank"


class TestMemoryBankConfig:
    def test_derived_paths(self, tmp_path: Path):
        config = MemoryBankConfig(project_root=tmp_path)
        assert config.memory_bank_dir == tmp_path / "memory-bank"
        assert config.rules_dir == tmp_path / ".roo" / "rules"

    def test_explicit_paths_are_kept(self, tmp_path: Path):
        config = MemoryBankConfig(project_root=tmp_path, memory_bank_dir=str(tmp_path / "mb"))
        assert config.memory_bank_dir == tmp_path / "mb"
