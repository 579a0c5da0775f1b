"""Entry point: umb [command] (or python -m umb)

- No args:        Auto-update the memory bank from recent Git history
- init:           Create the memory bank directory and master files
- update:         umb update <document> key=value ...
- decision:       umb decision title=... rationale=... implications=... status=...
- archive:        Move old daily files into archive/YYYY-MM/
- stats:          Show statistics since the last update
- roo-setup:      Set up Roo-Code rules for a workspace
- roo-rules:      Regenerate Roo-Code rules from the memory bank
- install-hooks:  Install the Git pre-commit reminder hook
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import fields
from pathlib import Path

from umb.config import MemoryBankConfig, load_config
from umb.memory.models import (
    ActiveContextUpdate,
    Decision,
    MemoryBankUpdate,
    Milestone,
    ProductContextUpdate,
    ProgressUpdate,
    SystemPatternsUpdate,
)

USAGE = """\
Usage: umb [command]

Commands:
  (none)                                 Auto-update memory bank from recent Git history
  help                                   Show this help message
  init                                   Initialize the memory bank
  update <document> key=value ...        Update sections of a document
                                         (productContext, activeContext, systemPatterns,
                                          progress, decisionLog)
  decision title=... rationale=... implications=... status=Implemented|Pending|Revised
  archive                                Archive daily files past the threshold
  stats                                  Show statistics since the last update
  roo-setup [workspace]                  Set up Roo-Code integration
  roo-rules                              Regenerate Roo-Code rules
  install-hooks                          Install the Git pre-commit hook

Example:
  umb update activeContext currentFocus='New feature development'
"""

_UPDATE_TYPES = {
    "productContext": ("product_context", ProductContextUpdate),
    "activeContext": ("active_context", ActiveContextUpdate),
    "systemPatterns": ("system_patterns", SystemPatternsUpdate),
    "progress": ("progress", ProgressUpdate),
}
_LIST_FIELDS = {"current_tasks", "completed_tasks", "upcoming_tasks"}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _camel_to_snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _parse_assignments(args: list[str]) -> dict[str, str]:
    """``currentFocus=Value`` arguments to ``{"current_focus": "Value"}``."""
    values: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {arg!r}")
        values[_camel_to_snake(key.strip())] = value.strip().strip("'\"")
    return values


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(";") if item.strip()]


def _parse_milestones(value: str) -> list[Milestone]:
    milestones = []
    for item in _split_list(value):
        title, _, description = item.partition(":")
        milestones.append(Milestone(title=title.strip(), description=description.strip() or None))
    return milestones


def build_update(document: str, args: list[str]) -> MemoryBankUpdate:
    """Translate ``umb update <document> key=value ...`` into a MemoryBankUpdate."""
    values = _parse_assignments(args)
    if not values:
        raise ValueError("No key=value updates given")

    if document == "decisionLog":
        return MemoryBankUpdate(decision=Decision(**_decision_kwargs(values)))

    if document not in _UPDATE_TYPES:
        raise ValueError(
            f"Unknown document {document!r}; expected one of "
            f"{', '.join([*_UPDATE_TYPES, 'decisionLog'])}"
        )
    attr, update_cls = _UPDATE_TYPES[document]
    allowed = {f.name for f in fields(update_cls)}
    kwargs: dict = {}
    for key, value in values.items():
        if key not in allowed:
            raise ValueError(f"Unknown field {key!r} for {document}")
        if key in _LIST_FIELDS:
            kwargs[key] = _split_list(value)
        elif key == "milestones":
            kwargs[key] = _parse_milestones(value)
        else:
            kwargs[key] = value
    return MemoryBankUpdate(**{attr: update_cls(**kwargs)})


def _decision_kwargs(values: dict[str, str]) -> dict[str, str]:
    missing = [k for k in ("title", "rationale", "implications") if not values.get(k)]
    if missing:
        raise ValueError(f"Decision is missing: {', '.join(missing)}")
    unknown = set(values) - {"title", "rationale", "implications", "status"}
    if unknown:
        raise ValueError(f"Unknown decision field(s): {', '.join(sorted(unknown))}")
    return values


# ── Commands ──────────────────────────────────────────────────


def _open_bank(config: MemoryBankConfig):
    from umb.memory.bank import MemoryBank

    return MemoryBank.from_config(config)


def _run_init(config: MemoryBankConfig) -> int:
    bank = _open_bank(config)
    if not bank.initialize():
        print("Failed to initialize memory bank.")
        return 1
    print(f"Memory bank initialized at {bank.root}")
    return 0


def _apply(config: MemoryBankConfig, update: MemoryBankUpdate) -> int:
    bank = _open_bank(config)
    if not bank.initialize():
        print("Failed to initialize memory bank.")
        return 1
    result = bank.handle_update(update)
    print(result.message)
    return 0 if result.success else 1


def _run_auto_update(config: MemoryBankConfig) -> int:
    from umb.memory.git import SubprocessRunner, recent_commits, recent_merges

    runner = SubprocessRunner(cwd=config.project_root, timeout=config.git_timeout)
    merges = recent_merges(runner)
    commits = recent_commits(runner)
    if merges:
        changes = "Recent PRs:\n" + "\n".join(f"- {m}" for m in merges)
    elif commits:
        changes = "Recent Commits:\n" + "\n".join(f"- {c}" for c in commits)
    else:
        changes = "No recent PRs or commits found."
    return _apply(config, MemoryBankUpdate(active_context=ActiveContextUpdate(recent_changes=changes)))


def _run_update(config: MemoryBankConfig, args: list[str]) -> int:
    if not args:
        print("Usage: umb update <document> key=value ...")
        return 1
    try:
        update = build_update(args[0], args[1:])
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return _apply(config, update)


def _run_decision(config: MemoryBankConfig, args: list[str]) -> int:
    return _run_update(config, ["decisionLog", *args])


def _run_archive(config: MemoryBankConfig) -> int:
    bank = _open_bank(config)
    result = bank.archiver.archive_files()
    for path in result.moved:
        print(f"Archived {path.relative_to(bank.root)}")
    for path in result.failed:
        print(f"Failed to archive {path.name}")
    if not result.moved and not result.failed:
        print("Nothing to archive.")
    return 0 if result.ok else 1


def _run_stats(config: MemoryBankConfig) -> int:
    from umb.memory.stats import render_statistics

    bank = _open_bank(config)
    stats = bank.stats.track_statistics()
    print(render_statistics(stats))
    session = bank.sessions.get_current_session_file()
    print(f"Current session: {session.name if session else '(none)'}")
    return 0


def _run_roo_setup(config: MemoryBankConfig, args: list[str]) -> int:
    from umb.integrations.roo import RooIntegration

    workspace = Path(args[0]) if args else config.project_root
    if not workspace.exists():
        print(f"Workspace path does not exist: {workspace}")
        return 1

    integration = RooIntegration.auto_configure(workspace, config.memory_bank_dir)
    if integration is None:
        integration = RooIntegration(
            config.memory_bank_dir, workspace / ".roo" / "rules", workspace_dir=workspace
        )
    if not integration.setup():
        print("Roo integration setup failed.")
        return 1
    print(f"Roo integration set up. Rules are in {integration.rules_dir}")
    return 0


def _run_roo_rules(config: MemoryBankConfig) -> int:
    from umb.integrations.roo import RooIntegration

    integration = RooIntegration(config.memory_bank_dir, config.rules_dir)
    if not integration.generate_rules():
        print(f"No rules generated. Run `umb init` to create {config.memory_bank_dir}")
        return 1
    for rule in integration.list_rules():
        print(f"  - {rule.path.name} ({rule.source})")
    return 0


def _run_install_hooks(config: MemoryBankConfig) -> int:
    from umb.integrations.git_hooks import install_pre_commit_hook

    try:
        bank_dir = config.memory_bank_dir.relative_to(config.project_root)
    except ValueError:
        bank_dir = config.memory_bank_dir
    if not install_pre_commit_hook(config.project_root, str(bank_dir)):
        print("Failed to install Git hooks. Are you in a Git repository?")
        return 1
    print("Git pre-commit hook installed.")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    config = load_config()
    _setup_logging(config.log_level)

    cmd = args[0] if args else None
    rest = args[1:]

    if cmd is None:
        return _run_auto_update(config)
    if cmd in ("help", "-h", "--help"):
        print(USAGE)
        return 0
    if cmd == "init":
        return _run_init(config)
    if cmd == "update":
        return _run_update(config, rest)
    if cmd == "decision":
        return _run_decision(config, rest)
    if cmd == "archive":
        return _run_archive(config)
    if cmd == "stats":
        return _run_stats(config)
    if cmd == "roo-setup":
        return _run_roo_setup(config, rest)
    if cmd == "roo-rules":
        return _run_roo_rules(config)
    if cmd == "install-hooks":
        return _run_install_hooks(config)

    print(f"Unknown command: {cmd}")
    print(USAGE)
    return 1


if __name__ == "__main__":
    sys.exit(main())
