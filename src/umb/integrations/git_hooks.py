"""Install a Git pre-commit hook that nudges the developer to run ``umb``."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

COMMIT_THRESHOLD = 5

PRE_COMMIT_HOOK = """\
#!/bin/sh

# Memory Bank pre-commit hook (installed by `umb install-hooks`)
# Reminds you to update the memory bank when it falls behind the commit log.

LAST_UPDATE_FILE="{memory_bank_dir}/.last_update"

if [ -f "$LAST_UPDATE_FILE" ]; then
  LAST_UPDATE=$(cat "$LAST_UPDATE_FILE")
  COMMIT_COUNT=$(git log --since="$LAST_UPDATE" --oneline | wc -l)

  if [ "$COMMIT_COUNT" -ge {threshold} ]; then
    echo "Memory bank hasn't been updated in $COMMIT_COUNT commits."
    echo "Consider running 'umb' to update the memory bank before committing."
  fi
else
  echo "Memory bank has never been initialized."
  echo "Consider running 'umb init' to initialize the memory bank."
fi

exit 0
"""


def render_pre_commit_hook(memory_bank_dir: str = "memory-bank") -> str:
    return PRE_COMMIT_HOOK.format(memory_bank_dir=memory_bank_dir, threshold=COMMIT_THRESHOLD)


def install_pre_commit_hook(project_root: Path, memory_bank_dir: str = "memory-bank") -> bool:
    """Write ``.git/hooks/pre-commit``. False when ``project_root`` is not a Git checkout."""
    git_dir = project_root / ".git"
    if not git_dir.is_dir():
        logger.error(".git directory not found in %s", project_root)
        return False

    hook = git_dir / "hooks" / "pre-commit"
    try:
        hook.parent.mkdir(parents=True, exist_ok=True)
        hook.write_text(render_pre_commit_hook(memory_bank_dir), encoding="utf-8")
        hook.chmod(0o755)
    except OSError as e:
        logger.error("Error installing pre-commit hook: %s", e)
        return False
    logger.info("Installed pre-commit hook at %s", hook)
    return True
