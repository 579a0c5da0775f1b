"""Section addressing for memory-bank Markdown documents.

A section is a second-level heading line plus everything under it, up to the
next ``## `` heading or the end of the document. A trailing footnote block
(a ``---`` rule followed only by ``[timestamp] - note`` lines) is not part of
the last section.
"""

from __future__ import annotations

import re

_FOOTER_TAIL = r"---\n(?:Footnotes:\n)?(?:\[[^\n]*(?:\n|\Z))*\s*\Z"
_BODY_END = rf"(?=\n## |^## |\n{_FOOTER_TAIL}|^{_FOOTER_TAIL}|\Z)"
_FOOTER_RE = re.compile(r"\n---\n(?:Footnotes:\n)?(?=(?:\[[^\n]*(?:\n|\Z))*\s*\Z)")


def _heading_pattern(heading: str) -> str:
    return rf"^{re.escape(heading)}[ \t]*(?:\n|\Z)"


def _section_re(heading: str) -> re.Pattern[str]:
    return re.compile(_heading_pattern(heading) + r"(.*?)" + _BODY_END, re.DOTALL | re.MULTILINE)


def has_section(content: str, heading: str) -> bool:
    return re.search(_heading_pattern(heading), content, re.MULTILINE) is not None


def extract_section(content: str, heading: str) -> str:
    """Return the stripped body of ``heading``, or "" when it is absent."""
    match = _section_re(heading).search(content)
    return match.group(1).strip() if match else ""


def update_section(content: str, heading: str, new_body: str) -> str:
    """Replace the body of ``heading`` with ``new_body``.

    A missing heading leaves the document untouched.
    """
    return _section_re(heading).sub(lambda _: f"{heading}\n{new_body}\n", content, count=1)


def prepend_entry(content: str, heading: str, entry: str) -> str:
    """Insert ``entry`` directly under the heading line, above older entries."""
    match = re.search(_heading_pattern(heading), content, re.MULTILINE)
    if not match:
        return content
    head = content[: match.end()]
    if not head.endswith("\n"):
        head += "\n"
    return f"{head}{entry.rstrip()}\n{content[match.end():]}"


def replace_footer(content: str, note: str) -> str:
    """Rewrite the trailing ``---`` footnote block so it holds only ``note``."""
    matches = list(_FOOTER_RE.finditer(content))
    if not matches:
        return content
    last = matches[-1]
    return f"{content[: last.end()]}{note}\n"


def bullet_list(items: list[str]) -> str:
    """Render items as ``- item`` lines; an empty list keeps the placeholder."""
    lines = [f"- {item.strip()}" for item in items if item.strip()]
    return "\n".join(lines) if lines else "- "
