"""Tests for Markdown section extraction and editing."""

from umb.memory import sections, templates

DOC = (
    "# Active Context\n\n"
    "## Current Focus\n-\n\n"
    "## Recent Changes\n-\n\n"
    "## Open Questions/Issues\n-\n"
)


class TestExtract:
    def test_placeholder_body(self):
        assert sections.extract_section(DOC, "## Current Focus") == "-"

    def test_missing_heading(self):
        assert sections.extract_section(DOC, "## Statistics") == ""

    def test_last_section_runs_to_end(self):
        doc = DOC.replace("## Open Questions/Issues\n-\n", "## Open Questions/Issues\nWhy?\nHow?\n")
        assert sections.extract_section(doc, "## Open Questions/Issues") == "Why?\nHow?"

    def test_deeper_heading_is_not_a_match(self):
        doc = "# Log\n\n### Decisions\nnot this\n"
        assert not sections.has_section(doc, "## Decisions")
        assert sections.extract_section(doc, "## Decisions") == ""

    def test_empty_section_followed_by_heading(self):
        doc = "## A\n## B\nbody\n"
        assert sections.extract_section(doc, "## A") == ""
        assert sections.extract_section(doc, "## B") == "body"

    def test_footer_is_not_part_of_last_section(self):
        doc = templates.product_context("2026-02-18 09:30:00")
        assert sections.extract_section(doc, "## Architecture Overview") == "-"


class TestUpdate:
    def test_round_trip(self):
        updated = sections.update_section(DOC, "## Current Focus", "Ship the parser")
        assert sections.extract_section(updated, "## Current Focus") == "Ship the parser"

    def test_other_sections_untouched(self):
        updated = sections.update_section(DOC, "## Current Focus", "X")
        assert sections.extract_section(updated, "## Recent Changes") == "-"
        assert sections.extract_section(updated, "## Open Questions/Issues") == "-"
        assert "\n\n## Recent Changes\n" in updated

    def test_multiline_value(self):
        updated = sections.update_section(DOC, "## Open Questions/Issues", "- one\n- two")
        assert sections.extract_section(updated, "## Open Questions/Issues") == "- one\n- two"

    def test_missing_heading_is_noop(self):
        assert sections.update_section(DOC, "## Nope", "value") == DOC

    def test_heading_at_end_without_newline(self):
        updated = sections.update_section("# T\n\n## A", "## A", "X")
        assert updated == "# T\n\n## A\nX\n"

    def test_keeps_footer(self):
        doc = templates.product_context("2026-02-18 09:30:00")
        updated = sections.update_section(doc, "## Architecture Overview", "Layers")
        assert "Footnotes:\n[2026-02-18 09:30:00] - Created product context" in updated
        assert sections.extract_section(updated, "## Architecture Overview") == "Layers"

    def test_value_with_horizontal_rule(self):
        value = "Part one\n---\nPart two"
        updated = sections.update_section(DOC, "## Current Focus", value)
        assert sections.extract_section(updated, "## Current Focus") == value

    def test_replacing_rule_value_leaves_nothing_behind(self):
        doc = sections.update_section(DOC, "## Current Focus", "Part one\n---\nstale")
        doc = sections.update_section(doc, "## Current Focus", "fresh")
        assert sections.extract_section(doc, "## Current Focus") == "fresh"
        assert "stale" not in doc
        assert "---" not in doc

    def test_rule_in_last_section_before_footer(self):
        doc = templates.product_context("2026-02-18 09:30:00")
        doc = sections.update_section(doc, "## Architecture Overview", "Layers\n---\nPlugins")
        assert sections.extract_section(doc, "## Architecture Overview") == "Layers\n---\nPlugins"
        assert doc.endswith("Footnotes:\n[2026-02-18 09:30:00] - Created product context\n")


class TestPrepend:
    def test_newest_first(self):
        doc = sections.prepend_entry(DOC, "## Recent Changes", "A")
        doc = sections.prepend_entry(doc, "## Recent Changes", "B")
        assert sections.extract_section(doc, "## Recent Changes") == "B\nA\n-"

    def test_missing_heading_is_noop(self):
        assert sections.prepend_entry(DOC, "## Milestones", "x") == DOC

    def test_multiline_entry(self):
        doc = sections.prepend_entry(DOC, "## Recent Changes", "Commits:\n- a\n- b\n")
        assert sections.extract_section(doc, "## Recent Changes") == "Commits:\n- a\n- b\n-"


class TestFooter:
    def test_replaces_footnotes(self):
        doc = templates.product_context("2026-02-18 09:30:00")
        updated = sections.replace_footer(doc, "[2026-02-19 10:00:00] - Updated product context")
        assert updated.endswith(
            "---\nFootnotes:\n[2026-02-19 10:00:00] - Updated product context\n"
        )
        assert "Created product context" not in updated

    def test_plain_rule_footer(self):
        doc = templates.system_patterns("2026-02-18 09:30:00")
        updated = sections.replace_footer(doc, "[x] - Updated system patterns")
        assert updated.endswith("\n---\n[x] - Updated system patterns\n")

    def test_no_footer(self):
        assert sections.replace_footer(DOC, "note") == DOC

    def test_rule_inside_section_is_not_a_footer(self):
        doc = sections.update_section(DOC, "## Current Focus", "a\n---\nb")
        assert sections.replace_footer(doc, "note") == doc


class TestBulletList:
    def test_items(self):
        assert sections.bullet_list(["a", " b ", ""]) == "- a\n- b"

    def test_empty(self):
        assert sections.bullet_list([]) == "- "
