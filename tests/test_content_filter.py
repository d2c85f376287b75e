"""
Tests for tools/content_filter.py — story text sanitizing.
"""

from tools.content_filter import sanitize_story_text, is_directive_line


class TestSanitizeStoryText:

    def test_plain_prose_unchanged(self):
        text = "You enter the cave. Water drips from above."
        assert sanitize_story_text(text) == text

    def test_drops_bullets(self):
        text = "The path splits.\n- Go left\n  - Go right"
        assert sanitize_story_text(text) == "The path splits."

    def test_drops_numbered_options(self):
        text = "What now?\n1. Fight\n2. Flee\n10. Hide"
        assert sanitize_story_text(text) == "What now?"

    def test_drops_bracket_remnants(self):
        text = "A chest creaks open.\n[GOLD: lots]\n[note] whisper"
        assert sanitize_story_text(text) == "A chest creaks open."

    def test_drops_blank_lines(self):
        assert sanitize_story_text("One.\n\n   \nTwo.") == "One.\nTwo."

    def test_keeps_sentences_starting_with_a_letter(self):
        # "A wolf howls." is not a numbered option.
        assert sanitize_story_text("A wolf howls.") == "A wolf howls."

    def test_keeps_year_like_numbers_without_dot_prefix(self):
        assert sanitize_story_text("300 soldiers march.") == "300 soldiers march."

    def test_everything_dropped_gives_empty(self):
        assert sanitize_story_text("- a\n- b") == ""


def test_is_directive_line():
    assert is_directive_line("  - option")
    assert is_directive_line("3. option")
    assert is_directive_line("[ITEM: x]")
    assert not is_directive_line("[unclosed bracket")
    assert not is_directive_line("Plain line.")
