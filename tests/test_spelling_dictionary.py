"""
Tests for tools/spelling_dictionary.py — the bundled word-list provider.
"""

from tools.spell_checker import analyze
from tools.spelling_dictionary import WordListDictionary

WORDS = ["i", "open", "the", "door", "with", "my", "rope", "you", "walk", "north"]


class TestWordListDictionary:

    def test_known_words_not_flagged(self):
        d = WordListDictionary(WORDS)
        assert d.misspelled_range("I open the door", 0) is None

    def test_finds_first_unknown_word(self):
        d = WordListDictionary(WORDS)
        assert d.misspelled_range("I oppen the door", 0) == (2, 7)

    def test_respects_start(self):
        d = WordListDictionary(WORDS)
        text = "oppen the dorr"
        assert d.misspelled_range(text, 5) == (10, 14)

    def test_skips_word_cut_by_cursor(self):
        d = WordListDictionary(WORDS)
        # Cursor lands inside "doorx"; the tail "oorx" must not be reported.
        assert d.misspelled_range("doorx", 1) is None

    def test_suggestions_close_match(self):
        d = WordListDictionary(WORDS)
        assert d.suggestions("oppen", (0, 5))[0] == "open"

    def test_suggestions_match_case(self):
        d = WordListDictionary(WORDS)
        assert d.suggestions("Nroth", (0, 5))[0] == "North"
        assert d.suggestions("NROTH", (0, 5))[0] == "NORTH"

    def test_no_close_match(self):
        d = WordListDictionary(WORDS)
        assert d.suggestions("xyzzy", (0, 5)) == []

    def test_empty_list_flags_nothing(self):
        d = WordListDictionary([])
        assert d.misspelled_range("anything goes", 0) is None

    def test_from_file(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("Open\nthe\n\ndoor\n", encoding="utf-8")
        d = WordListDictionary.from_file(str(path))
        assert len(d) == 3
        assert "open" in d
        assert "OPEN" in d

    def test_drives_analyzer(self):
        d = WordListDictionary(WORDS)
        result = analyze("I oppen the dor wiht my rope", ["Rope"], d)
        assert result.corrected_text == "I open the door with my rope"
        assert result.remaining_allowance == 2

    def test_ordinal_suffix_not_flagged(self):
        d = WordListDictionary(WORDS + ["climb", "to", "floor"])
        assert d.misspelled_range("I climb to the 2nd floor", 0) is None
        result = analyze("I climb to the 2nd floor", [], d)
        assert result.corrected_text == "I climb to the 2nd floor"
        assert result.remaining_allowance == 5

    def test_accented_word_is_one_token(self):
        d = WordListDictionary(WORDS + ["enter", "café"])
        assert d.misspelled_range("I enter the café", 0) is None
        result = analyze("I enter the café", [], d)
        assert result.corrected_text == "I enter the café"
        assert result.remaining_allowance == 5

    def test_accented_misspelling_spans_whole_word(self):
        d = WordListDictionary(WORDS)
        assert d.misspelled_range("I open the cafè", 0) == (11, 15)
