import pytest

from director_studio.lyrics.syllables import (
    break_word_into_syllables,
    clean_word,
    count_line_syllables,
    count_syllables,
    count_syllables_enhanced,
)


class TestCountSyllables:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("beautiful", 3),
            ("make", 1),
            ("the", 1),
            ("yellow", 2),
            ("rhythm", 1),
            ("a", 1),
            ("", 1),
        ],
    )
    def test_vowel_groups(self, word, expected):
        """Test the plain vowel-group rule with silent e and a minimum of one."""
        assert count_syllables(word) == expected


class TestCountSyllablesEnhanced:
    def test_special_words(self):
        """Test the special-case table for function words and slang."""
        assert count_syllables_enhanced("fire") == 2
        assert count_syllables_enhanced("every") == 3
        assert count_syllables_enhanced("gonna") == 2
        assert count_syllables_enhanced("Y'all") == 1

    def test_strips_punctuation(self):
        """Test that punctuation is ignored and letterless input counts zero."""
        assert count_syllables_enhanced("Fire!") == 2
        assert count_syllables_enhanced("123") == 0
        assert count_syllables_enhanced("...") == 0

    def test_falls_back_to_vowel_groups(self):
        """Test that unknown words use the vowel-group rule."""
        assert count_syllables_enhanced("Beautiful,") == 3

    def test_line(self):
        """Test that a line sums the per-word counts."""
        assert count_line_syllables("Hold on to the fire") == 6
        assert count_line_syllables("") == 0


class TestBreakWordIntoSyllables:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("yellow", ["yel", "low"]),
            ("hello", ["hel", "lo"]),
            ("music", ["mu", "sic"]),
            ("sister", ["si", "ster"]),
            ("hope", ["hope"]),
            ("about", ["a", "bout"]),
            ("heartless", ["heart", "less"]),
            ("make", ["make"]),
            ("tune", ["tune"]),
            ("alone", ["a", "lone"]),
        ],
    )
    def test_splits(self, word, expected):
        """Test known splits, onset clusters and the silent-e merge."""
        assert break_word_into_syllables(word) == expected

    def test_empty(self):
        """Test that words without letters have no syllables."""
        assert break_word_into_syllables("") == []
        assert break_word_into_syllables("?!") == []

    def test_pieces_rebuild_word(self):
        """Test that the syllables always concatenate back to the cleaned word."""
        for word in ["Generation", "mountain", "strawberry", "don't", "rhythm", "alone", "escape"]:
            assert "".join(break_word_into_syllables(word)) == clean_word(word)
