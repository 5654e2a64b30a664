from director_studio.lyrics.phonetics import (
    break_into_syllables,
    check_hiphop_rhyme,
    check_multi_word_rhyme,
    check_phonetic_rhyme,
    detect_rhyme_pattern_enhanced,
    find_internal_rhymes,
    phonetic_representation,
)


class TestPhoneticHelpers:
    def test_break_into_syllables(self):
        """Test the coarse consonant-vowel splitter."""
        assert break_into_syllables("making") == ["mak", "ing"]
        assert break_into_syllables("darkness") == ["dark", "ness"]
        assert break_into_syllables("") == []

    def test_phonetic_representation(self):
        """Test ordered substitutions, including silent gh."""
        assert phonetic_representation("night") == "nɪt"
        assert phonetic_representation("making") == "mækɪng"


class TestCheckPhoneticRhyme:
    def test_identical(self):
        """Test identical words."""
        result = check_phonetic_rhyme("Fire", "fire")
        assert result.strength == "perfect"
        assert result.pattern == "identical"

    def test_perfect_two_syllables(self):
        """Test equal two-syllable phonetic endings."""
        assert check_phonetic_rhyme("remaking", "retaking").strength == "perfect"

    def test_near(self):
        """Test equal final syllables."""
        result = check_phonetic_rhyme("making", "taking")
        assert result.strength == "near"
        assert result.pattern == "ɪng"

    def test_slant(self):
        """Test shared ending spellings."""
        result = check_phonetic_rhyme("darkness", "heartless")
        assert result.strength == "slant"
        assert result.pattern == "əs"

    def test_consonance(self):
        """Test matching final consonants."""
        assert check_phonetic_rhyme("night", "light").strength == "consonance"

    def test_none(self):
        """Test empty input."""
        assert check_phonetic_rhyme("", "light").strength == "none"
        assert not check_phonetic_rhyme("", "light").rhymes


class TestHipHopAndMultiWord:
    def test_hiphop_groups(self):
        """Test membership in the curated hip-hop rhyme groups."""
        assert check_hiphop_rhyme("plots", "Glock")
        assert check_hiphop_rhyme("pollution", "illusion")
        assert not check_hiphop_rhyme("plots", "victim")

    def test_multi_word_rhyme(self):
        """Test matching phrase tails and non-matching phrases."""
        result = check_multi_word_rhyme("lost in the rain", "walking in the rain")
        assert result.rhymes
        assert result.pattern == "rain/rain"
        assert not check_multi_word_rhyme("hello there", "big dog").rhymes
        assert not check_multi_word_rhyme("a b", "rain").rhymes


class TestInternalRhymes:
    def test_pairs_and_positions(self):
        """Test that rhyming word pairs within a line are reported."""
        result = find_internal_rhymes("making money taking chances")
        assert ("making", "taking") in result.pairs
        assert (0, 2) in result.positions

    def test_empty_line(self):
        """Test that an empty line has no internal rhymes."""
        assert find_internal_rhymes("").pairs == []


class TestDetectRhymePatternEnhanced:
    def test_hiphop_group(self):
        """Test that hip-hop group members share a letter."""
        assert detect_rhyme_pattern_enhanced(["I got the plots", "hold the glock"]) == "AA"

    def test_empty(self):
        """Test empty input and wordless lines."""
        assert detect_rhyme_pattern_enhanced([]) == ""
        assert detect_rhyme_pattern_enhanced(["", "making moves"]) == "-A"
