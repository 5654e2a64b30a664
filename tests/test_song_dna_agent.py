import json

import pytest

from director_studio.agent.llm import MissingAPIKeyError, extract_json
from director_studio.agent.song_dna_agent import (
    analyze_sections,
    analyze_song_dna,
    analyze_song_dna_enhanced,
)
from director_studio.models.artist import ArtistProfile
from director_studio.models.song_dna import AnalysisRequest
from director_studio.services.artist_store import ArtistBank

AI_ANALYSIS = {
    "sections": [
        {"type": "verse", "line_count": 4, "rhyme_scheme": "ABAB"},
        {"type": "chorus", "line_count": 4, "rhyme_scheme": "AABA"},
    ],
    "overall_pattern": ["verse", "chorus"],
    "themes": ["loneliness", "hope"],
    "primary_emotion": "yearning",
    "emotional_arc": [
        {"section": "verse", "emotion": "lonely", "intensity": 4},
        {"section": "chorus", "emotion": "defiant", "intensity": 14},
    ],
    "vocabulary_complexity": "technical",
    "signature_words": ["fire", "night"],
    "metaphor_examples": ["city hums a broken tune"],
    "metaphor_density": 15,
    "alliteration_frequency": 2,
    "internal_rhyme_density": 4,
    "repetition_level": 6,
    "suggested_tempo": "90-100 BPM",
    "energy_level": 7,
    "suggested_key": "A minor",
}

THEMATIC_ANALYSIS = {
    "themes": ["loneliness", "resilience"],
    "primary_emotion": "hopeful",
    "emotional_transitions": [{"from": "lonely", "to": "defiant", "location": "chorus"}],
    "signature_phrases": ["hold on to the fire"],
    "metaphors": ["neon light", "broken tune", "secrets to the moon"],
    "wordplay": [],
    "vocabulary_style": "technical",
}


def make_request(lyrics, **overrides):
    return AnalysisRequest(lyrics=lyrics, title="Neon Night", artist="Sarah Chen", **overrides)


class TestExtractJson:
    def test_outermost_object(self):
        """Test JSON extraction from a reply wrapped in prose."""
        assert extract_json('Sure! {"a": {"b": 1}} Hope this helps.') == {"a": {"b": 1}}

    def test_no_json(self):
        """Test that a reply without an object raises ValueError."""
        with pytest.raises(ValueError):
            extract_json("no json here")


class TestAnalyzeSongDna:
    @pytest.mark.asyncio
    async def test_missing_api_key(self, no_api_key, sample_lyrics):
        """Test that analysis fails fast without an API key."""
        with pytest.raises(MissingAPIKeyError):
            await analyze_song_dna(make_request(sample_lyrics))

    @pytest.mark.asyncio
    async def test_structured_analysis(self, fake_llm, sample_lyrics):
        """Test the JSON-mode path and the mapping into a Song DNA."""
        completions = fake_llm(json.dumps(AI_ANALYSIS))
        result = await analyze_song_dna(make_request(sample_lyrics))

        assert completions.calls[0]["response_format"] == {"type": "json_object"}
        assert result.confidence_scores.overall == 0.8
        assert result.confidence_scores.structure == 0.85

        dna = result.song_dna
        assert dna.reference_song.title == "Neon Night"
        assert dna.structure.pattern == ["verse", "chorus"]
        assert dna.structure.verse_lines == 4
        assert [(s.start_line, s.end_line) for s in dna.structure.sections] == [(0, 4), (4, 8)]
        assert dna.lyrical.rhyme_schemes == {"verse": "ABAB", "chorus": "AABA"}
        assert dna.lyrical.vocabulary_level == "academic"
        assert dna.lyrical.metaphor_density == 10
        assert dna.musical.tempo_bpm == 90
        assert dna.musical.suggested_key == "A minor"
        assert dna.emotional.primary_emotion == "yearning"
        assert dna.emotional.emotional_arc[1].intensity == 10
        assert dna.emotional.overall_intensity == 7
        assert dna.lyrical.syllables_per_line.average > 0
        assert "Consider selecting an artist for enhanced generation" in result.suggestions

    @pytest.mark.asyncio
    async def test_fallback_analysis(self, fake_llm, sample_lyrics):
        """Test that an unparsable JSON-mode reply falls back to free text."""
        partial = {"themes": ["hope"], "primary_emotion": "calm", "overall_pattern": ["verse"]}
        completions = fake_llm("not json", f"Here you go:\n{json.dumps(partial)}\nEnjoy!")
        result = await analyze_song_dna(make_request(sample_lyrics))

        assert len(completions.calls) == 2
        assert "response_format" not in completions.calls[1]
        assert result.confidence_scores.overall == 0.7
        assert result.song_dna.lyrical.themes == ["hope"]
        assert result.song_dna.structure.verse_lines == 4
        assert result.suggestions[0] == "Analysis completed using fallback method"
        assert result.warnings

    @pytest.mark.asyncio
    async def test_basic_analysis(self, fake_llm, sample_lyrics):
        """Test the structural result when both model calls fail."""
        fake_llm(RuntimeError("boom"), RuntimeError("boom again"))
        result = await analyze_song_dna(make_request(sample_lyrics))

        assert result.confidence_scores.overall == 0.2
        assert result.confidence_scores.emotion == 0.1
        assert result.song_dna.structure.pattern == ["verse", "chorus"]
        assert result.song_dna.structure.total_bars == 10
        assert result.suggestions[0] == "AI analysis failed - showing basic structural analysis only"
        assert len(result.warnings) == 2

    @pytest.mark.asyncio
    async def test_artist_genres_copied(self, fake_llm, storage, sample_lyrics):
        """Test that the artist profile's genres become genre tags."""
        bank = ArtistBank(storage)
        artist = bank.save(ArtistProfile(artist_id="art_1", artist_name="Sarah", genres=["indie", "pop"]))
        fake_llm(json.dumps(AI_ANALYSIS))

        result = await analyze_song_dna(
            make_request(sample_lyrics, artist_profile_id=artist.artist_id), artist_bank=bank
        )
        assert result.song_dna.genre_tags == ["indie", "pop"]
        assert result.song_dna.artist_profile_id == "art_1"
        assert 'Artist profile "Sarah" styles applied' in result.suggestions


class TestAnalyzeSongDnaEnhanced:
    def test_analyze_sections(self, sample_lyrics):
        """Test per-section heuristics without any model call."""
        sections = analyze_sections(sample_lyrics)
        assert [s.line_count for s in sections] == [4, 4]
        assert len(sections[1].rhyme_pattern) == 4
        assert sections[1].rhyme_pattern[:2] == "AA"

    @pytest.mark.asyncio
    async def test_missing_api_key(self, no_api_key, sample_lyrics):
        """Test that enhanced analysis also fails fast without an API key."""
        with pytest.raises(MissingAPIKeyError):
            await analyze_song_dna_enhanced(make_request(sample_lyrics))

    @pytest.mark.asyncio
    async def test_enhanced_analysis(self, fake_llm, sample_lyrics):
        """Test the structural analysis merged with the thematic reply."""
        fake_llm(f"```json\n{json.dumps(THEMATIC_ANALYSIS)}\n```")
        result = await analyze_song_dna_enhanced(make_request(sample_lyrics))

        assert result.confidence_scores.overall == 0.9
        assert result.confidence_scores.rhyme == 0.95
        dna = result.song_dna
        assert dna.analysis_version == "2.0-enhanced"
        assert dna.structure.pattern == ["verse", "chorus"]
        assert [(s.start_line, s.end_line) for s in dna.structure.sections] == [(0, 4), (4, 8)]
        assert dna.structure.total_bars == 8
        assert dna.lyrical.themes == ["loneliness", "resilience"]
        assert dna.lyrical.vocabulary_level == "academic"
        assert dna.lyrical.metaphor_density == 3
        assert dna.lyrical.signature_words == ["hold", "fire"]
        assert dna.lyrical.repetition_patterns[0].occurrences == 3
        assert dna.emotional.primary_emotion == "hopeful"
        arc = dna.emotional.emotional_arc[0]
        assert (arc.section, arc.emotion, arc.intensity) == ("chorus", "defiant", 5)
        assert dna.musical.tempo_bpm in {60, 80, 100, 120, 140}
        assert len(dna.musical.energy_curve) == 2
        assert dna.production_notes.startswith("Flow: ")
        assert result.suggestions[0].startswith("Flow type: ")
        assert result.suggestions[-1] == "Select an artist for better generation"

    @pytest.mark.asyncio
    async def test_non_list_fields_ignored(self, fake_llm, sample_lyrics):
        """Test that string themes and metaphors are not read character by character."""
        reply = dict(THEMATIC_ANALYSIS, themes="loneliness", metaphors="neon light")
        fake_llm(json.dumps(reply))
        result = await analyze_song_dna_enhanced(make_request(sample_lyrics))

        assert result.confidence_scores.overall == 0.9
        assert result.song_dna.lyrical.themes == []
        assert result.song_dna.lyrical.metaphor_density == 0

    @pytest.mark.asyncio
    async def test_degrades_to_structure(self, fake_llm, sample_lyrics):
        """Test that a failed thematic pass still returns the structural analysis."""
        fake_llm(RuntimeError("rate limited"))
        result = await analyze_song_dna_enhanced(make_request(sample_lyrics))

        assert result.confidence_scores.overall == 0.7
        assert result.confidence_scores.emotion == 0.3
        assert "AI enhancement failed - showing structural analysis only" in result.suggestions
        assert result.song_dna.structure.pattern == ["verse", "chorus"]
        assert result.song_dna.lyrical.themes == []
