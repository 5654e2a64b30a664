from director_studio.export.song_export import (
    format_dna_insights,
    format_lyrics_for_export,
    format_song_for_music_video,
)
from director_studio.models.song_dna import GeneratedSong, GenerationOptions, create_blank_song_dna


def make_song(**overrides):
    data = {
        "title": "Neon Rain",
        "lyrics": "[Verse 1]\nline one\nline two",
        "theme": "city nights",
        "emotional_tone": "melancholy",
        "estimated_bpm": 92,
        "suggested_key": "A minor",
        "song_dna_id": "dna_1",
        "generation_params": GenerationOptions(theme="city nights"),
    }
    data.update(overrides)
    return GeneratedSong(**data)


def numbered_lines(n):
    return "\n".join(f"line {i}" for i in range(1, n + 1))


class TestFormatLyricsForExport:
    def test_marked_lyrics_pass_through(self):
        """Test that lyrics with section markers are returned unchanged."""
        lyrics = "[Intro]\nhey\n\n[Verse]\nyo"
        assert format_lyrics_for_export(lyrics) == lyrics

    def test_short_song_is_one_verse(self):
        """Test that four lines become a single verse."""
        assert format_lyrics_for_export(numbered_lines(4)) == "[Verse 1]\n" + numbered_lines(4)

    def test_second_section_is_chorus(self):
        """Test that sections are capped at eight lines and the second is the chorus."""
        result = format_lyrics_for_export(numbered_lines(12))
        sections = result.split("\n\n")
        assert len(sections) == 2
        assert sections[0].startswith("[Verse 1]\nline 1\n")
        assert sections[0].count("\n") == 8
        assert sections[1].startswith("[Chorus]\nline 9")

    def test_trailing_lines_kept(self):
        """Test that leftover lines form a final section instead of being dropped."""
        result = format_lyrics_for_export(numbered_lines(10))
        assert "line 9" in result and "line 10" in result
        assert result.split("\n\n")[1] == "[Chorus]\nline 9\nline 10"

    def test_verse_numbers_are_sequential(self):
        """Test labels over many sections: verse, chorus, verse, verse, chorus."""
        result = format_lyrics_for_export(numbered_lines(40))
        labels = [section.split("\n")[0] for section in result.split("\n\n")]
        assert labels == ["[Verse 1]", "[Chorus]", "[Verse 2]", "[Verse 3]", "[Chorus]"]

    def test_blank_lines_ignored(self):
        """Test that blank lines do not count toward section length."""
        lyrics = "a\n\nb\n\n\nc\nd"
        assert format_lyrics_for_export(lyrics) == "[Verse 1]\na\nb\nc\nd"


class TestFormatSongForMusicVideo:
    def test_basic_fields(self):
        """Test title, lyrics and metadata mapping."""
        song = make_song()
        data = format_song_for_music_video(song)
        assert data.song_title == "Neon Rain"
        assert data.artist == "AI Generated"
        assert data.lyrics == song.lyrics
        assert data.metadata.bpm == 92
        assert data.metadata.key == "A minor"
        assert data.metadata.generated_at == song.created_at
        assert data.metadata.source_dna is None
        assert data.mv_concept == "Theme: city nights\nMood: melancholy"

    def test_dna_enriches_concept(self):
        """Test that DNA emotion, topics, artist and genres are used."""
        dna = create_blank_song_dna()
        dna.reference_song.artist = "The Weeknd"
        dna.emotional.primary_emotion = "longing"
        dna.lyrical.themes = ["love", "night"]
        dna.genre_tags = ["r&b", "synthwave"]
        data = format_song_for_music_video(make_song(), dna)
        assert data.artist == "The Weeknd"
        assert data.genre == "r&b, synthwave"
        assert "Emotional Core: longing" in data.mv_concept
        assert "Topics: love, night" in data.mv_concept
        assert data.metadata.source_dna == dna.id

    def test_attribution_and_defaults(self):
        """Test that attribution wins and an empty title gets a default."""
        data = format_song_for_music_video(make_song(title="", artist_attribution="Sarah Chen"))
        assert data.song_title == "Untitled Song"
        assert data.artist == "Sarah Chen"


class TestFormatDnaInsights:
    def test_full_insights(self):
        """Test every insight line for a populated DNA."""
        dna = create_blank_song_dna()
        dna.structure.pattern = ["verse", "chorus", "verse"]
        dna.lyrical.syllables_per_line.average = 11.25
        dna.lyrical.rhyme_schemes = {"verse": "AABBCC", "chorus": "ABAB"}
        dna.emotional.primary_emotion = "defiant"
        dna.lyrical.signature_words = ["fire", "gold", "crown", "street", "night", "extra"]
        assert format_dna_insights(dna).split("\n") == [
            "Structure: verse-chorus-verse",
            "Flow Type: Dense/Rapid (11.2 syllables/line)",
            "Rhyme Complexity: Complex",
            "Primary Emotion: defiant",
            "Key Words: fire, gold, crown, street, night",
        ]

    def test_flow_thresholds(self):
        """Test the Moderate and Sparse flow labels."""
        dna = create_blank_song_dna()
        dna.lyrical.syllables_per_line.average = 8
        assert "Flow Type: Moderate" in format_dna_insights(dna)
        dna.lyrical.syllables_per_line.average = 5
        assert "Flow Type: Sparse" in format_dna_insights(dna)

    def test_blank_dna(self):
        """Test that a blank DNA gives no insights."""
        assert format_dna_insights(create_blank_song_dna()) == ""
