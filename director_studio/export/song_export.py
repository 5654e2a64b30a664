"""Hand generated songs over to the music-video shot generator."""

from __future__ import annotations

from director_studio.models.song_dna import (
    ExportedSongData,
    ExportedSongMetadata,
    GeneratedSong,
    SongDNA,
)

MIN_SECTION_LINES = 4
MAX_SECTION_LINES = 8


def format_lyrics_for_export(lyrics: str) -> str:
    """Make sure lyrics carry ``[Section]`` markers.

    Unmarked lyrics are chunked into sections of four to eight lines. Every
    third section, starting with the second, is labelled as the chorus.
    """
    if "[" in lyrics:
        return lyrics

    lines = [line for line in lyrics.split("\n") if line.strip()]
    sections: list[str] = []
    current: list[str] = []
    verse_number = 0

    def _flush() -> None:
        nonlocal verse_number
        if len(sections) % 3 == 1:
            label = "Chorus"
        else:
            verse_number += 1
            label = f"Verse {verse_number}"
        sections.append(f"[{label}]\n" + "\n".join(current))
        current.clear()

    for i, line in enumerate(lines):
        current.append(line)
        is_last = i == len(lines) - 1
        if len(current) >= MIN_SECTION_LINES and (is_last or len(current) >= MAX_SECTION_LINES):
            _flush()

    if current:
        _flush()

    return "\n\n".join(sections)


def format_song_for_music_video(song: GeneratedSong, dna: SongDNA | None = None) -> ExportedSongData:
    artist = (
        song.artist_attribution
        or (dna.reference_song.artist if dna else None)
        or "AI Generated"
    )

    concept: list[str] = []
    if song.theme:
        concept.append(f"Theme: {song.theme}")
    if song.emotional_tone:
        concept.append(f"Mood: {song.emotional_tone}")
    if dna and dna.emotional.primary_emotion:
        concept.append(f"Emotional Core: {dna.emotional.primary_emotion}")
    if dna and dna.lyrical.themes:
        concept.append(f"Topics: {', '.join(dna.lyrical.themes)}")

    genre = song.genre
    if not genre and dna and dna.genre_tags:
        genre = ", ".join(dna.genre_tags)

    return ExportedSongData(
        song_title=song.title or "Untitled Song",
        artist=artist,
        lyrics=format_lyrics_for_export(song.lyrics),
        genre=genre,
        mv_concept="\n".join(concept),
        metadata=ExportedSongMetadata(
            theme=song.theme,
            mood=song.emotional_tone,
            bpm=song.estimated_bpm,
            key=song.suggested_key,
            generated_at=song.created_at,
            source_dna=dna.id if dna else None,
        ),
    )


def format_dna_insights(dna: SongDNA) -> str:
    """Short human-readable summary of a DNA for music-video notes."""
    insights: list[str] = []

    if dna.structure.pattern:
        insights.append(f"Structure: {'-'.join(dna.structure.pattern)}")

    average = dna.lyrical.syllables_per_line.average
    if average:
        if average > 10:
            flow_type = "Dense/Rapid"
        elif average > 7:
            flow_type = "Moderate"
        else:
            flow_type = "Sparse"
        insights.append(f"Flow Type: {flow_type} ({average:.1f} syllables/line)")

    if dna.lyrical.rhyme_schemes:
        schemes = dna.lyrical.rhyme_schemes.values()
        complexity = "Complex" if any(s and len(s) > 4 for s in schemes) else "Simple"
        insights.append(f"Rhyme Complexity: {complexity}")

    if dna.emotional.primary_emotion:
        insights.append(f"Primary Emotion: {dna.emotional.primary_emotion}")

    if dna.lyrical.signature_words:
        insights.append(f"Key Words: {', '.join(dna.lyrical.signature_words[:5])}")

    return "\n".join(insights)
