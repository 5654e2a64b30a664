"""Generate new songs that replicate the structure and style of a Song DNA."""

from __future__ import annotations

import json
import logging
import re

from director_studio.agent import llm
from director_studio.agent.prompts import (
    GENERATION_ARTIST_REQUIREMENTS,
    GENERATION_PROMPT,
    SONGWRITER_ARTIST_BLOCK,
    SONGWRITER_SYSTEM_PROMPT,
    TITLE_PROMPT,
    TITLE_SYSTEM_PROMPT,
)
from director_studio.models.artist import ArtistProfile
from director_studio.models.song_dna import (
    GeneratedSong,
    GenerationOptions,
    SongDNA,
    SongSection,
)
from director_studio.services.dna_validator import (
    can_generate_from_dna,
    validate_generation_options,
    validate_song_dna,
)

log = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"TITLE:\s*(.+)", re.IGNORECASE)
_MOOD_RE = re.compile(r"MOOD:\s*(.+)", re.IGNORECASE)
_BPM_RE = re.compile(r"BPM:\s*(\d+)", re.IGNORECASE)
_KEY_RE = re.compile(r"KEY:\s*(.+)", re.IGNORECASE)
_LYRICS_RE = re.compile(r"---\n(.+?)\n---", re.DOTALL)
_SECTION_RE = re.compile(r"\[([^\]]+)\]\n(.+?)(?=\[|\Z)", re.DOTALL)

_COMPLEXITY_NOTES = {
    "simpler": "Use simpler words and shorter phrases than the reference.",
    "more_complex": "Push the wordplay and rhyme density beyond the reference.",
}
_LENGTH_NOTES = {
    "short": "Keep the song short: two verses and a chorus at most.",
    "long": "Write a long version with an extra verse and a bridge.",
}


class SongGenerationError(RuntimeError):
    """Raised when the model call for one of the requested songs fails."""


def _join(items: list[str] | None) -> str:
    return ", ".join(items or [])


def build_system_prompt(dna: SongDNA, artist: ArtistProfile | None = None) -> str:
    artist_block = ""
    if artist:
        artist_block = SONGWRITER_ARTIST_BLOCK.format(
            name=artist.artist_name,
            genres=_join(artist.genres),
            vocal=artist.vocal_description.tone_texture or "",
            themes=_join(artist.writing_persona.themes),
        )
    return SONGWRITER_SYSTEM_PROMPT.format(
        artist_block=artist_block,
        structure=" → ".join(dna.structure.pattern),
        rhyme_schemes=json.dumps(dna.lyrical.rhyme_schemes),
        syllables=dna.lyrical.syllables_per_line.average,
        themes=_join(dna.lyrical.themes),
        emotion=dna.emotional.primary_emotion,
    )


def _extra_instructions(options: GenerationOptions) -> str:
    notes = []
    if options.force_rhyme_scheme:
        notes.append(f"Use the rhyme scheme {options.force_rhyme_scheme} in every section.")
    if options.complexity_adjustment in _COMPLEXITY_NOTES:
        notes.append(_COMPLEXITY_NOTES[options.complexity_adjustment])
    if isinstance(options.target_length, int):
        notes.append(f"Aim for about {options.target_length} lines in total.")
    elif options.target_length in _LENGTH_NOTES:
        notes.append(_LENGTH_NOTES[options.target_length])
    if options.modernize:
        notes.append("Modernize any dated references to feel current.")
    if not options.explicit_allowed:
        notes.append("Keep content clean and family-friendly.")
    return "".join(f"\n{note}" for note in notes) + ("\n" if notes else "")


def build_generation_prompt(
    dna: SongDNA,
    options: GenerationOptions,
    artist: ArtistProfile | None,
    variation: str,
) -> str:
    """Fill the generation template from the DNA, the options and the variation note."""
    structure = options.custom_structure or dna.structure.pattern
    bridge_line = f"- Bridge: {dna.structure.bridge_lines} lines\n" if dna.structure.bridge_lines else ""
    artist_requirements = ""
    if artist:
        artist_requirements = GENERATION_ARTIST_REQUIREMENTS.format(
            themes=_join(artist.writing_persona.themes),
            linguistic_base=artist.writing_persona.linguistic_base or "",
            devices=_join(artist.writing_persona.signature_devices),
        )
    return GENERATION_PROMPT.format(
        variation=variation,
        theme=options.theme,
        structure=" → ".join(structure),
        verse_lines=dna.structure.verse_lines,
        verse_scheme=dna.lyrical.rhyme_schemes.get("verse") or "ABAB",
        chorus_lines=dna.structure.chorus_lines,
        chorus_scheme=dna.lyrical.rhyme_schemes.get("chorus") or "AABB",
        bridge_line=bridge_line,
        syllables=dna.lyrical.syllables_per_line.average,
        vocabulary=dna.lyrical.vocabulary_level,
        signature_words=_join(dna.lyrical.signature_words[:5]),
        emotion=options.emotional_override or dna.emotional.primary_emotion,
        energy=f"{options.energy_level or dna.emotional.overall_intensity:g}",
        creativity=f"{options.creativity:g}",
        artist_requirements=artist_requirements,
        extra_instructions=_extra_instructions(options),
    )


def variation_note(options: GenerationOptions, index: int) -> str:
    if options.variation_mode == "diverse":
        style = "closer to the original style" if index == 0 else "more creative and different"
        return f"Variation {chr(65 + index)}: Make this version {style}"
    return f"Version {index + 1}: Keep very similar to the original style"


def parse_song_output(
    text: str,
    dna: SongDNA,
    options: GenerationOptions,
    artist: ArtistProfile | None = None,
) -> GeneratedSong:
    """Parse the TITLE/---/MOOD/BPM/KEY reply format into a GeneratedSong."""
    title_match = _TITLE_RE.search(text)
    mood_match = _MOOD_RE.search(text)
    bpm_match = _BPM_RE.search(text)
    key_match = _KEY_RE.search(text)
    lyrics_match = _LYRICS_RE.search(text)
    lyrics = lyrics_match.group(1).strip() if lyrics_match else text

    sections = [
        SongSection(
            section=match.group(1).strip(),
            lines=[line for line in match.group(2).strip().split("\n") if line.strip()],
        )
        for match in _SECTION_RE.finditer(lyrics)
    ]
    if not sections:
        sections = [
            SongSection(section="VERSE", lines=[line for line in lyrics.split("\n") if line.strip()])
        ]

    return GeneratedSong(
        title=title_match.group(1).strip() if title_match else "Untitled",
        lyrics=lyrics,
        structure=sections,
        theme=options.theme,
        estimated_bpm=int(bpm_match.group(1)) if bpm_match else None,
        suggested_key=key_match.group(1).strip() if key_match else None,
        emotional_tone=mood_match.group(1).strip() if mood_match else dna.emotional.primary_emotion,
        genre=", ".join(dna.genre_tags) or None,
        artist_attribution=artist.artist_name if artist and artist.artist_name else None,
        song_dna_id=dna.id,
        artist_profile_id=options.artist_profile_id,
        generation_params=options,
    )


async def generate_from_dna(
    dna: SongDNA,
    options: GenerationOptions,
    artist_profile: ArtistProfile | None = None,
    model_name: str | None = None,
    debug: bool = False,
) -> list[GeneratedSong]:
    """Generate ``options.count`` songs from a DNA.

    Raises ValueError when the DNA cannot drive generation and
    SongGenerationError when any model call fails.
    """
    llm.require_api_key()

    result = validate_song_dna(dna)
    if not result.valid:
        raise ValueError(f"Invalid Song DNA: {'; '.join(result.errors)}")
    ok, reason = can_generate_from_dna(dna)
    if not ok:
        raise ValueError(f"Cannot generate from DNA: {reason}")
    options_result = validate_generation_options(options)
    if not options_result.valid:
        raise ValueError(f"Invalid generation options: {'; '.join(options_result.errors)}")
    for warning in result.warnings + options_result.warnings:
        log.warning("Generation input: %s", warning)

    system_prompt = build_system_prompt(dna, artist_profile)
    songs: list[GeneratedSong] = []
    for i in range(options.count):
        prompt = build_generation_prompt(dna, options, artist_profile, variation_note(options, i))
        try:
            text = llm.complete(system_prompt, prompt, model_name=model_name, debug=debug)
        except Exception as e:
            log.error("Error generating song %d: %s", i + 1, e, exc_info=True)
            raise SongGenerationError(f"Failed to generate song {i + 1}") from e
        song = parse_song_output(text, dna, options, artist_profile)
        log.info("Generated song %d/%d: %s", i + 1, options.count, song.title)
        songs.append(song)
    return songs


async def generate_song_title(theme: str, model_name: str | None = None) -> str:
    llm.require_api_key()
    try:
        text = llm.complete(TITLE_SYSTEM_PROMPT, TITLE_PROMPT.format(theme=theme), model_name=model_name)
    except Exception as e:
        log.error("Error generating title: %s", e, exc_info=True)
        return "Untitled"
    return text.strip() or "Untitled"
