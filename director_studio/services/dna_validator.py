"""Integrity checks for Song DNA records and generation options."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from director_studio.models.song_dna import GenerationOptions, SongDNA, utc_now_iso


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _as_dict(value: Any) -> dict | None:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def validate_song_dna(dna: SongDNA | dict | None) -> ValidationResult:
    """Check that a DNA carries what generation needs.

    Missing lyrics or syllable statistics are errors; missing titles,
    patterns and emotions are only warnings.
    """
    data = _as_dict(dna)
    errors: list[str] = []
    warnings: list[str] = []

    if not data:
        return ValidationResult(valid=False, errors=["DNA object is null or undefined"])

    if not data.get("id"):
        warnings.append("DNA is missing an ID - will use 'unknown'")

    reference = data.get("reference_song")
    if not reference:
        errors.append("DNA is missing reference_song data")
    else:
        if not reference.get("title"):
            warnings.append("Reference song missing title")
        if not reference.get("artist"):
            warnings.append("Reference song missing artist")
        if not reference.get("lyrics"):
            errors.append("Reference song missing lyrics")

    structure = data.get("structure")
    if not structure:
        errors.append("DNA is missing structure data")
    else:
        if not structure.get("pattern"):
            warnings.append("Structure pattern is empty")
        if not isinstance(structure.get("total_bars"), (int, float)):
            warnings.append("Total bars is not a number")

    lyrical = data.get("lyrical")
    if not lyrical:
        errors.append("DNA is missing lyrical data")
    else:
        syllables = lyrical.get("syllables_per_line")
        if not syllables:
            errors.append("Missing syllables_per_line data - required for generation")
        else:
            average = syllables.get("average")
            if not isinstance(average, (int, float)) or average <= 0:
                errors.append("Invalid average syllables per line")
            if not isinstance(syllables.get("distribution"), list):
                warnings.append("Syllable distribution is not an array")
        if not isinstance(lyrical.get("rhyme_schemes"), dict) or not lyrical.get("rhyme_schemes"):
            warnings.append("Rhyme schemes data is missing or invalid")

    emotional = data.get("emotional")
    if not emotional:
        warnings.append("DNA is missing emotional data")
    elif not emotional.get("primary_emotion"):
        warnings.append("Primary emotion is missing")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate_generation_options(options: GenerationOptions | dict | None) -> ValidationResult:
    data = _as_dict(options)
    if not data:
        return ValidationResult(valid=False, errors=["Generation options are null or undefined"])

    errors: list[str] = []
    warnings: list[str] = []
    creativity = data.get("creativity")
    if isinstance(creativity, (int, float)):
        if creativity < 0:
            errors.append("Creativity cannot be negative")
        if creativity > 10:
            warnings.append("Creativity is above 10 - will be capped at 10")

    theme = data.get("theme")
    if not theme or not isinstance(theme, str):
        warnings.append("No theme specified - will use default")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def ensure_valid_dna(dna: SongDNA | dict) -> SongDNA:
    """Fill every missing or empty field of a partial DNA with a default."""
    data = _as_dict(dna) or {}
    now = utc_now_iso()
    structure = data.get("structure") or {}
    lyrical = data.get("lyrical") or {}
    emotional = data.get("emotional") or {}
    fallback_id = (
        f"dna_fallback_{int(datetime.now(timezone.utc).timestamp() * 1000)}_{uuid4().hex[:7]}"
    )

    return SongDNA.model_validate(
        {
            "id": data.get("id") or fallback_id,
            "reference_song": data.get("reference_song")
            or {"title": "Unknown", "artist": "Unknown", "lyrics": ""},
            "structure": {
                "pattern": structure.get("pattern") or [],
                "verse_lines": structure.get("verse_lines") or 4,
                "chorus_lines": structure.get("chorus_lines") or 4,
                "bridge_lines": structure.get("bridge_lines"),
                "total_bars": structure.get("total_bars") or 0,
                "sections": structure.get("sections") or [],
            },
            "lyrical": {
                "rhyme_schemes": lyrical.get("rhyme_schemes") or {},
                "syllables_per_line": lyrical.get("syllables_per_line")
                or {"average": 7, "variance": 1, "distribution": []},
                "vocabulary_level": lyrical.get("vocabulary_level") or "moderate",
                "signature_words": lyrical.get("signature_words") or [],
                "themes": lyrical.get("themes") or [],
                "metaphor_density": lyrical.get("metaphor_density") or 5,
                "alliteration_frequency": lyrical.get("alliteration_frequency") or 3,
                "internal_rhyme_density": lyrical.get("internal_rhyme_density") or 3,
                "repetition_patterns": lyrical.get("repetition_patterns") or [],
            },
            "musical": data.get("musical") or {},
            "emotional": {
                "primary_emotion": emotional.get("primary_emotion") or "neutral",
                "secondary_emotions": emotional.get("secondary_emotions") or [],
                "emotional_arc": emotional.get("emotional_arc") or [],
                "overall_intensity": emotional.get("overall_intensity") or 5,
                "sincerity_vs_irony": emotional.get("sincerity_vs_irony") or 0,
                "vulnerability_level": emotional.get("vulnerability_level") or 5,
            },
            "artist_profile_id": data.get("artist_profile_id"),
            "genre_tags": data.get("genre_tags") or [],
            "production_notes": data.get("production_notes"),
            "created_at": data.get("created_at") or now,
            "updated_at": data.get("updated_at") or now,
            "analysis_version": data.get("analysis_version") or "2.0-enhanced",
        }
    )


def can_generate_from_dna(dna: SongDNA | dict | None) -> tuple[bool, str | None]:
    """Quick check returning ``(can_generate, reason)``."""
    data = _as_dict(dna)
    if not data:
        return False, "No DNA data available"
    average = ((data.get("lyrical") or {}).get("syllables_per_line") or {}).get("average")
    if average is None or average == 0:
        return False, "Missing syllable analysis data"
    if average < 0:
        return False, "Invalid syllable count"
    return True, None
