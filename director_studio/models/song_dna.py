"""Song DNA: a structural and stylistic summary of a reference song."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

VocabularyLevel = Literal["simple", "moderate", "complex", "academic"]


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_dna_id() -> str:
    return f"dna_{int(datetime.now(timezone.utc).timestamp() * 1000)}_{uuid4().hex[:8]}"


class ReferenceSong(BaseModel):
    title: str = ""
    artist: str = ""
    lyrics: str = ""
    year: int | None = None
    genre: str | None = None


class SectionInfo(BaseModel):
    type: str
    start_line: int
    end_line: int
    rhyme_scheme: str | None = None


class SongStructure(BaseModel):
    """Section layout of the song."""

    pattern: list[str] = Field(default_factory=list, description="e.g. ['verse', 'chorus']")
    verse_lines: int = 0
    chorus_lines: int = 0
    bridge_lines: int | None = None
    pre_chorus_lines: int | None = None
    outro_lines: int | None = None
    total_bars: int = 0
    sections: list[SectionInfo] = Field(default_factory=list)


class SyllableStats(BaseModel):
    average: float = 0.0
    variance: float = 0.0
    distribution: list[int] = Field(default_factory=list, description="Syllables per line")


class RepetitionPattern(BaseModel):
    phrase: str
    occurrences: int
    positions: list[int] = Field(default_factory=list)


class LyricalPatterns(BaseModel):
    """Rhyme, syllable and vocabulary fingerprint."""

    rhyme_schemes: dict[str, str] = Field(
        default_factory=dict, description="Scheme per section type, e.g. {'verse': 'ABAB'}"
    )
    syllables_per_line: SyllableStats = Field(default_factory=SyllableStats)
    vocabulary_level: VocabularyLevel = "moderate"
    signature_words: list[str] = Field(default_factory=list)
    themes: list[str] = Field(default_factory=list)
    metaphor_density: float = Field(default=5, ge=0, le=10)
    alliteration_frequency: float = Field(default=3, ge=0, le=10)
    internal_rhyme_density: float = Field(default=3, ge=0, le=10)
    repetition_patterns: list[RepetitionPattern] = Field(default_factory=list)


class Dynamics(BaseModel):
    quiet_sections: list[str] = Field(default_factory=list)
    loud_sections: list[str] = Field(default_factory=list)
    build_sections: list[str] = Field(default_factory=list)


class MusicalDNA(BaseModel):
    tempo_bpm: int | None = None
    suggested_key: str | None = None
    time_signature: str | None = None
    energy_curve: list[float] = Field(default_factory=list, description="Energy per section (0-10)")
    hook_placement: list[int] = Field(default_factory=list)
    dynamics: Dynamics | None = None


class EmotionalArcPoint(BaseModel):
    section: str
    emotion: str
    intensity: float = Field(ge=1, le=10)


class EmotionalMapping(BaseModel):
    primary_emotion: str = ""
    secondary_emotions: list[str] = Field(default_factory=list)
    emotional_arc: list[EmotionalArcPoint] = Field(default_factory=list)
    overall_intensity: float = Field(default=5, ge=1, le=10)
    sincerity_vs_irony: float = Field(default=0, ge=-5, le=5)
    vulnerability_level: float = Field(default=5, ge=0, le=10)


class SongDNA(BaseModel):
    """Complete analysis of a reference song, used as a generation template."""

    id: str = Field(default_factory=new_dna_id)
    reference_song: ReferenceSong = Field(default_factory=ReferenceSong)
    structure: SongStructure = Field(default_factory=SongStructure)
    lyrical: LyricalPatterns = Field(default_factory=LyricalPatterns)
    musical: MusicalDNA = Field(default_factory=MusicalDNA)
    emotional: EmotionalMapping = Field(default_factory=EmotionalMapping)
    artist_profile_id: str | None = None
    genre_tags: list[str] = Field(default_factory=list)
    production_notes: str | None = None
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)
    analysis_version: str = "1.0"


def create_blank_song_dna() -> SongDNA:
    """Return an empty DNA record with neutral defaults."""
    return SongDNA()


class AnalysisRequest(BaseModel):
    lyrics: str
    title: str | None = None
    artist: str | None = None
    artist_profile_id: str | None = None
    year: int | None = None
    genre: str | None = None


class ConfidenceScores(BaseModel):
    structure: float = Field(ge=0, le=1)
    rhyme: float = Field(ge=0, le=1)
    emotion: float = Field(ge=0, le=1)
    overall: float = Field(ge=0, le=1)


class AnalysisResult(BaseModel):
    song_dna: SongDNA
    confidence_scores: ConfidenceScores
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Controls for generating new songs from a DNA."""

    theme: str = Field(description="What the new song should be about")
    creativity: float = Field(default=5, ge=0, le=10)
    complexity_adjustment: Literal["simpler", "match", "more_complex"] = "match"
    modernize: bool = False
    explicit_allowed: bool = True
    custom_structure: list[str] | None = None
    target_length: Literal["short", "medium", "long"] | int | None = None
    force_rhyme_scheme: str | None = None
    count: int = Field(default=2, ge=1, le=5)
    variation_mode: Literal["similar", "diverse"] = "diverse"
    emotional_override: str | None = None
    energy_level: float | None = Field(default=None, ge=1, le=10)
    artist_profile_id: str | None = None


class SongSection(BaseModel):
    section: str
    lines: list[str] = Field(default_factory=list)


class GeneratedSong(BaseModel):
    id: str = Field(default_factory=lambda: f"song_{uuid4().hex[:8]}")
    title: str
    lyrics: str
    structure: list[SongSection] = Field(default_factory=list)
    theme: str
    estimated_bpm: int | None = None
    suggested_key: str | None = None
    emotional_tone: str = ""
    genre: str | None = None
    artist_attribution: str | None = None
    song_dna_id: str
    artist_profile_id: str | None = None
    generation_params: GenerationOptions
    created_at: str = Field(default_factory=utc_now_iso)


class StoredDNAMetadata(BaseModel):
    title: str
    artist: str
    saved_at: str = Field(default_factory=utc_now_iso)
    last_modified: str = Field(default_factory=utc_now_iso)
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    version: str = "2.0"
    analysis_version: str = "2.0-enhanced"


class StoredSongDNA(BaseModel):
    """A DNA record as kept in the library."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    dna: SongDNA
    metadata: StoredDNAMetadata


class ExportedSongMetadata(BaseModel):
    theme: str | None = None
    mood: str | None = None
    bpm: int | None = None
    key: str | None = None
    generated_at: str | None = None
    source_dna: str | None = None


class ExportedSongData(BaseModel):
    """A generated song packaged for the music-video shot generator."""

    song_title: str
    artist: str
    lyrics: str
    genre: str | None = None
    mv_concept: str = ""
    metadata: ExportedSongMetadata = Field(default_factory=ExportedSongMetadata)
