"""Song DNA analysis: heuristic structure plus an LLM pass for meaning."""

from __future__ import annotations

import json
import logging
import re
import time

from pydantic import BaseModel, Field

from director_studio.agent import llm
from director_studio.agent.prompts import (
    ANALYSIS_FALLBACK_SUFFIX,
    ANALYSIS_FALLBACK_SYSTEM_PROMPT,
    ANALYSIS_PROMPT,
    ANALYSIS_SYSTEM_PROMPT,
    THEMATIC_PROMPT,
    THEMATIC_SYSTEM_PROMPT,
)
from director_studio.lyrics.analysis import (
    FlowAnalysis,
    analyze_flow_pattern,
    detect_repetitions,
    detect_song_sections,
    estimate_tempo,
    extract_signature_words,
    internal_rhyme_density,
    most_common_pattern,
    split_sections,
)
from director_studio.lyrics.multisyllable import detect_multi_syllable_rhyme_scheme
from director_studio.lyrics.phonetics import find_internal_rhymes
from director_studio.lyrics.syllables import count_syllables
from director_studio.models.artist import ArtistProfile
from director_studio.models.song_dna import (
    AnalysisRequest,
    AnalysisResult,
    ConfidenceScores,
    EmotionalArcPoint,
    ReferenceSong,
    SectionInfo,
    SongDNA,
    SyllableStats,
    create_blank_song_dna,
)
from director_studio.services.artist_store import ArtistBank

log = logging.getLogger(__name__)

ENHANCED_ANALYSIS_VERSION = "2.0-enhanced"
VOCABULARY_LEVELS = {"simple", "moderate", "complex", "academic"}

STRUCTURED_CONFIDENCE = ConfidenceScores(structure=0.85, rhyme=0.8, emotion=0.75, overall=0.8)
FALLBACK_CONFIDENCE = ConfidenceScores(structure=0.7, rhyme=0.7, emotion=0.65, overall=0.7)
BASIC_CONFIDENCE = ConfidenceScores(structure=0.3, rhyme=0.2, emotion=0.1, overall=0.2)
ENHANCED_CONFIDENCE = ConfidenceScores(structure=0.95, rhyme=0.95, emotion=0.75, overall=0.9)
STRUCTURAL_ONLY_CONFIDENCE = ConfidenceScores(structure=0.9, rhyme=0.85, emotion=0.3, overall=0.7)


class AISection(BaseModel):
    type: str
    line_count: int = 4
    rhyme_scheme: str = ""


class AIArcPoint(BaseModel):
    section: str = ""
    emotion: str = ""
    intensity: float = 5


class AIAnalysis(BaseModel):
    """Shape of the JSON analysis requested from the model."""

    sections: list[AISection]
    overall_pattern: list[str]
    themes: list[str]
    primary_emotion: str
    emotional_arc: list[AIArcPoint] = Field(default_factory=list)
    vocabulary_complexity: str = "moderate"
    signature_words: list[str] = Field(default_factory=list)
    metaphor_examples: list[str] = Field(default_factory=list)
    metaphor_density: float = 5
    alliteration_frequency: float = 3
    internal_rhyme_density: float = 3
    repetition_level: float = 0
    suggested_tempo: str = ""
    energy_level: float = 5
    suggested_key: str | None = None


class SectionAnalysis(BaseModel):
    lines: list[str]
    flow: FlowAnalysis
    rhyme_pattern: str
    internal_rhyme_pairs: int

    @property
    def line_count(self) -> int:
        return len(self.lines)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _vocabulary_level(value: object) -> str:
    level = str(value or "").strip().lower()
    if level == "technical":
        return "academic"
    return level if level in VOCABULARY_LEVELS else "moderate"


def _parse_tempo(value: str | None) -> int | None:
    match = re.search(r"\d+", value or "")
    return int(match.group()) if match else None


def _resolve_artist(
    artist_profile_id: str | None, artist_bank: ArtistBank | None
) -> ArtistProfile | None:
    if not artist_profile_id or artist_bank is None:
        return None
    artist = artist_bank.get(artist_profile_id)
    if artist is None:
        log.warning("Artist profile %s not found", artist_profile_id)
    return artist


def _reference(request: AnalysisRequest) -> ReferenceSong:
    return ReferenceSong(
        title=request.title or "Untitled",
        artist=request.artist or "Unknown Artist",
        lyrics=request.lyrics,
        year=request.year,
        genre=request.genre,
    )


def _artist_suggestion(artist: ArtistProfile | None, applied: str, missing: str) -> str:
    return applied.format(name=artist.artist_name) if artist else missing


def _line_syllables(lyrics: str) -> SyllableStats:
    lines = [line for line in lyrics.split("\n") if line.strip()]
    counts = [sum(count_syllables(word) for word in line.split()) for line in lines]
    if not counts:
        return SyllableStats()
    average = sum(counts) / len(counts)
    variance = sum((c - average) ** 2 for c in counts) / len(counts)
    return SyllableStats(average=average, variance=variance, distribution=counts)


def _section_line_count(sections: list[AISection], kind: str) -> int | None:
    for section in sections:
        if section.type.strip().lower().startswith(kind):
            return section.line_count
    return None


def _dna_from_ai(
    ai: AIAnalysis,
    request: AnalysisRequest,
    stats: SyllableStats,
    total_lines: int,
    artist: ArtistProfile | None,
) -> SongDNA:
    dna = create_blank_song_dna()
    dna.reference_song = _reference(request)

    dna.structure.pattern = ai.overall_pattern or ["verse"]
    dna.structure.verse_lines = _section_line_count(ai.sections, "verse") or 4
    dna.structure.chorus_lines = _section_line_count(ai.sections, "chorus") or 4
    dna.structure.bridge_lines = _section_line_count(ai.sections, "bridge")
    dna.structure.total_bars = total_lines
    start = 0
    for section in ai.sections:
        dna.structure.sections.append(
            SectionInfo(
                type=section.type,
                start_line=start,
                end_line=start + section.line_count,
                rhyme_scheme=section.rhyme_scheme,
            )
        )
        start += section.line_count

    lyrical = dna.lyrical
    lyrical.rhyme_schemes = {s.type: s.rhyme_scheme for s in ai.sections}
    lyrical.syllables_per_line = stats
    lyrical.vocabulary_level = _vocabulary_level(ai.vocabulary_complexity)
    lyrical.signature_words = ai.signature_words
    lyrical.themes = ai.themes
    lyrical.metaphor_density = _clamp(ai.metaphor_density, 0, 10)
    lyrical.alliteration_frequency = _clamp(ai.alliteration_frequency, 0, 10)
    lyrical.internal_rhyme_density = _clamp(ai.internal_rhyme_density, 0, 10)

    arc = [
        EmotionalArcPoint(
            section=point.section, emotion=point.emotion, intensity=_clamp(point.intensity, 1, 10)
        )
        for point in ai.emotional_arc
    ]
    dna.musical.tempo_bpm = _parse_tempo(ai.suggested_tempo)
    dna.musical.suggested_key = ai.suggested_key
    dna.musical.energy_curve = [point.intensity for point in arc]

    dna.emotional.primary_emotion = ai.primary_emotion or "Neutral"
    dna.emotional.emotional_arc = arc
    dna.emotional.overall_intensity = _clamp(ai.energy_level, 1, 10)

    dna.artist_profile_id = request.artist_profile_id
    dna.genre_tags = list(artist.genres) if artist else []
    dna.production_notes = (
        f"Tempo: {ai.suggested_tempo or 'Unknown'}, Energy: {ai.energy_level or 5:g}/10"
    )
    dna.analysis_version = "1.0"
    return dna


def _lenient_ai_analysis(data: dict) -> AIAnalysis:
    """Fill the gaps of a free-text reply before validating it."""
    return AIAnalysis.model_validate(
        {
            **data,
            "sections": data.get("sections") or [],
            "overall_pattern": data.get("overall_pattern") or ["verse"],
            "themes": data.get("themes") or [],
            "primary_emotion": data.get("primary_emotion") or "Neutral",
            "emotional_arc": data.get("emotional_arc") or [],
            "signature_words": data.get("signature_words") or [],
            "metaphor_density": data.get("metaphor_density") or 5,
            "alliteration_frequency": data.get("alliteration_frequency") or 3,
            "internal_rhyme_density": data.get("internal_rhyme_density") or 3,
            "energy_level": data.get("energy_level") or 5,
            "suggested_tempo": str(data.get("suggested_tempo") or ""),
        }
    )


async def analyze_song_dna(
    request: AnalysisRequest,
    artist_bank: ArtistBank | None = None,
    model_name: str | None = None,
    debug: bool = False,
) -> AnalysisResult:
    """Analyze lyrics into a Song DNA using an LLM for the deep analysis.

    Tries a JSON-mode request first, then a free-text request whose JSON is
    extracted by hand, and finally falls back to the heuristic structure alone.
    The confidence scores report which path produced the result.
    """
    llm.require_api_key()
    start = time.time()

    artist = _resolve_artist(request.artist_profile_id, artist_bank)
    lines = [line for line in request.lyrics.split("\n") if line.strip()]
    sections = detect_song_sections(request.lyrics)
    stats = _line_syllables(request.lyrics)

    artist_style = ""
    if artist:
        artist_style = (
            f"Artist Style: {', '.join(artist.genres)}, {artist.vocal_description.tone_texture or ''}\n"
        )
    prompt = ANALYSIS_PROMPT.format(
        title=request.title or "Unknown",
        artist=request.artist or "Unknown",
        artist_style=artist_style,
        lyrics=request.lyrics,
    )
    warnings: list[str] = []

    try:
        text = llm.complete(
            ANALYSIS_SYSTEM_PROMPT, prompt, model_name=model_name, json_mode=True, debug=debug
        )
        ai = AIAnalysis.model_validate(json.loads(text))
        dna = _dna_from_ai(ai, request, stats, len(lines), artist)
        log.info("Structured analysis completed in %.2fs", time.time() - start)
        return AnalysisResult(
            song_dna=dna,
            confidence_scores=STRUCTURED_CONFIDENCE,
            warnings=warnings,
            suggestions=[
                "Review detected sections for accuracy",
                "Verify rhyme schemes match your interpretation",
                _artist_suggestion(
                    artist,
                    'Artist profile "{name}" styles applied',
                    "Consider selecting an artist for enhanced generation",
                ),
            ],
        )
    except Exception as e:
        log.warning("Structured analysis failed, retrying with free text: %s", e)
        warnings.append(f"Structured analysis failed: {e}")

    try:
        text = llm.complete(
            ANALYSIS_FALLBACK_SYSTEM_PROMPT,
            prompt + ANALYSIS_FALLBACK_SUFFIX,
            model_name=model_name,
            debug=debug,
        )
        ai = _lenient_ai_analysis(llm.extract_json(text))
        dna = _dna_from_ai(ai, request, stats, len(lines), artist)
        log.info("Fallback analysis completed in %.2fs", time.time() - start)
        return AnalysisResult(
            song_dna=dna,
            confidence_scores=FALLBACK_CONFIDENCE,
            warnings=warnings,
            suggestions=[
                "Analysis completed using fallback method",
                "Review detected sections for accuracy",
                _artist_suggestion(
                    artist,
                    'Artist profile "{name}" styles applied',
                    "Consider selecting an artist for enhanced generation",
                ),
            ],
        )
    except Exception as e:
        log.error("Fallback analysis failed: %s", e, exc_info=True)
        warnings.append(f"Fallback analysis failed: {e}")

    dna = create_blank_song_dna()
    dna.reference_song = _reference(request)
    dna.structure.total_bars = len(lines)
    dna.structure.pattern = sections
    dna.lyrical.syllables_per_line = stats
    dna.artist_profile_id = request.artist_profile_id
    dna.genre_tags = list(artist.genres) if artist else []
    return AnalysisResult(
        song_dna=dna,
        confidence_scores=BASIC_CONFIDENCE,
        warnings=warnings,
        suggestions=[
            "AI analysis failed - showing basic structural analysis only",
            "Check your OpenAI API key is valid",
            "Try again with a shorter excerpt of lyrics",
        ],
    )


def analyze_sections(lyrics: str) -> list[SectionAnalysis]:
    """Per-section flow, multi-syllable rhyme scheme and internal rhymes."""
    analyses = []
    for body in split_sections(lyrics):
        lines = [line for line in body.split("\n") if line.strip()]
        pairs = sum(len(find_internal_rhymes(line).pairs) for line in lines)
        analyses.append(
            SectionAnalysis(
                lines=lines,
                flow=analyze_flow_pattern(body),
                rhyme_pattern=detect_multi_syllable_rhyme_scheme(lines).pattern,
                internal_rhyme_pairs=pairs,
            )
        )
    return analyses


def _structural_dna(
    request: AnalysisRequest,
    section_analyses: list[SectionAnalysis],
    overall: FlowAnalysis,
    artist: ArtistProfile | None,
) -> SongDNA:
    dna = create_blank_song_dna()
    dna.reference_song = _reference(request)

    section_types = ["verse" if i % 2 == 0 else "chorus" for i in range(len(section_analyses))]
    dna.structure.pattern = section_types
    dna.structure.verse_lines = section_analyses[0].line_count if section_analyses else 4
    dna.structure.chorus_lines = (
        section_analyses[1].line_count if len(section_analyses) > 1 else 4
    )
    dna.structure.total_bars = len(overall.syllable_pattern)
    start = 0
    for kind, analysis in zip(section_types, section_analyses):
        dna.structure.sections.append(
            SectionInfo(
                type=kind,
                start_line=start,
                end_line=start + analysis.line_count,
                rhyme_scheme=analysis.rhyme_pattern,
            )
        )
        start += analysis.line_count
        dna.lyrical.rhyme_schemes.setdefault(kind, analysis.rhyme_pattern)

    dna.lyrical.syllables_per_line = SyllableStats(
        average=overall.average_syllables,
        variance=overall.variance,
        distribution=overall.syllable_pattern,
    )
    dna.lyrical.signature_words = extract_signature_words(request.lyrics)
    dna.lyrical.internal_rhyme_density = internal_rhyme_density(request.lyrics)
    dna.lyrical.repetition_patterns = detect_repetitions(request.lyrics)

    dna.musical.tempo_bpm = estimate_tempo(overall.average_syllables)
    dna.musical.energy_curve = [
        _clamp(_round_half_up(a.flow.average_syllables / 2), 0, 10) for a in section_analyses
    ]

    dna.artist_profile_id = request.artist_profile_id
    dna.genre_tags = list(artist.genres) if artist else []
    dna.production_notes = (
        f"Flow: {overall.flow_type}, Consistency: {overall.consistency * 100:.0f}%, "
        f"Avg Syllables: {overall.average_syllables:.1f}"
    )
    dna.analysis_version = ENHANCED_ANALYSIS_VERSION
    return dna


def _list_value(value: object) -> list:
    return value if isinstance(value, list) else []


def _emotional_arc(transitions: object) -> list[EmotionalArcPoint]:
    arc = []
    for item in _list_value(transitions):
        if not isinstance(item, dict):
            continue
        arc.append(
            EmotionalArcPoint(
                section=str(item.get("location") or item.get("section") or ""),
                emotion=str(item.get("to") or item.get("emotion") or ""),
                intensity=_clamp(float(item.get("intensity") or 5), 1, 10),
            )
        )
    return arc


async def analyze_song_dna_enhanced(
    request: AnalysisRequest,
    artist_bank: ArtistBank | None = None,
    model_name: str | None = None,
    debug: bool = False,
) -> AnalysisResult:
    """Heuristic rhyme and flow analysis with an LLM pass for themes and emotion only.

    When the LLM pass fails, the structural analysis is still returned with a
    low emotion confidence.
    """
    llm.require_api_key()
    start = time.time()

    artist = _resolve_artist(request.artist_profile_id, artist_bank)
    section_analyses = analyze_sections(request.lyrics)
    overall = analyze_flow_pattern(request.lyrics)
    dna = _structural_dna(request, section_analyses, overall, artist)
    log.info(
        "Structural analysis: %d sections, %s flow, %.1f syllables/line",
        len(section_analyses),
        overall.flow_type,
        overall.average_syllables,
    )

    prompt = THEMATIC_PROMPT.format(
        title=request.title or "Unknown",
        artist=request.artist or "Unknown",
        lyrics=request.lyrics,
    )
    try:
        text = llm.complete(THEMATIC_SYSTEM_PROMPT, prompt, model_name=model_name, debug=debug)
        ai = llm.extract_json(text)
        themes = [str(t) for t in _list_value(ai.get("themes"))]
        arc = _emotional_arc(ai.get("emotional_transitions"))
    except Exception as e:
        log.error("Thematic analysis failed, returning structure only: %s", e, exc_info=True)
        return AnalysisResult(
            song_dna=dna,
            confidence_scores=STRUCTURAL_ONLY_CONFIDENCE,
            warnings=[f"Thematic analysis failed: {e}"],
            suggestions=[
                f"Syllable analysis complete: {overall.flow_type} flow",
                f"Average {overall.average_syllables:.1f} syllables per line",
                "AI enhancement failed - showing structural analysis only",
            ],
        )

    dna.lyrical.vocabulary_level = _vocabulary_level(ai.get("vocabulary_style"))
    dna.lyrical.themes = themes
    dna.lyrical.metaphor_density = _clamp(len(_list_value(ai.get("metaphors"))), 0, 10)
    dna.emotional.primary_emotion = str(ai.get("primary_emotion") or "Neutral")
    dna.emotional.emotional_arc = arc
    dna.emotional.overall_intensity = _clamp(_round_half_up(overall.average_syllables / 2), 1, 10)
    log.info("Enhanced analysis completed in %.2fs", time.time() - start)

    return AnalysisResult(
        song_dna=dna,
        confidence_scores=ENHANCED_CONFIDENCE,
        suggestions=[
            f"Flow type: {overall.flow_type} ({overall.average_syllables:.1f} syllables/line)",
            f"Rhyme consistency: {overall.consistency * 100:.0f}%",
            f"Most common pattern: {most_common_pattern([a.rhyme_pattern for a in section_analyses])}",
            _artist_suggestion(
                artist,
                'Artist profile "{name}" applied',
                "Select an artist for better generation",
            ),
        ],
    )
