"""Flow, structure and repetition analysis of lyrics without an LLM."""

from __future__ import annotations

import math
import re
from collections import Counter

from pydantic import BaseModel, Field

from director_studio.lyrics.rhyme import detect_rhyme_scheme, is_rhyme
from director_studio.lyrics.syllables import count_line_syllables, count_syllables
from director_studio.models.song_dna import (
    RepetitionPattern,
    SongDNA,
    SyllableStats,
    create_blank_song_dna,
)

SECTION_MARKERS: dict[str, re.Pattern] = {
    "verse": re.compile(r"^\[?verse\s*\d*\]?:?$", re.IGNORECASE),
    "chorus": re.compile(r"^\[?chorus\]?:?$", re.IGNORECASE),
    "bridge": re.compile(r"^\[?bridge\]?:?$", re.IGNORECASE),
    "pre-chorus": re.compile(r"^\[?pre[- ]?chorus\]?:?$", re.IGNORECASE),
    "outro": re.compile(r"^\[?outro\]?:?$", re.IGNORECASE),
    "intro": re.compile(r"^\[?intro\]?:?$", re.IGNORECASE),
    "hook": re.compile(r"^\[?hook\]?:?$", re.IGNORECASE),
}

_SECTION_SPLIT = re.compile(r"\[([^\]]+)\]")
MAX_REPETITIONS = 5


class FlowAnalysis(BaseModel):
    syllable_pattern: list[int] = Field(default_factory=list)
    average_syllables: float = 0.0
    variance: float = 0.0
    consistency: float = 0.0
    flow_type: str = "minimal"


def lyric_lines(lyrics: str) -> list[str]:
    """Non-empty lines that are not ``[Section]`` markers."""
    return [
        line.strip()
        for line in lyrics.split("\n")
        if line.strip() and not line.startswith("[")
    ]


def split_sections(lyrics: str) -> list[str]:
    """Section bodies between ``[Marker]`` lines; empty bodies are dropped."""
    parts = _SECTION_SPLIT.split(lyrics)
    return [part for part in parts[::2] if part.strip()]


def detect_song_sections(lyrics: str) -> list[str]:
    sections: list[str] = []
    for line in lyrics.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        for name, marker in SECTION_MARKERS.items():
            if marker.match(stripped):
                if name not in sections:
                    sections.append(name)
                break
    return sections or ["verse", "chorus"]


def analyze_flow_pattern(text: str) -> FlowAnalysis:
    """Per-line syllable counts and how evenly they are distributed."""
    counts = [count_line_syllables(line) for line in lyric_lines(text)]
    if not counts:
        return FlowAnalysis()

    average = sum(counts) / len(counts)
    variance = sum((count - average) ** 2 for count in counts) / len(counts)
    consistency = 1 - math.sqrt(variance) / average if average else 0.0

    flow_type = "varied"
    if consistency > 0.8:
        flow_type = "consistent"
    if consistency < 0.5:
        flow_type = "complex"
    if average > 12:
        flow_type = "dense"
    if average < 6:
        flow_type = "minimal"

    return FlowAnalysis(
        syllable_pattern=counts,
        average_syllables=average,
        variance=variance,
        consistency=consistency,
        flow_type=flow_type,
    )


def extract_signature_words(lyrics: str) -> list[str]:
    """Words longer than three letters used more than twice, most frequent first."""
    words = re.sub(r"[^\w\s]", "", lyrics.lower()).split()
    frequency = Counter(word for word in words if len(word) > 3)
    return [word for word, count in frequency.most_common() if count > 2][:10]


def internal_rhyme_density(lyrics: str) -> int:
    """Rhyming word pairs within lines, scaled to 0..10."""
    lines = lyric_lines(lyrics)
    if not lines:
        return 0
    pairs = 0
    for line in lines:
        words = line.split()
        for i in range(len(words) - 1):
            for j in range(i + 1, len(words)):
                if is_rhyme(words[i], words[j]):
                    pairs += 1
    return min(10, round(pairs / len(lines) * 2))


def detect_repetitions(lyrics: str) -> list[RepetitionPattern]:
    """Lines that occur more than once, with their line positions."""
    positions: dict[str, list[int]] = {}
    for index, line in enumerate(lyric_lines(lyrics)):
        positions.setdefault(line, []).append(index)
    repeated = [
        RepetitionPattern(phrase=line, occurrences=len(found), positions=found)
        for line, found in positions.items()
        if len(found) > 1
    ]
    return repeated[:MAX_REPETITIONS]


def estimate_tempo(average_syllables: float) -> int:
    if average_syllables < 6:
        return 60
    if average_syllables < 8:
        return 80
    if average_syllables < 10:
        return 100
    if average_syllables < 12:
        return 120
    return 140


def most_common_pattern(patterns: list[str]) -> str:
    if not patterns:
        return "VARIED"
    return Counter(patterns).most_common(1)[0][0]


def quick_analyze(lyrics: str) -> SongDNA:
    """Instant structural summary: sections, syllables and rhyme schemes."""
    lines = [line for line in lyrics.split("\n") if line.strip()]
    counts = [sum(count_syllables(word) for word in line.split()) for line in lines]
    average = sum(counts) / len(counts) if counts else 0.0

    dna = create_blank_song_dna()
    dna.reference_song.lyrics = lyrics
    dna.structure.pattern = detect_song_sections(lyrics)
    dna.structure.verse_lines = 4
    dna.structure.chorus_lines = 4
    dna.structure.total_bars = len(lines)
    dna.lyrical.syllables_per_line = SyllableStats(average=average, variance=0.0, distribution=counts)

    for i, body in enumerate(split_sections(lyrics)):
        section_type = "verse" if i % 2 == 0 else "chorus"
        section_lines = [line for line in body.split("\n") if line.strip()]
        dna.lyrical.rhyme_schemes.setdefault(section_type, detect_rhyme_scheme(section_lines))
    return dna
