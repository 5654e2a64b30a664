"""Multi-syllable rhyme detection over the last few syllables of a line."""

from __future__ import annotations

import math
import re
from typing import Literal

from pydantic import BaseModel, Field

from director_studio.lyrics.rhyme import scheme_letter
from director_studio.lyrics.syllables import break_word_into_syllables

RhymeStrength = Literal["perfect", "strong", "moderate", "weak", "none"]

# Insertion order is the match order.
PHONETIC_MAP: dict[str, str] = {
    "less": "ləs", "ness": "nəs", "ess": "əs", "ous": "əs",
    "ar": "ɑr", "arches": "ɑrtʃəz", "arges": "ɑrdʒəz", "arge": "ɑrdʒ",
    "arch": "ɑrtʃ", "arden": "ɑrdən", "arpet": "ɑrpət", "arted": "ɑrtəd",
    "ice": "ɪs", "fice": "fɪs", "ish": "ɪʃ", "ished": "ɪʃt", "ious": "ɪəs",
    "idge": "ɪdʒ", "tridge": "trɪdʒ", "age": "ɪdʒ",
    "tion": "ʃən", "sion": "ʃən", "ution": "uʃən",
    "ture": "tʃər", "cher": "tʃər", "tures": "tʃərz",
    "im": "ɪm", "tim": "tɪm", "tem": "təm", "em": "əm",
    "en": "ən", "in": "ɪn", "pen": "pən",
    "ine": "aɪn", "ime": "aɪm", "yme": "aɪm",
    "ind": "aɪnd", "ined": "aɪnd", "inned": "ɪnd",
}

SYLLABLE_RHYME_GROUPS = [
    ["less", "ness", "ess", "ous"],
    ["ar", "arch", "arge", "art"],
    ["ches", "ges", "dges"],
    ["ice", "ish", "ished", "is"],
    ["idge", "age", "edge"],
    ["ture", "cher", "sure"],
    ["tion", "sion", "ution"],
    ["im", "tim", "dim", "em", "tem"],
    ["en", "in", "pen", "kin"],
    ["ine", "ime", "ind", "imed"],
    ["ot", "op", "ock", "ought"],
]


class EndingSyllables(BaseModel):
    syllables: list[str] = Field(default_factory=list)
    phonetic: str = ""
    raw: str = ""


class RhymeMatch(BaseModel):
    rhymes: bool
    strength: RhymeStrength
    pattern: str | None = None
    syllable_match: int = 0


class LineRhymeInfo(BaseModel):
    line: int
    ending: str
    syllables: list[str]
    rhyme_group: str


class RhymeSchemeAnalysis(BaseModel):
    pattern: str = ""
    groups: dict[str, list[str]] = Field(default_factory=dict)
    analysis: list[LineRhymeInfo] = Field(default_factory=list)


def _line_words(line: str) -> list[str]:
    cleaned = re.sub(r"[^\w\s'-]", "", line.lower())
    return cleaned.split()


def syllables_to_phonetic(syllables: list[str]) -> str:
    if not syllables:
        return ""
    joined = "".join(syllables)
    for pattern, phonetic in PHONETIC_MAP.items():
        if joined.endswith(pattern):
            return phonetic

    parts = []
    for syllable in syllables:
        for pattern, phonetic in PHONETIC_MAP.items():
            if syllable.endswith(pattern):
                parts.append(phonetic)
                break
        else:
            parts.append(syllable)
    return "".join(parts)


def extract_ending_syllables(line: str, count: int = 3) -> EndingSyllables:
    """Collect the last ``count`` syllables of a line, walking words backwards."""
    words = _line_words(line)
    if not words:
        return EndingSyllables()

    collected: list[str] = []
    for word in reversed(words):
        if len(collected) >= count:
            break
        for syllable in reversed(break_word_into_syllables(word)):
            if len(collected) >= count:
                break
            collected.insert(0, syllable)

    raw = "".join(words[-math.ceil(count / 1.5):])
    return EndingSyllables(
        syllables=collected,
        phonetic=syllables_to_phonetic(collected),
        raw=raw,
    )


def syllables_rhyme(syl1: str, syl2: str) -> bool:
    if not syl1 or not syl2:
        return False
    if syl1 == syl2:
        return True
    for group in SYLLABLE_RHYME_GROUPS:
        in_group1 = any(syl1.endswith(p) for p in group)
        in_group2 = any(syl2.endswith(p) for p in group)
        if in_group1 and in_group2:
            return True
    return len(syl1) >= 2 and len(syl2) >= 2 and syl1[-2:] == syl2[-2:]


def check_multi_syllable_rhyme(line1: str, line2: str) -> RhymeMatch:
    """Grade how strongly two line endings rhyme."""
    ending1 = extract_ending_syllables(line1, 3)
    ending2 = extract_ending_syllables(line2, 3)
    if not ending1.syllables or not ending2.syllables:
        return RhymeMatch(rhymes=False, strength="none")

    matching = 0
    for syl1, syl2 in zip(reversed(ending1.syllables), reversed(ending2.syllables)):
        if not syllables_rhyme(syl1, syl2):
            break
        matching += 1

    if matching >= 3 or ending1.phonetic == ending2.phonetic:
        return RhymeMatch(
            rhymes=True,
            strength="perfect",
            pattern=f"{'-'.join(ending1.syllables)}/{'-'.join(ending2.syllables)}",
            syllable_match=matching,
        )
    if matching == 2:
        return RhymeMatch(
            rhymes=True,
            strength="strong",
            pattern=f"{'-'.join(ending1.syllables[-2:])}/{'-'.join(ending2.syllables[-2:])}",
            syllable_match=matching,
        )
    if matching == 1:
        if ending1.raw[-4:] == ending2.raw[-4:]:
            return RhymeMatch(
                rhymes=True, strength="moderate", pattern=ending1.raw[-4:], syllable_match=1
            )
        return RhymeMatch(
            rhymes=True, strength="weak", pattern=ending1.syllables[-1], syllable_match=1
        )
    return RhymeMatch(rhymes=False, strength="none")


def detect_multi_syllable_rhyme_scheme(lines: list[str]) -> RhymeSchemeAnalysis:
    """Rhyme scheme where a line joins a group only through a better-than-weak rhyme."""
    result = RhymeSchemeAnalysis()
    if not lines:
        return result

    pattern = []
    labelled: list[LineRhymeInfo] = []
    for i, line in enumerate(lines):
        ending = extract_ending_syllables(line, 3)
        if not ending.syllables:
            pattern.append("-")
            continue

        group = ""
        for previous in labelled:
            match = check_multi_syllable_rhyme(line, lines[previous.line])
            if match.rhymes and match.strength != "weak":
                group = previous.rhyme_group
                break
        if not group:
            group = scheme_letter(len(result.groups))

        ending_str = "-".join(ending.syllables)
        pattern.append(group)
        result.groups.setdefault(group, []).append(ending_str)
        info = LineRhymeInfo(line=i, ending=ending_str, syllables=ending.syllables, rhyme_group=group)
        labelled.append(info)

    result.pattern = "".join(pattern)
    result.analysis = labelled
    return result
