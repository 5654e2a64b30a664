"""Approximate phonetic rhyme analysis, including slant and hip-hop rhymes."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field

from director_studio.lyrics.rhyme import last_word, scheme_letter
from director_studio.lyrics.syllables import clean_word

PhoneticStrength = Literal["perfect", "near", "slant", "assonance", "consonance", "none"]

# Applied in order as global substitutions.
PHONETIC_MAPPINGS: dict[str, str] = {
    "a": "æ", "ai": "eɪ", "ay": "eɪ", "au": "ɔː", "aw": "ɔː",
    "e": "ɛ", "ea": "iː", "ee": "iː", "ei": "eɪ", "ey": "eɪ",
    "i": "ɪ", "ie": "aɪ", "igh": "aɪ", "y": "aɪ",
    "o": "ɒ", "oa": "oʊ", "oe": "oʊ", "ow": "oʊ", "ou": "aʊ",
    "u": "ʌ", "ue": "uː", "ew": "uː", "oo": "uː",
    "ch": "tʃ", "sh": "ʃ", "th": "θ", "ph": "f", "gh": "",
    "ck": "k", "qu": "kw", "tion": "ʃən", "sion": "ʃən",
    "mb": "m", "mn": "m", "kn": "n", "wr": "r", "ps": "s",
    "gn": "n", "rh": "r", "wh": "w",
}

ENDING_PATTERNS: dict[str, list[str]] = {
    "əs": ["ess", "less", "ness", "ous", "us", "ice", "ace", "ence"],
    "ɑr": ["ar", "arges", "arches", "arpet", "arded", "ardless", "artless", "arted"],
    "ɪʃ": ["ish", "ished", "ice", "iss", "is", "ious", "eous"],
    "ɪdʒ": ["idge", "age", "edge", "ege"],
    "iːs": ["eus", "esis", "eces", "eases", "eeses", "ises"],
    "tʃər": ["ture", "cher", "tcher"],
    "uːʃən": ["ution", "usion"],
    "ɪm": ["im", "em", "ym", "um"],
    "ən": ["en", "in", "on", "an"],
}

HIPHOP_RHYME_GROUPS: dict[str, list[str]] = {
    "ot_group": [
        "plot", "plots", "got", "not", "lot", "hot", "shot", "spot", "knot", "pot",
        "op", "ops", "cop", "cops", "drop", "drops", "stop", "stops", "pop", "pops",
        "top", "tops", "shop", "shops", "ock", "ocks", "block", "blocks", "clock",
        "clocks", "lock", "locks", "rock", "rocks", "shock", "shocks", "stock", "stocks",
        "glock", "glocks", "photoshop", "ciroc", "croc",
    ],
    "ess_group": [
        "heartless", "darkness", "regardless", "mess", "less", "bless", "stress", "press",
        "confess", "express", "impress", "address", "success", "process",
    ],
    "ar_group": [
        "charges", "arches", "marches", "carpet", "target", "market", "started",
        "parted", "charted", "departed", "garden", "harden", "pardon",
    ],
    "ish_group": [
        "accomplished", "demolished", "abolished", "polished", "office", "notice",
        "cautious", "conscious", "nauseous", "vicious", "precious", "delicious",
    ],
    "idge_group": [
        "cartridge", "partridge", "bridge", "ridge", "damage", "baggage",
        "package", "message", "passage", "savage", "average", "leverage",
    ],
    "eature_group": [
        "creature", "feature", "features", "teacher", "preacher", "bleachers",
        "reaches", "beaches", "peaches", "leeches",
    ],
    "tion_group": [
        "pollution", "solution", "revolution", "evolution", "contribution",
        "distribution", "constitution", "institution", "prostitution",
        "confusion", "illusion", "conclusion", "intrusion", "exclusion",
    ],
    "im_group": [
        "victim", "system", "wisdom", "kingdom", "freedom", "random",
        "problem", "emblem", "rhythm", "algorithm",
    ],
    "en_group": [
        "pippen", "kippen", "rippin", "slippin", "trippin", "drippin",
        "sickenin", "thickenin", "quickenin", "vision", "mission", "ambition",
        "condition", "position", "tradition", "commission",
    ],
}

_PLAIN_VOWELS = "aeiou"
_PHONETIC_VOWELS = re.compile("[^æeɪɔːɛiaɒoʊʌu]")


class PhoneticRhyme(BaseModel):
    rhymes: bool
    strength: PhoneticStrength
    pattern: str | None = None


class MultiWordRhyme(BaseModel):
    rhymes: bool
    pattern: str | None = None


class InternalRhymes(BaseModel):
    pairs: list[tuple[str, str]] = Field(default_factory=list)
    positions: list[tuple[int, int]] = Field(default_factory=list)


def break_into_syllables(word: str) -> list[str]:
    """Coarse splitter: a syllable closes on a consonant followed by a new vowel."""
    cleaned = clean_word(word)
    syllables: list[str] = []
    current = ""
    has_vowel = False
    i = 0
    while i < len(cleaned):
        char = cleaned[i]
        current += char
        if char in _PLAIN_VOWELS:
            has_vowel = True
            if i + 1 < len(cleaned) and cleaned[i + 1] in _PLAIN_VOWELS:
                current += cleaned[i + 1]
                i += 1
        elif has_vowel and i + 1 < len(cleaned):
            following = cleaned[i + 1]
            after = cleaned[i + 2] if i + 2 < len(cleaned) else ""
            if following in _PLAIN_VOWELS or (after and after in _PLAIN_VOWELS):
                syllables.append(current)
                current = ""
                has_vowel = False
        i += 1
    if current:
        syllables.append(current)
    return syllables


def phonetic_representation(word: str) -> str:
    phonetic = clean_word(word)
    for pattern, sound in PHONETIC_MAPPINGS.items():
        phonetic = phonetic.replace(pattern, sound)
    return phonetic


def phonetic_word_ending(word: str, syllable_count: int = 2) -> str:
    syllables = break_into_syllables(word)
    if not syllables:
        return ""
    return phonetic_representation("".join(syllables[-syllable_count:]))


def check_phonetic_rhyme(word1: str, word2: str) -> PhoneticRhyme:
    """Classify the rhyme between two words from perfect down to consonance."""
    w1 = clean_word(word1 or "")
    w2 = clean_word(word2 or "")
    if not w1 or not w2:
        return PhoneticRhyme(rhymes=False, strength="none")
    if w1 == w2:
        return PhoneticRhyme(rhymes=True, strength="perfect", pattern="identical")

    ending1 = phonetic_word_ending(w1, 2)
    ending2 = phonetic_word_ending(w2, 2)
    if ending1 == ending2:
        return PhoneticRhyme(rhymes=True, strength="perfect", pattern=ending1)

    last1 = phonetic_word_ending(w1, 1)
    last2 = phonetic_word_ending(w2, 1)
    if last1 == last2:
        return PhoneticRhyme(rhymes=True, strength="near", pattern=last1)

    for sound, spellings in ENDING_PATTERNS.items():
        if any(w1.endswith(s) for s in spellings) and any(w2.endswith(s) for s in spellings):
            return PhoneticRhyme(rhymes=True, strength="slant", pattern=sound)

    vowels1 = _PHONETIC_VOWELS.sub("", ending1)
    vowels2 = _PHONETIC_VOWELS.sub("", ending2)
    if len(vowels1) >= 2 and vowels1 == vowels2:
        return PhoneticRhyme(rhymes=True, strength="assonance", pattern=vowels1)

    consonants1 = re.sub("[aeiou]", "", w1[-3:])
    consonants2 = re.sub("[aeiou]", "", w2[-3:])
    if len(consonants1) >= 2 and consonants1 == consonants2:
        return PhoneticRhyme(rhymes=True, strength="consonance", pattern=consonants1)

    return PhoneticRhyme(rhymes=False, strength="none")


def check_multi_word_rhyme(phrase1: str, phrase2: str) -> MultiWordRhyme:
    """Compare the phonetic tails of the last one or two words of each phrase."""
    words1 = [w for w in phrase1.lower().split() if len(w) > 2]
    words2 = [w for w in phrase2.lower().split() if len(w) > 2]
    if not words1 or not words2:
        return MultiWordRhyme(rhymes=False)

    combinations = [
        (words1[-1:], words2[-1:]),
        (words1[-2:], words2[-2:]),
        (words1[-1:], words2[-2:]),
        (words1[-2:], words2[-1:]),
    ]
    for combo1, combo2 in combinations:
        phonetic1 = phonetic_representation("".join(combo1))
        phonetic2 = phonetic_representation("".join(combo2))
        length = min(len(phonetic1), len(phonetic2), 4)
        if length >= 3 and phonetic1[-length:] == phonetic2[-length:]:
            return MultiWordRhyme(rhymes=True, pattern=f"{' '.join(combo1)}/{' '.join(combo2)}")
    return MultiWordRhyme(rhymes=False)


def find_internal_rhymes(line: str) -> InternalRhymes:
    words = [w for w in line.lower().split() if len(w) > 2]
    result = InternalRhymes()
    for i in range(len(words) - 1):
        for j in range(i + 1, len(words)):
            match = check_phonetic_rhyme(words[i], words[j])
            if match.rhymes and match.strength != "consonance":
                result.pairs.append((words[i], words[j]))
                result.positions.append((i, j))
    return result


def check_hiphop_rhyme(word1: str, word2: str) -> bool:
    w1 = clean_word(word1)
    w2 = clean_word(word2)
    return any(w1 in group and w2 in group for group in HIPHOP_RHYME_GROUPS.values())


def detect_rhyme_pattern_enhanced(lines: list[str]) -> str:
    """Rhyme scheme that accepts phonetic, hip-hop group or multi-word rhymes."""
    endings = []
    for line in lines:
        words = re.sub(r"[^\w\s]", "", line.strip()).split()
        endings.append((last_word(line), " ".join(words[-2:]).lower()))

    pattern = []
    groups: list[list[str]] = []
    for i, (word, last_two) in enumerate(endings):
        if not word:
            pattern.append("-")
            continue
        label = None
        for prev_word, prev_two in endings[:i]:
            if not prev_word:
                continue
            if (
                check_phonetic_rhyme(word, prev_word).rhymes
                or check_hiphop_rhyme(word, prev_word)
                or check_multi_word_rhyme(last_two, prev_two).rhymes
            ):
                index = next((k for k, g in enumerate(groups) if prev_word in g), None)
                if index is not None:
                    groups[index].append(word)
                    label = scheme_letter(index)
                    break
        if label is None:
            groups.append([word])
            label = scheme_letter(len(groups) - 1)
        pattern.append(label)
    return "".join(pattern)
