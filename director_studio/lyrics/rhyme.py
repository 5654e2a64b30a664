"""Line-ending rhyme detection and rhyme-scheme labelling."""

from __future__ import annotations

import re
import string

from director_studio.lyrics.syllables import clean_word

# Order matters: the first family whose spelling matches the word ending wins.
RHYME_PATTERNS: dict[str, list[str]] = {
    "ot": ["ot", "ots", "op", "ops", "ock", "ocks", "oc", "ought", "aught", "aut"],
    "ain": ["ain", "ane", "eign", "ayne"],
    "ight": ["ight", "ite", "yte", "eight"],
    "ake": ["ake", "ache", "eigh", "eik"],
    "ore": ["ore", "or", "our", "oor", "aur"],
    "ear": ["ear", "eer", "ere", "ier"],
    "air": ["air", "are", "ear", "ere"],
    "ow": ["ow", "ough", "au"],
    "ew": ["ew", "ue", "oo", "oux", "ieu"],
    "y": ["y", "ie", "ee", "ey", "i"],
    "ing": ["ing", "in"],
    "tion": ["tion", "sion", "cion", "xion"],
    "ed": ["ed", "ted", "ded", "id"],
    "ent": ["ent", "ant", "int"],
    "ound": ["ound", "owned"],
    "ill": ["ill", "ell", "il", "el"],
    "um": ["um", "umb", "ome"],
    "unk": ["unk", "unc", "onk"],
    "ove": ["ove", "uv", "of"],
    "orn": ["orn", "orne", "orm", "awn", "on"],
}

RHYME_DICTIONARY: dict[str, list[str]] = {
    "plots": ["opps", "glock", "locks", "rocks", "ciroc", "croc", "not", "lot", "photoshop",
              "block", "cop", "stop", "drop", "top", "pop", "shot", "hot", "spot", "knot"],
    "tormented": ["scorned", "storm", "forfeited", "warned", "formed"],
    "critics": ["statistics", "linguistics", "ballistics", "mystics"],
    "home": ["alone", "phone", "zone", "shown", "grown", "known", "stone"],
    "way": ["day", "say", "pay", "play", "stay", "away", "today"],
    "time": ["rhyme", "dime", "climb", "prime", "crime", "sublime"],
    "life": ["strife", "knife", "wife", "rife"],
    "real": ["feel", "deal", "steal", "wheel", "heal", "seal"],
    "mind": ["find", "grind", "blind", "kind", "behind", "signed", "refined", "defined"],
    "game": ["name", "fame", "shame", "blame", "same", "came", "frame", "claim", "aim"],
    "love": ["above", "dove", "shove", "glove", "thereof"],
    "heart": ["apart", "start", "part", "smart", "art", "cart", "dart"],
    "night": ["right", "sight", "light", "fight", "tight", "bright", "flight", "height", "might"],
    "soul": ["goal", "role", "hole", "whole", "control", "roll", "toll", "pole"],
}

_RHYME_GROUPS = [{key, *values} for key, values in RHYME_DICTIONARY.items()]
_PUNCTUATION = re.compile(f"[{re.escape(string.punctuation)}]")

SCHEME_LETTERS = string.ascii_uppercase + string.ascii_lowercase


def scheme_letter(index: int) -> str:
    """Letter for the ``index``-th rhyme group; ``?`` once letters run out."""
    return SCHEME_LETTERS[index] if index < len(SCHEME_LETTERS) else "?"


def phonetic_ending(word: str) -> str:
    w = clean_word(word)
    for key, spellings in RHYME_PATTERNS.items():
        if any(w.endswith(spelling) for spelling in spellings):
            return key
    return w[-2:]


def is_rhyme(word1: str, word2: str) -> bool:
    if not word1 or not word2:
        return False
    w1 = clean_word(word1)
    w2 = clean_word(word2)
    if not w1 or not w2:
        return False
    if w1 == w2:
        return True

    for group in _RHYME_GROUPS:
        if w1 in group and w2 in group:
            return True

    if phonetic_ending(w1) == phonetic_ending(w2):
        return True

    consonants1 = re.sub("[aeiou]", "", w1[-3:])
    consonants2 = re.sub("[aeiou]", "", w2[-3:])
    if len(consonants1) >= 2 and consonants1 == consonants2:
        return True

    vowels1 = re.sub("[^aeiou]", "", w1[-4:])
    vowels2 = re.sub("[^aeiou]", "", w2[-4:])
    if len(vowels1) >= 2 and vowels1 == vowels2:
        return True

    return w1[-2:] == w2[-2:]


def last_word(line: str) -> str:
    words = _PUNCTUATION.sub("", line).lower().split()
    return words[-1] if words else ""


def detect_rhyme_scheme(lines: list[str]) -> str:
    """Label each line ending with a rhyme-group letter, e.g. ``"ABAB"``.

    Lines without words are labelled ``-``.
    """
    pattern = []
    groups: list[list[str]] = []
    for line in lines:
        word = last_word(line)
        if not word:
            pattern.append("-")
            continue
        for index, members in enumerate(groups):
            if any(is_rhyme(word, member) for member in members):
                members.append(word)
                pattern.append(scheme_letter(index))
                break
        else:
            groups.append([word])
            pattern.append(scheme_letter(len(groups) - 1))
    return "".join(pattern)
