"""
Hangul initial-consonant indexing.

Members are grouped by the leading consonant of the first syllable of
their name, the way a Korean address book is tabbed. Tense consonants
share the tab of their plain counterpart (까 files under ㄱ), which leaves
14 tabs plus one bucket for names that do not start with a Hangul syllable.
"""

from typing import Iterable, Optional, Protocol, TypeVar


HANGUL_BASE = 0xAC00
HANGUL_SYLLABLE_COUNT = 11172
SYLLABLES_PER_INITIAL = 588  # 21 vowels * 28 finals
SYLLABLES_PER_VOWEL = 28

# Leading consonants in Unicode block order
CHOSEONG = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

TENSE_TO_PLAIN = {
    "ㄲ": "ㄱ",
    "ㄸ": "ㄷ",
    "ㅃ": "ㅂ",
    "ㅆ": "ㅅ",
    "ㅉ": "ㅈ",
}

# The 14 bucket keys, in display order
CONSONANTS = tuple(c for c in CHOSEONG if c not in TENSE_TO_PLAIN)

# Bucket key for names without a Hangul initial, and its display label
OTHER_BUCKET = ""
OTHER_BUCKET_LABEL = "기타"


class _Named(Protocol):
    name: str


N = TypeVar("N", bound=_Named)


def decompose(char: str) -> Optional[tuple[int, int, int]]:
    """
    Split a precomposed syllable into (initial, vowel, final) indices.

    Returns None for anything outside the syllable block. `final` is 0 for
    open syllables.
    """
    offset = ord(char) - HANGUL_BASE
    if offset < 0 or offset >= HANGUL_SYLLABLE_COUNT:
        return None
    initial, rest = divmod(offset, SYLLABLES_PER_INITIAL)
    vowel, final = divmod(rest, SYLLABLES_PER_VOWEL)
    return initial, vowel, final


def initial_consonant(name: str) -> str:
    """
    Bucket key for a name: its normalised leading consonant, or "".

    Only the first character is inspected.

        >>> initial_consonant("김철수")
        'ㄱ'
        >>> initial_consonant("까치")
        'ㄱ'
        >>> initial_consonant("123")
        ''
    """
    if not name:
        return OTHER_BUCKET
    parts = decompose(name[0])
    if parts is None:
        return OTHER_BUCKET
    consonant = CHOSEONG[parts[0]]
    return TENSE_TO_PLAIN.get(consonant, consonant)


def group_by_initial(members: Iterable[N]) -> dict[str, list[N]]:
    """
    Partition members into consonant buckets.

    Keys follow CONSONANTS order with OTHER_BUCKET last; empty buckets are
    omitted. Every member lands in exactly one bucket and input order is
    kept within a bucket.
    """
    buckets: dict[str, list[N]] = {}
    for member in members:
        buckets.setdefault(initial_consonant(member.name), []).append(member)

    order = CONSONANTS + (OTHER_BUCKET,)
    return {key: buckets[key] for key in order if key in buckets}


def filter_by_initial(members: Iterable[N], consonant: Optional[str]) -> list[N]:
    """Members under one bucket. None selects everyone."""
    if consonant is None:
        return list(members)
    if consonant != OTHER_BUCKET and consonant not in CONSONANTS:
        raise ValueError(f"Unknown consonant bucket: {consonant!r}")
    return [m for m in members if initial_consonant(m.name) == consonant]
