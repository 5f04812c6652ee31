"""
Korean-locale string ordering.

Names, category labels and memos are ordered the way the Korean locale of
the Unicode collation algorithm orders them:

- whitespace, then punctuation and symbols (in collation-table order, so
  `_` < `-` < `(`), then digits by numeric value
- Hangul ahead of every other letter, then Han ideographs, then Latin,
  then any other script
- Hangul compared jamo by jamo: a syllable is its initial, vowel and
  optional final. A bare consonant (ㄱ) is an initial on its own, so it
  sorts before every syllable that starts with it, and 가나 < 각
- Latin folded to its base letter first; accents break ties, then case
  (lowercase first)
- a string sorts before any longer string it is a prefix of

Han ideographs are ordered by code point rather than interleaved with
the Hangul reading of each character.

Strings are NFC-normalised first so decomposed jamo sequences compare
equal to their precomposed syllables.
"""

import unicodedata

from parish_ledger.engine.hangul import CHOSEONG, decompose


_WHITESPACE = 0
_SYMBOL = 1
_DIGIT = 2
_HANGUL = 3
_HAN = 4
_LATIN = 5
_OTHER = 6

# Hangul elements: initial < vowel < final at equal position
_JAMO_INITIAL = 0
_JAMO_VOWEL = 1
_JAMO_FINAL = 2

# Root collation order for ASCII punctuation and symbols
_SYMBOL_ORDER = {
    ch: i for i, ch in enumerate("_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$")
}

_COMPAT_CONSONANT_INDEX = {c: i for i, c in enumerate(CHOSEONG)}
_COMPAT_CONSONANT_START = 0x3131  # ㄱ
_COMPAT_VOWEL_START = 0x314F      # ㅏ
_COMPAT_VOWEL_END = 0x3163        # ㅣ

_HAN_PREFIXES = ("CJK UNIFIED IDEOGRAPH", "CJK COMPATIBILITY IDEOGRAPH")


def _hangul_elements(ch: str) -> list[tuple[int, int, int]]:
    parts = decompose(ch)
    if parts is not None:
        initial, vowel, final = parts
        elements = [(_HANGUL, _JAMO_INITIAL, initial), (_HANGUL, _JAMO_VOWEL, vowel)]
        if final:
            elements.append((_HANGUL, _JAMO_FINAL, final))
        return elements

    if ch in _COMPAT_CONSONANT_INDEX:
        return [(_HANGUL, _JAMO_INITIAL, _COMPAT_CONSONANT_INDEX[ch])]
    code = ord(ch)
    if _COMPAT_VOWEL_START <= code <= _COMPAT_VOWEL_END:
        return [(_HANGUL, _JAMO_VOWEL, code - _COMPAT_VOWEL_START)]
    if _COMPAT_CONSONANT_START <= code < _COMPAT_VOWEL_START:
        # Cluster consonants (ㄳ, ㄺ...) only occur as finals
        return [(_HANGUL, _JAMO_FINAL, code)]
    return []


def _char_weights(ch: str) -> tuple[list[tuple[int, int, int]], tuple[int, ...], int]:
    """(primary elements, accent marks, case flag) for one NFC character."""
    hangul = _hangul_elements(ch)
    if hangul:
        return hangul, (), 0

    if unicodedata.combining(ch):
        return [], (ord(ch),), 0
    if ch.isspace():
        return [(_WHITESPACE, ord(ch), 0)], (), 0
    if ch.isdigit():
        return [(_DIGIT, unicodedata.digit(ch, 0), 0)], (), 0

    if ch.isalpha():
        if unicodedata.name(ch, "").startswith(_HAN_PREFIXES):
            return [(_HAN, ord(ch), 0)], (), 0
        decomposed = unicodedata.normalize("NFD", ch)
        base = decomposed[0]
        accents = tuple(ord(mark) for mark in decomposed[1:])
        script = _LATIN if unicodedata.name(base, "").startswith("LATIN") else _OTHER
        case = 1 if ch.isupper() else 0
        return [(script, ord(base.lower()[0]), 0)], accents, case

    if ch in _SYMBOL_ORDER:
        return [(_SYMBOL, _SYMBOL_ORDER[ch], 0)], (), 0
    return [(_SYMBOL, len(_SYMBOL_ORDER) + ord(ch), 0)], (), 0


def korean_sort_key(value: str) -> tuple:
    """
    Sort key implementing the ordering described in the module docstring.

    Levels are compared in turn: base letters, accents, case, and finally
    the text itself so distinct strings never compare equal.
    """
    text = unicodedata.normalize("NFC", value)
    primary = []
    secondary = []
    tertiary = []
    for ch in text:
        elements, accents, case = _char_weights(ch)
        primary.extend(elements)
        secondary.append(accents)
        tertiary.append(case)
    return (tuple(primary), tuple(secondary), tuple(tertiary), text)


def compare_korean(a: str, b: str) -> int:
    """Three-way comparison: negative, zero or positive."""
    key_a = korean_sort_key(a)
    key_b = korean_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)
