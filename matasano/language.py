from collections import defaultdict
from math import sqrt
from types import MappingProxyType

import regex

from .errors import EmptyInput

"""Character-frequency language models, used to rank candidate plain-texts"""

# fractional frequency of letters and space in English text, see
# https://en.wikipedia.org/wiki/Letter_frequency
ENGLISH_DISTRIBUTION = MappingProxyType({
'A':0.0651738, 'B':0.0124248, 'C':0.0217339, 'D':0.0349835, 'E':0.1041442,
'F':0.0197881, 'G':0.0158610, 'H':0.0492888, 'I':0.0558094, 'J':0.0009033,
'K':0.0050529, 'L':0.0331490, 'M':0.0202124, 'N':0.0564513, 'O':0.0596302,
'P':0.0137645, 'Q':0.0008606, 'R':0.0497563, 'S':0.0515760, 'T':0.0729357,
'U':0.0225134, 'V':0.0082903, 'W':0.0171272, 'X':0.0013692, 'Y':0.0145984,
'Z':0.0007836, ' ':0.1918182
})

def _as_text(text):
    """Decode byte-likes as UTF-8, each invalid byte becoming a single
    (surrogate) character, so any candidate plain-text can be scored."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode('utf-8', errors='surrogateescape')
    return text

def character_frequency(text):
    """Count occurrences of each character (grapheme), normalized to uppercase.

    Args:
        text (str or bytes-like): Text to analyse. Bytes are decoded as UTF-8.
    Returns:
        counts (dict): Character to number of occurrences
    """
    counts = defaultdict(int)
    for char in regex.findall(r'\X', _as_text(text).upper()):
        counts[char] += 1
    return dict(counts)

def relative_frequency(text):
    """Fraction of the text made up by each (uppercased) character. The
    fractions sum to 1. Raises EmptyInput for text with no characters."""
    counts = character_frequency(text)
    total = sum(counts.values())
    if total < 1:
        raise EmptyInput('cannot compute frequencies of empty text')
    return {char: count/total for char, count in counts.items()}

def bhattacharyya_coefficient(left, right):
    """Overlap between two distributions, 0.0 when they share nothing. Keys
    missing from right count as zero."""
    return sum([sqrt(value*right.get(key, 0)) for key, value in left.items()])

def language_score(text, distribution):
    """Score how closely the characters of text follow a language's
    distribution. Higher is more likely; only meaningful for ranking."""
    return bhattacharyya_coefficient(distribution, relative_frequency(text))

def english_score(text):
    return language_score(text, ENGLISH_DISTRIBUTION)
