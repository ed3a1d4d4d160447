"""
Text normalisation for answer matching.

Turns free text (a learner's submission or one accepted alternative) into a
set of comparable tokens:
- Case folding
- Punctuation stripping (periods, commas, semicolons, quotes)
- Whitespace collapsing
- Digit/subscript equivalence so "CO2" and "CO₂" compare equal
- Number words, fractions and temperature units written one way
"""

from __future__ import annotations

import re
from typing import Optional

SUBSCRIPT_DIGITS = "₀₁₂₃₄₅₆₇₈₉"
ASCII_DIGITS = "0123456789"

_FROM_SUBSCRIPT = str.maketrans(SUBSCRIPT_DIGITS, ASCII_DIGITS)

UNICODE_FRACTIONS = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

NUMBER_WORDS = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
    "ten": "10",
}

_QUOTES = str.maketrans("", "", "\"'“”‘’")

_UNICODE_FRACTION = re.compile("[" + "".join(UNICODE_FRACTIONS) + "]")
_FRACTION = re.compile(r"(\d+)\s*/\s*(\d+)")
_NUMBER_WORD = re.compile(r"\b(" + "|".join(NUMBER_WORDS) + r")\b")
_DEGREES = re.compile(r"°([cf])")

# Separators between two digits are part of a number ("3.5", "1,000")
_STRIP_PATTERN = re.compile(r"(?<!\d)[.,]|[.,](?!\d)|;")


def unsubscript(text: str) -> str:
    """Replace subscript digit glyphs with ASCII digits."""
    return text.translate(_FROM_SUBSCRIPT)


def _expand_fraction_glyph(match: re.Match[str]) -> str:
    # "1½" is one and a half, not eleven halves
    return " " + UNICODE_FRACTIONS[match.group(0)]


def _fraction_to_decimal(match: re.Match[str]) -> str:
    numerator, denominator = int(match.group(1)), int(match.group(2))
    if denominator == 0:
        return f"{numerator}/{denominator}"
    value = numerator / denominator
    return str(int(value)) if value.is_integer() else repr(value)


def canonical_text(text: Optional[str]) -> str:
    """
    Apply every character-level rule and return a single-spaced string.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Lower-cased text with punctuation removed and whitespace collapsed

    Examples:
        >>> canonical_text("Two electrons.")
        '2 electrons'
        >>> canonical_text("¾ of the cells at 37°C")
        '0.75 of the cells at 37degc'
    """
    if not text:
        return ""

    text = unsubscript(text)
    text = _UNICODE_FRACTION.sub(_expand_fraction_glyph, text)
    text = text.translate(_QUOTES).lower()
    text = text.replace("−", "-")
    text = _DEGREES.sub(r"deg\1", text)
    text = _FRACTION.sub(_fraction_to_decimal, text)
    text = _NUMBER_WORD.sub(lambda m: NUMBER_WORDS[m.group(1)], text)
    text = _STRIP_PATTERN.sub(" ", text)
    return " ".join(text.split())


def tokens(text: Optional[str]) -> tuple[str, ...]:
    """Normalised tokens in first-occurrence order, without repeats."""
    return tuple(dict.fromkeys(canonical_text(text).split()))


def normalize(text: Optional[str]) -> frozenset[str]:
    """
    Normalise text into an order-insensitive token set.

    Never raises; empty or whitespace-only input yields an empty set.

    Examples:
        >>> sorted(normalize("Kill  Bacteria."))
        ['bacteria', 'kill']
        >>> normalize("CO₂") == normalize("co2")
        True
    """
    return frozenset(canonical_text(text).split())
