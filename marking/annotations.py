"""
Mark-scheme annotations found in authored answer text.

Exam-board mark schemes decorate answers with conventions such as "owtte"
(or words to that effect), "ora" (or reverse argument), "ecf" (error
carried forward), M1/A1 method and accuracy marks. They are surfaced as
feedback flags; they do not alter matching or marks.
"""

from __future__ import annotations

import re
from typing import Iterable

OWTTE = "owtte"
ORA = "ora"
ECF = "ecf"
METHOD = "method"
ACCURACY = "accuracy"
UNITS = "units"

_MARKERS = re.compile(r"[\[(]\s*(owtte|ora|ecf)\s*[\])]|\b(owtte|ora|ecf)\b", re.IGNORECASE)

_RULES: list[tuple[str, re.Pattern[str]]] = [
    (OWTTE, re.compile(r"\bowtte\b", re.IGNORECASE)),
    (ORA, re.compile(r"\bora\b", re.IGNORECASE)),
    (ECF, re.compile(r"\becf\b", re.IGNORECASE)),
    (METHOD, re.compile(r"\bmethod\b", re.IGNORECASE)),
    (METHOD, re.compile(r"\bM\d+\b")),
    (ACCURACY, re.compile(r"\baccuracy\b|\bsig(?:nificant)? fig(?:ure)?s?\b|\bdp\b", re.IGNORECASE)),
    (ACCURACY, re.compile(r"\bA\d+\b")),
    (UNITS, re.compile(r"\bunits?\b", re.IGNORECASE)),
]

NOTES = {
    OWTTE: "owtte: equivalent wording accepted",
    ORA: "ora: reverse argument accepted",
    ECF: "ecf: error carried forward",
    METHOD: "method mark",
    ACCURACY: "accuracy mark",
    UNITS: "units required",
}


def derive_annotations(answers: Iterable[str]) -> frozenset[str]:
    """Collect annotation flags from every answer text of a group."""
    found = set()
    for text in answers:
        for flag, pattern in _RULES:
            if pattern.search(text):
                found.add(flag)
    return frozenset(found)


def strip_markers(text: str) -> str:
    """Remove owtte/ora/ecf markers so they are not required in a response."""
    return " ".join(_MARKERS.sub(" ", text).split())


def annotation_notes(flags: Iterable[str]) -> list[str]:
    """Feedback notes for a set of flags, in a stable order."""
    return [NOTES[flag] for flag in NOTES if flag in set(flags)]
