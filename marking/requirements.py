"""
Requirement classification for groups of correct-answer rows.

Two layers:
- Per group: ``classify()`` decides how many alternatives of one group must
  be satisfied. An explicit author tag always wins; ``infer_requirement()``
  only backfills legacy rows that carry no tag.
- Per question: ``derive_answer_requirement()`` produces the single summary
  tag the authoring side stores for display.
"""

from __future__ import annotations

import re
from typing import Literal, Optional, Sequence

from pydantic import BaseModel

from .models import CorrectAnswerRecord, Requirement, RequirementKind


# Largest k inferred for legacy "any k of" groups
MAX_INFERRED_K = 3

# Legacy groups larger than this are treated as alternative methods
ANY_K_MAX_GROUP_SIZE = 5

_TAG_KINDS: dict[str, RequirementKind] = {
    "single_choice": RequirementKind.SINGLE_CHOICE,
    "one_required": RequirementKind.ONE_OF_GROUP,
    "any_one": RequirementKind.ONE_OF_GROUP,
    "one_of_group": RequirementKind.ONE_OF_GROUP,
    "all_required": RequirementKind.ALL_OF_GROUP,
    "both_required": RequirementKind.ALL_OF_GROUP,
    "structure_function_pair": RequirementKind.ALL_OF_GROUP,
    "all_of_group": RequirementKind.ALL_OF_GROUP,
    "alternative_methods": RequirementKind.ALTERNATIVE_METHODS,
    "acceptable_variations": RequirementKind.ACCEPTABLE_VARIATIONS,
    "standalone": RequirementKind.STANDALONE,
}

_TAG_COUNTS: dict[str, int] = {
    "two_required": 2,
    "three_required": 3,
}

_ANY_N = re.compile(r"^any_(\d+)(?:_from|_of_group)?$")
_ANY_UNSPECIFIED = {"any_from", "any_k_of_group", "any_k"}


def _clean_tag(tag: str) -> str:
    return re.sub(r"[\s\-]+", "_", tag.strip().lower())


def inferred_k(group_size: int) -> int:
    """Number of alternatives asked for by an untagged "any k of" group."""
    return max(1, min(group_size - 1, MAX_INFERRED_K))


def parse_requirement_tag(tag: Optional[str], group_size: int = 1) -> Optional[Requirement]:
    """
    Parse an author's requirement tag.

    Args:
        tag: Raw tag as stored on a row (e.g. "one_required", "any_2_from")
        group_size: Rows in the group, used when a tag asks for "any" without
            saying how many

    Returns:
        The Requirement, or None if the tag is missing or unrecognised
    """
    if not tag:
        return None

    cleaned = _clean_tag(tag)

    kind = _TAG_KINDS.get(cleaned)
    if kind is not None:
        return Requirement.of(kind)

    if cleaned in _TAG_COUNTS:
        return Requirement.any_k_of(_TAG_COUNTS[cleaned])

    match = _ANY_N.match(cleaned)
    if match and int(match.group(1)) >= 1:
        return Requirement.any_k_of(int(match.group(1)))

    if cleaned in _ANY_UNSPECIFIED:
        return Requirement.any_k_of(inferred_k(group_size))

    return None


def unrecognised_tags(related: Sequence[CorrectAnswerRecord]) -> list[str]:
    """Tags in a group that ``parse_requirement_tag`` cannot read."""
    found = []
    for record in related:
        tag = record.explicit_requirement
        if tag and parse_requirement_tag(tag, len(related)) is None and tag not in found:
            found.append(tag)
    return found


def marks_uniform(related: Sequence[CorrectAnswerRecord]) -> bool:
    return len({record.marks for record in related}) <= 1


def infer_requirement(related: Sequence[CorrectAnswerRecord]) -> Requirement:
    """
    Infer a requirement from group shape alone (legacy data without tags).

    Only groups whose rows are all worth exactly one mark are read as
    phrasings or choices; any other mark distribution means the rows are
    separate components, all of which count.
    """
    size = len(related)
    if size <= 1:
        return Requirement.of(RequirementKind.STANDALONE)

    if not (marks_uniform(related) and related[0].marks == 1):
        return Requirement.of(RequirementKind.ALL_OF_GROUP)

    if size == 2:
        # Surfaced as "both_required" by some authoring paths; scored as one.
        return Requirement.of(RequirementKind.ONE_OF_GROUP)
    if size <= ANY_K_MAX_GROUP_SIZE:
        return Requirement.any_k_of(inferred_k(size))
    return Requirement.of(RequirementKind.ALTERNATIVE_METHODS)


def classify(related: Sequence[CorrectAnswerRecord]) -> Requirement:
    """
    Decide the requirement for one group of rows.

    The first recognised explicit tag in group order wins. Unrecognised tags
    are ignored and the group falls back to inference; the builder reports
    them as warnings.
    """
    for record in related:
        requirement = parse_requirement_tag(record.explicit_requirement, len(related))
        if requirement is not None:
            return requirement

    return infer_requirement(related)


# Question-level summary

SummaryTag = Literal[
    "single_choice",
    "both_required",
    "any_2_from",
    "any_3_from",
    "all_required",
    "alternative_methods",
]


class RequirementSummary(BaseModel):
    """Summary requirement for a whole question, with how sure we are"""

    answer_requirement: Optional[SummaryTag] = None
    confidence: Literal["high", "medium", "low"] = "low"
    reason: str = ""


_TWO_ITEM_FORMATS = {"two_items", "two_items_connected"}
_METHOD_FORMATS = {"calculation", "equation"}


def _from_answer_format(answer_format: Optional[str]) -> RequirementSummary:
    if answer_format in ("single_word", "single_line"):
        return RequirementSummary(
            answer_requirement="single_choice",
            confidence="high",
            reason="Single-line answer format typically expects one answer",
        )
    if answer_format in _TWO_ITEM_FORMATS:
        return RequirementSummary(
            answer_requirement="both_required",
            confidence="medium",
            reason="Two items format typically requires both components",
        )
    if answer_format in ("multi_line", "multi_line_labeled"):
        return RequirementSummary(
            answer_requirement="all_required",
            confidence="medium",
            reason="Multi-line format typically requires all components",
        )
    if answer_format in _METHOD_FORMATS:
        return RequirementSummary(
            answer_requirement="alternative_methods",
            confidence="low",
            reason="Calculations may accept different solution methods",
        )
    if answer_format in ("diagram", "structural_diagram", "chemical_structure", "graph", "table"):
        return RequirementSummary(
            answer_requirement="all_required",
            confidence="low",
            reason="Visual answers typically require all components to be marked",
        )
    if answer_format in ("file_upload", "audio"):
        return RequirementSummary(
            reason="Upload-based answers require manual marking",
        )
    return RequirementSummary(
        reason="Unable to determine answer requirement automatically - manual review needed",
    )


def derive_answer_requirement(
    records: Sequence[CorrectAnswerRecord],
    question_type: Optional[str] = None,
    answer_format: Optional[str] = None,
) -> RequirementSummary:
    """
    Derive the summary requirement tag for a whole question.

    Args:
        records: All correct-answer rows of the question
        question_type: "mcq", "tf", "descriptive", "calculation", ...
        answer_format: "single_word", "two_items", "calculation", ...

    Returns:
        RequirementSummary (answer_requirement is None when manual review
        is needed)
    """
    if question_type in ("mcq", "tf"):
        return RequirementSummary(
            answer_requirement="single_choice",
            confidence="high",
            reason=f"{question_type.upper()} questions require selecting one correct option",
        )

    count = len(records)
    alternative_ids = {r.alternative_id for r in records if r.alternative_id is not None}

    if answer_format in _TWO_ITEM_FORMATS:
        if count > 2 or len(alternative_ids) > 1:
            return RequirementSummary(
                answer_requirement="any_2_from",
                confidence="high",
                reason="Two items format with multiple alternatives - any 2 correct answers acceptable",
            )
        return RequirementSummary(
            answer_requirement="both_required",
            confidence="high",
            reason="Two items format requires both components to be provided",
        )

    if count == 0:
        return _from_answer_format(answer_format)

    tags = [
        r.explicit_requirement
        for r in records
        if r.explicit_requirement and _clean_tag(r.explicit_requirement) != "standalone"
    ]

    if tags or len(alternative_ids) > 1:
        requirement = parse_requirement_tag(tags[0], count) if tags else None
        kind = requirement.kind if requirement else None

        if kind is RequirementKind.ANY_K_OF_GROUP and requirement.k in (2, 3):
            return RequirementSummary(
                answer_requirement=f"any_{requirement.k}_from",
                confidence="high",
                reason=f"Any {requirement.k} of the alternative answers acceptable",
            )
        if kind in (RequirementKind.ONE_OF_GROUP, RequirementKind.ANY_K_OF_GROUP):
            alt_count = len(alternative_ids) or count
            if alt_count in (2, 3):
                return RequirementSummary(
                    answer_requirement=f"any_{alt_count}_from",
                    confidence="high",
                    reason=f"Multiple alternative answers detected - any {alt_count} acceptable",
                )
            return RequirementSummary(
                answer_requirement="alternative_methods",
                confidence="high",
                reason="Multiple alternative solution methods detected",
            )
        if kind is RequirementKind.ALL_OF_GROUP:
            return RequirementSummary(
                answer_requirement="all_required",
                confidence="high",
                reason="All answer components must be provided together",
            )
        if kind is RequirementKind.SINGLE_CHOICE:
            return RequirementSummary(
                answer_requirement="single_choice",
                confidence="high",
                reason="Author marked the question as single choice",
            )
        return RequirementSummary(
            answer_requirement="alternative_methods",
            confidence="medium",
            reason="Multiple alternative answers or solution methods detected",
        )

    if count == 1:
        if records[0].acceptable_variations:
            return RequirementSummary(
                answer_requirement="alternative_methods",
                confidence="medium",
                reason="Single answer with acceptable variations detected",
            )
        return RequirementSummary(
            answer_requirement="single_choice",
            confidence="high",
            reason="Single correct answer expected",
        )

    if count == 2:
        if answer_format in _METHOD_FORMATS:
            return RequirementSummary(
                answer_requirement="alternative_methods",
                confidence="medium",
                reason="Calculation with multiple acceptable solution methods",
            )
        return RequirementSummary(
            answer_requirement="both_required",
            confidence="medium",
            reason="Two answer components detected - both likely required",
        )

    if count == 3:
        return RequirementSummary(
            answer_requirement="any_3_from",
            confidence="medium",
            reason="Three answer components detected - typically any 3 acceptable",
        )

    return RequirementSummary(
        answer_requirement="all_required",
        confidence="medium",
        reason="Multiple answer components detected - all typically required for full marks",
    )


_EXPLANATIONS = {
    "single_choice": "Student must provide exactly one correct answer",
    "both_required": "Student must provide both required components",
    "any_2_from": "Student must provide any 2 correct answers from the available options",
    "any_3_from": "Student must provide any 3 correct answers from the available options",
    "all_required": "Student must provide all required answer components for full marks",
    "alternative_methods": (
        "Multiple valid solution methods are acceptable - "
        "student must complete one valid approach"
    ),
}


def explain_answer_requirement(tag: Optional[str]) -> str:
    """Human-readable sentence for a summary tag."""
    return _EXPLANATIONS.get(tag or "", "Answer requirement not specified - requires manual review")


def validate_answer_requirement(
    tag: Optional[str],
    records: Sequence[CorrectAnswerRecord],
) -> Optional[str]:
    """
    Check a summary tag against the number of rows.

    Returns:
        A warning message, or None if the tag is plausible
    """
    count = len(records)
    if not tag or count == 0:
        return None

    if tag == "single_choice" and count > 1:
        return (
            f'"Single choice" selected but {count} correct answers provided. '
            'Consider "alternative_methods" or "any_2_from".'
        )
    if tag == "both_required" and count != 2:
        return f'"Both required" selected but {count} answers provided. Expected exactly 2 answers.'
    if tag == "any_2_from" and count < 2:
        return f'"Any 2 from" selected but only {count} answer(s) provided. Need at least 2 alternatives.'
    if tag == "any_3_from" and count < 3:
        return f'"Any 3 from" selected but only {count} answer(s) provided. Need at least 3 alternatives.'
    if tag == "all_required" and count == 1:
        return '"All required" selected but only 1 answer provided. Consider "single_choice" instead.'
    return None
