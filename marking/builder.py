"""
Marking point builder.

Compiles the ordered correct-answer rows of one question (or sub-question)
into MarkingPoints:

1. Each row gets a grouping key: its alternative_id, else its context
   label, else a key of its own.
2. Rows sharing a key form one group; groups keep first-occurrence order.
3. Each group is classified (see ``requirements.classify``) and valued:
   one-alternative groups are worth their first row's marks, the others
   the sum of their rows' marks.

The builder is pure. Data problems are reported as BuildWarnings and never
raised, so an author can always save a key and fix it afterwards.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence, Union

from .annotations import derive_annotations, strip_markers
from .models import AnswerKey, BuildWarning, CorrectAnswerRecord, MarkingPoint, Requirement
from .normalizer import normalize
from .requirements import (
    classify,
    derive_answer_requirement,
    explain_answer_requirement,
    marks_uniform,
    unrecognised_tags,
    validate_answer_requirement,
)

logger = logging.getLogger(__name__)


class GroupingKey(NamedTuple):
    """Where a row's group comes from, and the value it is keyed on"""

    source: str  # "alternative", "context" or "row"
    value: Union[int, str]

    @property
    def point_id(self) -> str:
        if self.source == "alternative":
            return f"alt_{self.value}"
        if self.source == "context":
            return str(self.value)
        return f"P{int(self.value) + 1}"


def grouping_key(record: CorrectAnswerRecord, index: int) -> GroupingKey:
    """
    Grouping key of one row.

    Args:
        record: The row
        index: Position of the row in the input, for singleton keys
    """
    if record.alternative_id is not None:
        return GroupingKey("alternative", record.alternative_id)
    if record.context_label:
        return GroupingKey("context", record.context_label)
    return GroupingKey("row", index)


def group_records(
    records: Sequence[CorrectAnswerRecord],
) -> list[tuple[GroupingKey, list[CorrectAnswerRecord]]]:
    """Cluster rows by grouping key, in order of each key's first row."""
    groups: dict[GroupingKey, list[CorrectAnswerRecord]] = {}
    for index, record in enumerate(records):
        groups.setdefault(grouping_key(record, index), []).append(record)
    return list(groups.items())


def unique_point_id(candidate: str, taken: set[str]) -> str:
    """
    ``candidate``, or ``candidate_2``, ``candidate_3``, ... if already taken.

    Context labels are free text, so a label such as "alt_1" or "P3" can
    clash with an id from another source.
    """
    point_id = candidate
    suffix = 2
    while point_id in taken:
        point_id = f"{candidate}_{suffix}"
        suffix += 1
    return point_id


def group_marks(requirement: Requirement, related: Sequence[CorrectAnswerRecord]) -> int:
    """Mark value of a group under its requirement."""
    if requirement.needs_single_alternative and len(related) > 1:
        return related[0].marks
    return sum(record.marks for record in related)


def collect_alternatives(related: Sequence[CorrectAnswerRecord]) -> tuple[str, ...]:
    """Distinct accepted texts of a group, in row order."""
    texts: dict[str, None] = {}
    for record in related:
        for text in (record.answer_text, *record.acceptable_variations):
            text = strip_markers(text)
            if text:
                texts.setdefault(text, None)
    return tuple(texts)


class MarkingPointBuilder:
    """
    Builds MarkingPoints from correct-answer rows.

    Warnings from the last call to ``build()`` are kept on ``warnings``.
    Instances hold no other state; use one per build when sharing across
    threads.
    """

    def __init__(self) -> None:
        self.warnings: list[BuildWarning] = []

    def build(self, records: Sequence[CorrectAnswerRecord]) -> list[MarkingPoint]:
        """
        Compile rows into marking points.

        Args:
            records: Ordered correct-answer rows (may be empty)

        Returns:
            Marking points in first-occurrence order of their groups
        """
        self.warnings = []
        taken: set[str] = set()
        points = []
        for key, related in group_records(records):
            point_id = unique_point_id(key.point_id, taken)
            if point_id != key.point_id:
                self._warn(
                    "duplicate_point_id",
                    f"Point id {key.point_id!r} is already used; renamed to {point_id!r}",
                    point_id,
                )
            taken.add(point_id)
            points.append(self._build_point(point_id, related))

        logger.debug(
            "Built %d marking point(s) from %d row(s), %d warning(s)",
            len(points),
            len(records),
            len(self.warnings),
        )
        return points

    def _build_point(
        self,
        point_id: str,
        related: list[CorrectAnswerRecord],
    ) -> MarkingPoint:
        requirement = classify(related)

        for tag in unrecognised_tags(related):
            self._warn(
                "unrecognised_requirement",
                f"Unrecognised requirement tag {tag!r}; grouping inferred instead",
                point_id,
            )

        if requirement.needs_single_alternative and len(related) > 1 and not marks_uniform(related):
            self._warn(
                "inconsistent_marks",
                f"Alternatives disagree on marks ({sorted({r.marks for r in related})}); "
                f"using {related[0].marks} from the first row",
                point_id,
            )

        alternatives = collect_alternatives(related)
        for text in alternatives:
            if not normalize(text):
                self._warn(
                    "empty_alternative",
                    f"Alternative {text!r} has no matchable words and will never match",
                    point_id,
                )

        return MarkingPoint(
            id=point_id,
            accepted_alternatives=alternatives,
            mark_value=group_marks(requirement, related),
            requirement=requirement,
            context_label=related[0].context_label,
            annotations=derive_annotations(r.answer_text for r in related),
        )

    def _warn(self, code: str, message: str, point_id: str | None = None) -> None:
        logger.warning("%s: %s", point_id or "answer key", message)
        self.warnings.append(BuildWarning(code=code, message=message, point_id=point_id))


def build(records: Sequence[CorrectAnswerRecord]) -> list[MarkingPoint]:
    """Compile rows into marking points (convenience wrapper)."""
    return MarkingPointBuilder().build(records)


def build_answer_key(
    records: Sequence[CorrectAnswerRecord],
    question_type: str | None = None,
    answer_format: str | None = None,
) -> AnswerKey:
    """
    Rebuild a question's answer key from scratch.

    This is what the authoring side calls whenever an answer key is saved.

    Args:
        records: All correct-answer rows of the question, in display order
        question_type: Optional question type, used for the summary tag
        answer_format: Optional answer format, used for the summary tag

    Returns:
        AnswerKey with points, warnings, summary requirement and totals
    """
    builder = MarkingPointBuilder()
    points = builder.build(records)
    warnings = list(builder.warnings)

    summary = derive_answer_requirement(records, question_type, answer_format)
    mismatch = validate_answer_requirement(summary.answer_requirement, records)
    if mismatch:
        logger.warning("answer key: %s", mismatch)
        warnings.append(BuildWarning(code="requirement_mismatch", message=mismatch))

    return AnswerKey(
        points=points,
        warnings=warnings,
        answer_requirement=summary.answer_requirement,
        answer_requirement_reason=summary.reason,
        answer_requirement_explanation=explain_answer_requirement(summary.answer_requirement),
        total_alternatives=len(records),
        total_marks=sum(point.mark_value for point in points),
    )
