"""
Scoring engine.

Evaluates one submitted answer against a question's marking points.

An alternative is satisfied when every token it normalises to appears in the
submission's token set (order and adjacency do not matter). A point is
satisfied when any of its alternatives is; it then earns its full mark
value. This holds for every requirement kind: an all-of-group point is
satisfied by any one of its alternatives even though its mark value is the
sum of its rows. Changing that alters scores of existing content, so it is
kept as is.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .annotations import annotation_notes
from .models import MarkingPoint, PointOutcome, ScoringResult
from .normalizer import normalize

logger = logging.getLogger(__name__)

NO_MATCH = "no alternative matched"
NO_ALTERNATIVES = "no accepted alternatives"

# Questions worth this much or less get no descriptive band
BAND_MIN_MARKS = 3


def alternative_satisfied(alternative: str, submitted_tokens: frozenset[str]) -> bool:
    """Token-subset match. Alternatives with no tokens never match."""
    wanted = normalize(alternative)
    return bool(wanted) and wanted <= submitted_tokens


def matching_alternative(point: MarkingPoint, submitted_tokens: frozenset[str]) -> Optional[str]:
    """First alternative of ``point`` satisfied by the submission, if any."""
    for alternative in point.accepted_alternatives:
        if alternative_satisfied(alternative, submitted_tokens):
            return alternative
    return None


def mark_band(awarded: int, maximum: int) -> Optional[str]:
    """
    Descriptive band for a score.

    Returns:
        "excellent", "good", "adequate" or "limited"; None for questions
        worth BAND_MIN_MARKS or less
    """
    if maximum <= BAND_MIN_MARKS:
        return None
    if awarded >= maximum:
        return "excellent"
    if awarded >= math.ceil(maximum * 0.6):
        return "good"
    if awarded >= math.ceil(maximum * 0.3):
        return "adequate"
    return "limited"


class ScoringEngine:
    """
    Scores submissions against a fixed sequence of marking points.

    Points are read-only, so one engine may score many submissions
    concurrently.
    """

    def __init__(self, points: Sequence[MarkingPoint]):
        self.points = tuple(points)
        self.max_marks = sum(point.mark_value for point in self.points)

    def evaluate_point(self, point: MarkingPoint, submitted_tokens: frozenset[str]) -> PointOutcome:
        matched = matching_alternative(point, submitted_tokens)
        notes = annotation_notes(point.annotations)

        if matched is not None:
            return PointOutcome(
                point_id=point.id,
                satisfied=True,
                mark_value=point.mark_value,
                awarded_marks=point.mark_value,
                matched_alternative=matched,
                annotations=notes,
            )

        has_tokens = any(normalize(text) for text in point.accepted_alternatives)
        return PointOutcome(
            point_id=point.id,
            satisfied=False,
            mark_value=point.mark_value,
            reason=NO_MATCH if has_tokens else NO_ALTERNATIVES,
            expected=" / ".join(point.accepted_alternatives),
            annotations=notes,
        )

    def score(self, submitted_text: Optional[str]) -> ScoringResult:
        """
        Score one submission.

        Args:
            submitted_text: Plain text extracted from the learner's answer

        Returns:
            ScoringResult with totals, matched ids and per-point breakdown
        """
        if not self.points:
            return ScoringResult.empty()

        submitted_tokens = normalize(submitted_text)
        outcomes = [self.evaluate_point(point, submitted_tokens) for point in self.points]

        satisfied = [o.point_id for o in outcomes if o.satisfied]
        missed_required = [
            point.id
            for point, outcome in zip(self.points, outcomes)
            if not outcome.satisfied and point.is_required
        ]
        awarded = min(self.max_marks, max(0, sum(o.awarded_marks for o in outcomes)))
        percentage = round(awarded * 100 / self.max_marks) if self.max_marks else 0

        logger.debug(
            "Scored %d/%d (%d of %d point(s) satisfied)",
            awarded,
            self.max_marks,
            len(satisfied),
            len(self.points),
        )

        return ScoringResult(
            awarded_marks=awarded,
            max_marks=self.max_marks,
            satisfied_point_ids=satisfied,
            unsatisfied_required_point_ids=missed_required,
            outcomes=outcomes,
            percentage=percentage,
            band=mark_band(awarded, self.max_marks),
        )


def score(points: Sequence[MarkingPoint], submitted_text: Optional[str]) -> ScoringResult:
    """Score one submission against ``points`` (convenience wrapper)."""
    return ScoringEngine(points).score(submitted_text)
