"""
marking - Answer-marking engine for exam question practice.

Compiles author-written correct answers into marking points and scores
learner submissions against them:
- Text normalisation (case, punctuation, whitespace, subscript digits)
- Grouping of alternative answers into marking points
- Requirement classification (explicit tags, legacy inference)
- Token-subset scoring with per-point feedback
"""

from .builder import MarkingPointBuilder, build, build_answer_key
from .models import (
    AnswerContext,
    AnswerKey,
    BuildWarning,
    CorrectAnswerRecord,
    MarkingPoint,
    PointOutcome,
    Requirement,
    RequirementKind,
    ScoringResult,
)
from .normalizer import normalize
from .requirements import classify, derive_answer_requirement
from .scoring import ScoringEngine, score

__version__ = "0.1.0"

__all__ = [
    "AnswerContext",
    "AnswerKey",
    "BuildWarning",
    "CorrectAnswerRecord",
    "MarkingPoint",
    "PointOutcome",
    "Requirement",
    "RequirementKind",
    "ScoringResult",
    "MarkingPointBuilder",
    "ScoringEngine",
    # Convenience functions
    "normalize",
    "classify",
    "build",
    "build_answer_key",
    "derive_answer_requirement",
    "score",
]
