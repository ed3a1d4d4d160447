"""
Data model for the marking engine.

Inputs are the author-written correct-answer rows (CorrectAnswerRecord);
outputs are the compiled MarkingPoints, the AnswerKey handed back to the
authoring side, and the ScoringResult produced for each submission.

MarkingPoints and records are frozen: once built they are shared read-only
snapshots and may be scored concurrently without locking.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RequirementKind(str, Enum):
    """How many alternatives of a group must be satisfied"""

    SINGLE_CHOICE = "single_choice"
    ONE_OF_GROUP = "one_of_group"
    ALL_OF_GROUP = "all_of_group"
    ANY_K_OF_GROUP = "any_k_of_group"
    ALTERNATIVE_METHODS = "alternative_methods"
    ACCEPTABLE_VARIATIONS = "acceptable_variations"
    STANDALONE = "standalone"


class Requirement(BaseModel):
    """
    A requirement kind plus its parameter.

    Only ANY_K_OF_GROUP carries ``k`` (the number of alternatives asked for).
    """

    model_config = ConfigDict(frozen=True)

    kind: RequirementKind
    k: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def check_k(self) -> Requirement:
        if self.kind is RequirementKind.ANY_K_OF_GROUP and self.k is None:
            raise ValueError("any_k_of_group requires k")
        if self.kind is not RequirementKind.ANY_K_OF_GROUP and self.k is not None:
            raise ValueError(f"{self.kind.value} does not take k")
        return self

    @classmethod
    def of(cls, kind: RequirementKind) -> Requirement:
        return cls(kind=kind)

    @classmethod
    def any_k_of(cls, k: int) -> Requirement:
        return cls(kind=RequirementKind.ANY_K_OF_GROUP, k=k)

    @property
    def needs_single_alternative(self) -> bool:
        """True when every row of the group is a phrasing of one point."""
        return self.kind not in (
            RequirementKind.ALL_OF_GROUP,
            RequirementKind.ANY_K_OF_GROUP,
        )

    @property
    def label(self) -> str:
        if self.kind is RequirementKind.ANY_K_OF_GROUP:
            return f"any_{self.k}_of_group"
        return self.kind.value

    def __str__(self) -> str:
        return self.label


class AnswerContext(BaseModel):
    """Sub-blank / sub-part a row belongs to in a multi-blank question"""

    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None
    value: Optional[str] = None
    label: Optional[str] = None


class CorrectAnswerRecord(BaseModel):
    """
    One accepted alternative text from an author's answer key.

    Attributes:
        answer_text: The accepted phrasing
        marks: Marks attached to this row (default 1)
        alternative_id: Rows sharing an id are alternatives of one point
        context: Sub-part identification, secondary grouping key
        explicit_requirement: Author's grouping policy tag, if any
        acceptable_variations: Further phrasings accepted for this row
    """

    model_config = ConfigDict(frozen=True)

    answer_text: str
    marks: int = Field(default=1, ge=1)
    alternative_id: Optional[int] = None
    context: Optional[AnswerContext] = None
    explicit_requirement: Optional[str] = None
    acceptable_variations: tuple[str, ...] = ()

    @field_validator("marks", mode="before")
    @classmethod
    def default_marks(cls, v: Any) -> Any:
        """Rows stored without marks are worth one mark."""
        return 1 if v is None else v

    @field_validator("explicit_requirement", mode="before")
    @classmethod
    def blank_requirement(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("acceptable_variations", mode="before")
    @classmethod
    def validate_variations(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            raise ValueError("acceptable_variations must be a list of strings")
        return tuple(v)

    @property
    def context_label(self) -> Optional[str]:
        if self.context is None:
            return None
        return self.context.label or None


class MarkingPoint(BaseModel):
    """
    A unit of credit compiled from one group of correct-answer rows.

    The point is satisfied when any of its accepted alternatives is found in
    a submission; it then contributes ``mark_value`` marks.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    accepted_alternatives: tuple[str, ...]
    mark_value: int = Field(ge=0)
    requirement: Requirement
    context_label: Optional[str] = None
    # Mark-scheme conventions (owtte, ecf, ...). Feedback only.
    annotations: frozenset[str] = frozenset()

    @property
    def requirement_kind(self) -> RequirementKind:
        return self.requirement.kind

    @property
    def is_required(self) -> bool:
        return self.requirement.kind is not RequirementKind.STANDALONE


class BuildWarning(BaseModel):
    """Data-quality problem found while compiling an answer key"""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    point_id: Optional[str] = None


class AnswerKey(BaseModel):
    """
    Everything the authoring side persists after a key is saved.

    Rebuilt wholesale on every save; never patched.
    """

    points: list[MarkingPoint] = Field(default_factory=list)
    warnings: list[BuildWarning] = Field(default_factory=list)
    answer_requirement: Optional[str] = None
    answer_requirement_reason: str = ""
    answer_requirement_explanation: str = ""
    total_alternatives: int = 0
    total_marks: int = 0

    def point_ids(self) -> list[str]:
        return [point.id for point in self.points]


class PointOutcome(BaseModel):
    """Per-point line of a marking breakdown"""

    point_id: str
    satisfied: bool
    mark_value: int
    awarded_marks: int = 0
    matched_alternative: Optional[str] = None
    reason: Optional[str] = None
    expected: str = ""
    annotations: list[str] = Field(default_factory=list)


class ScoringResult(BaseModel):
    """
    Outcome of scoring one submission against one answer key.

    Attributes:
        awarded_marks: Sum of mark values of satisfied points
        max_marks: Sum of mark values of all points
        satisfied_point_ids: Matched point ids in point order
        unsatisfied_required_point_ids: Missed points that are not standalone
        outcomes: Per-point breakdown in point order
        percentage: Rounded awarded/max percentage (0 when max is 0)
        band: Descriptive band for longer questions, else None
    """

    awarded_marks: int = Field(default=0, ge=0)
    max_marks: int = Field(default=0, ge=0)
    satisfied_point_ids: list[str] = Field(default_factory=list)
    unsatisfied_required_point_ids: list[str] = Field(default_factory=list)
    outcomes: list[PointOutcome] = Field(default_factory=list)
    percentage: int = Field(default=0, ge=0, le=100)
    band: Optional[str] = None

    @model_validator(mode="after")
    def check_awarded(self) -> ScoringResult:
        if self.awarded_marks > self.max_marks:
            raise ValueError("awarded_marks cannot exceed max_marks")
        return self

    @property
    def is_full_marks(self) -> bool:
        return self.max_marks > 0 and self.awarded_marks == self.max_marks

    @classmethod
    def empty(cls) -> ScoringResult:
        return cls()
