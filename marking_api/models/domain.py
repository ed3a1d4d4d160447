"""
Domain models for the marking API.

Request bodies and stored snapshots wrapped around the engine's own models.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from marking import AnswerKey, CorrectAnswerRecord, ScoringResult

from ..core.config import settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnswerKeyRequest(BaseModel):
    """An author's full set of correct-answer rows for one question"""
    records: List[CorrectAnswerRecord] = Field(default_factory=list)
    question_type: Optional[str] = Field(None, description="mcq, tf, descriptive, calculation, ...")
    answer_format: Optional[str] = Field(None, description="single_word, two_items, calculation, ...")

    @field_validator('records')
    @classmethod
    def limit_rows(cls, v: List[CorrectAnswerRecord]) -> List[CorrectAnswerRecord]:
        """Reject oversized answer keys"""
        if len(v) > settings.MAX_ANSWER_ROWS:
            raise ValueError(f"Too many answer rows (max {settings.MAX_ANSWER_ROWS})")
        return v


class SubmissionRequest(BaseModel):
    """A learner's answer, already reduced to plain text"""
    answer: str = Field(..., description="Submitted answer text")

    @field_validator('answer')
    @classmethod
    def limit_answer(cls, v: str) -> str:
        """Reject oversized answers"""
        if len(v) > settings.MAX_ANSWER_LENGTH:
            raise ValueError(f"Answer too long (max {settings.MAX_ANSWER_LENGTH} characters)")
        return v


class MarkRequest(AnswerKeyRequest, SubmissionRequest):
    """Answer key and submission in one request (nothing is stored)"""


class StoredAnswerKey(BaseModel):
    """Snapshot of a question's compiled answer key"""
    question_id: str
    version: int = Field(1, ge=1)
    answer_key: AnswerKey
    saved_at: datetime = Field(default_factory=_utcnow)


class MarkResponse(BaseModel):
    """Result of a stateless marking request"""
    answer_key: AnswerKey
    result: ScoringResult
