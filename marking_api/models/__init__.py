"""Domain models package"""

from .domain import (
    AnswerKeyRequest,
    SubmissionRequest,
    MarkRequest,
    StoredAnswerKey,
    MarkResponse,
)

__all__ = [
    "AnswerKeyRequest",
    "SubmissionRequest",
    "MarkRequest",
    "StoredAnswerKey",
    "MarkResponse",
]
