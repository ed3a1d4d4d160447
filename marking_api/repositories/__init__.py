"""Repositories package"""

from .answer_key_repository import (
    AnswerKeyRepositoryInterface,
    InMemoryAnswerKeyRepository,
    get_answer_key_repository,
)

__all__ = [
    "AnswerKeyRepositoryInterface",
    "InMemoryAnswerKeyRepository",
    "get_answer_key_repository",
]
