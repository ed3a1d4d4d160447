"""
Answer key repository for data access.

Implements the Repository pattern for compiled answer keys. Snapshots are
replaced wholesale on every save; readers always get a complete key.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, List

from ..models.domain import StoredAnswerKey
from ..core.errors import AnswerKeyNotFoundError
from ..core.logging import get_logger

logger = get_logger(__name__)


class AnswerKeyRepositoryInterface(ABC):
    """Abstract interface for answer key repository"""

    @abstractmethod
    async def get(self, question_id: str) -> StoredAnswerKey:
        """Get the stored answer key for a question"""
        pass

    @abstractmethod
    async def save(self, stored: StoredAnswerKey) -> StoredAnswerKey:
        """Store (replace) a question's answer key"""
        pass

    @abstractmethod
    async def delete(self, question_id: str) -> None:
        """Remove a question's answer key"""
        pass

    @abstractmethod
    async def exists(self, question_id: str) -> bool:
        """Check if a question has an answer key"""
        pass

    @abstractmethod
    async def list_ids(self) -> List[str]:
        """List question ids with stored answer keys"""
        pass


class InMemoryAnswerKeyRepository(AnswerKeyRepositoryInterface):
    """
    In-process answer key store.

    Stands in for the question database; keys are lost on restart.
    """

    def __init__(self):
        self._keys: Dict[str, StoredAnswerKey] = {}

    async def get(self, question_id: str) -> StoredAnswerKey:
        stored = self._keys.get(question_id)
        if stored is None:
            raise AnswerKeyNotFoundError(question_id)
        return stored

    async def save(self, stored: StoredAnswerKey) -> StoredAnswerKey:
        previous = self._keys.get(stored.question_id)
        if previous is not None:
            stored = stored.model_copy(update={"version": previous.version + 1})
        self._keys[stored.question_id] = stored

        logger.debug(
            "Answer key stored",
            extra_data={"question_id": stored.question_id, "version": stored.version}
        )
        return stored

    async def delete(self, question_id: str) -> None:
        if self._keys.pop(question_id, None) is None:
            raise AnswerKeyNotFoundError(question_id)

    async def exists(self, question_id: str) -> bool:
        return question_id in self._keys

    async def list_ids(self) -> List[str]:
        return sorted(self._keys)


@lru_cache()
def get_answer_key_repository() -> AnswerKeyRepositoryInterface:
    """Get the process-wide answer key repository"""
    return InMemoryAnswerKeyRepository()
