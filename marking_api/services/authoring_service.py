"""
Authoring service for answer keys.

Compiles an author's correct-answer rows into marking points whenever the
answer key is saved, and stores the result as a fresh snapshot.
"""

from typing import List

from marking import build_answer_key

from ..models.domain import AnswerKeyRequest, StoredAnswerKey
from ..repositories.answer_key_repository import AnswerKeyRepositoryInterface
from ..core.errors import MarkingError
from ..core.logging import get_logger

logger = get_logger(__name__)


class AuthoringService:
    """
    Service for answer key operations.

    Every save rebuilds the key from scratch; previous points are discarded.
    """

    def __init__(self, repository: AnswerKeyRepositoryInterface):
        self.repository = repository

    async def save_answer_key(
        self,
        question_id: str,
        request: AnswerKeyRequest
    ) -> StoredAnswerKey:
        """
        Compile and store a question's answer key.

        Args:
            question_id: Question identifier
            request: Correct-answer rows plus optional question metadata

        Returns:
            The stored snapshot (with its new version)

        Raises:
            MarkingError: If compilation fails unexpectedly
        """
        logger.info(
            "Saving answer key",
            extra_data={"question_id": question_id, "num_rows": len(request.records)}
        )

        try:
            answer_key = build_answer_key(
                request.records,
                question_type=request.question_type,
                answer_format=request.answer_format,
            )
        except Exception as e:
            logger.error(
                "Failed to build answer key",
                extra_data={"question_id": question_id, "error": str(e)},
                exc_info=True
            )
            raise MarkingError(question_id, str(e)) from e

        if answer_key.warnings:
            logger.warning(
                "Answer key has data-quality warnings",
                extra_data={
                    "question_id": question_id,
                    "warnings": [w.code for w in answer_key.warnings]
                }
            )

        stored = await self.repository.save(
            StoredAnswerKey(question_id=question_id, answer_key=answer_key)
        )

        logger.info(
            "Answer key saved",
            extra_data={
                "question_id": question_id,
                "version": stored.version,
                "num_points": len(answer_key.points),
                "total_marks": answer_key.total_marks
            }
        )
        return stored

    async def get_answer_key(self, question_id: str) -> StoredAnswerKey:
        """Get a question's stored answer key"""
        return await self.repository.get(question_id)

    async def delete_answer_key(self, question_id: str) -> None:
        """Remove a question's stored answer key"""
        await self.repository.delete(question_id)
        logger.info("Answer key deleted", extra_data={"question_id": question_id})

    async def list_questions(self) -> List[str]:
        """Question ids that have an answer key"""
        return await self.repository.list_ids()


# Factory function
def get_authoring_service(
    repository: AnswerKeyRepositoryInterface
) -> AuthoringService:
    """Create authoring service instance"""
    return AuthoringService(repository)
