"""
Grading service for learner submissions.

Scores submitted answer text against a question's stored marking points.
"""

from marking import ScoringEngine, ScoringResult, build_answer_key

from ..models.domain import MarkRequest, MarkResponse
from ..repositories.answer_key_repository import AnswerKeyRepositoryInterface
from ..core.errors import MarkingError
from ..core.logging import get_logger, get_context_logger

logger = get_logger(__name__)


class GradingService:
    """
    Service for answer grading operations.

    Reads answer key snapshots only; it never modifies them.
    """

    def __init__(self, repository: AnswerKeyRepositoryInterface):
        self.repository = repository

    async def score_submission(
        self,
        question_id: str,
        answer: str
    ) -> ScoringResult:
        """
        Score one submitted answer.

        Args:
            question_id: Question identifier
            answer: Submitted answer as plain text

        Returns:
            ScoringResult for the submission

        Raises:
            AnswerKeyNotFoundError: If the question has no answer key
            MarkingError: If scoring fails unexpectedly
        """
        log = get_context_logger(__name__, question_id=question_id)
        stored = await self.repository.get(question_id)

        try:
            result = ScoringEngine(stored.answer_key.points).score(answer)
        except Exception as e:
            log.error(
                "Failed to score submission",
                extra_data={"error": str(e)},
                exc_info=True
            )
            raise MarkingError(question_id, str(e)) from e

        log.info(
            "Submission scored",
            extra_data={
                "version": stored.version,
                "awarded_marks": result.awarded_marks,
                "max_marks": result.max_marks
            }
        )
        return result

    def mark(self, request: MarkRequest) -> MarkResponse:
        """
        Build a key and score a submission in one go, storing nothing.

        Used for previewing how an answer key marks a sample answer.
        """
        answer_key = build_answer_key(
            request.records,
            question_type=request.question_type,
            answer_format=request.answer_format,
        )
        result = ScoringEngine(answer_key.points).score(request.answer)

        logger.info(
            "Preview marked",
            extra_data={
                "num_rows": len(request.records),
                "awarded_marks": result.awarded_marks,
                "max_marks": result.max_marks
            }
        )
        return MarkResponse(answer_key=answer_key, result=result)


# Factory function
def get_grading_service(
    repository: AnswerKeyRepositoryInterface
) -> GradingService:
    """Create grading service instance"""
    return GradingService(repository)
