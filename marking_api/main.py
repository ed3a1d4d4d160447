"""
FastAPI adapter for the marking engine.

Exposes the two boundaries of the engine:
- Authoring: save an answer key, which is compiled into marking points
- Grading: score a submitted answer against a stored answer key
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from typing import List

from marking import ScoringResult

from .core import (
    settings,
    setup_logging,
    get_logger,
    register_error_handlers,
)
from .models import (
    AnswerKeyRequest,
    SubmissionRequest,
    MarkRequest,
    StoredAnswerKey,
    MarkResponse,
)
from .repositories import get_answer_key_repository
from .services import (
    AuthoringService,
    GradingService,
    get_authoring_service,
    get_grading_service,
)

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting marking API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        }
    )
    yield
    logger.info("Shutting down marking API")


app = FastAPI(
    title=settings.APP_NAME,
    description="Answer-key compilation and answer marking",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
def get_authoring_service_dep() -> AuthoringService:
    """Get authoring service instance"""
    return get_authoring_service(get_answer_key_repository())


def get_grading_service_dep() -> GradingService:
    """Get grading service instance"""
    return get_grading_service(get_answer_key_repository())


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "questions": "/questions",
            "answer_key": "/questions/{question_id}/answer-key",
            "score": "/questions/{question_id}/score",
            "mark": "/mark",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/questions", response_model=List[str])
async def list_questions(
    service: AuthoringService = Depends(get_authoring_service_dep)
):
    """List question ids that have an answer key"""
    return await service.list_questions()


@app.put("/questions/{question_id}/answer-key", response_model=StoredAnswerKey)
async def save_answer_key(
    question_id: str,
    request: AnswerKeyRequest,
    service: AuthoringService = Depends(get_authoring_service_dep)
):
    """
    Save (replace) a question's answer key.

    Args:
        question_id: Question identifier
        request: All correct-answer rows of the question

    Returns:
        Compiled answer key with marking points and warnings
    """
    return await service.save_answer_key(question_id, request)


@app.get("/questions/{question_id}/answer-key", response_model=StoredAnswerKey)
async def get_answer_key(
    question_id: str,
    service: AuthoringService = Depends(get_authoring_service_dep)
):
    """Get a question's compiled answer key"""
    return await service.get_answer_key(question_id)


@app.delete("/questions/{question_id}/answer-key", status_code=status.HTTP_204_NO_CONTENT)
async def delete_answer_key(
    question_id: str,
    service: AuthoringService = Depends(get_authoring_service_dep)
):
    """Remove a question's answer key"""
    await service.delete_answer_key(question_id)


@app.post("/questions/{question_id}/score", response_model=ScoringResult)
async def score_submission(
    question_id: str,
    request: SubmissionRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """
    Score a submitted answer.

    Args:
        question_id: Question identifier
        request: Submitted answer text

    Returns:
        Awarded marks, matched points and per-point breakdown
    """
    return await service.score_submission(question_id, request.answer)


@app.post("/mark", response_model=MarkResponse)
async def mark(
    request: MarkRequest,
    service: GradingService = Depends(get_grading_service_dep)
):
    """Build an answer key and score one answer without storing anything"""
    return service.mark(request)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "marking_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
