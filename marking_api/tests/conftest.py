"""
Pytest configuration and fixtures.

Provides shared fixtures for testing the API and its services.
"""

import pytest
from fastapi.testclient import TestClient

from marking_api.main import app, get_authoring_service_dep, get_grading_service_dep
from marking_api.repositories import InMemoryAnswerKeyRepository
from marking_api.services import AuthoringService, GradingService
from marking_api.models import AnswerKeyRequest


@pytest.fixture
def answer_key_repository() -> InMemoryAnswerKeyRepository:
    """Fresh, empty answer key repository"""
    return InMemoryAnswerKeyRepository()


@pytest.fixture
def client(answer_key_repository) -> TestClient:
    """FastAPI test client backed by a fresh repository"""
    app.dependency_overrides[get_authoring_service_dep] = lambda: AuthoringService(answer_key_repository)
    app.dependency_overrides[get_grading_service_dep] = lambda: GradingService(answer_key_repository)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def bacteria_key_payload() -> dict:
    """Answer key with an action point and a reason point"""
    actions = ["kill bacteria", "destroy bacteria", "kill microorganisms", "kill pathogens", "kill germs"]
    reasons = ["bacteria cause illness", "bacteria cause disease", "pathogens cause disease", "prevent infection"]
    return {
        "records": (
            [{"answer_text": t, "alternative_id": 1, "explicit_requirement": "one_required"} for t in actions]
            + [{"answer_text": t, "alternative_id": 6, "explicit_requirement": "one_required"} for t in reasons]
        ),
        "question_type": "descriptive",
    }


@pytest.fixture
def bacteria_key_request(bacteria_key_payload) -> AnswerKeyRequest:
    return AnswerKeyRequest.model_validate(bacteria_key_payload)
