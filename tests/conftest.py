"""
Shared pytest fixtures for the marking engine tests.

This module provides:
- A helper for asserting pydantic validation errors
- Record factories and the answer keys used across test modules
"""

import pytest
from typing import Any, Type
from pydantic import BaseModel, ValidationError

from marking import AnswerContext, CorrectAnswerRecord


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that creating a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'] and e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation


@pytest.fixture
def record():
    """Factory for CorrectAnswerRecord with a terse signature."""
    def _record(
        text: str,
        marks: int = 1,
        alt: int | None = None,
        label: str | None = None,
        tag: str | None = None,
        **kwargs: Any,
    ) -> CorrectAnswerRecord:
        context = AnswerContext(type="part", value=label, label=label) if label else None
        return CorrectAnswerRecord(
            answer_text=text,
            marks=marks,
            alternative_id=alt,
            context=context,
            explicit_requirement=tag,
            **kwargs,
        )
    return _record


@pytest.fixture
def bacteria_records(record):
    """Action alternatives (id 1) and reason alternatives (id 6)."""
    actions = ["kill bacteria", "destroy bacteria", "kill microorganisms", "kill pathogens", "kill germs"]
    reasons = ["bacteria cause illness", "bacteria cause disease", "pathogens cause disease", "prevent infection"]
    return (
        [record(text, alt=1, tag="one_required") for text in actions]
        + [record(text, alt=6, tag="one_required") for text in reasons]
    )


@pytest.fixture
def eleven_records(record):
    """Eleven independent one-mark points."""
    return [record(f"answer {n}", alt=n) for n in range(1, 12)]


pytestmark = [
    pytest.mark.filterwarnings("ignore::DeprecationWarning"),
]
