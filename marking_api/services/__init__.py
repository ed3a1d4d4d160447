"""Services package"""

from .authoring_service import AuthoringService, get_authoring_service
from .grading_service import GradingService, get_grading_service

__all__ = [
    "AuthoringService",
    "get_authoring_service",
    "GradingService",
    "get_grading_service",
]
