"""API schema modules."""

from api.schemas.predict import (
    PredictionRequest,
    PredictionResponse,
    ServiceErrorResponse,
    ValidationErrorResponse,
)

__all__ = [
    "PredictionRequest",
    "PredictionResponse",
    "ServiceErrorResponse",
    "ValidationErrorResponse",
]
