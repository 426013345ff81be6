"""
Error taxonomy for the prediction flow.

Every failure is scoped to a single request. Input-side errors are raised
before any AI call; service-side errors only after the call was attempted.
"""

from typing import Optional


class PredictionError(Exception):
    """Base class for all prediction request failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(PredictionError):
    """One or more patient fields failed validation."""

    status_code = 400

    def __init__(self, field_errors: dict[str, list[str]]):
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Invalid input data ({fields})")
        self.field_errors = field_errors


class RequestFormatError(PredictionError):
    """The transport payload is unusable (bad content type, non-JSON, not an object)."""

    status_code = 400

    def __init__(self, message: str, details: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class AIServiceError(PredictionError):
    """The AI provider was unreachable, rate-limited, timed out or errored."""

    public_detail = "The AI service is currently unavailable."


class OutputValidationError(PredictionError):
    """The provider replied, but not with a valid prediction."""

    public_detail = "The AI service returned an invalid prediction."

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output
