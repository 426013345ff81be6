"""
DiaPredict - Enumerations

Centralized enum definitions shared by the validator, parser and handler.
"""

from enum import Enum


class Gender(str, Enum):
    """Accepted patient gender values."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Confidence(str, Enum):
    """How strongly the model commits to its probability estimate."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RequestState(str, Enum):
    """
    Lifecycle of a single prediction request.

    RECEIVED -> VALIDATING -> (REJECTED | VALIDATED) -> PROMPTING
    -> AWAITING_AI -> (PARSED | AI_FAILED | PARSE_FAILED) -> RESPONDING
    """

    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"  # Terminal
    VALIDATED = "validated"
    PROMPTING = "prompting"
    AWAITING_AI = "awaiting_ai"
    AI_FAILED = "ai_failed"  # Terminal
    PARSE_FAILED = "parse_failed"  # Terminal
    PARSED = "parsed"
    RESPONDING = "responding"

    @property
    def is_failure(self) -> bool:
        return self in (
            RequestState.REJECTED,
            RequestState.AI_FAILED,
            RequestState.PARSE_FAILED,
        )
