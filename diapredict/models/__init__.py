"""Data models for the prediction service."""

from diapredict.models.enums import Confidence, Gender, RequestState
from diapredict.models.llm import LLMResponse
from diapredict.models.patient import PatientInput
from diapredict.models.prediction import PredictionOutput

__all__ = [
    "Confidence",
    "Gender",
    "LLMResponse",
    "PatientInput",
    "PredictionOutput",
    "RequestState",
]
