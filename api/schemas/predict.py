"""Prediction API schemas."""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PredictionRequest(BaseModel):
    """
    Documented shape of the POST body.

    Only used for OpenAPI docs; the route validates the raw body itself so
    it can report every field error in one response.
    """
    model_config = ConfigDict(populate_by_name=True)

    age: Union[int, str] = Field(..., description="The patient's age in years (1-120, whole number).")
    blood_group: str = Field(..., alias="bloodGroup", description="The patient's blood group (e.g., A+, O-).")
    gender: Literal["Male", "Female", "Other"] = Field(..., description="The patient's gender (Male, Female, or Other).")
    weight: Union[float, str] = Field(..., description="The patient's weight in kilograms (1-500).")
    height: Union[int, str] = Field(..., description="The patient's height in centimeters (50-250, whole number).")


class PredictionResponse(BaseModel):
    """Successful prediction."""
    probability: float = Field(..., ge=0, le=1)
    confidence: Literal["High", "Medium", "Low"]


class ValidationErrorResponse(BaseModel):
    """Field-level validation failure."""
    error: str
    details: dict[str, list[str]]


class ServiceErrorResponse(BaseModel):
    """Request format, provider or output failure."""
    error: str
    details: str = ""


EXAMPLE_REQUEST_BODY = {
    "age": 50,
    "bloodGroup": "O+",
    "gender": "Female",
    "weight": 75.5,
    "height": 165,
}

DISCLAIMER = (
    "This prediction is based on AI analysis and should not replace professional "
    "medical advice. Consult a healthcare provider for diagnosis."
)


def required_body_schema() -> dict[str, str]:
    """Field name -> human-readable description, from PredictionRequest."""
    return {
        field.alias or name: field.description or ""
        for name, field in PredictionRequest.model_fields.items()
    }


def usage_document() -> dict:
    """Static usage documentation returned by GET /api/predict."""
    return {
        "message": "DiaPredict API Endpoint.",
        "usage": (
            "Send a POST request to this endpoint with patient data in the JSON body "
            "to get a diabetes risk prediction."
        ),
        "requiredBodySchema": required_body_schema(),
        "exampleRequestBody": dict(EXAMPLE_REQUEST_BODY),
        "successResponseFormat": {
            "probability": "number (0-1) - Estimated probability of diabetes.",
            "confidence": "'High' | 'Medium' | 'Low' - AI's confidence level in the prediction.",
        },
        "errorResponseFormat": {
            "error": "string - General error message.",
            "details": "object | string - Specific error details (e.g., validation failures or internal error info).",
        },
        "disclaimer": DISCLAIMER,
    }
