"""
DiaPredict - Prediction Output

The single result produced for each request from the model's reply.
"""

from pydantic import BaseModel, ConfigDict, Field

from diapredict.models.enums import Confidence


class PredictionOutput(BaseModel):
    """Diabetes probability and the model's confidence in it."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    probability: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Probability of a positive diabetes diagnosis (0 to 1)",
    )
    confidence: Confidence = Field(
        ...,
        description="Confidence level indicator (High, Medium, Low)",
    )

    @property
    def percentage(self) -> int:
        """Probability as a rounded 0-100 percentage."""
        return round(self.probability * 100)

    @classmethod
    def json_schema_for_provider(cls) -> dict:
        """
        JSON schema sent to the provider in structured-output mode.

        Must stay a flat object with no $defs references.
        """
        return {
            "type": "object",
            "properties": {
                "probability": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 1,
                    "description": "Probability of a positive diabetes diagnosis (0 to 1).",
                },
                "confidence": {
                    "type": "string",
                    "enum": [c.value for c in Confidence],
                    "description": "Confidence level indicator (High, Medium, Low).",
                },
            },
            "required": ["probability", "confidence"],
            "additionalProperties": False,
        }
