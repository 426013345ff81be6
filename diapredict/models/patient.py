"""
DiaPredict - Patient Input

The validated, immutable set of patient attributes for one request.
"""

from pydantic import BaseModel, ConfigDict, Field

from diapredict.models.enums import Gender


AGE_RANGE = (1, 120)
WEIGHT_RANGE = (1, 500)
HEIGHT_RANGE = (50, 250)


class PatientInput(BaseModel):
    """Patient attributes submitted for a diabetes risk assessment."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age: int = Field(..., ge=AGE_RANGE[0], le=AGE_RANGE[1], description="Age in years")
    blood_group: str = Field(
        ...,
        min_length=1,
        alias="bloodGroup",
        description="Blood group, e.g. A+ or O-",
    )
    gender: Gender
    weight: float = Field(..., ge=WEIGHT_RANGE[0], le=WEIGHT_RANGE[1], description="Weight in kg")
    height: int = Field(..., ge=HEIGHT_RANGE[0], le=HEIGHT_RANGE[1], description="Height in cm")

    @property
    def height_m(self) -> float:
        return self.height / 100

    @property
    def bmi(self) -> float:
        """Body Mass Index: weight (kg) / height (m) squared."""
        return self.weight / (self.height_m ** 2)
