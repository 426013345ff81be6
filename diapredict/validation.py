"""
Schema validation for incoming patient data.

Each field has its own validator returning a FieldResult. The validators are
composed by validate_patient_input(), which either builds a PatientInput or
returns every field-level message keyed by the wire field name.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from diapredict.errors import InputValidationError, RequestFormatError
from diapredict.models.enums import Gender
from diapredict.models.patient import (
    AGE_RANGE,
    HEIGHT_RANGE,
    WEIGHT_RANGE,
    PatientInput,
)


@dataclass(frozen=True)
class FieldResult:
    """Outcome of validating one field: a value or a list of messages."""

    value: Any = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a whole payload. No partial success."""

    patient: Optional[PatientInput] = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.patient is not None and not self.errors


def _fail(*messages: str) -> FieldResult:
    return FieldResult(errors=list(messages))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce_number(value: Any) -> Optional[float]:
    """
    Coerce a number or numeric-looking string to float.

    Returns None for anything non-coercible, including booleans and NaN/inf.
    """
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # OverflowError: integers beyond float range
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _validate_number(
    value: Any,
    label: str,
    bounds: tuple[float, float],
    min_message: str,
    max_message: str,
    whole_message: Optional[str] = None,
) -> FieldResult:
    if _is_blank(value):
        return _fail(f"{label} is required.")

    number = _coerce_number(value)
    if number is None:
        return _fail(f"{label} must be a number.")

    errors = []
    if number < bounds[0]:
        errors.append(min_message)
    if number > bounds[1]:
        errors.append(max_message)
    if whole_message and not number.is_integer():
        errors.append(whole_message)

    if errors:
        return FieldResult(errors=errors)
    return FieldResult(value=int(number) if whole_message else number)


def validate_age(value: Any) -> FieldResult:
    return _validate_number(
        value,
        "Age",
        AGE_RANGE,
        "Age must be at least 1.",
        "Age seems unrealistic.",
        whole_message="Age must be a whole number.",
    )


def validate_weight(value: Any) -> FieldResult:
    return _validate_number(
        value,
        "Weight",
        WEIGHT_RANGE,
        "Weight must be positive.",
        "Weight seems unrealistic.",
    )


def validate_height(value: Any) -> FieldResult:
    return _validate_number(
        value,
        "Height",
        HEIGHT_RANGE,
        "Height must be at least 50cm.",
        "Height seems unrealistic.",
        whole_message="Height must be a whole number (cm).",
    )


def validate_blood_group(value: Any) -> FieldResult:
    if _is_blank(value):
        return _fail("Blood group is required.")
    if not isinstance(value, str):
        return _fail("Blood group must be a string.")
    return FieldResult(value=value.strip())


def validate_gender(value: Any) -> FieldResult:
    if _is_blank(value):
        return _fail("Gender is required.")
    allowed = ", ".join(g.value for g in Gender)
    if not isinstance(value, str):
        return _fail(f"Gender must be one of: {allowed}.")

    wanted = value.strip().lower()
    for gender in Gender:
        if gender.value.lower() == wanted:
            return FieldResult(value=gender)
    return _fail(f"Gender must be one of: {allowed}.")


# Wire field name -> (model attribute, validator)
FIELD_VALIDATORS: dict[str, tuple[str, Callable[[Any], FieldResult]]] = {
    "age": ("age", validate_age),
    "bloodGroup": ("blood_group", validate_blood_group),
    "gender": ("gender", validate_gender),
    "weight": ("weight", validate_weight),
    "height": ("height", validate_height),
}


def validate_patient_input(data: Any) -> ValidationResult:
    """
    Validate a decoded request body.

    Args:
        data: Decoded JSON body. Must be a mapping; extra keys are ignored.

    Returns:
        ValidationResult holding either a PatientInput or per-field errors

    Raises:
        RequestFormatError: If data is not a mapping at all
    """
    if not isinstance(data, Mapping):
        raise RequestFormatError(
            "Request body must be a JSON object",
            details=f"Got {type(data).__name__}",
        )

    values: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}

    for wire_name, (attr, validator) in FIELD_VALIDATORS.items():
        result = validator(data.get(wire_name))
        if result.ok:
            values[attr] = result.value
        else:
            errors[wire_name] = result.errors

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(patient=PatientInput(**values))


def parse_patient_input(data: Any) -> PatientInput:
    """Validate data and return a PatientInput, raising InputValidationError on failure."""
    result = validate_patient_input(data)
    if not result.ok:
        raise InputValidationError(result.errors)
    return result.patient
