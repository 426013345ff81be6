"""
Parsing and validation of the model's prediction reply.

Both the structured-output path (reply is a JSON object) and the raw-text
path (JSON buried in prose, or "probability: 0.4" style lines) end in the
same validation. Nothing is defaulted: anything that is not a complete,
in-range prediction raises OutputValidationError.
"""

import json
import math
import re
from typing import Any, Optional

from diapredict.errors import OutputValidationError
from diapredict.models.enums import Confidence
from diapredict.models.prediction import PredictionOutput


_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)
_PROBABILITY_RE = re.compile(
    r"[\"']?probability[\"']?\s*[:=]\s*[\"']?(-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)",
    re.IGNORECASE,
)
_CONFIDENCE_RE = re.compile(
    r"[\"']?confidence[\"']?\s*[:=]\s*[\"']?([A-Za-z]+)",
    re.IGNORECASE,
)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def extract_json_object(text: str) -> Optional[dict]:
    """
    Find the first decodable JSON object in text.

    Tries the whole text first, then every balanced {...} block from the
    left, using the JSON decoder to find where each block ends.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", text):
        try:
            candidate, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(candidate, dict):
            return candidate
    return None


def extract_fields_from_text(text: str) -> Optional[dict]:
    """Pull probability and confidence out of free-form "key: value" text."""
    probability = _PROBABILITY_RE.search(text)
    confidence = _CONFIDENCE_RE.search(text)
    if not probability or not confidence:
        return None
    return {
        "probability": probability.group(1),
        "confidence": confidence.group(1),
    }


def _coerce_probability(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"probability must be a number, got {value!r}")
    if not isinstance(value, (int, float, str)):
        raise ValueError(f"probability must be a number, got {type(value).__name__}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except ValueError:
        raise ValueError(f"probability must be a number, got {value!r}") from None
    except OverflowError:
        raise ValueError("probability must be a number, got an integer beyond float range") from None

    if math.isnan(number) or not 0.0 <= number <= 1.0:
        raise ValueError(f"probability must be between 0 and 1, got {number}")
    return number


def _coerce_confidence(value: Any) -> Confidence:
    if isinstance(value, str):
        wanted = value.strip().lower()
        for level in Confidence:
            if level.value.lower() == wanted:
                return level
    allowed = ", ".join(c.value for c in Confidence)
    raise ValueError(f"confidence must be one of {allowed}, got {value!r}")


def validate_prediction(data: Any, raw_output: str = "") -> PredictionOutput:
    """
    Validate an already-decoded reply object.

    Raises:
        OutputValidationError: If the object is not a valid prediction
    """
    if not isinstance(data, dict):
        raise OutputValidationError(
            f"Expected a JSON object, got {type(data).__name__}", raw_output=raw_output
        )

    missing = [key for key in ("probability", "confidence") if key not in data]
    if missing:
        raise OutputValidationError(
            f"Reply is missing field(s): {', '.join(missing)}", raw_output=raw_output
        )

    try:
        probability = _coerce_probability(data["probability"])
        confidence = _coerce_confidence(data["confidence"])
    except ValueError as e:
        raise OutputValidationError(str(e), raw_output=raw_output) from e

    return PredictionOutput(probability=probability, confidence=confidence)


def parse_prediction(raw_output: str) -> PredictionOutput:
    """
    Parse the provider's reply text into a PredictionOutput.

    Args:
        raw_output: Reply text, either a JSON object or prose containing one

    Returns:
        Validated PredictionOutput

    Raises:
        OutputValidationError: If no valid prediction can be extracted
    """
    if not raw_output or not raw_output.strip():
        raise OutputValidationError("AI reply was empty", raw_output=raw_output or "")

    text = strip_code_fences(raw_output)
    data = extract_json_object(text)
    if data is None:
        data = extract_fields_from_text(text)
    if data is None:
        raise OutputValidationError("Could not locate a prediction in AI reply", raw_output=raw_output)

    return validate_prediction(data, raw_output=raw_output)
