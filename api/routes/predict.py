"""Diabetes prediction API routes."""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from api.schemas.predict import (
    PredictionRequest,
    PredictionResponse,
    ServiceErrorResponse,
    ValidationErrorResponse,
    usage_document,
)
from diapredict.errors import RequestFormatError
from diapredict.service import DiabetesPredictor

router = APIRouter()

ALLOWED_METHODS = "GET, POST, OPTIONS"


def get_predictor(request: Request) -> DiabetesPredictor:
    """Predictor built once at startup and shared across requests."""
    return request.app.state.predictor


async def read_json_body(request: Request):
    """
    Decode the request body as JSON.

    Raises:
        RequestFormatError: Content type is not JSON (415) or the body is not valid JSON (400)
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "application/json":
        raise RequestFormatError(
            "Invalid content type, expected application/json",
            details=f"Got '{content_type}'" if content_type else "No content type supplied",
            status_code=415,
        )

    body = await request.body()
    try:
        return json.loads(body)
    except ValueError as e:
        raise RequestFormatError("Invalid JSON format in request body", details=str(e)) from e


@router.post(
    "/predict",
    response_model=PredictionResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Invalid input data or malformed JSON"},
        415: {"model": ServiceErrorResponse, "description": "Content type is not application/json"},
        500: {"model": ServiceErrorResponse, "description": "AI service or output failure"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": PredictionRequest.model_json_schema(by_alias=True)}},
        }
    },
)
async def predict(
    request: Request,
    predictor: DiabetesPredictor = Depends(get_predictor),
) -> PredictionResponse:
    """
    Predict the probability of a diabetes diagnosis from patient metrics.

    Every field error is reported at once; no AI call is made unless all
    fields are valid.
    """
    data = await read_json_body(request)
    prediction = await predictor.predict(data)
    return PredictionResponse(
        probability=prediction.probability,
        confidence=prediction.confidence,
    )


# Registered ahead of GET so HEAD is not served by the usage route
@router.api_route("/predict", methods=["PUT", "DELETE", "PATCH", "HEAD"], include_in_schema=False)
async def predict_method_not_allowed(request: Request) -> JSONResponse:
    return JSONResponse(
        {"error": f"Method {request.method} Not Allowed"},
        status_code=405,
        headers={"Allow": ALLOWED_METHODS},
    )


@router.get("/predict")
async def predict_usage() -> JSONResponse:
    """Describe how to call the prediction endpoint."""
    return JSONResponse(usage_document(), headers={"Allow": ALLOWED_METHODS})


@router.options("/predict", status_code=204)
async def predict_options() -> Response:
    """Advertise the allowed methods."""
    return Response(status_code=204, headers={"Allow": ALLOWED_METHODS})

