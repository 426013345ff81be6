"""
FastAPI backend for DiaPredict.

Provides a JSON endpoint that turns patient health metrics into an
AI-estimated diabetes probability and confidence level.
"""

from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import health, predict
from diapredict import __version__
from diapredict.config import Settings
from diapredict.errors import (
    AIServiceError,
    InputValidationError,
    OutputValidationError,
    RequestFormatError,
)
from diapredict.llm.client import LLMClient
from diapredict.service import DiabetesPredictor
from diapredict.utils.logging import get_logger, setup_logging
from diapredict.utils.protocols import LLMClientProtocol

logger = get_logger("api")


def build_llm_client(settings: Settings) -> Optional[LLMClient]:
    """
    Create the provider client, or None when no API key is configured.

    Raises:
        RuntimeError: If the key is missing and require_api_key is set
    """
    if not settings.ai_configured:
        message = "OPENROUTER_API_KEY environment variable is not set. Please add it to your .env file."
        if settings.require_api_key:
            raise RuntimeError(message)
        logger.error(f"{message} Starting in degraded mode: predictions will fail.")
        return None

    return LLMClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout,
    )


async def handle_input_validation_error(request: Request, exc: InputValidationError) -> JSONResponse:
    return JSONResponse(
        {"error": "Invalid input data", "details": exc.field_errors},
        status_code=exc.status_code,
    )


async def handle_request_format_error(request: Request, exc: RequestFormatError) -> JSONResponse:
    logger.info(f"Rejected malformed request: {exc.message} ({exc.details})")
    return JSONResponse(
        {"error": exc.message, "details": exc.details},
        status_code=exc.status_code,
    )


async def handle_service_error(
    request: Request,
    exc: AIServiceError | OutputValidationError,
) -> JSONResponse:
    # Full detail was logged by the predictor; the caller gets the category only
    return JSONResponse(
        {"error": "Failed to get prediction", "details": exc.public_detail},
        status_code=exc.status_code,
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return JSONResponse(
        {"error": "Failed to get prediction", "details": "An unexpected error occurred."},
        status_code=500,
    )


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[LLMClientProtocol] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration. Defaults to Settings.from_env().
        llm_client: Provider client. Defaults to one built from settings.
    """
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()
    setup_logging(settings.log_level)

    if llm_client is None:
        llm_client = build_llm_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown."""
        logger.info(
            f"DiaPredict API starting (model={settings.model}, "
            f"ai_configured={llm_client is not None})"
        )
        yield
        if llm_client is not None:
            await llm_client.close()
        logger.info("DiaPredict API shutting down")

    app = FastAPI(
        title="DiaPredict API",
        description="AI-assisted diabetes risk assessment from basic health metrics",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.predictor = DiabetesPredictor.from_settings(settings, llm_client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InputValidationError, handle_input_validation_error)
    app.add_exception_handler(RequestFormatError, handle_request_format_error)
    app.add_exception_handler(AIServiceError, handle_service_error)
    app.add_exception_handler(OutputValidationError, handle_service_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health.router, tags=["Health"])
    app.include_router(predict.router, prefix="/api", tags=["Prediction"])

    return app


def main():
    import uvicorn

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )


if __name__ == "__main__":
    main()
