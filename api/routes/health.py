"""Health check endpoints."""

from fastapi import APIRouter, Request

from diapredict import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Basic health check. Reports whether the AI provider is configured."""
    predictor = request.app.state.predictor
    ai_configured = predictor.gateway.available
    return {
        "status": "healthy" if ai_configured else "degraded",
        "service": "diapredict",
        "ai_configured": ai_configured,
    }


@router.get("/")
async def root():
    """API root."""
    return {
        "name": "DiaPredict API",
        "version": __version__,
        "docs": "/docs",
        "predict": "/api/predict",
    }
