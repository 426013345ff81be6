"""
Pytest configuration and shared fixtures for the test suite.
"""

import json

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from api.main import create_app
from diapredict.config import Settings
from diapredict.gateway import PredictionGateway
from diapredict.models.enums import Gender
from diapredict.models.llm import LLMResponse
from diapredict.models.patient import PatientInput
from diapredict.service import DiabetesPredictor


# ============================================================================
# Patient Fixtures
# ============================================================================

@pytest.fixture
def valid_payload():
    """Request body used by the documented example."""
    return {
        "age": 50,
        "bloodGroup": "O+",
        "gender": "Female",
        "weight": 75.5,
        "height": 165,
    }


@pytest.fixture
def sample_patient():
    """Validated patient matching valid_payload."""
    return PatientInput(
        age=50,
        blood_group="O+",
        gender=Gender.FEMALE,
        weight=75.5,
        height=165,
    )


# ============================================================================
# Settings / Mock LLM Client
# ============================================================================

@pytest.fixture
def settings():
    """Settings with a dummy key and a short timeout."""
    return Settings(api_key="test-key", model="test/model", request_timeout=2.0)


@pytest.fixture
def mock_llm_response():
    """Factory for creating mock LLM responses."""
    def _create(content: str, model: str = "test/model", input_tokens: int = 100, output_tokens: int = 20):
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
    return _create


@pytest.fixture
def prediction_reply():
    """Factory for JSON prediction replies."""
    def _create(probability=0.42, confidence="Medium") -> str:
        return json.dumps({"probability": probability, "confidence": confidence})
    return _create


@pytest.fixture
def mock_llm_client(mock_llm_response, prediction_reply):
    """Mock LLM client returning a valid Medium / 0.42 prediction."""
    client = MagicMock()
    client.complete = AsyncMock(return_value=mock_llm_response(prediction_reply()))
    client.close = AsyncMock()
    return client


@pytest.fixture
def predictor(settings, mock_llm_client):
    """Predictor wired to the mock client."""
    return DiabetesPredictor.from_settings(settings, mock_llm_client)


@pytest.fixture
def gateway(settings, mock_llm_client):
    """Gateway wired to the mock client."""
    return PredictionGateway(mock_llm_client, settings)


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def app(settings, mock_llm_client):
    """FastAPI app using the mock client."""
    return create_app(settings=settings, llm_client=mock_llm_client)


@pytest.fixture
def client(app):
    """HTTP test client for the app."""
    return TestClient(app)
