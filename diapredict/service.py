"""
Prediction request handler.

Orchestrates one request through validation, prompt construction, the AI
call and output parsing. Holds no per-request state between calls; the
collaborators it receives are read-only after construction.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from diapredict.config import Settings
from diapredict.errors import (
    AIServiceError,
    InputValidationError,
    OutputValidationError,
)
from diapredict.gateway import PredictionGateway
from diapredict.models.enums import RequestState
from diapredict.models.patient import PatientInput
from diapredict.models.prediction import PredictionOutput
from diapredict.parsing import parse_prediction
from diapredict.prompts.builder import PromptBuilder, build_messages
from diapredict.utils.protocols import LLMClientProtocol
from diapredict.validation import validate_patient_input

logger = logging.getLogger(__name__)


@dataclass
class RequestTrace:
    """States visited by a single request, in order."""

    states: list[RequestState] = field(default_factory=lambda: [RequestState.RECEIVED])

    @property
    def current(self) -> RequestState:
        return self.states[-1]

    def advance(self, state: RequestState) -> None:
        logger.debug(f"{self.current.value} -> {state.value}")
        self.states.append(state)


class DiabetesPredictor:
    """
    Runs the validate -> prompt -> AI -> parse flow for one request at a time.

    Safe to share across concurrent requests.
    """

    def __init__(
        self,
        gateway: PredictionGateway,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        self.gateway = gateway
        self.prompt_builder = prompt_builder or PromptBuilder(gateway.settings.bmi_mode)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        llm_client: Optional[LLMClientProtocol],
    ) -> "DiabetesPredictor":
        """Build a predictor and its gateway from configuration."""
        gateway = PredictionGateway(llm_client, settings)
        return cls(gateway, PromptBuilder(settings.bmi_mode))

    async def predict(self, data: Any, trace: Optional[RequestTrace] = None) -> PredictionOutput:
        """
        Produce a prediction for a decoded request body.

        Args:
            data: Decoded JSON body
            trace: Optional trace to record the visited states in

        Returns:
            Validated PredictionOutput

        Raises:
            RequestFormatError: Body is not a JSON object
            InputValidationError: One or more fields are invalid (no AI call made)
            AIServiceError: Provider failed or timed out
            OutputValidationError: Provider reply is not a valid prediction
        """
        trace = trace or RequestTrace()

        trace.advance(RequestState.VALIDATING)
        result = validate_patient_input(data)
        if not result.ok:
            trace.advance(RequestState.REJECTED)
            logger.info(f"Rejected prediction request: {result.errors}")
            raise InputValidationError(result.errors)
        trace.advance(RequestState.VALIDATED)

        return await self.predict_for_patient(result.patient, trace)

    async def predict_for_patient(
        self,
        patient: PatientInput,
        trace: Optional[RequestTrace] = None,
    ) -> PredictionOutput:
        """Run the prompt -> AI -> parse stages for an already validated patient."""
        trace = trace or RequestTrace(states=[RequestState.VALIDATED])

        trace.advance(RequestState.PROMPTING)
        messages = build_messages(self.prompt_builder, patient)

        trace.advance(RequestState.AWAITING_AI)
        try:
            raw_output = await self.gateway.request_prediction(messages)
        except AIServiceError as e:
            trace.advance(RequestState.AI_FAILED)
            logger.error(f"AI service failure: {e.message}")
            raise

        try:
            prediction = parse_prediction(raw_output)
        except OutputValidationError as e:
            trace.advance(RequestState.PARSE_FAILED)
            logger.error(f"Invalid AI output: {e.message}; raw output: {e.raw_output!r}")
            raise
        trace.advance(RequestState.PARSED)

        trace.advance(RequestState.RESPONDING)
        logger.info(
            f"Prediction: probability={prediction.probability:.2f}, "
            f"confidence={prediction.confidence}"
        )
        return prediction
