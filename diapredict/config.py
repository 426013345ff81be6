"""
Service configuration.

Settings are read once at startup (after python-dotenv has loaded .env) and
passed explicitly to the components that need them.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from diapredict.prompts.builder import BMIMode


DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "google/gemini-2.0-flash-001"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    """Read-only configuration shared by all requests."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, ge=16)
    request_timeout: float = Field(default=30.0, gt=0)
    structured_output: bool = True
    bmi_mode: BMIMode = BMIMode.COMPUTED
    require_api_key: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def ai_configured(self) -> bool:
        return self.api_key is not None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If a variable is present but malformed
        """
        kwargs = {
            "api_key": os.getenv("OPENROUTER_API_KEY"),
            "base_url": os.getenv("DIAPREDICT_BASE_URL", DEFAULT_BASE_URL),
            "model": os.getenv("DIAPREDICT_MODEL", DEFAULT_MODEL),
            "structured_output": _env_bool("DIAPREDICT_STRUCTURED_OUTPUT", True),
            "require_api_key": _env_bool("DIAPREDICT_REQUIRE_API_KEY", False),
            "cors_origins": _env_list("DIAPREDICT_CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
        }
        # Numeric and enum values are left as strings for pydantic to coerce
        optional = {
            "temperature": "DIAPREDICT_TEMPERATURE",
            "max_tokens": "DIAPREDICT_MAX_TOKENS",
            "request_timeout": "DIAPREDICT_TIMEOUT",
            "bmi_mode": "DIAPREDICT_BMI_MODE",
        }
        for key, env_name in optional.items():
            raw = os.getenv(env_name)
            if raw is not None:
                kwargs[key] = raw.strip()

        return cls(**kwargs)
