"""
Runtime configuration for the contract review assistant.

Values come from the environment (a local `.env` file is loaded first).
"""
import os
from typing import Mapping, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when a setting is present but malformed"""
    pass


class Settings(BaseModel):
    """Configuration for the model and tracking-service clients."""

    model_config = ConfigDict(frozen=True)

    # Model
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    model_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    model_max_output_tokens: int = Field(default=4000, gt=0)
    model_timeout_ms: int = Field(default=15000, gt=0)

    # Task tracking (Notion)
    notion_token: Optional[str] = None
    notion_database_id: Optional[str] = None
    notion_timeout_s: float = Field(default=15.0, gt=0)
    notion_version: str = "2022-06-28"

    @property
    def task_tracking_enabled(self) -> bool:
        return bool(self.notion_token and self.notion_database_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        names = {
            "gemini_api_key": "GEMINI_API_KEY",
            "gemini_model": "GEMINI_MODEL",
            "model_temperature": "MODEL_TEMPERATURE",
            "model_max_output_tokens": "MODEL_MAX_OUTPUT_TOKENS",
            "model_timeout_ms": "MODEL_TIMEOUT_MS",
            "notion_token": "NOTION_TOKEN",
            "notion_database_id": "NOTION_DATABASE_ID",
            "notion_timeout_s": "NOTION_TIMEOUT_S",
            "notion_version": "NOTION_VERSION",
        }
        values = {}
        for field, var in names.items():
            raw = env.get(var)
            if raw is not None and raw.strip():
                values[field] = raw.strip()
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
