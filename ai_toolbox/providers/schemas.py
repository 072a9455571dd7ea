"""Provider configuration and call/response schemas.

Two layers live here:
- Configuration-store shapes (ProviderConfig, ModelConfig,
  ProviderModelSelection) as they are loaded from definition files.
- The per-call shapes the adapters speak: ProviderAdapterConfig (built fresh
  for every call, no state carried across invocations), chat messages and
  results, transcription options and results.
"""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1"


class ProviderType(str, Enum):
    """Provider type tags."""

    AZURE_OPENAI = "azure-openai"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"  # accepted in config, no adapter yet


class TimestampGranularity(str, Enum):
    """Requested level of timestamp detail in a transcription call."""

    DISABLED = "disabled"
    SEGMENT = "segment"
    WORD = "word"


class ModelConfig(BaseModel):
    """One model offered by a configured provider."""

    id: str = Field(..., description="Identifier referenced by ProviderModelSelection.model_id")
    name: str = Field(default="", description="Human-readable model name")
    model_id: str = Field(..., description="Model identifier sent to the provider API")
    deployment_name: str = Field(
        default="",
        description="Azure deployment name. Falls back to model_id when empty.",
    )
    supports_chat: bool = False
    supports_transcription: bool = False


class ProviderConfig(BaseModel):
    """A configured provider account with its models."""

    id: str
    name: str = ""
    type: ProviderType
    endpoint: str = ""
    api_key: str = Field(default="", description="Credential stored inline")
    api_key_env: Optional[str] = Field(
        default=None,
        description="Environment variable holding the credential. Used when api_key is empty.",
    )
    models: list[ModelConfig] = Field(default_factory=list)

    def resolve_api_key(self) -> str:
        """Inline credential, else the referenced environment variable, else ''."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env, "")
        return ""

    def get_model(self, model_id: str) -> Optional[ModelConfig]:
        for model in self.models:
            if model.id == model_id:
                return model
        return None


class ProviderModelSelection(BaseModel):
    """Reference from an action to a provider + model pair."""

    provider_id: str
    model_id: str


class ProviderSummary(BaseModel):
    """Provider listing with the credential redacted."""

    id: str
    name: str
    type: ProviderType
    endpoint: str
    has_credential: bool
    model_ids: list[str] = Field(default_factory=list)
    chat_models: list[str] = Field(default_factory=list)
    transcription_models: list[str] = Field(default_factory=list)


class ProviderAdapterConfig(BaseModel):
    """Everything one adapter instance needs for one call."""

    id: str
    name: str
    model_display_name: str = ""
    type: ProviderType
    endpoint: str = ""
    api_key: str = ""
    model_id: str
    deployment_name: str = ""
    supports_chat: bool = False
    supports_transcription: bool = False


# --- Chat ---


class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str


class ChatOptions(BaseModel):
    max_tokens: Optional[int] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)


class ChatUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResult(BaseModel):
    content: str
    usage: Optional[ChatUsage] = None


# --- Transcription ---


class TranscriptionOptions(BaseModel):
    timestamp_granularity: TimestampGranularity = TimestampGranularity.DISABLED
    language: Optional[str] = None


class TranscriptionChunk(BaseModel):
    """A timed segment of the transcript."""

    text: str
    timestamp: tuple[float, Optional[float]]


class TranscriptionWord(BaseModel):
    word: str
    start: float
    end: float


class TranscriptionResult(BaseModel):
    text: str
    chunks: list[TranscriptionChunk] = Field(default_factory=list)
    words: Optional[list[TranscriptionWord]] = None
    audio_file_path: str = ""
