"""Model provider adapters.

Capability-polymorphic adapters over OpenAI-compatible HTTP APIs, the
multipart encoder used for audio uploads, and the provider registry.
"""

from ai_toolbox.providers.base import BaseProvider, ModelProvider
from ai_toolbox.providers.azure_openai import AzureOpenAIProvider
from ai_toolbox.providers.openai import OpenAIProvider
from ai_toolbox.providers.factory import (
    build_adapter_config,
    create_model_provider,
    create_provider_for_selection,
    resolve_adapter_config,
)
from ai_toolbox.providers.registry import ProviderRegistry, get_provider_registry
from ai_toolbox.providers.schemas import (
    ChatMessage,
    ChatOptions,
    ChatResult,
    ModelConfig,
    ProviderAdapterConfig,
    ProviderConfig,
    ProviderModelSelection,
    ProviderType,
    TimestampGranularity,
    TranscriptionOptions,
    TranscriptionResult,
)

__all__ = [
    "AzureOpenAIProvider",
    "BaseProvider",
    "ChatMessage",
    "ChatOptions",
    "ChatResult",
    "ModelConfig",
    "ModelProvider",
    "OpenAIProvider",
    "ProviderAdapterConfig",
    "ProviderConfig",
    "ProviderModelSelection",
    "ProviderRegistry",
    "ProviderType",
    "TimestampGranularity",
    "TranscriptionOptions",
    "TranscriptionResult",
    "build_adapter_config",
    "create_model_provider",
    "create_provider_for_selection",
    "get_provider_registry",
    "resolve_adapter_config",
]
