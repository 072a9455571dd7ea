"""Provider adapter factory.

Resolves a type tag to the adapter implementation, and a
ProviderModelSelection to a ready adapter via the configured providers.
"""

import logging
from typing import Optional, Sequence, Union

import httpx

from ai_toolbox.errors import ConfigurationError
from ai_toolbox.providers.azure_openai import AzureOpenAIProvider
from ai_toolbox.providers.openai import OpenAIProvider
from ai_toolbox.providers.schemas import (
    DEFAULT_OPENAI_ENDPOINT,
    ModelConfig,
    ProviderAdapterConfig,
    ProviderConfig,
    ProviderModelSelection,
    ProviderType,
)

logger = logging.getLogger(__name__)


def build_adapter_config(provider: ProviderConfig, model: ModelConfig) -> ProviderAdapterConfig:
    """Flatten a provider + model pair into a per-call adapter config."""
    endpoint = provider.endpoint
    if not endpoint and provider.type == ProviderType.OPENAI:
        endpoint = DEFAULT_OPENAI_ENDPOINT

    return ProviderAdapterConfig(
        id=provider.id,
        name=provider.name or provider.id,
        model_display_name=model.name or model.model_id,
        type=provider.type,
        endpoint=endpoint,
        api_key=provider.resolve_api_key(),
        model_id=model.model_id,
        deployment_name=model.deployment_name or model.model_id,
        supports_chat=model.supports_chat,
        supports_transcription=model.supports_transcription,
    )


def create_model_provider(
    adapter_config: ProviderAdapterConfig,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Union[AzureOpenAIProvider, OpenAIProvider]:
    """Get the adapter for a provider type.

    Args:
        adapter_config: Per-call configuration
        transport: Optional httpx transport (tests)

    Returns:
        Adapter instance for the provider type

    Raises:
        ConfigurationError: If the provider type has no adapter
    """
    if adapter_config.type == ProviderType.AZURE_OPENAI:
        return AzureOpenAIProvider(adapter_config, transport=transport)
    elif adapter_config.type == ProviderType.OPENAI:
        return OpenAIProvider(adapter_config, transport=transport)
    elif adapter_config.type == ProviderType.ANTHROPIC:
        raise ConfigurationError("Anthropic model provider is not yet implemented.")
    else:
        raise ConfigurationError(f"Unknown provider type: {adapter_config.type}")


def resolve_adapter_config(
    providers: Sequence[ProviderConfig],
    selection: ProviderModelSelection,
) -> ProviderAdapterConfig:
    """Look up the provider and model a selection points at.

    Raises:
        ConfigurationError: If the provider or model is not configured
    """
    provider = next((p for p in providers if p.id == selection.provider_id), None)
    if provider is None:
        raise ConfigurationError(f"Provider not found: {selection.provider_id}")

    model = provider.get_model(selection.model_id)
    if model is None:
        raise ConfigurationError(
            f"Model not found: {selection.model_id} (provider {provider.name or provider.id})"
        )

    return build_adapter_config(provider, model)


def create_provider_for_selection(
    providers: Sequence[ProviderConfig],
    selection: ProviderModelSelection,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Union[AzureOpenAIProvider, OpenAIProvider]:
    adapter_config = resolve_adapter_config(providers, selection)
    logger.debug(
        f"Creating {adapter_config.type.value} adapter for "
        f"{adapter_config.name}/{adapter_config.model_id}"
    )
    return create_model_provider(adapter_config, transport=transport)
