"""OpenAI provider.

Bearer-token auth against a fixed base path. The model id goes both in the
chat body and as a `model` form field on transcription uploads.
"""

from typing import Any, Optional, Sequence

import httpx

from ai_toolbox.providers.base import BaseProvider
from ai_toolbox.providers.multipart import FormField
from ai_toolbox.providers.schemas import (
    DEFAULT_OPENAI_ENDPOINT,
    ChatMessage,
    ChatOptions,
    ProviderAdapterConfig,
    ProviderType,
)


class OpenAIProvider(BaseProvider):
    provider_type = ProviderType.OPENAI

    def __init__(
        self,
        adapter_config: ProviderAdapterConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        if not adapter_config.endpoint:
            adapter_config = adapter_config.model_copy(
                update={"endpoint": DEFAULT_OPENAI_ENDPOINT}
            )
        super().__init__(adapter_config, transport=transport, timeout=timeout)

    def build_transcription_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/audio/transcriptions"

    def build_chat_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/chat/completions"

    def get_auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def validate_chat_config(self) -> None:
        self._require(self.api_key, "OpenAI API key")
        self._require(self.model_id, "OpenAI model id")

    def validate_transcription_config(self) -> None:
        self._require(self.api_key, "OpenAI API key")
        self._require(self.model_id, "OpenAI model id")

    def build_chat_request_body(
        self, messages: Sequence[ChatMessage], options: ChatOptions
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model_id,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if options.max_tokens is not None:
            body["max_tokens"] = options.max_tokens
        if options.temperature is not None:
            body["temperature"] = options.temperature
        return body

    def get_additional_form_fields(self) -> list[FormField]:
        return [FormField("model", self.model_id)]
