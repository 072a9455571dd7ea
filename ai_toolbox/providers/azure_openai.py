"""Azure OpenAI provider.

Deployment-scoped URLs, `api-key` header auth. The model is encoded in the
deployment path, so it is not repeated in the chat body.
"""

from typing import Any, Sequence

from ai_toolbox.providers.base import BaseProvider
from ai_toolbox.providers.schemas import ChatMessage, ChatOptions, ProviderType

CHAT_API_VERSION = "2024-06-01"
TRANSCRIPTION_API_VERSION = "2024-06-01"


class AzureOpenAIProvider(BaseProvider):
    provider_type = ProviderType.AZURE_OPENAI

    def _deployment_base(self) -> str:
        endpoint = self.endpoint.rstrip("/")
        return f"{endpoint}/openai/deployments/{self.deployment_name}"

    def build_transcription_url(self) -> str:
        return (
            f"{self._deployment_base()}/audio/transcriptions"
            f"?api-version={TRANSCRIPTION_API_VERSION}"
        )

    def build_chat_url(self) -> str:
        return f"{self._deployment_base()}/chat/completions?api-version={CHAT_API_VERSION}"

    def get_auth_headers(self) -> dict[str, str]:
        return {"api-key": self.api_key}

    def _validate(self) -> None:
        self._require(self.endpoint, "Azure OpenAI endpoint")
        self._require(self.api_key, "Azure OpenAI API key")
        self._require(self.deployment_name, "Azure OpenAI deployment name")

    def validate_chat_config(self) -> None:
        self._validate()

    def validate_transcription_config(self) -> None:
        self._validate()

    def build_chat_request_body(
        self, messages: Sequence[ChatMessage], options: ChatOptions
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if options.max_tokens is not None:
            body["max_tokens"] = options.max_tokens
        if options.temperature is not None:
            body["temperature"] = options.temperature
        return body
