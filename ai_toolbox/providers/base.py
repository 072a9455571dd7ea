"""Provider abstraction for chat and transcription calls.

Provides a unified capability interface over OpenAI-compatible HTTP APIs.
`BaseProvider` owns the provider-agnostic concerns:
- Request dispatch over httpx with explicit timeouts
- Status checking (non-2xx -> TransportError with status and body)
- Chat response parsing (choices[0].message.content + usage)
- Transcription response parsing per timestamp granularity

Concrete providers only supply the differences:
- Chat and transcription URLs
- Auth headers
- Chat request body shape
- Extra multipart form fields
- Configuration validation (runs before any network call)
"""

import logging
import time
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import httpx

from ai_toolbox import config
from ai_toolbox.errors import ConfigurationError, TransportError
from ai_toolbox.providers.multipart import (
    FormField,
    build_body,
    content_type_header,
    generate_boundary,
    prepare_audio_form_data,
)
from ai_toolbox.providers.schemas import (
    ChatMessage,
    ChatOptions,
    ChatResult,
    ChatUsage,
    ProviderAdapterConfig,
    ProviderType,
    TimestampGranularity,
    TranscriptionChunk,
    TranscriptionOptions,
    TranscriptionResult,
    TranscriptionWord,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class ModelProvider(Protocol):
    """Capability interface every provider adapter implements."""

    @property
    def type(self) -> ProviderType: ...

    @property
    def provider_name(self) -> str: ...

    def supports_chat(self) -> bool: ...

    def supports_transcription(self) -> bool: ...

    def chat(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[ChatOptions] = None,
    ) -> ChatResult: ...

    def transcribe(
        self,
        audio_file_path: str,
        options: Optional[TranscriptionOptions] = None,
    ) -> TranscriptionResult: ...


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.HTTP_CONNECT_TIMEOUT,
        read=config.HTTP_READ_TIMEOUT,
        write=120.0,  # large audio uploads
        pool=config.HTTP_CONNECT_TIMEOUT,
    )


class BaseProvider:
    """Shared HTTP plumbing for OpenAI-compatible providers.

    Instances are cheap and stateless; the factory builds a fresh one per call
    from a ProviderAdapterConfig. `transport` is an optional httpx transport,
    used by tests to stub the network.
    """

    provider_type: ProviderType

    def __init__(
        self,
        adapter_config: ProviderAdapterConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        self.provider_name = adapter_config.name
        self.model_display_name = adapter_config.model_display_name or adapter_config.model_id
        self.endpoint = adapter_config.endpoint
        self.api_key = adapter_config.api_key
        self.model_id = adapter_config.model_id
        self.deployment_name = adapter_config.deployment_name or adapter_config.model_id
        self._supports_chat = adapter_config.supports_chat
        self._supports_transcription = adapter_config.supports_transcription
        self._transport = transport
        self._timeout = timeout or default_timeout()

    @property
    def type(self) -> ProviderType:
        return self.provider_type

    @property
    def label(self) -> str:
        """Display name used in log lines and error messages."""
        return f"{self.provider_name} - {self.model_display_name}"

    def supports_chat(self) -> bool:
        return self._supports_chat

    def supports_transcription(self) -> bool:
        return self._supports_transcription

    # --- Hooks for concrete providers ---

    def build_chat_url(self) -> str:
        raise NotImplementedError

    def build_transcription_url(self) -> str:
        raise NotImplementedError

    def get_auth_headers(self) -> dict[str, str]:
        raise NotImplementedError

    def build_chat_request_body(
        self, messages: Sequence[ChatMessage], options: ChatOptions
    ) -> dict[str, Any]:
        raise NotImplementedError

    def validate_chat_config(self) -> None:
        raise NotImplementedError

    def validate_transcription_config(self) -> None:
        raise NotImplementedError

    def get_additional_form_fields(self) -> list[FormField]:
        return []

    # --- Chat ---

    def chat(
        self,
        messages: Sequence[ChatMessage],
        options: Optional[ChatOptions] = None,
    ) -> ChatResult:
        """Send a chat completion request.

        Raises:
            ConfigurationError: Missing credential/endpoint/deployment
            TransportError: Network failure or non-success status
        """
        options = options or ChatOptions()
        self.validate_chat_config()

        url = self.build_chat_url()
        body = self.build_chat_request_body(messages, options)
        headers = {**self.get_auth_headers(), "Content-Type": "application/json"}

        logger.info(f"[{self.label}] Chat request: {len(messages)} message(s)")
        start_time = time.time()
        data = self._post(url, headers=headers, json=body)
        result = self.parse_chat_response(data)

        duration_ms = int((time.time() - start_time) * 1000)
        usage_str = f", {result.usage.total_tokens} tokens" if result.usage else ""
        logger.info(f"[{self.label}] Chat completed: {duration_ms}ms{usage_str}")
        return result

    def parse_chat_response(self, data: dict[str, Any]) -> ChatResult:
        choices = data.get("choices") or []
        if not choices:
            raise TransportError(f"{self.label}: no choices in chat response")

        message = choices[0].get("message") or {}
        result = ChatResult(content=message.get("content") or "")

        usage = data.get("usage")
        if usage:
            result.usage = ChatUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            )
        return result

    # --- Transcription ---

    def transcribe(
        self,
        audio_file_path: str,
        options: Optional[TranscriptionOptions] = None,
    ) -> TranscriptionResult:
        """Transcribe an audio file from disk.

        Raises:
            ConfigurationError: Missing credential/endpoint/deployment
            ValidationError: Audio file not found
            TransportError: Network failure or non-success status
        """
        options = options or TranscriptionOptions()
        self.validate_transcription_config()

        prepared = prepare_audio_form_data(
            audio_file_path,
            granularity=options.timestamp_granularity,
            language=options.language,
            extra_fields=self.get_additional_form_fields(),
        )

        logger.info(
            f"[{self.label}] Transcribing {prepared.file_name} "
            f"({len(prepared.body):,} bytes, timestamps={options.timestamp_granularity.value})"
        )
        start_time = time.time()
        data = self._send_transcription(prepared.boundary, prepared.body)
        result = self.parse_transcription_response(
            data, audio_file_path, options.timestamp_granularity
        )

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"[{self.label}] Transcription completed: {duration_ms}ms, "
            f"{len(result.text):,} chars, {len(result.chunks)} chunks"
        )
        return result

    def transcribe_bytes(self, audio_bytes: bytes, file_name: str) -> str:
        """Transcribe an in-memory clip and return plain text.

        Used to verify a provider configuration without touching disk.
        """
        self.validate_transcription_config()

        boundary = generate_boundary()
        body = build_body(
            boundary,
            audio_bytes,
            file_name,
            TimestampGranularity.DISABLED,
            extra_fields=self.get_additional_form_fields(),
        )
        data = self._send_transcription(boundary, body)
        return data.get("text", "")

    def parse_transcription_response(
        self,
        data: dict[str, Any],
        audio_file_path: str,
        granularity: TimestampGranularity,
    ) -> TranscriptionResult:
        """Normalize a raw transcription payload.

        - disabled: chunks are always empty, whatever the payload contains
        - segment: [start, end] chunks with trimmed text
        - word: segment chunks plus a word list when the payload has one
        """
        result = TranscriptionResult(
            text=data.get("text", ""),
            audio_file_path=audio_file_path,
        )

        if granularity == TimestampGranularity.DISABLED:
            return result

        result.chunks = [
            TranscriptionChunk(
                text=(segment.get("text") or "").strip(),
                timestamp=(segment.get("start") or 0.0, segment.get("end")),
            )
            for segment in data.get("segments") or []
        ]

        if granularity == TimestampGranularity.WORD and data.get("words"):
            result.words = [
                TranscriptionWord(
                    word=(w.get("word") or "").strip(),
                    start=w.get("start") or 0.0,
                    end=w.get("end") or 0.0,
                )
                for w in data["words"]
            ]

        return result

    # --- HTTP ---

    def _send_transcription(self, boundary: str, body: bytes) -> dict[str, Any]:
        url = self.build_transcription_url()
        headers = {
            **self.get_auth_headers(),
            "Content-Type": content_type_header(boundary),
        }
        return self._post(url, headers=headers, content=body)

    def _post(self, url: str, *, headers: dict[str, str], **kwargs: Any) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[{self.label}] Request to {url} failed: {e}")
            raise TransportError(f"{self.label} request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"[{self.label}] API error {response.status_code}: {response.text[:500]}"
            )
            raise TransportError(
                f"{self.label} API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{self.label} returned invalid JSON: {response.text[:200]}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _require(self, value: str, what: str) -> None:
        if not value:
            raise ConfigurationError(f"{self.provider_name or self.provider_type.value}: {what} is not configured.")
