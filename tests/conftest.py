"""Shared pytest fixtures and fakes."""

from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from ai_toolbox.executor.collaborators import CollectingOutputSink, StaticContextGatherer
from ai_toolbox.executor.context import RunContext
from ai_toolbox.executor.schemas import ContextValues
from ai_toolbox.providers.schemas import (
    ChatMessage,
    ChatOptions,
    ChatResult,
    ModelConfig,
    ProviderAdapterConfig,
    ProviderConfig,
    ProviderType,
    TranscriptionChunk,
    TranscriptionOptions,
    TranscriptionResult,
)
from ai_toolbox.workflows.schemas import WorkflowDefinition


class FakeProvider:
    """In-memory ModelProvider recording every call."""

    def __init__(
        self,
        *,
        chat: bool = True,
        transcription: bool = True,
        respond: Optional[Callable[[str], str]] = None,
        transcript: str = "hello world",
        chunks: Sequence[TranscriptionChunk] = (),
        fail_on: Optional[str] = None,
    ):
        self._chat = chat
        self._transcription = transcription
        self.respond = respond or (lambda prompt: prompt)
        self.transcript = transcript
        self.chunks = list(chunks)
        self.fail_on = fail_on
        self.prompts: list[str] = []
        self.transcribed: list[tuple[str, TranscriptionOptions]] = []

    type = ProviderType.OPENAI
    provider_name = "fake"

    def supports_chat(self) -> bool:
        return self._chat

    def supports_transcription(self) -> bool:
        return self._transcription

    def chat(
        self, messages: Sequence[ChatMessage], options: Optional[ChatOptions] = None
    ) -> ChatResult:
        prompt = messages[-1].content
        self.prompts.append(prompt)
        if self.fail_on is not None and self.fail_on in prompt:
            raise RuntimeError(f"boom on {self.fail_on}")
        return ChatResult(content=self.respond(prompt))

    def transcribe(
        self, audio_file_path: str, options: Optional[TranscriptionOptions] = None
    ) -> TranscriptionResult:
        options = options or TranscriptionOptions()
        self.transcribed.append((audio_file_path, options))
        return TranscriptionResult(
            text=self.transcript, chunks=self.chunks, audio_file_path=audio_file_path
        )

    @property
    def call_count(self) -> int:
        return len(self.prompts) + len(self.transcribed)


class CountingGatherer:
    def __init__(self, values: ContextValues):
        self.values = values
        self.calls = 0

    def __call__(self) -> ContextValues:
        self.calls += 1
        return self.values


def make_provider_config(
    provider_id: str = "p",
    provider_type: ProviderType = ProviderType.OPENAI,
    **model_kwargs,
) -> ProviderConfig:
    model = dict(
        id="m", name="Model", model_id="model-1", supports_chat=True, supports_transcription=True
    )
    model.update(model_kwargs)
    return ProviderConfig(
        id=provider_id,
        name="Test Provider",
        type=provider_type,
        endpoint="https://example.test",
        api_key="secret",
        models=[ModelConfig(**model)],
    )


def chat_action(action_id: str, prompt: str, **kwargs) -> dict:
    return {
        "type": "chat",
        "id": action_id,
        "name": action_id,
        "provider": {"provider_id": "p", "model_id": "m"},
        "prompt_text": prompt,
        **kwargs,
    }


def make_workflow(workflow_id: str, actions: list[dict], **kwargs) -> WorkflowDefinition:
    return WorkflowDefinition.model_validate(
        {"id": workflow_id, "name": workflow_id.upper(), "actions": actions, **kwargs}
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_run_context(fake_provider):
    """Factory for RunContexts wired to the fake provider."""

    def _make(
        workflows: Sequence[WorkflowDefinition] = (),
        *,
        provider: Optional[FakeProvider] = None,
        context: Optional[ContextValues] = None,
        **kwargs,
    ) -> RunContext:
        provider = provider or fake_provider
        created: list[ProviderAdapterConfig] = []

        def _factory(adapter_config: ProviderAdapterConfig) -> FakeProvider:
            created.append(adapter_config)
            return provider

        kwargs.setdefault("output_sink", CollectingOutputSink())
        kwargs.setdefault("context_gatherer", StaticContextGatherer(context or ContextValues()))
        kwargs.setdefault("notifier", lambda message: None)
        run_context = RunContext(
            providers=[make_provider_config()],
            workflows={w.id: w for w in workflows},
            provider_factory=_factory,
            **kwargs,
        )
        run_context.created_adapters = created
        return run_context

    return _make


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "clip.mp3"
    path.write_bytes(b"ID3fakeaudio")
    return path
