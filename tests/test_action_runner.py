"""Tests for single-action execution."""

from ai_toolbox.executor.action_runner import execute_action, run_action_sequence
from ai_toolbox.executor.collaborators import FilePromptLoader, LocalFileInputAcquirer
from ai_toolbox.executor.schemas import (
    ContextValues,
    EntityKind,
    ExecutionResult,
    SourceMetadata,
)
from ai_toolbox.providers.schemas import TimestampGranularity, TranscriptionChunk
from ai_toolbox.workflows.schemas import ChatAction, TranscriptionAction
from conftest import FakeProvider, chat_action, make_workflow


def _chat(action_id: str = "a1", prompt: str = "hello", **kwargs) -> ChatAction:
    return ChatAction.model_validate(chat_action(action_id, prompt, **kwargs))


def _transcription(**kwargs) -> TranscriptionAction:
    return TranscriptionAction.model_validate(
        {"id": "t1", "provider": {"provider_id": "p", "model_id": "m"}, **kwargs}
    )


def test_chat_action_success(make_run_context, fake_provider) -> None:
    run_context = make_run_context()

    result = execute_action(_chat(prompt="ping"), run_context)

    assert result.success
    assert result.kind == EntityKind.CHAT
    assert result.tokens == {"prompt": "ping", "response": "ping"}
    assert fake_provider.prompts == ["ping"]


def test_chat_action_resolves_local_then_dependency_then_context(make_run_context, fake_provider) -> None:
    run_context = make_run_context(context=ContextValues(clipboard="clip"))
    run_context.dependency_results["dep"] = ExecutionResult(
        entity_id="dep", kind=EntityKind.WORKFLOW, success=True, tokens={"response": "D"}
    )
    local = {
        "prev": ExecutionResult(
            entity_id="prev", kind=EntityKind.CHAT, success=True, tokens={"response": "L"}
        )
    }

    execute_action(
        _chat(prompt="{{prev.response}} {{dep.response}} {{clipboard}} {{nope.x}}"),
        run_context,
        local,
    )

    assert fake_provider.prompts == ["L D clip {{nope.x}}"]


def test_missing_provider_selection(make_run_context, fake_provider) -> None:
    result = execute_action(_chat(provider=None), make_run_context())

    assert not result.success
    assert result.error == "No provider configured"
    assert fake_provider.call_count == 0


def test_unknown_provider(make_run_context) -> None:
    action = _chat(provider={"provider_id": "ghost", "model_id": "m"})

    result = execute_action(action, make_run_context())

    assert not result.success
    assert "Provider not found" in result.error


def test_capability_mismatch(make_run_context) -> None:
    provider = FakeProvider(chat=False, transcription=False)
    run_context = make_run_context(provider=provider)

    chat_result = execute_action(_chat(), run_context)
    transcription_result = execute_action(_transcription(), run_context)

    assert chat_result.error == "Provider does not support chat"
    assert transcription_result.error == "Provider does not support transcription"
    assert provider.call_count == 0


def test_blank_prompt_after_resolution(make_run_context, fake_provider) -> None:
    run_context = make_run_context(context=ContextValues(selection="   "))

    result = execute_action(_chat(prompt="{{selection}}"), run_context)

    assert not result.success
    assert result.error == "Empty prompt text"
    assert fake_provider.call_count == 0


def test_prompt_from_file(make_run_context, fake_provider) -> None:
    loaded = []

    def loader(path: str) -> str:
        loaded.append(path)
        return "from file"

    run_context = make_run_context(prompt_loader=loader)

    result = execute_action(
        _chat(prompt="", prompt_source_type="from-file", prompt_file_path="p.md"), run_context
    )

    assert result.success
    assert loaded == ["p.md"]
    assert fake_provider.prompts == ["from file"]


def test_prompt_file_missing_is_a_failed_result(make_run_context, tmp_path) -> None:
    run_context = make_run_context(prompt_loader=FilePromptLoader(tmp_path))

    result = execute_action(
        _chat(prompt_source_type="from-file", prompt_file_path="missing.md"), run_context
    )

    assert not result.success
    assert "Prompt file not found" in result.error


def test_adapter_exception_becomes_failed_result(make_run_context) -> None:
    provider = FakeProvider(fail_on="ping")

    result = execute_action(_chat(prompt="ping"), make_run_context(provider=provider))

    assert not result.success
    assert "boom on ping" in result.error


def test_transcription_action_success(make_run_context, audio_file) -> None:
    provider = FakeProvider(
        transcript="hello world",
        chunks=[TranscriptionChunk(text="hello world", timestamp=(61.0, 62.0))],
    )
    run_context = make_run_context(
        provider=provider,
        input_acquirer=LocalFileInputAcquirer(
            str(audio_file),
            source_url="https://youtu.be/x",
            metadata=SourceMetadata(title="Talk", uploader="Ada", tags=["x", "y"]),
        ),
    )

    result = execute_action(
        _transcription(timestamp_granularity="segment", language="en"), run_context
    )

    assert result.success
    assert result.tokens["transcription"] == "hello world"
    assert result.tokens["transcriptionWithTimestamps"] == "[01:01] hello world"
    assert result.tokens["author"] == "Ada"
    assert result.tokens["sourceUrl"] == "https://youtu.be/x"
    assert result.tokens["tags"] == "x, y"
    assert result.input_result.audio_file_path == str(audio_file)
    path, options = provider.transcribed[0]
    assert options.timestamp_granularity == TimestampGranularity.SEGMENT
    assert options.language == "en"


def test_transcription_without_timestamps_omits_token(make_run_context, audio_file) -> None:
    run_context = make_run_context(input_acquirer=LocalFileInputAcquirer(str(audio_file)))

    result = execute_action(_transcription(), run_context)

    assert result.success
    assert "transcriptionWithTimestamps" not in result.tokens
    assert result.tokens["sourceUrl"] == ""


def test_transcription_cancelled_input(make_run_context, fake_provider) -> None:
    result = execute_action(_transcription(), make_run_context())

    assert not result.success
    assert result.error == "No input provided or cancelled"
    assert fake_provider.call_count == 0


def test_input_acquirer_receives_source_type(make_run_context, audio_file) -> None:
    seen = []

    class Acquirer:
        def acquire(self, source_type):
            seen.append(source_type.value)
            return None

    execute_action(
        _transcription(source_type="select-file-from-vault"),
        make_run_context(input_acquirer=Acquirer()),
    )

    assert seen == ["select-file-from-vault"]


def test_run_action_sequence_folds_terminal_tokens(make_run_context) -> None:
    workflow = make_workflow(
        "wf", [chat_action("a1", "one"), chat_action("a2", "two {{a1.response}}")]
    )

    result = run_action_sequence(workflow, make_run_context())

    assert result.success
    assert result.entity_id == "wf"
    assert result.kind == EntityKind.WORKFLOW
    assert result.tokens == {"prompt": "two one", "response": "two one"}


def test_run_action_sequence_failure(make_run_context) -> None:
    workflow = make_workflow("wf", [chat_action("a1", "fail here")])

    result = run_action_sequence(workflow, make_run_context(provider=FakeProvider(fail_on="fail")))

    assert not result.success
    assert result.error.startswith("Action a1 failed:")
