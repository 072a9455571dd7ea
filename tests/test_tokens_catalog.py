"""Tests for token builders and the token catalog."""

from ai_toolbox.executor.schemas import SourceMetadata
from ai_toolbox.providers.schemas import TranscriptionChunk, TranscriptionResult
from ai_toolbox.tokens.builders import (
    create_chat_tokens,
    create_transcription_tokens,
    format_timestamp,
    format_transcription_with_timestamps,
)
from ai_toolbox.tokens.definitions import (
    generate_workflow_token_template,
    get_action_tokens,
    get_token_definitions,
    get_workflow_context_tokens,
)


def _transcription() -> TranscriptionResult:
    return TranscriptionResult(
        text="first second",
        chunks=[
            TranscriptionChunk(text="first", timestamp=(0.0, 4.2)),
            TranscriptionChunk(text="second", timestamp=(65.9, None)),
        ],
    )


def test_create_chat_tokens() -> None:
    assert create_chat_tokens("q", "a") == {"prompt": "q", "response": "a"}


def test_format_timestamp() -> None:
    assert format_timestamp(0) == "00:00"
    assert format_timestamp(65.9) == "01:05"
    assert format_timestamp(3599) == "59:59"
    assert format_timestamp(3725) == "01:02:05"


def test_format_transcription_with_timestamps() -> None:
    assert format_transcription_with_timestamps(_transcription().chunks) == (
        "[00:00] first\n[01:05] second"
    )
    assert format_transcription_with_timestamps([]) == ""


def test_transcription_tokens_without_timestamps() -> None:
    tokens = create_transcription_tokens(
        _transcription(),
        SourceMetadata(title="Talk", uploader="Ada", description="d", tags=["a", "b"]),
        source_url="https://youtu.be/x",
    )

    assert tokens == {
        "transcription": "first second",
        "title": "Talk",
        "author": "Ada",
        "sourceUrl": "https://youtu.be/x",
        "description": "d",
        "tags": "a, b",
    }


def test_transcription_tokens_with_timestamps() -> None:
    tokens = create_transcription_tokens(_transcription(), granularity="segment")

    assert tokens["transcriptionWithTimestamps"] == "[00:00] first\n[01:05] second"
    assert tokens["title"] == ""
    assert tokens["tags"] == ""


def test_token_definitions_drop_timestamps_when_disabled() -> None:
    disabled = [t.name for t in get_token_definitions("transcription")]
    segment = [t.name for t in get_token_definitions("transcription", "segment")]

    assert "transcriptionWithTimestamps" not in disabled
    assert segment[-1] == "transcriptionWithTimestamps"
    assert [t.name for t in get_token_definitions("chat")] == ["prompt", "response"]


def test_action_and_workflow_tokens_are_prefixed() -> None:
    assert [t.name for t in get_action_tokens("a1", "chat")] == ["a1.prompt", "a1.response"]
    workflow_tokens = get_workflow_context_tokens("wf", "transcription", "word")
    assert workflow_tokens[0].name == "wf.title"
    assert workflow_tokens[-1].name == "wf.transcriptionWithTimestamps"


def test_generate_workflow_token_template() -> None:
    assert generate_workflow_token_template("wf", "chat") == (
        "- Prompt: {{wf.prompt}}\n- Response: {{wf.response}}"
    )
    template = generate_workflow_token_template("wf", "transcription", "segment")
    assert "- Source URL: {{wf.sourceUrl}}" in template
    assert template.endswith("- Transcription (with timestamps): {{wf.transcriptionWithTimestamps}}")
