"""Token sets produced by finished actions."""

from typing import Optional, Sequence, Union

from ai_toolbox.executor.schemas import SourceMetadata
from ai_toolbox.providers.schemas import (
    TimestampGranularity,
    TranscriptionChunk,
    TranscriptionResult,
)


def create_chat_tokens(prompt: str, response: str) -> dict[str, str]:
    return {"prompt": prompt, "response": response}


def format_timestamp(seconds: float) -> str:
    """Seconds -> MM:SS, or HH:MM:SS once an hour is reached."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_transcription_with_timestamps(chunks: Sequence[TranscriptionChunk]) -> str:
    """One `[MM:SS] text` line per chunk, keyed on the chunk start."""
    return "\n".join(
        f"[{format_timestamp(chunk.timestamp[0])}] {chunk.text}" for chunk in chunks
    )


def create_transcription_tokens(
    result: TranscriptionResult,
    metadata: Optional[SourceMetadata] = None,
    *,
    source_url: Optional[str] = None,
    granularity: Union[TimestampGranularity, str] = TimestampGranularity.DISABLED,
) -> dict[str, str]:
    """Build the transcription token set.

    `transcriptionWithTimestamps` is only present when timestamps were
    requested.
    """
    metadata = metadata or SourceMetadata()
    tokens = {
        "transcription": result.text,
        "title": metadata.title or "",
        "author": metadata.uploader or "",
        "sourceUrl": source_url or "",
        "description": metadata.description or "",
        "tags": ", ".join(metadata.tags),
    }
    if TimestampGranularity(granularity) != TimestampGranularity.DISABLED:
        tokens["transcriptionWithTimestamps"] = format_transcription_with_timestamps(
            result.chunks
        )
    return tokens
