"""Token templating: substitution, token builders and the token catalog."""

from ai_toolbox.tokens.builders import (
    create_chat_tokens,
    create_transcription_tokens,
    format_timestamp,
    format_transcription_with_timestamps,
)
from ai_toolbox.tokens.resolver import (
    has_context_tokens,
    resolve_prompt,
    substitute_context,
    substitute_entities,
)

__all__ = [
    "create_chat_tokens",
    "create_transcription_tokens",
    "format_timestamp",
    "format_transcription_with_timestamps",
    "has_context_tokens",
    "resolve_prompt",
    "substitute_context",
    "substitute_entities",
]
