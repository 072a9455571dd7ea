"""Catalog of the tokens each action type produces.

Used to show which `{{id.token}}` references a workflow or action makes
available, and to generate a copyable template of them.
"""

from typing import Optional, Union

from pydantic import BaseModel

from ai_toolbox.providers.schemas import TimestampGranularity
from ai_toolbox.workflows.schemas import ActionType


class TokenDefinition(BaseModel):
    name: str
    description: str


CHAT_TOKENS: list[TokenDefinition] = [
    TokenDefinition(name="prompt", description="The original prompt text"),
    TokenDefinition(name="response", description="The AI response text"),
]

TRANSCRIPTION_TOKENS: list[TokenDefinition] = [
    TokenDefinition(name="title", description="The title of the video"),
    TokenDefinition(name="author", description="The author/uploader of the video"),
    TokenDefinition(name="sourceUrl", description="The original video URL"),
    TokenDefinition(name="description", description="The video description"),
    TokenDefinition(name="tags", description="The video tags (comma-separated)"),
    TokenDefinition(
        name="transcription", description="The plain transcription text (no timestamps)"
    ),
    TokenDefinition(
        name="transcriptionWithTimestamps",
        description="The transcription with [MM:SS] timestamps",
    ),
]

CONTEXT_TOKENS: list[TokenDefinition] = [
    TokenDefinition(name="selection", description="The currently selected text in the editor"),
    TokenDefinition(
        name="activeTabContent", description="The full contents of the currently active file"
    ),
    TokenDefinition(name="activeTabFilename", description="The name of the currently active file"),
    TokenDefinition(name="clipboard", description="The current contents of the system clipboard"),
]

TOKEN_LABELS = {
    "prompt": "Prompt",
    "response": "Response",
    "title": "Title",
    "author": "Author",
    "sourceUrl": "Source URL",
    "description": "Description",
    "tags": "Tags",
    "transcription": "Transcription",
    "transcriptionWithTimestamps": "Transcription (with timestamps)",
}


def get_token_definitions(
    action_type: Union[ActionType, str],
    granularity: Optional[Union[TimestampGranularity, str]] = None,
) -> list[TokenDefinition]:
    """Tokens produced by one action type.

    For transcription, `transcriptionWithTimestamps` is dropped unless a
    granularity other than disabled is given.
    """
    if ActionType(action_type) == ActionType.TRANSCRIPTION:
        granularity = TimestampGranularity(granularity or TimestampGranularity.DISABLED)
        if granularity == TimestampGranularity.DISABLED:
            return [t for t in TRANSCRIPTION_TOKENS if t.name != "transcriptionWithTimestamps"]
        return list(TRANSCRIPTION_TOKENS)
    return list(CHAT_TOKENS)


def _prefixed(entity_id: str, tokens: list[TokenDefinition]) -> list[TokenDefinition]:
    return [
        TokenDefinition(name=f"{entity_id}.{t.name}", description=t.description)
        for t in tokens
    ]


def get_action_tokens(
    action_id: str,
    action_type: Union[ActionType, str],
    granularity: Optional[Union[TimestampGranularity, str]] = None,
) -> list[TokenDefinition]:
    return _prefixed(action_id, get_token_definitions(action_type, granularity))


def get_workflow_context_tokens(
    workflow_id: str,
    last_action_type: Union[ActionType, str],
    granularity: Optional[Union[TimestampGranularity, str]] = None,
) -> list[TokenDefinition]:
    """Tokens a workflow exposes to its dependents (its terminal action's)."""
    return _prefixed(workflow_id, get_token_definitions(last_action_type, granularity))


def generate_workflow_token_template(
    workflow_id: str,
    last_action_type: Union[ActionType, str],
    granularity: Optional[Union[TimestampGranularity, str]] = None,
) -> str:
    """`- Label: {{workflowId.token}}` lines, one per token."""
    return "\n".join(
        f"- {TOKEN_LABELS.get(t.name, t.name)}: {{{{{workflow_id}.{t.name}}}}}"
        for t in get_token_definitions(last_action_type, granularity)
    )
