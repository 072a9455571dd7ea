"""Workflow schemas.

A workflow is a strictly linear list of actions. Each action is either a
chat call or a transcription call; finished actions publish tokens that later
actions reference as `{{actionId.token}}`. A workflow may also depend on
other workflows, whose terminal-action tokens are referenced as
`{{workflowId.token}}`.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ai_toolbox.providers.schemas import ProviderModelSelection, TimestampGranularity

ENTITY_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class ActionType(str, Enum):
    CHAT = "chat"
    TRANSCRIPTION = "transcription"


class OutputType(str, Enum):
    """Where the host puts a finished workflow's output."""

    POPUP = "popup"
    NEW_NOTE = "new-note"
    AT_CURSOR = "at-cursor"


class PromptSourceType(str, Enum):
    INLINE = "inline"
    FROM_FILE = "from-file"


class TranscriptionSourceType(str, Enum):
    """How a transcription action acquires its audio input."""

    SELECT_FILE_FROM_VAULT = "select-file-from-vault"
    URL_FROM_CLIPBOARD = "url-from-clipboard"
    URL_FROM_SELECTION = "url-from-selection"


class ChatAction(BaseModel):
    """Send a single user message to a chat-capable model."""

    type: Literal["chat"] = "chat"
    id: str = Field(..., pattern=ENTITY_ID_PATTERN, description="Token namespace for this action")
    name: str = ""
    provider: Optional[ProviderModelSelection] = None
    prompt_source_type: PromptSourceType = PromptSourceType.INLINE
    prompt_text: str = Field(default="", description="Inline prompt; may contain token references")
    prompt_file_path: str = Field(
        default="",
        description="Prompt file, relative to the prompts directory (from-file only)",
    )


class TranscriptionAction(BaseModel):
    """Transcribe audio acquired through the input collaborator."""

    type: Literal["transcription"] = "transcription"
    id: str = Field(..., pattern=ENTITY_ID_PATTERN)
    name: str = ""
    provider: Optional[ProviderModelSelection] = None
    language: Optional[str] = Field(default=None, description="Language code hint, e.g. 'en'")
    timestamp_granularity: TimestampGranularity = TimestampGranularity.DISABLED
    source_type: TranscriptionSourceType = TranscriptionSourceType.URL_FROM_CLIPBOARD


ActionDefinition = Annotated[
    Union[ChatAction, TranscriptionAction],
    Field(discriminator="type"),
]


class WorkflowDefinition(BaseModel):
    """Complete workflow definition."""

    id: str = Field(..., pattern=ENTITY_ID_PATTERN)
    name: str
    actions: list[ActionDefinition] = Field(default_factory=list)
    output_type: OutputType = OutputType.POPUP
    output_folder: str = ""
    depends_on: list[str] = Field(
        default_factory=list,
        description="Workflows that run first; their terminal-action tokens become "
        "available as {{workflowId.token}}",
    )
    show_in_command: bool = Field(
        default=True, description="Offer this workflow in the command palette"
    )
    available_as_input: bool = Field(
        default=False,
        description="Offer this workflow as a token source to other workflows",
    )

    @model_validator(mode="after")
    def _check_action_ids(self) -> "WorkflowDefinition":
        seen: set[str] = set()
        for action in self.actions:
            if action.id in seen:
                raise ValueError(f"Duplicate action id in workflow {self.id}: {action.id}")
            seen.add(action.id)
        return self

    @property
    def terminal_action(self) -> Optional[Union[ChatAction, TranscriptionAction]]:
        return self.actions[-1] if self.actions else None


class WorkflowSummary(BaseModel):
    """Lightweight workflow info for listing."""

    id: str
    name: str
    action_count: int
    action_types: list[ActionType]
    output_type: OutputType
    depends_on: list[str] = Field(default_factory=list)
    show_in_command: bool = True
    available_as_input: bool = False
