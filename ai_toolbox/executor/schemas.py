"""Schemas for workflow execution.

ExecutionResult is the unit every action and dependency workflow produces.
It is frozen: once an entity has finished, later actions can read its tokens
but never change them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    CHAT = "chat"
    TRANSCRIPTION = "transcription"
    WORKFLOW = "workflow"


class RunStatus(str, Enum):
    """Terminal state of one workflow run."""

    COMPLETED = "completed"
    ABORTED_NO_ACTIONS = "aborted_no_actions"
    ABORTED_DEPENDENCY_FAILURE = "aborted_dependency_failure"
    ABORTED_ACTION_FAILURE = "aborted_action_failure"
    OUTPUT_FAILED = "output_failed"


class ContextValues(BaseModel):
    """Snapshot of the user's editing context, captured once per run."""

    model_config = ConfigDict(frozen=True)

    selection: Optional[str] = None
    active_tab_content: Optional[str] = None
    active_tab_filename: Optional[str] = None
    clipboard: Optional[str] = None


class SourceMetadata(BaseModel):
    """Metadata of the video/audio an input was extracted from."""

    title: Optional[str] = None
    uploader: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class InputResult(BaseModel):
    """Audio acquired for a transcription action."""

    audio_file_path: str
    source_url: Optional[str] = Field(
        default=None, description="Set when the audio was extracted from a video URL"
    )
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)


class ExecutionResult(BaseModel):
    """Outcome of one action or one dependency workflow."""

    model_config = ConfigDict(frozen=True)

    entity_id: str
    kind: EntityKind
    success: bool
    error: Optional[str] = None
    tokens: dict[str, str] = Field(default_factory=dict)
    input_result: Optional[InputResult] = Field(
        default=None,
        description="Transcription input, kept for output title derivation",
    )

    @classmethod
    def failure(cls, entity_id: str, kind: EntityKind, error: str) -> "ExecutionResult":
        return cls(entity_id=entity_id, kind=kind, success=False, error=error)


class WorkflowRunResult(BaseModel):
    """Outcome of a top-level workflow run."""

    workflow_id: str
    status: RunStatus
    action_results: list[ExecutionResult] = Field(default_factory=list)
    dependency_results: dict[str, ExecutionResult] = Field(default_factory=dict)
    output_text: Optional[str] = None
    title: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == RunStatus.COMPLETED
