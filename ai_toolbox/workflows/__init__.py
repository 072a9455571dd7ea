"""Workflow definitions module."""

from ai_toolbox.workflows.registry import WorkflowRegistry, get_workflow_registry
from ai_toolbox.workflows.schemas import (
    ActionDefinition,
    ActionType,
    ChatAction,
    OutputType,
    PromptSourceType,
    TranscriptionAction,
    TranscriptionSourceType,
    WorkflowDefinition,
    WorkflowSummary,
)

__all__ = [
    "ActionDefinition",
    "ActionType",
    "ChatAction",
    "OutputType",
    "PromptSourceType",
    "TranscriptionAction",
    "TranscriptionSourceType",
    "WorkflowDefinition",
    "WorkflowRegistry",
    "WorkflowSummary",
    "get_workflow_registry",
]
