"""Workflow API routes.

Read-only access to workflow definitions and the tokens they expose.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ai_toolbox.executor.dependency_resolver import find_cycle
from ai_toolbox.tokens.definitions import (
    CONTEXT_TOKENS,
    TokenDefinition,
    generate_workflow_token_template,
    get_action_tokens,
    get_workflow_context_tokens,
)
from ai_toolbox.workflows.dependencies import declared_dependencies
from ai_toolbox.workflows.registry import get_workflow_registry
from ai_toolbox.workflows.schemas import (
    TranscriptionAction,
    WorkflowDefinition,
    WorkflowSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["workflows"])


class WorkflowTokensResponse(BaseModel):
    workflow_id: str
    workflow_tokens: list[TokenDefinition] = Field(
        default_factory=list,
        description="Tokens this workflow exposes to dependents (terminal action's)",
    )
    action_tokens: dict[str, list[TokenDefinition]] = Field(
        default_factory=dict, description="Tokens per action id, in action order"
    )
    context_tokens: list[TokenDefinition] = Field(default_factory=list)
    template: str = Field(default="", description="Copyable token reference list")


class WorkflowDependenciesResponse(BaseModel):
    workflow_id: str
    depends_on: list[str]
    missing: list[str] = Field(default_factory=list)
    cycle: Optional[list[str]] = None


def _get_workflow_or_404(workflow_id: str) -> WorkflowDefinition:
    workflow = get_workflow_registry().get(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail=f"Workflow not found: {workflow_id}")
    return workflow


def _granularity(action):
    return action.timestamp_granularity if isinstance(action, TranscriptionAction) else None


@router.get("", response_model=list[WorkflowSummary])
async def list_workflows() -> list[WorkflowSummary]:
    """List all workflows."""
    return get_workflow_registry().list_summaries()


@router.get("/count")
async def get_workflow_count() -> dict[str, int]:
    """Get total number of workflows."""
    return {"count": get_workflow_registry().count()}


@router.get("/{workflow_id}", response_model=WorkflowDefinition)
async def get_workflow(workflow_id: str) -> WorkflowDefinition:
    """Get a full workflow definition."""
    return _get_workflow_or_404(workflow_id)


@router.get("/{workflow_id}/tokens", response_model=WorkflowTokensResponse)
async def get_workflow_tokens(workflow_id: str) -> WorkflowTokensResponse:
    """Tokens available inside a workflow and to workflows that depend on it."""
    workflow = _get_workflow_or_404(workflow_id)

    response = WorkflowTokensResponse(
        workflow_id=workflow.id,
        action_tokens={
            action.id: get_action_tokens(action.id, action.type, _granularity(action))
            for action in workflow.actions
        },
        context_tokens=CONTEXT_TOKENS,
    )

    terminal = workflow.terminal_action
    if terminal is not None:
        response.workflow_tokens = get_workflow_context_tokens(
            workflow.id, terminal.type, _granularity(terminal)
        )
        response.template = generate_workflow_token_template(
            workflow.id, terminal.type, _granularity(terminal)
        )
    return response


@router.get("/{workflow_id}/dependencies", response_model=WorkflowDependenciesResponse)
async def get_workflow_dependencies(workflow_id: str) -> WorkflowDependenciesResponse:
    """Declared dependencies, unknown ids, and any cycle reachable from this workflow."""
    workflow = _get_workflow_or_404(workflow_id)
    workflows_by_id = get_workflow_registry().as_mapping()

    depends_on = declared_dependencies(workflow)
    return WorkflowDependenciesResponse(
        workflow_id=workflow.id,
        depends_on=depends_on,
        missing=[d for d in depends_on if d not in workflows_by_id],
        cycle=find_cycle(workflow.id, workflows_by_id, declared_dependencies),
    )
