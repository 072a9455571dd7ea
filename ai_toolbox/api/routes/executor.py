"""Executor API routes.

Runs a workflow synchronously. The request carries the editing context and
the audio input a desktop host would otherwise supply, and the output is
returned in the response instead of being written to a note.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ai_toolbox.executor.collaborators import (
    CollectingOutputSink,
    LocalFileInputAcquirer,
    StaticContextGatherer,
)
from ai_toolbox.executor.context import RunContext
from ai_toolbox.executor.schemas import ContextValues, SourceMetadata, WorkflowRunResult
from ai_toolbox.executor.workflow_runner import execute_workflow
from ai_toolbox.providers.registry import get_provider_registry
from ai_toolbox.workflows.registry import get_workflow_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/executor", tags=["executor"])


class RunWorkflowRequest(BaseModel):
    selection: Optional[str] = None
    active_tab_content: Optional[str] = None
    active_tab_filename: Optional[str] = None
    clipboard: Optional[str] = None
    audio_file_path: Optional[str] = Field(
        default=None, description="Local audio file for transcription actions"
    )
    source_url: Optional[str] = Field(
        default=None, description="URL the audio was extracted from, if any"
    )
    source_metadata: Optional[SourceMetadata] = None


def build_run_context(request: RunWorkflowRequest) -> RunContext:
    """Fresh run context from the registries and the request's inputs."""
    return RunContext(
        providers=get_provider_registry().list_all(),
        workflows=get_workflow_registry().as_mapping(),
        input_acquirer=LocalFileInputAcquirer(
            request.audio_file_path,
            source_url=request.source_url,
            metadata=request.source_metadata,
        ),
        output_sink=CollectingOutputSink(),
        context_gatherer=StaticContextGatherer(
            ContextValues(
                selection=request.selection,
                active_tab_content=request.active_tab_content,
                active_tab_filename=request.active_tab_filename,
                clipboard=request.clipboard,
            )
        ),
    )


@router.post("/workflows/{workflow_id}/run", response_model=WorkflowRunResult)
def run_workflow(
    workflow_id: str, request: Optional[RunWorkflowRequest] = None
) -> WorkflowRunResult:
    """Run a workflow and return its result.

    Blocking: provider calls run inline, so this is a sync endpoint.
    """
    workflow = get_workflow_registry().get(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail=f"Workflow not found: {workflow_id}")

    request = request or RunWorkflowRequest()
    logger.info(f"Running workflow {workflow_id} via API")
    return execute_workflow(workflow, build_run_context(request))
