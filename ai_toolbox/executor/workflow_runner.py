"""Top-level workflow execution.

Drives one workflow run:

1. Abort with a notice if the workflow has no actions
2. Resolve dependency workflows (cycle check first, then depth-first runs)
3. Run the workflow's actions in order, fail-fast
4. Derive output text and title from the terminal action
5. Hand the output to the output sink

Ambient context is gathered lazily by the first action that references it
and shared by every action in the run, dependency workflows included.
`execute_workflow` never raises; every outcome is a WorkflowRunResult.
"""

import logging
import time
from typing import Optional

from ai_toolbox.errors import GraphError
from ai_toolbox.executor.action_runner import run_action_sequence, run_actions
from ai_toolbox.executor.context import RunContext
from ai_toolbox.executor.dependency_resolver import resolve_dependencies
from ai_toolbox.executor.schemas import (
    EntityKind,
    ExecutionResult,
    RunStatus,
    WorkflowRunResult,
)
from ai_toolbox.executor.titles import default_title
from ai_toolbox.workflows.schemas import WorkflowDefinition

logger = logging.getLogger(__name__)

__all__ = ["derive_output_text", "execute_workflow", "run_action_sequence"]


def derive_output_text(result: ExecutionResult) -> str:
    """Output text for a terminal action's tokens.

    Chat: the response. Transcription: the timestamped transcription when
    present and non-empty, else the plain transcription.
    """
    if result.kind == EntityKind.CHAT:
        return result.tokens.get("response", "")
    elif result.kind == EntityKind.TRANSCRIPTION:
        return result.tokens.get("transcriptionWithTimestamps") or result.tokens.get(
            "transcription", ""
        )
    else:
        raise ValueError(f"No output text for entity kind: {result.kind}")


def _derive_title(
    workflow: WorkflowDefinition, terminal: ExecutionResult, run_context: RunContext
) -> str:
    """Title for the output note; a failing title deriver falls back to the default."""
    input_result = terminal.input_result
    if input_result is None or not input_result.source_url:
        return default_title(workflow.name)
    try:
        return run_context.title_deriver(input_result, workflow.name)
    except Exception:
        logger.exception(
            f"[{workflow.name}] Title derivation failed for {input_result.source_url}, "
            f"using default title"
        )
        return default_title(workflow.name)


def _notify(workflow: WorkflowDefinition, run_context: RunContext, message: str) -> None:
    try:
        run_context.notifier(message)
    except Exception:
        logger.exception(f"[{workflow.name}] Notifier failed on: {message}")


def _abort(
    workflow: WorkflowDefinition,
    run_context: RunContext,
    status: RunStatus,
    error: str,
    action_results: Optional[list[ExecutionResult]] = None,
) -> WorkflowRunResult:
    logger.warning(f"[{workflow.name}] Run aborted ({status.value}): {error}")
    _notify(workflow, run_context, f"Workflow {workflow.name} failed: {error}")
    return WorkflowRunResult(
        workflow_id=workflow.id,
        status=status,
        action_results=action_results or [],
        dependency_results=dict(run_context.dependency_results),
        error=error,
    )


def execute_workflow(workflow: WorkflowDefinition, run_context: RunContext) -> WorkflowRunResult:
    """Execute a workflow and deliver its output.

    Args:
        workflow: The workflow to run
        run_context: A fresh run context; its dependency results and context
            snapshot belong to this run

    Returns:
        WorkflowRunResult with the terminal status, executed action results,
        and the output text and title on completion
    """
    if not workflow.actions:
        message = f"Workflow {workflow.name} has no actions configured."
        logger.warning(f"[{workflow.name}] {message}")
        _notify(workflow, run_context, message)
        return WorkflowRunResult(
            workflow_id=workflow.id,
            status=RunStatus.ABORTED_NO_ACTIONS,
            error=message,
        )

    start_time = time.time()
    logger.info(f"[{workflow.name}] Starting workflow run ({len(workflow.actions)} actions)")
    _notify(workflow, run_context, f"Executing workflow: {workflow.name}...")

    try:
        resolve_dependencies(workflow, run_context)
    except GraphError as e:
        return _abort(workflow, run_context, RunStatus.ABORTED_DEPENDENCY_FAILURE, str(e))

    executed = run_actions(workflow, run_context)
    terminal = executed[-1]
    if not terminal.success:
        return _abort(
            workflow,
            run_context,
            RunStatus.ABORTED_ACTION_FAILURE,
            f"Action {terminal.entity_id} failed: {terminal.error}",
            action_results=executed,
        )

    output_text = derive_output_text(terminal)
    title = _derive_title(workflow, terminal, run_context)
    try:
        run_context.output_sink.write(output_text, title, workflow.output_folder)
    except Exception as e:
        logger.exception(f"[{workflow.name}] Output sink failed")
        return _abort(
            workflow,
            run_context,
            RunStatus.OUTPUT_FAILED,
            f"Could not write output: {e}",
            action_results=executed,
        )

    duration_ms = int((time.time() - start_time) * 1000)
    logger.info(
        f"[{workflow.name}] Workflow completed in {duration_ms}ms: "
        f"{len(executed)} actions, {len(output_text):,} chars output"
    )
    return WorkflowRunResult(
        workflow_id=workflow.id,
        status=RunStatus.COMPLETED,
        action_results=executed,
        dependency_results=dict(run_context.dependency_results),
        output_text=output_text,
        title=title,
    )
