"""Single-action execution.

Runs one chat or transcription action against the tokens produced so far
and returns an ExecutionResult. This is the failure boundary for actions:
missing provider, capability mismatch, empty prompt or input, and adapter
errors all come back as a failed result, never as a raised exception.
"""

import logging
import time
from typing import Mapping, Optional, Union

from ai_toolbox.errors import CapabilityError, ConfigurationError, ToolboxError, ValidationError
from ai_toolbox.executor.context import RunContext
from ai_toolbox.executor.schemas import EntityKind, ExecutionResult
from ai_toolbox.providers.base import ModelProvider
from ai_toolbox.providers.schemas import ChatMessage, ProviderModelSelection, TranscriptionOptions
from ai_toolbox.tokens.builders import create_chat_tokens, create_transcription_tokens
from ai_toolbox.tokens.resolver import resolve_prompt
from ai_toolbox.workflows.schemas import (
    ChatAction,
    PromptSourceType,
    TranscriptionAction,
    WorkflowDefinition,
)

logger = logging.getLogger(__name__)


def execute_action(
    action: Union[ChatAction, TranscriptionAction],
    run_context: RunContext,
    local_results: Optional[Mapping[str, ExecutionResult]] = None,
) -> ExecutionResult:
    """Execute one action.

    Args:
        action: The action definition
        run_context: Run-scoped collaborators, providers and dependency results
        local_results: Results of the actions already finished in this sequence

    Returns:
        ExecutionResult keyed by the action id; success=False carries the error
    """
    local_results = local_results or {}

    if isinstance(action, ChatAction):
        kind = EntityKind.CHAT
        runner = _run_chat
    elif isinstance(action, TranscriptionAction):
        kind = EntityKind.TRANSCRIPTION
        runner = _run_transcription
    else:
        raise TypeError(f"Unknown action type: {type(action).__name__}")

    label = action.name or action.id
    start_time = time.time()
    try:
        result = runner(action, run_context, local_results)
    except ToolboxError as e:
        logger.error(f"[{label}] {kind.value} action failed: {e}")
        return ExecutionResult.failure(action.id, kind, str(e))
    except Exception as e:
        logger.exception(f"[{label}] {kind.value} action raised unexpectedly")
        return ExecutionResult.failure(action.id, kind, f"{type(e).__name__}: {e}")

    duration_ms = int((time.time() - start_time) * 1000)
    logger.info(f"[{label}] {kind.value} action completed in {duration_ms}ms")
    return result


def _get_provider(
    selection: Optional[ProviderModelSelection], run_context: RunContext
) -> ModelProvider:
    if selection is None:
        raise ConfigurationError("No provider configured")
    return run_context.create_provider(selection)


def _load_prompt_text(action: ChatAction, run_context: RunContext) -> str:
    if action.prompt_source_type == PromptSourceType.FROM_FILE:
        return run_context.prompt_loader(action.prompt_file_path)
    return action.prompt_text


def _run_chat(
    action: ChatAction,
    run_context: RunContext,
    local_results: Mapping[str, ExecutionResult],
) -> ExecutionResult:
    provider = _get_provider(action.provider, run_context)
    if not provider.supports_chat():
        raise CapabilityError("Provider does not support chat")

    prompt_text = resolve_prompt(
        _load_prompt_text(action, run_context),
        local_results,
        run_context.dependency_results,
        run_context.get_context_values,
    )
    if not prompt_text.strip():
        raise ValidationError("Empty prompt text")

    logger.debug(f"[{action.name or action.id}] Sending chat request ({len(prompt_text)} chars)")
    chat_result = provider.chat([ChatMessage(role="user", content=prompt_text)])

    return ExecutionResult(
        entity_id=action.id,
        kind=EntityKind.CHAT,
        success=True,
        tokens=create_chat_tokens(prompt_text, chat_result.content),
    )


def _run_transcription(
    action: TranscriptionAction,
    run_context: RunContext,
    local_results: Mapping[str, ExecutionResult],
) -> ExecutionResult:
    provider = _get_provider(action.provider, run_context)
    if not provider.supports_transcription():
        raise CapabilityError("Provider does not support transcription")

    input_result = run_context.input_acquirer.acquire(action.source_type)
    if input_result is None:
        raise ValidationError("No input provided or cancelled")

    run_context.notifier("Transcribing audio...")
    transcription = provider.transcribe(
        input_result.audio_file_path,
        TranscriptionOptions(
            timestamp_granularity=action.timestamp_granularity,
            language=action.language or None,
        ),
    )

    return ExecutionResult(
        entity_id=action.id,
        kind=EntityKind.TRANSCRIPTION,
        success=True,
        tokens=create_transcription_tokens(
            transcription,
            input_result.metadata,
            source_url=input_result.source_url,
            granularity=action.timestamp_granularity,
        ),
        input_result=input_result,
    )


def run_actions(
    workflow: WorkflowDefinition, run_context: RunContext
) -> list[ExecutionResult]:
    """Run a workflow's actions in order, stopping at the first failure.

    Each action sees the results of the actions before it. The returned list
    ends with the failed result when the sequence was cut short.
    """
    local_results: dict[str, ExecutionResult] = {}
    executed: list[ExecutionResult] = []

    for index, action in enumerate(workflow.actions, start=1):
        logger.info(
            f"[{workflow.name}] Action {index}/{len(workflow.actions)}: "
            f"{action.name or action.id} ({action.type})"
        )
        result = execute_action(action, run_context, local_results)
        executed.append(result)
        if not result.success:
            break
        local_results[action.id] = result

    return executed


def run_action_sequence(workflow: WorkflowDefinition, run_context: RunContext) -> ExecutionResult:
    """Run a workflow's actions and fold them into one result under the workflow id.

    The folded tokens are the terminal action's tokens. Used for dependency
    workflows, which produce tokens but no output.
    """
    if not workflow.actions:
        return ExecutionResult.failure(
            workflow.id, EntityKind.WORKFLOW, f"Workflow {workflow.name} has no actions"
        )

    executed = run_actions(workflow, run_context)
    last = executed[-1]
    if not last.success:
        return ExecutionResult.failure(
            workflow.id,
            EntityKind.WORKFLOW,
            f"Action {last.entity_id} failed: {last.error}",
        )

    return ExecutionResult(
        entity_id=workflow.id,
        kind=EntityKind.WORKFLOW,
        success=True,
        tokens=dict(last.tokens),
        input_result=last.input_result,
    )
