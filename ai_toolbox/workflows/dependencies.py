"""Dependency declaration strategies.

A DependencyDeclaration maps a workflow to the ordered ids of the workflows
it depends on. The executor takes one as a parameter, so how dependencies
are declared stays separate from how they are resolved.
"""

from typing import Callable, Iterable

from ai_toolbox.tokens.resolver import ENTITY_TOKEN_PATTERN
from ai_toolbox.workflows.schemas import ChatAction, PromptSourceType, WorkflowDefinition

DependencyDeclaration = Callable[[WorkflowDefinition], list[str]]


def _unique(ids: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for workflow_id in ids:
        seen.setdefault(workflow_id, None)
    return list(seen)


def no_dependencies(workflow: WorkflowDefinition) -> list[str]:
    """Workflows never depend on each other."""
    return []


def declared_dependencies(workflow: WorkflowDefinition) -> list[str]:
    """The workflow's explicit `depends_on` list, duplicates dropped."""
    return _unique(workflow.depends_on)


def inferred_dependencies(known_ids: Iterable[str]) -> DependencyDeclaration:
    """Infer dependencies from `{{workflowId.token}}` references in inline prompts.

    A reference counts when its entity id is a known workflow other than the
    workflow itself and is not one of the workflow's own action ids. Explicit
    `depends_on` entries come first.
    """
    known = set(known_ids)

    def _declare(workflow: WorkflowDefinition) -> list[str]:
        action_ids = {action.id for action in workflow.actions}
        referenced = [
            match.group(1)
            for action in workflow.actions
            if isinstance(action, ChatAction)
            and action.prompt_source_type == PromptSourceType.INLINE
            for match in ENTITY_TOKEN_PATTERN.finditer(action.prompt_text)
        ]
        inferred = [
            entity_id
            for entity_id in referenced
            if entity_id in known and entity_id != workflow.id and entity_id not in action_ids
        ]
        return _unique([*workflow.depends_on, *inferred])

    return _declare
