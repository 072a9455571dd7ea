"""Dependency workflow resolution.

Before a workflow's own actions run, every workflow it depends on runs
first, depth-first with leaves before dependents. Each dependency runs its
action sequence once per run (results are memoized on the RunContext) and
contributes its terminal-action tokens under its workflow id.

The whole graph is checked for cycles before anything executes, so a
circular definition never reaches a provider.
"""

import logging
from typing import Callable, Mapping, Optional

from ai_toolbox.errors import GraphError
from ai_toolbox.executor.action_runner import run_action_sequence
from ai_toolbox.executor.context import RunContext
from ai_toolbox.executor.schemas import ExecutionResult
from ai_toolbox.workflows.schemas import WorkflowDefinition

logger = logging.getLogger(__name__)


def find_cycle(
    root_id: str,
    workflows_by_id: Mapping[str, WorkflowDefinition],
    get_dependency_ids: Callable[[WorkflowDefinition], list[str]],
) -> Optional[list[str]]:
    """Walk the dependency graph from root_id looking for a cycle.

    Unknown ids are not followed; the resolver reports them when it reaches
    them.

    Returns:
        The cycle as a path that starts and ends on the same id
        (e.g. ["a", "b", "a"]), or None.
    """
    path: list[str] = []
    on_path: set[str] = set()
    finished: set[str] = set()

    def _visit(workflow_id: str) -> Optional[list[str]]:
        if workflow_id in on_path:
            return path[path.index(workflow_id):] + [workflow_id]
        if workflow_id in finished:
            return None
        workflow = workflows_by_id.get(workflow_id)
        if workflow is None:
            return None

        path.append(workflow_id)
        on_path.add(workflow_id)
        for dependency_id in get_dependency_ids(workflow):
            cycle = _visit(dependency_id)
            if cycle:
                return cycle
        path.pop()
        on_path.discard(workflow_id)
        finished.add(workflow_id)
        return None

    return _visit(root_id)


def format_cycle(cycle: list[str]) -> str:
    return " -> ".join(cycle)


def check_for_cycles(workflow: WorkflowDefinition, run_context: RunContext) -> None:
    """Raise GraphError if the workflow's dependency graph has a cycle."""
    workflows_by_id = {**run_context.workflows, workflow.id: workflow}
    cycle = find_cycle(workflow.id, workflows_by_id, run_context.get_dependency_ids)
    if cycle:
        raise GraphError(f"Circular dependency detected: {format_cycle(cycle)}", path=cycle)


def resolve_dependencies(
    workflow: WorkflowDefinition, run_context: RunContext
) -> dict[str, ExecutionResult]:
    """Run every dependency of `workflow` and return their results by workflow id.

    Raises:
        GraphError: Cycle, unknown dependency id, or a dependency that failed.
            Raised before any provider call in the cycle case.
    """
    check_for_cycles(workflow, run_context)

    executing: list[str] = [workflow.id]

    def _resolve(workflow_id: str) -> None:
        if workflow_id in run_context.dependency_results:
            return
        if workflow_id in executing:
            cycle = executing[executing.index(workflow_id):] + [workflow_id]
            raise GraphError(f"Circular dependency detected: {format_cycle(cycle)}", path=cycle)

        dependency = run_context.workflows.get(workflow_id)
        if dependency is None:
            raise GraphError(
                f"Dependency workflow not found: {workflow_id}",
                path=[*executing, workflow_id],
            )

        executing.append(workflow_id)
        for nested_id in run_context.get_dependency_ids(dependency):
            _resolve(nested_id)

        logger.info(f"[{workflow.name}] Running dependency workflow: {dependency.name}")
        result = run_action_sequence(dependency, run_context)
        executing.pop()
        run_context.dependency_results[workflow_id] = result

        if not result.success:
            raise GraphError(
                f"Dependency workflow {dependency.name} failed: {result.error}",
                path=[*executing, workflow_id],
            )

    for dependency_id in run_context.get_dependency_ids(workflow):
        _resolve(dependency_id)

    return dict(run_context.dependency_results)
