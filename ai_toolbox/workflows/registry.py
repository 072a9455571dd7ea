"""Workflow registry for loading and managing workflow definitions."""

import logging
from pathlib import Path
from typing import Optional

from ai_toolbox import config
from ai_toolbox.loader import iter_definition_files, read_definition_file
from ai_toolbox.workflows.schemas import ActionType, WorkflowDefinition, WorkflowSummary

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Registry for workflow definitions.

    Loads one WorkflowDefinition per JSON/YAML file in the definitions
    directory. Invalid files are logged and skipped.
    """

    def __init__(self, definitions_dir: Optional[Path] = None):
        self.definitions_dir = definitions_dir or config.WORKFLOW_DEFINITIONS_DIR
        self._workflows: dict[str, WorkflowDefinition] = {}
        self._loaded = False

    def load(self) -> None:
        """Load all workflow definitions."""
        if self._loaded:
            return

        if not self.definitions_dir.exists():
            logger.warning(f"Workflow definitions directory not found: {self.definitions_dir}")
            self._loaded = True
            return

        for path in iter_definition_files(self.definitions_dir):
            try:
                workflow = WorkflowDefinition.model_validate(read_definition_file(path))
                self._workflows[workflow.id] = workflow
                logger.debug(f"Loaded workflow: {workflow.id} ({len(workflow.actions)} actions)")
            except Exception as e:
                logger.error(f"Failed to load workflow {path}: {e}")

        self._loaded = True
        logger.info(f"Loaded {len(self._workflows)} workflows")

    def add(self, workflow: WorkflowDefinition) -> None:
        """Register a workflow in memory (no file is written)."""
        self.load()
        self._workflows[workflow.id] = workflow

    def get(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        """Get a workflow definition by id."""
        self.load()
        return self._workflows.get(workflow_id)

    def get_validated(self, workflow_id: str) -> WorkflowDefinition:
        """Get workflow by id, raising if not found."""
        workflow = self.get(workflow_id)
        if workflow is None:
            available = list(self._workflows.keys())
            raise ValueError(f"Workflow not found: {workflow_id}. Available: {available}")
        return workflow

    def list_all(self) -> list[WorkflowDefinition]:
        self.load()
        return list(self._workflows.values())

    def as_mapping(self) -> dict[str, WorkflowDefinition]:
        """Snapshot of id -> definition, as consumed by the executor."""
        self.load()
        return dict(self._workflows)

    def list_summaries(self) -> list[WorkflowSummary]:
        """List all workflow summaries."""
        self.load()
        return [
            WorkflowSummary(
                id=w.id,
                name=w.name,
                action_count=len(w.actions),
                action_types=[ActionType(a.type) for a in w.actions],
                output_type=w.output_type,
                depends_on=w.depends_on,
                show_in_command=w.show_in_command,
                available_as_input=w.available_as_input,
            )
            for w in self._workflows.values()
        ]

    def list_input_sources(self) -> list[WorkflowDefinition]:
        """Workflows other workflows may use as a token source."""
        self.load()
        return [w for w in self._workflows.values() if w.available_as_input]

    def count(self) -> int:
        """Get total number of workflows."""
        self.load()
        return len(self._workflows)

    def reload(self) -> None:
        """Force reload all definitions."""
        self._loaded = False
        self._workflows.clear()
        self.load()


# Global registry instance
_registry: Optional[WorkflowRegistry] = None


def get_workflow_registry() -> WorkflowRegistry:
    """Get the global workflow registry instance."""
    global _registry
    if _registry is None:
        _registry = WorkflowRegistry()
        _registry.load()
    return _registry
