"""Run-scoped execution context.

One RunContext per top-level workflow run. It carries the configuration the
run reads (providers, workflows), the host collaborators, and the state the
run owns: the ambient-context snapshot and the memoized dependency results.
Nothing in the execution core reads module-level state.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

import httpx

from ai_toolbox.executor.collaborators import (
    CollectingOutputSink,
    ContextGatherer,
    FilePromptLoader,
    InputAcquirer,
    LocalFileInputAcquirer,
    Notifier,
    OutputSink,
    PromptFileLoader,
    StaticContextGatherer,
    TitleDeriver,
    log_notice,
)
from ai_toolbox.executor.schemas import ContextValues, ExecutionResult
from ai_toolbox.executor.titles import derive_platform_title
from ai_toolbox.providers.base import ModelProvider
from ai_toolbox.providers.factory import create_model_provider, resolve_adapter_config
from ai_toolbox.providers.schemas import (
    ProviderAdapterConfig,
    ProviderConfig,
    ProviderModelSelection,
)
from ai_toolbox.workflows.dependencies import DependencyDeclaration, declared_dependencies
from ai_toolbox.workflows.schemas import WorkflowDefinition

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderAdapterConfig], ModelProvider]


@dataclass
class RunContext:
    providers: Sequence[ProviderConfig]
    workflows: Mapping[str, WorkflowDefinition] = field(default_factory=dict)
    prompt_loader: PromptFileLoader = field(default_factory=FilePromptLoader)
    input_acquirer: InputAcquirer = field(default_factory=LocalFileInputAcquirer)
    output_sink: OutputSink = field(default_factory=CollectingOutputSink)
    context_gatherer: ContextGatherer = field(default_factory=StaticContextGatherer)
    title_deriver: TitleDeriver = derive_platform_title
    notifier: Notifier = log_notice
    dependency_declaration: DependencyDeclaration = declared_dependencies
    provider_factory: Optional[ProviderFactory] = None
    transport: Optional[httpx.BaseTransport] = None  # passed to the default factory

    # Run-owned state
    dependency_results: dict[str, ExecutionResult] = field(default_factory=dict, init=False)
    _context_snapshot: Optional[ContextValues] = field(default=None, init=False, repr=False)

    def get_context_values(self) -> ContextValues:
        """Ambient context, gathered on first use and reused for the rest of the run."""
        if self._context_snapshot is None:
            logger.debug("Gathering ambient context")
            self._context_snapshot = self.context_gatherer()
        return self._context_snapshot

    @property
    def context_gathered(self) -> bool:
        return self._context_snapshot is not None

    def get_dependency_ids(self, workflow: WorkflowDefinition) -> list[str]:
        return self.dependency_declaration(workflow)

    def create_provider(self, selection: ProviderModelSelection) -> ModelProvider:
        """Build a fresh adapter for one call.

        Raises:
            ConfigurationError: Provider/model not configured or type unsupported
        """
        adapter_config = resolve_adapter_config(self.providers, selection)
        if self.provider_factory is not None:
            return self.provider_factory(adapter_config)
        return create_model_provider(adapter_config, transport=self.transport)
