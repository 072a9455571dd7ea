"""Execution engine for user-defined workflows.

Architecture (bottom-up):
- schemas: ExecutionResult, WorkflowRunResult, context and input shapes
- collaborators: Host interfaces (prompt files, input, output, context, titles)
- context: RunContext, the run-scoped state and configuration
- action_runner: Single action execution and the fail-fast action loop
- dependency_resolver: Cycle check and depth-first dependency workflow runs
- workflow_runner: Top-level run, output text/title derivation, output hand-off
"""
