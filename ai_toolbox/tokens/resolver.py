"""Token substitution over prompt text.

Two token shapes:
- `{{entityId.tokenName}}` refers to a token produced by a finished action
  (local namespace) or a finished dependency workflow (dependency namespace).
- `{{name}}` (no dot) refers to the ambient-context vocabulary: selection,
  activeTabContent, activeTabFilename, clipboard.

Substitution never fails: a reference that cannot be resolved is left
byte-identical. Each pass scans the input once, so substituted values are
never rescanned within that pass.
"""

import logging
import re
from typing import Callable, Mapping, Optional

from ai_toolbox.executor.schemas import ContextValues, ExecutionResult

logger = logging.getLogger(__name__)

ENTITY_TOKEN_PATTERN = re.compile(r"\{\{([A-Za-z0-9_-]+)\.([A-Za-z0-9_]+)\}\}")

# Bare context token name -> ContextValues attribute
CONTEXT_TOKEN_FIELDS = {
    "selection": "selection",
    "activeTabContent": "active_tab_content",
    "activeTabFilename": "active_tab_filename",
    "clipboard": "clipboard",
}

CONTEXT_TOKEN_PATTERN = re.compile(
    r"\{\{(" + "|".join(CONTEXT_TOKEN_FIELDS) + r")\}\}"
)


def substitute_entities(text: str, results_by_id: Mapping[str, ExecutionResult]) -> str:
    """Replace `{{entityId.tokenName}}` references with produced token values."""
    if not results_by_id:
        return text

    def _replace(match: re.Match) -> str:
        entity_id, token_name = match.group(1), match.group(2)
        result = results_by_id.get(entity_id)
        if result is None:
            return match.group(0)
        value = result.tokens.get(token_name)
        if value is None:
            logger.debug(f"Token {token_name!r} not produced by {entity_id!r}, leaving as-is")
            return match.group(0)
        return value

    return ENTITY_TOKEN_PATTERN.sub(_replace, text)


def has_context_tokens(text: str) -> bool:
    """Cheap pre-scan: does the text reference any ambient-context token?"""
    return CONTEXT_TOKEN_PATTERN.search(text) is not None


def substitute_context(text: str, context_values: ContextValues) -> str:
    """Replace bare `{{name}}` context references that have a value."""

    def _replace(match: re.Match) -> str:
        value = getattr(context_values, CONTEXT_TOKEN_FIELDS[match.group(1)])
        return match.group(0) if value is None else value

    return CONTEXT_TOKEN_PATTERN.sub(_replace, text)


def resolve_prompt(
    text: str,
    local_results: Mapping[str, ExecutionResult],
    dependency_results: Mapping[str, ExecutionResult],
    gather_context: Optional[Callable[[], ContextValues]] = None,
) -> str:
    """Resolve every token namespace in priority order.

    Local results first, then dependency results, then ambient context.
    `gather_context` is only invoked when the text still contains a bare
    context token after entity substitution.
    """
    text = substitute_entities(text, local_results)
    text = substitute_entities(text, dependency_results)
    if gather_context is not None and has_context_tokens(text):
        text = substitute_context(text, gather_context())
    return text
