"""Tests for token substitution."""

from ai_toolbox.executor.schemas import ContextValues, EntityKind, ExecutionResult
from ai_toolbox.tokens.resolver import (
    has_context_tokens,
    resolve_prompt,
    substitute_context,
    substitute_entities,
)


def _result(entity_id: str, **tokens: str) -> ExecutionResult:
    return ExecutionResult(entity_id=entity_id, kind=EntityKind.CHAT, success=True, tokens=tokens)


def test_substitute_entities_replaces_known_tokens() -> None:
    results = {"a1": _result("a1", response="hi", prompt="p")}

    text = substitute_entities("Say: {{a1.response}} ({{a1.prompt}})", results)

    assert text == "Say: hi (p)"


def test_unresolvable_references_are_byte_identical() -> None:
    results = {"a1": _result("a1", response="hi")}
    text = "{{missing.response}} {{a1.nope}} {{ a1.response }} {{a1.response.extra}} {{a1}}"

    assert substitute_entities(text, results) == text


def test_substituted_values_are_not_rescanned() -> None:
    results = {
        "a1": _result("a1", response="{{a2.response}}"),
        "a2": _result("a2", response="SHOULD NOT APPEAR"),
    }

    assert substitute_entities("{{a1.response}}", results) == "{{a2.response}}"


def test_entity_ids_allow_dashes_and_underscores() -> None:
    results = {"my-flow_2": _result("my-flow_2", response="ok")}

    assert substitute_entities("{{my-flow_2.response}}", results) == "ok"


def test_substitute_context_fills_only_present_values() -> None:
    values = ContextValues(selection="sel", active_tab_filename="note.md")
    text = "{{selection}}|{{activeTabFilename}}|{{clipboard}}|{{unknown}}"

    assert substitute_context(text, values) == "sel|note.md|{{clipboard}}|{{unknown}}"


def test_has_context_tokens() -> None:
    assert has_context_tokens("use {{clipboard}}")
    assert has_context_tokens("{{activeTabContent}}")
    assert not has_context_tokens("{{a1.selection}} {{other}} plain")


def test_resolve_prompt_local_results_take_priority() -> None:
    local = {"x": _result("x", response="local")}
    dependency = {"x": _result("x", response="dependency"), "d": _result("d", response="dep")}

    text = resolve_prompt("{{x.response}} {{d.response}}", local, dependency)

    assert text == "local dep"


def test_resolve_prompt_gathers_context_only_when_needed() -> None:
    calls = []

    def gather() -> ContextValues:
        calls.append(1)
        return ContextValues(clipboard="clip")

    assert resolve_prompt("no context here", {}, {}, gather) == "no context here"
    assert calls == []

    assert resolve_prompt("paste {{clipboard}}", {}, {}, gather) == "paste clip"
    assert calls == [1]


def test_resolve_prompt_context_tokens_inside_values_are_substituted() -> None:
    # Entity substitution runs first; context substitution then scans its output.
    local = {"a1": _result("a1", response="Summarize: {{selection}}")}

    text = resolve_prompt(
        "{{a1.response}}", local, {}, lambda: ContextValues(selection="hello")
    )

    assert text == "Summarize: hello"
