"""
Recursive evaluation of a rule's selection chain.

Selections are consumed outermost first. Each quantified level binds one
value, appended to both the context (predicate arguments) and the path
(violation location). Context and path are tuples: every branch extends its
own copy, so sibling iterations never observe each other's bindings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

from .errors import InvalidSelection, InvalidSelectionKind
from .result import Path, RuleResult
from .selection import MissingReferencePolicy, Selection, SelectionKind, resolve_selection


@dataclass(frozen=True)
class Environment:
    """What contextual references may be resolved against during a run."""

    input: Any = None
    helper_values: Mapping[str, Any] = field(default_factory=dict)
    missing_reference: MissingReferencePolicy = "error"


def _elements(selection: Selection) -> Iterable[Any]:
    content = selection.content
    if content is None:
        return ()
    # Objects are quantified over their values, not their keys
    if isinstance(content, Mapping):
        return content.values()
    try:
        iter(content)
    except TypeError:
        raise InvalidSelection(
            f"{selection.kind.value} selection needs an iterable content, got {type(content).__name__}"
        ) from None
    return content


def check(
    predicate: Callable[..., Any],
    selections: Sequence[Selection],
    context: tuple[Any, ...] = (),
    path: Path = (),
    *,
    env: Environment | None = None,
) -> RuleResult:
    """
    Evaluate `predicate` under the quantifiers described by `selections`.

    Args:
        predicate: Called with one positional argument per selection, in
            declaration order
        selections: Remaining selections, outermost first
        context: Values bound so far
        path: Elements traversed so far
        env: Resolution environment for contextual references

    Returns:
        RuleResult listing every violating path

    Raises:
        InvalidSelection: Content cannot be resolved or iterated
        InvalidSelectionKind: Unknown selection kind
    """
    if not selections:
        if predicate(*context):
            return RuleResult.success()
        return RuleResult.failure(path)

    if env is None:
        env = Environment()

    head, tail = selections[0], selections[1:]
    if not head.resolved:
        head = resolve_selection(
            head,
            env.input,
            env.helper_values,
            context,
            missing_reference=env.missing_reference,
        )

    kind = head.kind
    if kind is SelectionKind.ALL:
        result = RuleResult.success()
        for x in _elements(head):
            result = result.merge(check(predicate, tail, context + (x,), path + (x,), env=env))
        return result

    if kind is SelectionKind.ANY:
        for x in _elements(head):
            if check(predicate, tail, context + (x,), path + (x,), env=env).succeeded:
                return RuleResult.success()
        return RuleResult.failure(path + (head.content,))

    if kind is SelectionKind.RAW:
        return check(predicate, tail, context + (head.content,), path + (head.content,), env=env)

    raise InvalidSelectionKind(f"Invalid selection kind: {kind!r}")
