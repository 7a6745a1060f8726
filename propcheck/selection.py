"""
Selections: what to look at, one nesting level at a time.

A selection pairs a quantifier kind with a content. The content is either
already resolved (a concrete value or collection) or describes how to
obtain it:

- Reference(name): a helper value computed once per checker run
- ContextualReference(fn): fn(context), evaluated against the values bound
  by the enclosing selections
- any other callable: fn(input), evaluated against the checked input
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Literal, Mapping

from .errors import InvalidReference, InvalidSelection

logger = logging.getLogger(__name__)

MissingReferencePolicy = Literal["error", "empty"]


class SelectionKind(Enum):
    """
    Quantifier of a selection.

    - ALL: every element must satisfy the rest of the rule
    - ANY: at least one element must satisfy the rest of the rule
    - RAW: the content is bound as a single value
    """

    ALL = "all"
    ANY = "any"
    RAW = "raw"


@dataclass(frozen=True)
class Reference:
    """Named lookup into the helpers of a checker."""

    name: str


@dataclass(frozen=True)
class ContextualReference:
    """Content computed from the context bound so far.

    `fn` receives the context tuple; `context[0]` is the value bound by the
    outermost selection.
    """

    fn: Callable[[tuple[Any, ...]], Any]


def _is_unresolved(content: Any) -> bool:
    return isinstance(content, (Reference, ContextualReference)) or callable(content)


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind
    content: Any
    resolved: bool = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.resolved is None:
            object.__setattr__(self, "resolved", not _is_unresolved(self.content))
        # One-shot iterators are materialized so nested branches can walk them again
        if self.resolved and isinstance(self.content, Iterator):
            object.__setattr__(self, "content", list(self.content))

    @classmethod
    def all(cls, content: Any) -> Selection:
        """Universally quantified selection."""
        return cls(SelectionKind.ALL, content)

    @classmethod
    def any(cls, content: Any) -> Selection:
        """Existentially quantified selection."""
        return cls(SelectionKind.ANY, content)

    @classmethod
    def raw(cls, content: Any) -> Selection:
        """Selection passed as-is to the predicate."""
        return cls(SelectionKind.RAW, content)

    @property
    def is_contextual(self) -> bool:
        return not self.resolved and isinstance(self.content, ContextualReference)

    def with_content(self, content: Any) -> Selection:
        """Resolved copy of this selection holding `content`."""
        return Selection(self.kind, content, resolved=True)


def for_all(content: Any) -> Selection:
    return Selection.all(content)


def exists(content: Any) -> Selection:
    return Selection.any(content)


def raw(content: Any) -> Selection:
    return Selection.raw(content)


def resolve_selection(
    selection: Selection,
    input: Any,
    helper_values: Mapping[str, Any],
    context: tuple[Any, ...] = (),
    *,
    missing_reference: MissingReferencePolicy = "error",
) -> Selection:
    """
    Resolve a selection to one holding concrete content.

    Args:
        selection: Selection to resolve
        input: The value being checked
        helper_values: Helper values computed for the current run
        context: Values bound by the enclosing selections
        missing_reference: "error" raises on unknown helper names,
            "empty" resolves them to None

    Returns:
        `selection` itself when already resolved, otherwise a new Selection

    Raises:
        InvalidReference: Unknown helper name under the "error" policy
        InvalidSelection: Content cannot be resolved
    """
    if selection.resolved:
        return selection

    content = selection.content
    if isinstance(content, Reference):
        if content.name in helper_values:
            return selection.with_content(helper_values[content.name])
        if missing_reference == "empty":
            logger.debug("Unknown helper %r resolved to None", content.name)
            return selection.with_content(None)
        raise InvalidReference(content.name, list(helper_values))

    if isinstance(content, ContextualReference):
        return selection.with_content(content.fn(tuple(context)))

    if callable(content):
        return selection.with_content(content(input))

    raise InvalidSelection(f"Invalid selection content: {content!r} ({selection.kind})")


def on_input(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Apply `fn` to the source side of a transformation input."""
    return lambda x: fn(x["in"])


def on_output(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Apply `fn` to the target side of a transformation input."""
    return lambda x: fn(x["out"])
