"""Rules: selections plus a terminal predicate."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .config import DEFAULT_CONFIG, CheckerConfig
from .errors import PredicateArityMismatch
from .evaluator import Environment, check
from .result import RuleResult
from .selection import Selection, resolve_selection


def _accepts(predicate: Callable[..., Any], count: int) -> bool | None:
    """Whether `predicate` can be called with `count` positional arguments.

    Returns None when the signature cannot be inspected (some builtins).
    """
    try:
        sig = inspect.signature(predicate)
    except (TypeError, ValueError):
        return None

    required = 0
    optional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return count >= required
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            if param.default is inspect.Parameter.empty:
                required += 1
            else:
                optional += 1
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is inspect.Parameter.empty:
            return False
    return required <= count <= required + optional


@dataclass(frozen=True)
class Rule:
    """
    An ordered list of selections (outermost first) and a predicate.

    The predicate receives one value per selection, in declaration order.
    """

    selections: tuple[Selection, ...]
    predicate: Callable[..., Any]
    check_arity: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "selections", tuple(self.selections))
        if self.check_arity and _accepts(self.predicate, len(self.selections)) is False:
            name = getattr(self.predicate, "__name__", repr(self.predicate))
            raise PredicateArityMismatch(
                f"Predicate {name} cannot take {len(self.selections)} argument(s), one per selection"
            )

    @classmethod
    def define(cls, *args: Any, check_arity: bool = True) -> Rule:
        """Build a rule from selections followed by the predicate.

        `Rule.define(s1, s2, predicate)` is `Rule([s1, s2], predicate)`.
        """
        if not args:
            raise TypeError("Rule.define needs at least a predicate")
        *selections, predicate = args
        return cls(tuple(selections), predicate, check_arity=check_arity)

    def run(
        self,
        input: Any,
        helper_values: Mapping[str, Any] | None = None,
        *,
        config: CheckerConfig = DEFAULT_CONFIG,
    ) -> RuleResult:
        """
        Evaluate this rule against `input`.

        Every selection except contextual references is resolved up front.
        Contextual references depend on the values bound above them, so the
        evaluator resolves them at each depth where they appear.
        """
        helper_values = helper_values if helper_values is not None else {}
        resolved = [
            s if s.is_contextual
            else resolve_selection(s, input, helper_values, missing_reference=config.missing_reference)
            for s in self.selections
        ]
        env = Environment(
            input=input,
            helper_values=helper_values,
            missing_reference=config.missing_reference,
        )
        return check(self.predicate, resolved, env=env)
