"""
Checkers: named rules plus named helpers, evaluated together.

Helpers are functions of the checked input. They are computed once per run
and exposed to rules through Reference selections.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from .config import DEFAULT_CONFIG, CheckerConfig
from .errors import CheckError, RuleEvaluationError
from .result import CheckResult
from .rule import Rule
from .selection import Selection

logger = logging.getLogger(__name__)

HelperFn = Callable[[Any], Any]


class Checker:
    """A named collection of rules and helpers."""

    def __init__(
        self,
        rules: Mapping[str, Rule] | None = None,
        helpers: Mapping[str, HelperFn] | None = None,
        *,
        config: CheckerConfig | None = None,
    ):
        self.rules: dict[str, Rule] = dict(rules or {})
        self.helpers: dict[str, HelperFn] = dict(helpers or {})
        self.config = config or DEFAULT_CONFIG

    def __repr__(self) -> str:
        return f"Checker(rules={list(self.rules)}, helpers={list(self.helpers)})"

    def add_rule(
        self,
        name: str,
        selections: Sequence[Selection],
        predicate: Callable[..., Any],
    ) -> Rule:
        """
        Register a rule, replacing any rule already registered under `name`.

        Raises:
            PredicateArityMismatch: If arity checking is enabled and the
                predicate does not take one argument per selection
        """
        rule = Rule(tuple(selections), predicate, check_arity=self.config.check_arity)
        self.rules[name] = rule
        return rule

    def add_helper(self, name: str, fn: HelperFn) -> None:
        """Register a helper, replacing any helper already registered under `name`."""
        self.helpers[name] = fn

    def compute_helpers(self, input: Any) -> dict[str, Any]:
        values = {}
        for name, fn in self.helpers.items():
            logger.debug("Computing helper %r", name)
            values[name] = fn(input)
        return values

    def run(self, input: Any) -> CheckResult:
        """
        Evaluate every rule against `input` and merge the outcomes.

        Rules run in registration order; the order only affects how errors
        are listed, never whether the run succeeds.

        Raises:
            RuleEvaluationError: A rule is malformed and faults are not
                recorded (see CheckerConfig.on_fault)

        Exceptions raised by selection functions or predicates propagate
        unchanged unless faults are recorded, in which case the rule is
        skipped and reported in CheckResult.faults like any other fault.
        """
        helper_values = self.compute_helpers(input)

        result = CheckResult.success()
        for name, rule in self.rules.items():
            try:
                rule_result = rule.run(input, helper_values, config=self.config)
            except Exception as e:
                # Selection functions and predicates are user code and may raise anything
                if self.config.on_fault == "raise":
                    if isinstance(e, CheckError):
                        raise RuleEvaluationError(name, e) from e
                    raise
                logger.warning("Rule %r faulted: %s: %s", name, type(e).__name__, e)
                result = result.merge(CheckResult.from_fault(name, e))
                continue

            logger.debug("Rule %r: %d violation(s)", name, len(rule_result.violations))
            result = result.merge(CheckResult.from_rule(name, rule_result))

        return result

    def run_on_transformation(self, source: Any, target: Any) -> CheckResult:
        """Check a transformation; rules read the two sides as x["in"] and x["out"]."""
        return self.run({"in": source, "out": target})

    def compose(self, *others: Checker) -> Checker:
        """New checker holding the rules and helpers of `self` then `others`."""
        return compose_checkers(self, *others)


def compose_checkers(*checkers: Checker) -> Checker:
    """
    Merge checkers into a new one.

    On name collisions the later checker wins, for rules and helpers alike.
    The config of the last checker is kept. Inputs are left untouched.
    """
    rules: dict[str, Rule] = {}
    helpers: dict[str, HelperFn] = {}
    config = DEFAULT_CONFIG
    for c in checkers:
        rules.update(c.rules)
        helpers.update(c.helpers)
        config = c.config
    return Checker(rules, helpers, config=config)
