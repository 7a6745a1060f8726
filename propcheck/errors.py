"""Faults raised by malformed rules.

Rule violations are never exceptions: a rule whose predicate fails is a
successful evaluation that reports violations. The classes below cover rules
that cannot be evaluated at all.
"""

from __future__ import annotations


class CheckError(ValueError):
    """Base class for every fault raised by the checking engine."""


class InvalidSelection(CheckError):
    """Selection content is neither a value, a reference, nor a callable."""


class InvalidSelectionKind(InvalidSelection):
    """Selection kind is not one of ALL, ANY, RAW."""


class InvalidReference(CheckError):
    """A named reference does not match any helper of the checker."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = sorted(available or [])
        msg = f"Unknown helper reference: {name!r}"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class PredicateArityMismatch(CheckError):
    """Predicate does not accept one argument per selection."""


class RuleEvaluationError(CheckError):
    """A rule of a checker faulted during `Checker.run`."""

    def __init__(self, rule: str, error: Exception):
        self.rule = rule
        self.error = error
        super().__init__(f"Rule {rule!r} could not be evaluated: {error}")
