"""Evaluation outcomes for a single rule and for a whole checker run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

# Ordered concrete elements leading to a failing leaf
Path = tuple[Any, ...]


@dataclass(frozen=True)
class Violation:
    """A failing path attributed to a rule."""

    rule: str
    path: Path

    def __str__(self) -> str:
        return f"[{self.rule}] {' -> '.join(repr(p) for p in self.path)}"


@dataclass(frozen=True)
class RuleResult:
    """Outcome of one rule: the paths that violated its predicate."""

    violations: tuple[Path, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.violations

    @classmethod
    def success(cls) -> RuleResult:
        return cls()

    @classmethod
    def failure(cls, path: Path) -> RuleResult:
        return cls((tuple(path),))

    def merge(self, other: RuleResult) -> RuleResult:
        if not other.violations:
            return self
        if not self.violations:
            return other
        return RuleResult(self.violations + other.violations)


@dataclass(frozen=True)
class CheckResult:
    """
    Aggregate outcome of a checker run.

    `errors` maps each failing rule name to its violation paths, in
    evaluation order. Rules without violations do not appear. `faults` holds
    rules that could not be evaluated when the checker records faults
    instead of raising them.
    """

    errors: dict[str, list[Path]] = field(default_factory=dict)
    faults: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.errors and not self.faults

    @classmethod
    def success(cls) -> CheckResult:
        return cls()

    @classmethod
    def from_rule(cls, name: str, result: RuleResult) -> CheckResult:
        """Tag the violations of one rule with its name."""
        if result.succeeded:
            return cls()
        return cls(errors={name: list(result.violations)})

    @classmethod
    def from_fault(cls, name: str, error: Exception) -> CheckResult:
        return cls(faults={name: f"{type(error).__name__}: {error}"})

    def merge(self, other: CheckResult) -> CheckResult:
        errors = {name: list(paths) for name, paths in self.errors.items()}
        for name, paths in other.errors.items():
            errors.setdefault(name, []).extend(paths)
        return CheckResult(errors=errors, faults={**self.faults, **other.faults})

    def violations(self) -> Iterator[Violation]:
        """Flat listing of every violation, grouped by rule."""
        for name, paths in self.errors.items():
            for path in paths:
                yield Violation(rule=name, path=path)

    @property
    def violation_count(self) -> int:
        return sum(len(paths) for paths in self.errors.values())
