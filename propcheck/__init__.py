"""propcheck - declarative property checking over in-memory values.

Rules quantify over selections of the input (for all / exists / raw) and
end in a predicate; checkers run named rules and report the exact paths of
the elements that violate them.
"""

__version__ = "0.3.0"

from .checker import Checker, compose_checkers
from .config import CheckerConfig, load_config
from .errors import (
    CheckError,
    InvalidReference,
    InvalidSelection,
    InvalidSelectionKind,
    PredicateArityMismatch,
    RuleEvaluationError,
)
from .evaluator import Environment, check
from .result import CheckResult, RuleResult, Violation
from .rule import Rule
from .selection import (
    ContextualReference,
    Reference,
    Selection,
    SelectionKind,
    exists,
    for_all,
    on_input,
    on_output,
    raw,
    resolve_selection,
)

__all__ = [
    "__version__",
    # Core
    "Checker",
    "compose_checkers",
    "Rule",
    "check",
    "Environment",
    # Selections
    "Selection",
    "SelectionKind",
    "Reference",
    "ContextualReference",
    "for_all",
    "exists",
    "raw",
    "on_input",
    "on_output",
    "resolve_selection",
    # Results
    "CheckResult",
    "RuleResult",
    "Violation",
    # Config
    "CheckerConfig",
    "load_config",
    # Errors
    "CheckError",
    "InvalidSelection",
    "InvalidSelectionKind",
    "InvalidReference",
    "PredicateArityMismatch",
    "RuleEvaluationError",
]
