"""
Checker configuration.

Settings can be given in code or loaded from TOML, either from a
`[tool.propcheck]` table of a pyproject.toml or from the top level of a
dedicated file:

    missing_reference = "error"   # or "empty"
    on_fault = "raise"            # or "record"
    check_arity = true
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from .selection import MissingReferencePolicy

FaultPolicy = Literal["raise", "record"]

_MISSING_REFERENCE_POLICIES = ("error", "empty")
_FAULT_POLICIES = ("raise", "record")


@dataclass(frozen=True)
class CheckerConfig:
    """
    Behaviour switches of a checker.

    Attributes:
        missing_reference: "error" raises InvalidReference on unknown helper
            names, "empty" resolves them to None
        on_fault: "raise" aborts the run on the first faulting rule,
            "record" skips it and reports it in CheckResult.faults
        check_arity: Reject rules whose predicate does not take one argument
            per selection
    """

    missing_reference: MissingReferencePolicy = "error"
    on_fault: FaultPolicy = "raise"
    check_arity: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CheckerConfig:
        """Build a config from parsed TOML, rejecting unknown values."""
        unknown = sorted(set(data) - {"missing_reference", "on_fault", "check_arity"})
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        missing_reference = str(data.get("missing_reference", "error")).strip().lower()
        if missing_reference not in _MISSING_REFERENCE_POLICIES:
            raise ValueError(
                f"missing_reference must be one of {', '.join(_MISSING_REFERENCE_POLICIES)} "
                f"(got {missing_reference!r})"
            )

        on_fault = str(data.get("on_fault", "raise")).strip().lower()
        if on_fault not in _FAULT_POLICIES:
            raise ValueError(f"on_fault must be one of {', '.join(_FAULT_POLICIES)} (got {on_fault!r})")

        check_arity = data.get("check_arity", True)
        if not isinstance(check_arity, bool):
            raise ValueError("check_arity must be a boolean")

        return cls(
            missing_reference=missing_reference,  # type: ignore[arg-type]
            on_fault=on_fault,  # type: ignore[arg-type]
            check_arity=check_arity,
        )


DEFAULT_CONFIG = CheckerConfig()


def load_config(path: str | Path) -> CheckerConfig:
    """
    Load checker settings from a TOML file.

    Args:
        path: A pyproject.toml (settings under [tool.propcheck]) or a
            dedicated TOML file (settings at the top level)

    Returns:
        Parsed CheckerConfig; defaults when a pyproject has no propcheck table

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the TOML is malformed or holds invalid settings
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Checker config not found: {path}")

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse config TOML: {e}") from e

    if path.name == "pyproject.toml":
        tool = data.get("tool", {})
        section = tool.get("propcheck", {}) if isinstance(tool, dict) else {}
    else:
        section = data

    if not isinstance(section, dict):
        raise ValueError("propcheck settings must be a table")

    return CheckerConfig.from_dict(section)
