"""Human and JSON renderings of a checker result."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape

from .result import CheckResult, Path


def _format_path(path: Path) -> str:
    return " -> ".join(repr(p) for p in path) or "(root)"


def result_to_dict(result: CheckResult) -> dict[str, Any]:
    """JSON-ready view of a result; use json.dumps(..., default=str) for arbitrary elements."""
    return {
        "succeeded": result.succeeded,
        "errors": {name: [list(p) for p in paths] for name, paths in result.errors.items()},
        "faults": dict(result.faults),
        "summary": {
            "failing_rules": len(result.errors),
            "violations": result.violation_count,
            "faults": len(result.faults),
        },
    }


def render_result(
    result: CheckResult,
    console: Console | None = None,
    *,
    rules: list[str] | None = None,
) -> None:
    """
    Print a per-rule status listing.

    Args:
        result: Outcome of Checker.run
        console: Target console (stdout by default)
        rules: Names of every rule that ran, so passing rules are listed too
    """
    console = console or Console()

    names = list(rules or [])
    for name in [*result.errors, *result.faults]:
        if name not in names:
            names.append(name)

    for name in names:
        if name in result.faults:
            console.print(f"! {escape(name)}", style="bold magenta")
            console.print(f"    FAULT: {escape(result.faults[name])}", style="magenta")
        elif name in result.errors:
            paths = result.errors[name]
            console.print(f"✗ {escape(name)}", style="bold red")
            console.print(f"  {len(paths)} violation(s)", style="dim")
            for path in paths:
                console.print(f"    {escape(_format_path(path))}", style="red")
        else:
            console.print(f"✓ {escape(name)}", style="bold green")

    console.print()
    if result.succeeded:
        console.print("✓ All rules passing", style="bold green")
    else:
        console.print(
            f"✗ {result.violation_count} violation(s) in {len(result.errors)} rule(s), "
            f"{len(result.faults)} fault(s)",
            style="bold red",
        )
