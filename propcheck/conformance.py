"""
Conformance checking of object models.

The engine knows nothing about any modelling framework. A host model plugs
in through a ModelAdapter that enumerates elements and describes, per
element, its declared attributes and references. `conformance_checker`
turns an adapter into a Checker whose rules verify that every element
matches its declaration.

Checkers attached to particular models or metamodels are kept in a
CheckerRegistry owned by the caller, rather than stored on the model
objects themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Protocol, runtime_checkable

from .checker import Checker, compose_checkers
from .config import CheckerConfig
from .result import CheckResult
from .selection import ContextualReference, Reference, Selection


@dataclass(frozen=True)
class AttributeSpec:
    """Declared attribute: a value check and whether a value is required."""

    check: Callable[[Any], bool]
    mandatory: bool = False


@dataclass(frozen=True)
class ReferenceSpec:
    """Declared reference: target type and cardinality bounds (max=None: unbounded)."""

    type: Any
    min: int = 0
    max: int | None = None
    # Type of the values carried by each link of this reference, if any
    associated: Any = None


class Declared(NamedTuple):
    """A declared attribute or reference, bound by conformance rules."""

    name: str
    spec: Any


class Associations(NamedTuple):
    """Values attached to the links of one reference."""

    reference: str
    values: list[Any]


@runtime_checkable
class ModelAdapter(Protocol):
    """What the conformance rules need from a host object model."""

    def elements(self, model: Any) -> Iterable[Any]:
        """Elements of `model` subject to conformance checking."""
        ...

    def attributes(self, element: Any) -> Mapping[str, AttributeSpec]:
        ...

    def references(self, element: Any) -> Mapping[str, ReferenceSpec]:
        ...

    def has_type(self, value: Any, type_: Any) -> bool:
        ...

    def properties(self, element: Any) -> Iterable[str]:
        """Names of the properties actually set on `element`."""
        ...

    def get(self, element: Any, name: str) -> Any:
        ...

    def associated(self, element: Any) -> Mapping[str, Iterable[Any]]:
        """Per reference name, the values attached to the links of `element`."""
        ...


def _targets(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def conformance_checker(adapter: ModelAdapter, *, config: CheckerConfig | None = None) -> Checker:
    """
    Build the checker verifying elements against their declarations.

    Rules:
    - attribute_type: attribute values pass their check (unset allowed when optional)
    - reference_min_cardinality / reference_max_cardinality: reference counts
    - reference_type: every referenced element has the declared type
    - associated_type: values attached to reference links have the declared associated type
    - no_extra_properties: elements only carry declared properties
    """
    checker = Checker(config=config)
    checker.add_helper("elements", lambda model: list(adapter.elements(model)))

    def declared_attributes(ctx: tuple[Any, ...]) -> list[Declared]:
        return [Declared(name, spec) for name, spec in adapter.attributes(ctx[0]).items()]

    def declared_references(ctx: tuple[Any, ...]) -> list[Declared]:
        return [Declared(name, spec) for name, spec in adapter.references(ctx[0]).items()]

    def attribute_conforms(e: Any, a: Declared) -> bool:
        value = adapter.get(e, a.name)
        return bool(a.spec.check(value)) or (value is None and not a.spec.mandatory)

    checker.add_rule(
        "attribute_type",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(declared_attributes)),
        ],
        attribute_conforms,
    )

    checker.add_rule(
        "reference_min_cardinality",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(declared_references)),
        ],
        lambda e, r: len(_targets(adapter.get(e, r.name))) >= r.spec.min,
    )

    checker.add_rule(
        "reference_max_cardinality",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(declared_references)),
        ],
        lambda e, r: r.spec.max is None or len(_targets(adapter.get(e, r.name))) <= r.spec.max,
    )

    checker.add_rule(
        "reference_type",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(declared_references)),
            Selection.all(ContextualReference(lambda ctx: _targets(adapter.get(ctx[0], ctx[1].name)))),
        ],
        lambda e, r, target: adapter.has_type(target, r.spec.type),
    )

    def association_conforms(e: Any, a: Associations, value: Any) -> bool:
        ref = adapter.references(e).get(a.reference)
        return ref is not None and ref.associated is not None and adapter.has_type(value, ref.associated)

    checker.add_rule(
        "associated_type",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(
                lambda ctx: [Associations(name, list(values)) for name, values in adapter.associated(ctx[0]).items()]
            )),
            Selection.all(ContextualReference(lambda ctx: ctx[1].values)),
        ],
        association_conforms,
    )

    def declared_names(ctx: tuple[Any, ...]) -> set[str]:
        return set(adapter.attributes(ctx[0])) | set(adapter.references(ctx[0]))

    checker.add_rule(
        "no_extra_properties",
        [
            Selection.all(Reference("elements")),
            Selection.all(ContextualReference(lambda ctx: list(adapter.properties(ctx[0])))),
            Selection.raw(ContextualReference(declared_names)),
        ],
        lambda e, prop, declared: prop in declared,
    )

    return checker


class CheckerRegistry:
    """
    Caller-owned association from models to their checkers.

    A model has its own checker; a metamodel has an instance checker applied
    to every model conforming to it. Models are tracked by identity, so they
    need not be hashable.
    """

    def __init__(self, adapter: ModelAdapter, conformance: Checker | None = None):
        self.adapter = adapter
        self.conformance = conformance if conformance is not None else conformance_checker(adapter)
        self._checkers: dict[int, tuple[Any, Checker]] = {}
        self._instance_checkers: dict[int, tuple[Any, Checker]] = {}

    @staticmethod
    def _get_or_create(table: dict[int, tuple[Any, Checker]], key: Any) -> Checker:
        entry = table.get(id(key))
        if entry is None:
            entry = (key, Checker())
            table[id(key)] = entry
        return entry[1]

    def checker_for(self, model: Any) -> Checker:
        """Checker holding rules specific to `model` (created on first use)."""
        return self._get_or_create(self._checkers, model)

    def instance_checker_for(self, metamodel: Any) -> Checker:
        """Checker applied to every model of `metamodel` (created on first use)."""
        return self._get_or_create(self._instance_checkers, metamodel)

    def set_checker(self, model: Any, checker: Checker) -> None:
        self._checkers[id(model)] = (model, checker)

    def set_instance_checker(self, metamodel: Any, checker: Checker) -> None:
        self._instance_checkers[id(metamodel)] = (metamodel, checker)

    def check(self, model: Any, metamodel: Any = None) -> CheckResult:
        """Run conformance, then the metamodel's instance rules, then the model's own rules."""
        checkers = [self.conformance]
        if metamodel is not None and id(metamodel) in self._instance_checkers:
            checkers.append(self._instance_checkers[id(metamodel)][1])
        if id(model) in self._checkers:
            checkers.append(self._checkers[id(model)][1])
        return compose_checkers(*checkers).run(model)
