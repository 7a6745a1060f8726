"""Pytest configuration and fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from propcheck import Checker
from propcheck.conformance import AttributeSpec, ReferenceSpec


@pytest.fixture
def checker() -> Checker:
    """An empty checker."""
    return Checker()


# -----------------------------------------------------------------------------
# A tiny object model for conformance tests
# -----------------------------------------------------------------------------


@dataclass(eq=False, repr=False)
class Clazz:
    name: str
    attributes: dict[str, AttributeSpec] = field(default_factory=dict)
    references: dict[str, ReferenceSpec] = field(default_factory=dict)
    supertype: "Clazz | None" = None

    def all_attributes(self) -> dict[str, AttributeSpec]:
        inherited = self.supertype.all_attributes() if self.supertype else {}
        return {**inherited, **self.attributes}

    def all_references(self) -> dict[str, ReferenceSpec]:
        inherited = self.supertype.all_references() if self.supertype else {}
        return {**inherited, **self.references}

    def conforms(self, other: "Clazz") -> bool:
        return self is other or (self.supertype is not None and self.supertype.conforms(other))

    def __repr__(self) -> str:
        return self.name


class Obj:
    def __init__(self, clazz: Clazz, **values: Any):
        self.clazz = clazz
        self.values = dict(values)
        # reference name -> values attached to its links
        self.associations: dict[str, list[Any]] = {}

    def __repr__(self) -> str:
        return f"{self.clazz.name}({self.values.get('name', '?')})"


@dataclass
class ObjModel:
    name: str
    elements: list[Obj] = field(default_factory=list)


class ObjAdapter:
    def elements(self, model: ObjModel) -> list[Obj]:
        return list(model.elements)

    def attributes(self, element: Obj) -> dict[str, AttributeSpec]:
        return element.clazz.all_attributes()

    def references(self, element: Obj) -> dict[str, ReferenceSpec]:
        return element.clazz.all_references()

    def has_type(self, value: Any, type_: Clazz) -> bool:
        return isinstance(value, Obj) and value.clazz.conforms(type_)

    def properties(self, element: Obj) -> list[str]:
        return list(element.values)

    def get(self, element: Obj, name: str) -> Any:
        return element.values.get(name)

    def associated(self, element: Obj) -> dict[str, list[Any]]:
        return element.associations


def _is_str(x: Any) -> bool:
    return isinstance(x, str)


@pytest.fixture
def fsm_classes() -> dict[str, Clazz]:
    """State machine metamodel: states linked by transitions."""
    state = Clazz("State", attributes={"name": AttributeSpec(_is_str, mandatory=True)})
    start = Clazz("StartState", supertype=state)
    end = Clazz("EndState", supertype=state)
    transition = Clazz("Transition", attributes={"name": AttributeSpec(_is_str)})
    guard = Clazz("Guard", attributes={"condition": AttributeSpec(_is_str)})
    transition.references["next"] = ReferenceSpec(state, min=1, max=1, associated=guard)
    state.references["transition"] = ReferenceSpec(transition)
    return {"State": state, "StartState": start, "EndState": end, "Transition": transition, "Guard": guard}


@pytest.fixture
def adapter() -> ObjAdapter:
    return ObjAdapter()


@pytest.fixture
def make_obj() -> type[Obj]:
    """Factory for model elements: make_obj(clazz, **values)."""
    return Obj


@pytest.fixture
def make_model() -> type[ObjModel]:
    """Factory for models: make_model(name, elements)."""
    return ObjModel
