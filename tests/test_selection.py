from __future__ import annotations

import pytest

from propcheck import (
    ContextualReference,
    InvalidReference,
    InvalidSelection,
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


def test_constructors_set_kind() -> None:
    assert Selection.all([1]).kind is SelectionKind.ALL
    assert Selection.any([1]).kind is SelectionKind.ANY
    assert Selection.raw([1]).kind is SelectionKind.RAW
    assert for_all([1]) == Selection.all([1])
    assert exists([1]) == Selection.any([1])
    assert raw([1]) == Selection.raw([1])


def test_resolved_flag_depends_on_content() -> None:
    assert Selection.all([1, 2]).resolved
    assert Selection.all(42).resolved
    assert not Selection.all(lambda x: x).resolved
    assert not Selection.all(Reference("elements")).resolved
    assert not Selection.all(ContextualReference(lambda ctx: ctx[0])).resolved


def test_resolving_resolved_selection_is_identity() -> None:
    s = Selection.all([1, 2, 3])
    assert resolve_selection(s, [9], {"x": 1}) is s


def test_function_content_receives_input() -> None:
    s = Selection.all(lambda xs: [x * 2 for x in xs])
    resolved = resolve_selection(s, [1, 2], {})
    assert resolved.resolved
    assert resolved.kind is SelectionKind.ALL
    assert resolved.content == [2, 4]
    # Resolution never mutates the original selection
    assert not s.resolved


def test_reference_looks_up_helper_values() -> None:
    s = Selection.any(Reference("evens"))
    resolved = resolve_selection(s, None, {"evens": [2, 4]})
    assert resolved.content == [2, 4]
    assert resolved.kind is SelectionKind.ANY


def test_unknown_reference_fails_by_default() -> None:
    s = Selection.all(Reference("missing"))
    with pytest.raises(InvalidReference) as exc:
        resolve_selection(s, None, {"present": 1})
    assert exc.value.name == "missing"
    assert "present" in str(exc.value)


def test_unknown_reference_can_resolve_to_none() -> None:
    s = Selection.all(Reference("missing"))
    resolved = resolve_selection(s, None, {}, missing_reference="empty")
    assert resolved.resolved
    assert resolved.content is None


def test_contextual_reference_receives_context() -> None:
    s = Selection.all(ContextualReference(lambda ctx: ctx[0] + ctx[1]))
    resolved = resolve_selection(s, "ignored", {}, (["a"], ["b"]))
    assert resolved.content == ["a", "b"]


def test_plain_content_marked_unresolved_is_invalid() -> None:
    s = Selection(SelectionKind.ALL, [1, 2], resolved=False)
    with pytest.raises(InvalidSelection):
        resolve_selection(s, None, {})


def test_iterators_are_materialized() -> None:
    s = Selection.all(iter([1, 2, 3]))
    assert s.content == [1, 2, 3]

    resolved = resolve_selection(Selection.all(lambda xs: (x for x in xs)), [4, 5], {})
    assert resolved.content == [4, 5]


def test_transformation_helpers() -> None:
    transformation = {"in": [1, 2], "out": [3]}
    assert on_input(len)(transformation) == 2
    assert on_output(len)(transformation) == 1
