from __future__ import annotations

from typing import Any, NamedTuple, Sequence

from abi_engine.app.domain.abi_types import AbiKind, AbiType


class Binding(NamedTuple):
    name: str
    depth: int
    type: AbiType


def find_bindings(types: Sequence[AbiType], depth: int = 0) -> list[Binding]:
    """
    Named-binding index of a type list.

    Every node carrying a name yields (name, depth, inner type). Descending
    into an array element or tuple member adds one level of depth; the search
    continues below a binding to pick up nested names.
    """
    out: list[Binding] = []
    for t in types:
        out.extend(_find(t, depth))
    return out


def _find(t: AbiType, depth: int) -> list[Binding]:
    found: list[Binding] = []
    if t.name is not None:
        found.append(Binding(t.name, depth, t.annotate()))
    if t.kind is AbiKind.ARRAY:
        found.extend(_find(t.element_type, depth + 1))
    elif t.kind is AbiKind.TUPLE:
        found.extend(find_bindings(t.members, depth + 1))
    return found


def capture_values(types: Sequence[AbiType], values: Sequence[Any]) -> list[tuple[str, Any]]:
    """
    Pull the value at every binding position out of a decoded value tree.

    Aligned one-to-one with find_bindings(types). A binding below an array
    element captures the list of its values across all elements.
    """
    out: list[tuple[str, Any]] = []
    for t, v in zip(types, values, strict=True):
        out.extend(_capture(t, v))
    return out


def _capture(t: AbiType, value: Any) -> list[tuple[str, Any]]:
    found: list[tuple[str, Any]] = []
    if t.name is not None:
        found.append((t.name, value))
    if t.kind is AbiKind.ARRAY:
        names = [b.name for b in _find(t.element_type, 0)]
        per_element = [_capture(t.element_type, v) for v in value]
        for i, name in enumerate(names):
            found.append((name, [caps[i][1] for caps in per_element]))
    elif t.kind is AbiKind.TUPLE:
        found.extend(capture_values(t.members, value))
    return found
