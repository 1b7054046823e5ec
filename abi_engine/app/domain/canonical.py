from __future__ import annotations

from typing import Sequence

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.errors import AbiTypeError

_ELEMENTARY_NAMES = {
    AbiKind.BOOL: "bool",
    AbiKind.ADDRESS: "address",
    AbiKind.BYTES: "bytes",
    AbiKind.STRING: "string",
}


def canonical_name(t: AbiType) -> str:
    """
    Normalized elementary name of a type, e.g. "uint256", "bytes32",
    "(uint256,address)[]". Annotations are ignored.
    """
    kind = t.kind
    if kind in _ELEMENTARY_NAMES:
        return _ELEMENTARY_NAMES[kind]
    if kind in (AbiKind.UINT, AbiKind.INT):
        return f"{kind.value}{t.bits}"
    if kind is AbiKind.FIXED_BYTES:
        return f"bytes{t.size}"
    if kind in (AbiKind.FIXED, AbiKind.UFIXED):
        return f"{kind.value}{t.bits}x{t.precision}"
    if kind is AbiKind.ARRAY:
        suffix = "" if t.length is None else str(t.length)
        return f"{canonical_name(t.element_type)}[{suffix}]"
    if kind is AbiKind.TUPLE:
        return "(" + ",".join(canonical_name(m) for m in t.members) + ")"
    raise AbiTypeError(f"Unhandled ABI kind: {kind!r}")


def signature(name: str | None, types: Sequence[AbiType]) -> str:
    """Canonical `name(type1,type2,...)` string; an anonymous entry renders as `(...)`."""
    return (name or "") + "(" + ",".join(canonical_name(t) for t in types) + ")"
