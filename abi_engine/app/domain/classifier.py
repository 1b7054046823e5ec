from __future__ import annotations

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.errors import AbiTypeError

WORD_SIZE = 32


def is_dynamic(t: AbiType) -> bool:
    """
    True when the wire size of `t` depends on the value.

    Dynamic: bytes, string, T[], and any T[k] / tuple that contains a dynamic
    type. Annotations play no part.
    """
    if t.kind in (AbiKind.BYTES, AbiKind.STRING):
        return True
    if t.kind is AbiKind.ARRAY:
        return t.length is None or is_dynamic(t.element_type)
    if t.kind is AbiKind.TUPLE:
        return any(is_dynamic(m) for m in t.members)
    return False


def static_word_count(t: AbiType) -> int:
    """Number of 32-byte words a static type occupies inline."""
    if is_dynamic(t):
        raise AbiTypeError(f"static_word_count called on dynamic type {t.kind.value}")
    if t.kind is AbiKind.ARRAY:
        # fixed length here: a T[] is always dynamic
        return (t.length or 0) * static_word_count(t.element_type)
    if t.kind is AbiKind.TUPLE:
        return sum(static_word_count(m) for m in t.members)
    return 1


def head_size(t: AbiType) -> int:
    """Bytes `t` takes in the head of its enclosing level: one offset word if dynamic."""
    if is_dynamic(t):
        return WORD_SIZE
    return WORD_SIZE * static_word_count(t)
