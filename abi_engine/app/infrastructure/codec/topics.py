from __future__ import annotations

from typing import Any

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.canonical import canonical_name
from abi_engine.app.domain.errors import ShapeError
from abi_engine.app.domain.ports.out import Keccak256Hasher
from abi_engine.app.infrastructure.codec.encoder import encode_scalar, pad_right


class HashedTopic(bytes):
    """
    32-byte topic of an indexed reference-type parameter.

    The log only carries keccak256 of the value, so decoding stops here.
    """

    def __repr__(self) -> str:
        return f"HashedTopic(0x{self.hex()})"


def is_hashed_topic(t: AbiType) -> bool:
    """Indexed bytes, string, arrays and tuples are stored as a hash."""
    return t.kind in (AbiKind.BYTES, AbiKind.STRING, AbiKind.ARRAY, AbiKind.TUPLE)


def encode_topic(t: AbiType, value: Any, *, hasher: Keccak256Hasher) -> bytes:
    if is_hashed_topic(t):
        return HashedTopic(hasher(_in_place(t, value, top_level=True)))
    return encode_scalar(t, value)


def _in_place(t: AbiType, value: Any, *, top_level: bool) -> bytes:
    # No length words and no offsets; nested bytes/string are padded to a word.
    kind = t.kind
    if kind in (AbiKind.BYTES, AbiKind.STRING):
        if kind is AbiKind.STRING:
            if not isinstance(value, str):
                raise ShapeError(f"Expected str for string, got {type(value).__name__}")
            raw = value.encode("utf-8")
        else:
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise ShapeError(f"Expected bytes for bytes, got {type(value).__name__}")
            raw = bytes(value)
        return raw if top_level else pad_right(raw)

    if kind is AbiKind.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise ShapeError(f"Expected a list or tuple for {canonical_name(t)}")
        if t.length is not None and len(value) != t.length:
            raise ShapeError(
                f"Expected {t.length} elements for {canonical_name(t)}, got {len(value)}"
            )
        return b"".join(_in_place(t.element_type, v, top_level=False) for v in value)

    if kind is AbiKind.TUPLE:
        if not isinstance(value, (list, tuple)) or len(value) != len(t.members):
            raise ShapeError(f"Expected {len(t.members)} members for {canonical_name(t)}")
        return b"".join(
            _in_place(m, v, top_level=False) for m, v in zip(t.members, value)
        )

    return encode_scalar(t, value)
