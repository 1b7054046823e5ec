from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from eth_utils import decode_hex, to_checksum_address

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.canonical import canonical_name
from abi_engine.app.domain.errors import ShapeError
from abi_engine.app.infrastructure.codec.topics import HashedTopic


def from_json(t: AbiType, value: Any) -> Any:
    """
    Turn a JSON-decoded value into the Python value the encoder expects.

    JSON has no bytes or decimals: 0x-strings become bytes for bytes/bytesM,
    numeric strings become ints / Decimals.
    """
    kind = t.kind

    if kind is AbiKind.ARRAY:
        if not isinstance(value, list):
            raise ShapeError(f"Expected a JSON array for {canonical_name(t)}")
        return [from_json(t.element_type, v) for v in value]

    if kind is AbiKind.TUPLE:
        if not isinstance(value, list):
            raise ShapeError(f"Expected a JSON array for {canonical_name(t)}")
        if len(value) != len(t.members):
            raise ShapeError(
                f"Expected {len(t.members)} members for {canonical_name(t)}, got {len(value)}"
            )
        return tuple(from_json(m, v) for m, v in zip(t.members, value))

    if kind in (AbiKind.BYTES, AbiKind.FIXED_BYTES):
        if not isinstance(value, str):
            raise ShapeError(f"Expected a 0x-hex string for {canonical_name(t)}")
        return decode_hex(value)

    if kind in (AbiKind.UINT, AbiKind.INT) and isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            raise ShapeError(f"Not an integer: {value!r}")

    if kind in (AbiKind.FIXED, AbiKind.UFIXED) and isinstance(value, (str, int, float)):
        try:
            # str(float) keeps the shortest repr instead of the binary expansion
            return Decimal(str(value))
        except InvalidOperation:
            raise ShapeError(f"Not a decimal: {value!r}")

    return value


def to_json(t: AbiType, value: Any) -> Any:
    if isinstance(value, HashedTopic):
        return "0x" + value.hex()

    kind = t.kind

    if kind is AbiKind.ARRAY:
        return [to_json(t.element_type, v) for v in value]

    if kind is AbiKind.TUPLE:
        return [to_json(m, v) for m, v in zip(t.members, value)]

    if kind is AbiKind.ADDRESS:
        return to_checksum_address(value)

    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()

    if isinstance(value, Decimal):
        return str(value)

    return value
