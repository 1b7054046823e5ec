from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Sequence, cast

from eth_utils import is_hex_address, to_canonical_address

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.canonical import canonical_name
from abi_engine.app.domain.classifier import WORD_SIZE, head_size, is_dynamic
from abi_engine.app.domain.errors import AbiOverflowError, ArityError, ShapeError

logger = logging.getLogger(__name__)

_ADDRESS_BITS = 160


def encode(types: Sequence[AbiType], values: Sequence[Any]) -> bytes:
    """
    Head/tail encode `values` against `types`.

    The result is word-aligned. Any failure raises before anything is
    returned; there is no partial output.
    """
    if len(values) != len(types):
        raise ArityError(f"Expected {len(types)} values, got {len(values)}")
    out = _encode_sequence(types, values)
    logger.debug("Encoded ABI payload: params=%s, bytes=%s", len(types), len(out))
    return out


# -----------------------------------------------------------------------------
# Aggregates
# -----------------------------------------------------------------------------


def _encode_sequence(types: Sequence[AbiType], values: Sequence[Any]) -> bytes:
    # Offsets are relative to the start of this level, tail starts after the head.
    tail_offset = sum(head_size(t) for t in types)
    heads: list[bytes] = []
    tails: list[bytes] = []
    for t, v in zip(types, values):
        if is_dynamic(t):
            encoded = encode_value(t, v)
            heads.append(uint_word(tail_offset))
            tails.append(encoded)
            tail_offset += len(encoded)
        else:
            heads.append(encode_value(t, v))
    return b"".join(heads) + b"".join(tails)


def _as_sequence(t: AbiType, value: Any) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)):
        raise ShapeError(
            f"Expected a list or tuple for {canonical_name(t)}, got {type(value).__name__}"
        )
    return value


def encode_value(t: AbiType, value: Any) -> bytes:
    """Standalone encoding of a single value; aggregates recurse through `_encode_sequence`."""
    kind = t.kind

    if kind is AbiKind.ARRAY:
        items = _as_sequence(t, value)
        if t.length is not None and len(items) != t.length:
            raise ShapeError(
                f"Expected {t.length} elements for {canonical_name(t)}, got {len(items)}"
            )
        body = _encode_sequence([t.element_type] * len(items), items)
        if t.length is None:
            return uint_word(len(items)) + body
        return body

    if kind is AbiKind.TUPLE:
        items = _as_sequence(t, value)
        if len(items) != len(t.members):
            raise ShapeError(
                f"Expected {len(t.members)} members for {canonical_name(t)}, got {len(items)}"
            )
        return _encode_sequence(t.members, items)

    if kind is AbiKind.BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise ShapeError(f"Expected bytes for bytes, got {type(value).__name__}")
        raw = bytes(value)
        return uint_word(len(raw)) + pad_right(raw)

    if kind is AbiKind.STRING:
        if not isinstance(value, str):
            raise ShapeError(f"Expected str for string, got {type(value).__name__}")
        raw = value.encode("utf-8")
        return uint_word(len(raw)) + pad_right(raw)

    return encode_scalar(t, value)


# -----------------------------------------------------------------------------
# Scalars
# -----------------------------------------------------------------------------


def encode_scalar(t: AbiType, value: Any) -> bytes:
    kind = t.kind

    if kind is AbiKind.UINT:
        return _encode_unsigned(t, _as_int(t, value), t.width)

    if kind is AbiKind.INT:
        return _encode_signed(t, _as_int(t, value), t.width)

    if kind is AbiKind.BOOL:
        if not isinstance(value, bool):
            raise ShapeError(f"Expected bool for bool, got {type(value).__name__}")
        return uint_word(1 if value else 0)

    if kind is AbiKind.ADDRESS:
        return _encode_address(t, value)

    if kind is AbiKind.FIXED_BYTES:
        if not isinstance(value, (bytes, bytearray)):
            raise ShapeError(f"Expected bytes for {canonical_name(t)}, got {type(value).__name__}")
        if len(value) > t.byte_size:
            raise AbiOverflowError(
                f"Data overflow encoding {canonical_name(t)}, "
                f"{len(value)} bytes cannot fit in {t.byte_size} bytes"
            )
        return bytes(value).ljust(WORD_SIZE, b"\x00")

    if kind in (AbiKind.FIXED, AbiKind.UFIXED):
        scaled = _scale_fixed(t, value)
        if kind is AbiKind.UFIXED:
            return _encode_unsigned(t, scaled, t.width, shown=value)
        return _encode_signed(t, scaled, t.width, shown=value)

    raise ShapeError(f"Cannot encode {canonical_name(t)} as a scalar")


def _as_int(t: AbiType, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ShapeError(f"Expected int for {canonical_name(t)}, got {type(value).__name__}")
    return value


def _encode_unsigned(t: AbiType, value: int, bits: int, shown: Any = None) -> bytes:
    if value < 0 or value >= 1 << bits:
        raise AbiOverflowError(
            f"Data overflow encoding {canonical_name(t)}, "
            f"data `{value if shown is None else shown}` cannot fit in {bits} bits"
        )
    return uint_word(value)


def _encode_signed(t: AbiType, value: int, bits: int, shown: Any = None) -> bytes:
    bound = 1 << (bits - 1)
    if value < -bound or value >= bound:
        raise AbiOverflowError(
            f"Data overflow encoding {canonical_name(t)}, "
            f"data `{value if shown is None else shown}` cannot fit in {bits} bits"
        )
    return value.to_bytes(WORD_SIZE, "big", signed=True)


def _encode_address(t: AbiType, value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ShapeError(f"Expected 20 bytes for address, got {len(value)}")
        return bytes(value).rjust(WORD_SIZE, b"\x00")
    if isinstance(value, str):
        if not is_hex_address(value):
            raise ShapeError(f"Not a hex address: {value!r}")
        return to_canonical_address(value).rjust(WORD_SIZE, b"\x00")
    return _encode_unsigned(t, _as_int(t, value), _ADDRESS_BITS)


def _scale_fixed(t: AbiType, value: Any) -> int:
    """value * 10**precision as an exact integer."""
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise ShapeError(
            f"Expected Decimal or int for {canonical_name(t)}, got {type(value).__name__}"
        )
    if isinstance(value, int):
        return value * 10**t.decimals
    if not value.is_finite():
        raise ShapeError(f"Non-finite value {value} for {canonical_name(t)}")

    sign, digits, exponent = value.as_tuple()
    exponent = cast(int, exponent)
    magnitude = int("".join(map(str, digits)) or "0")
    shift = exponent + t.decimals
    if shift >= 0:
        magnitude *= 10**shift
    else:
        magnitude, remainder = divmod(magnitude, 10**-shift)
        if remainder:
            raise AbiOverflowError(
                f"Data overflow encoding {canonical_name(t)}, "
                f"data `{value}` has more than {t.decimals} decimals"
            )
    return -magnitude if sign else magnitude


# -----------------------------------------------------------------------------
# Word helpers
# -----------------------------------------------------------------------------


def uint_word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big", signed=False)


def pad_right(raw: bytes) -> bytes:
    remainder = len(raw) % WORD_SIZE
    if remainder == 0:
        return raw
    return raw + b"\x00" * (WORD_SIZE - remainder)
