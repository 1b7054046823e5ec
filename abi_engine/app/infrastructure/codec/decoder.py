from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Literal, Sequence, overload

from abi_engine.app.domain.abi_types import AbiKind, AbiType
from abi_engine.app.domain.bindings import capture_values
from abi_engine.app.domain.canonical import canonical_name
from abi_engine.app.domain.classifier import WORD_SIZE, head_size, is_dynamic
from abi_engine.app.domain.errors import (
    AbiDecodingError,
    BufferTooShortError,
    OffsetOutOfRangeError,
)

logger = logging.getLogger(__name__)

Captures = list[tuple[str, Any]]


@overload
def decode(
    data: bytes, types: Sequence[AbiType], *, capture_names: Literal[False] = ...
) -> list[Any]: ...


@overload
def decode(
    data: bytes, types: Sequence[AbiType], *, capture_names: Literal[True]
) -> tuple[list[Any], Captures]: ...


def decode(
    data: bytes,
    types: Sequence[AbiType],
    *,
    capture_names: bool = False,
) -> list[Any] | tuple[list[Any], Captures]:
    """
    Decode a head/tail buffer into positional values.

    With capture_names=True also returns (name, value) pairs for every named
    node of the type tree, in declaration order.
    """
    buf = bytes(data)
    if len(buf) % WORD_SIZE != 0:
        raise BufferTooShortError(
            f"Buffer length {len(buf)} is not a multiple of {WORD_SIZE}"
        )
    # One word per parameter, more for inline static aggregates; zero-member
    # tuples take no space at all.
    head_len = sum(head_size(t) for t in types)
    if len(buf) < head_len:
        raise BufferTooShortError(
            f"Buffer of {len(buf)} bytes cannot hold a {head_len}-byte head for {len(types)} params"
        )

    values = _decode_sequence(memoryview(buf), 0, types)
    logger.debug("Decoded ABI payload: params=%s, bytes=%s", len(types), len(buf))

    if not capture_names:
        return values

    return values, capture_values(types, values)


# -----------------------------------------------------------------------------
# Aggregates
# -----------------------------------------------------------------------------


def _decode_sequence(buf: memoryview, start: int, types: Sequence[AbiType]) -> list[Any]:
    head_len = sum(head_size(t) for t in types)
    level_len = len(buf) - start
    _require(buf, start, head_len)

    values: list[Any] = []
    pos = start
    for t in types:
        if is_dynamic(t):
            offset = _read_uint(buf, pos)
            if offset < head_len or offset >= level_len:
                raise OffsetOutOfRangeError(
                    f"Offset {offset} for {canonical_name(t)} outside [{head_len}, {level_len})"
                )
            values.append(decode_value(buf, start + offset, t))
        else:
            values.append(decode_value(buf, pos, t))
        pos += head_size(t)
    return values


def decode_value(buf: memoryview, pos: int, t: AbiType) -> Any:
    """Decode one value whose encoding begins at absolute position `pos`."""
    kind = t.kind

    if kind is AbiKind.ARRAY:
        element = t.element_type
        if t.length is not None:
            return _decode_sequence(buf, pos, [element] * t.length)
        count = _read_uint(buf, pos)
        # Guard before materializing the type list: each element needs its
        # head, and zero-word elements are capped by the buffer size.
        element_size = head_size(element)
        if element_size:
            too_long = count * element_size > len(buf) - pos - WORD_SIZE
        else:
            too_long = count > len(buf)
        if too_long:
            raise BufferTooShortError(
                f"Array length {count} for {canonical_name(t)} exceeds the buffer"
            )
        return _decode_sequence(buf, pos + WORD_SIZE, [element] * count)

    if kind is AbiKind.TUPLE:
        return tuple(_decode_sequence(buf, pos, t.members))

    if kind in (AbiKind.BYTES, AbiKind.STRING):
        length = _read_uint(buf, pos)
        _require(buf, pos + WORD_SIZE, length)
        raw = bytes(buf[pos + WORD_SIZE : pos + WORD_SIZE + length])
        if kind is AbiKind.BYTES:
            return raw
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AbiDecodingError(f"Invalid UTF-8 in string: {e}") from e

    _require(buf, pos, WORD_SIZE)
    return decode_scalar(bytes(buf[pos : pos + WORD_SIZE]), t)


# -----------------------------------------------------------------------------
# Scalars
# -----------------------------------------------------------------------------


def decode_scalar(word: bytes, t: AbiType) -> Any:
    kind = t.kind

    if kind is AbiKind.UINT:
        return _unsigned(word, t, t.width)

    if kind is AbiKind.INT:
        return _signed(word, t, t.width)

    if kind is AbiKind.BOOL:
        value = int.from_bytes(word, "big")
        if value not in (0, 1):
            raise AbiDecodingError(f"Non-canonical bool word: 0x{word.hex()}")
        return value == 1

    if kind is AbiKind.ADDRESS:
        return word[-20:]

    if kind is AbiKind.FIXED_BYTES:
        return word[: t.byte_size]

    if kind in (AbiKind.FIXED, AbiKind.UFIXED):
        if kind is AbiKind.UFIXED:
            scaled = _unsigned(word, t, t.width)
        else:
            scaled = _signed(word, t, t.width)
        return Decimal(f"{scaled}E-{t.decimals}")

    raise AbiDecodingError(f"Cannot decode {canonical_name(t)} as a scalar")


def _unsigned(word: bytes, t: AbiType, bits: int) -> int:
    value = int.from_bytes(word, "big", signed=False)
    if value >= 1 << bits:
        raise AbiDecodingError(f"Value 0x{word.hex()} does not fit {canonical_name(t)}")
    return value


def _signed(word: bytes, t: AbiType, bits: int) -> int:
    value = int.from_bytes(word, "big", signed=True)
    bound = 1 << (bits - 1)
    if value < -bound or value >= bound:
        raise AbiDecodingError(f"Value 0x{word.hex()} does not fit {canonical_name(t)}")
    return value


def _read_uint(buf: memoryview, pos: int) -> int:
    _require(buf, pos, WORD_SIZE)
    return int.from_bytes(buf[pos : pos + WORD_SIZE], "big")


def _require(buf: memoryview, pos: int, size: int) -> None:
    if pos + size > len(buf):
        raise BufferTooShortError(
            f"Read of {size} bytes at {pos} overruns buffer of {len(buf)} bytes"
        )
