"""
Property tests over randomly generated type trees.

Aggregate lengths start at 1: a zero-length fixed array of dynamic elements
encodes to zero bytes, and its offset would point at the end of the buffer.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from eth_abi import encode as eth_abi_encode
from hypothesis import given
from hypothesis import strategies as st

from abi_engine.app.domain.abi_types import (
    AbiKind,
    AbiType,
    address,
    array,
    bool_,
    bytes_,
    fixed,
    fixed_bytes,
    int_,
    string,
    tuple_,
    uint,
)
from abi_engine.app.domain.canonical import canonical_name
from abi_engine.app.domain.classifier import WORD_SIZE, head_size, is_dynamic
from abi_engine.app.domain.type_parser import parse_type
from abi_engine.app.infrastructure.codec.decoder import decode
from abi_engine.app.infrastructure.codec.encoder import encode

BITS = st.sampled_from([8, 16, 24, 64, 128, 256])

ELEMENTARY = st.one_of(
    BITS.map(uint),
    BITS.map(int_),
    st.just(bool_()),
    st.just(address()),
    st.integers(min_value=1, max_value=32).map(fixed_bytes),
    st.just(bytes_()),
    st.just(string()),
)

FIXED_POINT = st.builds(
    lambda signed, bits, precision: fixed(bits, precision, signed=signed),
    st.booleans(),
    st.sampled_from([8, 64, 128, 256]),
    st.integers(min_value=0, max_value=18),
)


def _aggregates(children: st.SearchStrategy[AbiType]) -> st.SearchStrategy[AbiType]:
    return st.one_of(
        children.map(array),
        st.builds(array, children, st.integers(min_value=1, max_value=3)),
        st.lists(children, min_size=1, max_size=3).map(lambda ms: tuple_(*ms)),
    )


abi_types = st.recursive(ELEMENTARY, _aggregates, max_leaves=6)
abi_types_with_fixed = st.recursive(st.one_of(ELEMENTARY, FIXED_POINT), _aggregates, max_leaves=6)


def values_for(t: AbiType) -> st.SearchStrategy[Any]:
    """Values in the shape decode() returns them."""
    kind = t.kind
    if kind is AbiKind.UINT:
        return st.integers(min_value=0, max_value=2**t.bits - 1)
    if kind is AbiKind.INT:
        return st.integers(min_value=-(2 ** (t.bits - 1)), max_value=2 ** (t.bits - 1) - 1)
    if kind is AbiKind.BOOL:
        return st.booleans()
    if kind is AbiKind.ADDRESS:
        return st.binary(min_size=20, max_size=20)
    if kind is AbiKind.FIXED_BYTES:
        return st.binary(min_size=t.size, max_size=t.size)
    if kind is AbiKind.BYTES:
        return st.binary(max_size=80)
    if kind is AbiKind.STRING:
        return st.text(max_size=40)
    if kind in (AbiKind.FIXED, AbiKind.UFIXED):
        if kind is AbiKind.UFIXED:
            scaled = st.integers(min_value=0, max_value=2**t.bits - 1)
        else:
            scaled = st.integers(min_value=-(2 ** (t.bits - 1)), max_value=2 ** (t.bits - 1) - 1)
        return scaled.map(lambda n: Decimal(f"{n}E-{t.precision}"))
    if kind is AbiKind.ARRAY:
        if t.length is None:
            return st.lists(values_for(t.element), max_size=3)
        return st.lists(values_for(t.element), min_size=t.length, max_size=t.length)
    return st.tuples(*(values_for(m) for m in t.members))


@st.composite
def typed_values(draw, types=abi_types_with_fixed):
    ts = draw(st.lists(types, max_size=4))
    vs = [draw(values_for(t)) for t in ts]
    return ts, vs


@given(typed_values())
def test_round_trip(case):
    types, values = case
    assert decode(encode(types, values), types) == values


@given(typed_values())
def test_output_is_word_aligned(case):
    types, values = case
    assert len(encode(types, values)) % WORD_SIZE == 0


@given(typed_values())
def test_top_level_offsets_point_into_tail(case):
    types, values = case
    out = encode(types, values)
    head_len = sum(head_size(t) for t in types)
    pos = 0
    for t in types:
        if is_dynamic(t):
            offset = int.from_bytes(out[pos : pos + WORD_SIZE], "big")
            assert head_len <= offset < len(out)
        pos += head_size(t)


@given(abi_types_with_fixed)
def test_canonical_name_parses_back(t):
    assert parse_type(canonical_name(t)) == t


@given(typed_values(abi_types))
def test_agrees_with_eth_abi(case):
    types, values = case
    assert encode(types, values) == eth_abi_encode([canonical_name(t) for t in types], values)
