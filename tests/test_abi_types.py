from __future__ import annotations

import pytest

from abi_engine.app.domain.abi_types import (
    AbiKind,
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
    ufixed,
)
from abi_engine.app.domain.canonical import canonical_name, signature
from abi_engine.app.domain.classifier import head_size, is_dynamic, static_word_count
from abi_engine.app.domain.errors import AbiTypeError


@pytest.mark.parametrize(
    "t, expected",
    [
        (uint(), "uint256"),
        (uint(8), "uint8"),
        (int_(24), "int24"),
        (bool_(), "bool"),
        (address(), "address"),
        (fixed_bytes(32), "bytes32"),
        (bytes_(), "bytes"),
        (string(), "string"),
        (fixed(), "fixed128x18"),
        (ufixed(64, 10), "ufixed64x10"),
        (array(uint()), "uint256[]"),
        (array(address(), 3), "address[3]"),
        (array(array(string(), 2)), "string[2][]"),
        (tuple_(uint(), address()), "(uint256,address)"),
        (array(tuple_(bool_(), tuple_(bytes_(), int_(8))), 4), "(bool,(bytes,int8))[4]"),
        (tuple_(), "()"),
    ],
)
def test_canonical_name(t, expected):
    assert canonical_name(t) == expected


def test_annotations_do_not_change_canonical_name_or_classification():
    plain = tuple_(uint(), array(string()))
    annotated = tuple_(
        uint().annotate(name="amount"),
        array(string().annotate(name="memo")).annotate(name="memos", indexed=True),
    ).annotate(name="payload")

    assert canonical_name(annotated) == canonical_name(plain)
    assert is_dynamic(annotated) == is_dynamic(plain)
    assert annotated != plain
    assert annotated.effective() == plain


def test_signature_uses_effective_types():
    types = [uint().annotate(name="x"), address().annotate(name="y", indexed=True)]
    assert signature("baz", types) == "baz(uint256,address)"
    assert signature("baz", types) == signature("baz", [uint(), address()])


def test_signature_of_anonymous_and_empty():
    assert signature(None, [array(address())]) == "(address[])"
    assert signature("rollover", []) == "rollover()"


@pytest.mark.parametrize(
    "t, dynamic",
    [
        (uint(), False),
        (fixed_bytes(4), False),
        (bytes_(), True),
        (string(), True),
        (array(uint()), True),
        (array(uint(), 3), False),
        (array(string(), 3), True),
        (array(array(uint()), 2), True),
        (tuple_(uint(), address()), False),
        (tuple_(uint(), bytes_()), True),
        (tuple_(tuple_(bool_(), array(uint(), 0)), array(tuple_(string()), 1)), True),
        (tuple_(), False),
    ],
)
def test_is_dynamic(t, dynamic):
    assert is_dynamic(t) is dynamic


@pytest.mark.parametrize(
    "t, words",
    [
        (uint(), 1),
        (address(), 1),
        (array(uint(), 3), 3),
        (array(array(bool_(), 2), 3), 6),
        (tuple_(uint(), address()), 2),
        (tuple_(uint(), array(tuple_(bool_(), fixed_bytes(1)), 2)), 5),
        (tuple_(), 0),
    ],
)
def test_static_word_count(t, words):
    assert static_word_count(t) == words
    assert head_size(t) == 32 * words


def test_static_word_count_rejects_dynamic_types():
    with pytest.raises(AbiTypeError):
        static_word_count(array(uint()))


def test_head_size_of_dynamic_type_is_one_offset_word():
    assert head_size(tuple_(uint(), uint(), string())) == 32


@pytest.mark.parametrize("bits", [0, 7, 12, 264])
def test_invalid_integer_widths(bits):
    with pytest.raises(AbiTypeError):
        uint(bits)
    with pytest.raises(AbiTypeError):
        int_(bits)


@pytest.mark.parametrize("size", [0, 33])
def test_invalid_fixed_bytes_size(size):
    with pytest.raises(AbiTypeError):
        fixed_bytes(size)


def test_invalid_fixed_point_precision():
    with pytest.raises(AbiTypeError):
        fixed(128, 81)


def test_annotation_accessors():
    t = bool_().annotate(name="loudly", indexed=True, internal_type="bool")
    assert t.kind is AbiKind.BOOL
    assert t.name == "loudly"
    assert t.indexed is True
    assert t.annotation is not None and t.annotation.internal_type == "bool"
    assert t.annotate().annotation is None


def test_missing_kind_fields_raise_type_errors():
    with pytest.raises(AbiTypeError):
        uint().element_type
    with pytest.raises(AbiTypeError):
        bool_().width
    with pytest.raises(AbiTypeError):
        string().byte_size
    with pytest.raises(AbiTypeError):
        uint().decimals
    assert array(uint(8)).element_type == uint(8)
    assert fixed(64, 10).decimals == 10
