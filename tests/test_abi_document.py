from __future__ import annotations

import json

import pytest

from abi_engine.app.domain.abi_types import address, bool_, uint
from abi_engine.app.domain.errors import AbiTypeError
from abi_engine.app.infrastructure.abi_document.loader import (
    find_event,
    load_abi,
    parse_events,
    parse_specification,
)

from conftest import DOG_ABI, ERC20_EVENTS_ABI, TRANSFER_TOPIC0, word


def test_load_abi_list(dog_abi_path):
    assert load_abi(dog_abi_path) == DOG_ABI


def test_load_abi_artifact(erc20_artifact_path):
    assert load_abi(erc20_artifact_path) == ERC20_EVENTS_ABI


def test_load_abi_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_abi(tmp_path / "nope.json")


def test_load_abi_unsupported_format(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"contractName": "X"}), encoding="utf-8")
    with pytest.raises(AbiTypeError):
        load_abi(path)


def test_parse_specification_dog():
    bark, rollover = parse_specification(DOG_ABI)

    assert bark.name == "bark"
    assert bark.types == (address(), bool_())
    assert bark.returns is None
    assert bark.method_id().hex() == "b85d0bd2"
    assert bark.encode_call([1, True]).hex() == "b85d0bd2" + (word(1) + word(1)).hex()

    assert rollover.name == "rollover"
    assert rollover.types == ()
    assert rollover.returns == bool_()
    assert rollover.decode_output(word(1)) is True


def test_parse_specification_keeps_bindings_on_request():
    bark, _ = parse_specification(DOG_ABI, bindings=True)
    assert [t.name for t in bark.types] == ["at", "loudly"]
    values, captures = bark.decode(word(1) + word(0), capture_names=True)
    assert captures == [("at", values[0]), ("loudly", False)]


def test_parse_specification_skips_non_functions_and_maps_fallback():
    doc = ERC20_EVENTS_ABI + [{"type": "fallback", "stateMutability": "payable"}]
    balance_of, fallback = parse_specification(doc)

    assert balance_of.signature() == "balanceOf(address)"
    assert balance_of.returns == uint()
    assert fallback.name is None
    assert fallback.method_id() == b""


def test_parse_specification_rejects_unnamed_function():
    with pytest.raises(AbiTypeError):
        parse_specification([{"type": "function", "inputs": []}])


def test_parse_events():
    transfer, approval = parse_events(ERC20_EVENTS_ABI)
    assert transfer.canonical_signature() == "Transfer(address,address,uint256)"
    assert transfer.signature() == TRANSFER_TOPIC0
    assert [p.name for p in transfer.topic_params] == ["from", "to"]
    assert approval.name == "Approval"


def test_parse_events_skips_anonymous():
    doc = [dict(ERC20_EVENTS_ABI[0], anonymous=True), ERC20_EVENTS_ABI[1]]
    assert [e.name for e in parse_events(doc)] == ["Approval"]


def test_find_event():
    assert find_event(ERC20_EVENTS_ABI, "Transfer").signature() == TRANSFER_TOPIC0


def test_find_event_missing_lists_available():
    with pytest.raises(AbiTypeError, match="Approval"):
        find_event(ERC20_EVENTS_ABI, "Swap")


def test_find_event_ambiguous():
    with pytest.raises(AbiTypeError, match="Multiple events"):
        find_event(ERC20_EVENTS_ABI + [ERC20_EVENTS_ABI[0]], "Transfer")
