"""
Shared fixtures.

- Hypothesis profiles ("local" by default, "ci" when CI is set).
- CountingHasher: Keccak-256 port implementation that counts calls.
- ABI documents used across modules (the dog.abi.json example contract,
  a minimal ERC-20 event ABI).
"""

from __future__ import annotations

import json
import os
import threading
import time
from pathlib import Path
from typing import Any

import pytest
from eth_utils import keccak
from hypothesis import settings

settings.register_profile("local", settings(max_examples=60, deadline=None))
settings.register_profile("ci", settings(max_examples=300, deadline=None))
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "local"))


def word(value: int) -> bytes:
    return value.to_bytes(32, "big", signed=value < 0)


class CountingHasher:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self._delay = delay
        self._lock = threading.Lock()

    def __call__(self, data: bytes) -> bytes:
        with self._lock:
            self.calls += 1
        if self._delay:
            time.sleep(self._delay)
        return keccak(data)


@pytest.fixture
def counting_hasher() -> CountingHasher:
    return CountingHasher()


DOG_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [
            {"name": "at", "type": "address"},
            {"name": "loudly", "type": "bool", "indexed": True},
        ],
        "name": "bark",
        "outputs": [],
        "payable": False,
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "rollover",
        "outputs": [{"name": "is_a_good_boy", "type": "bool"}],
        "payable": False,
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

ERC20_EVENTS_ABI: list[dict[str, Any]] = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "from", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "to", "type": "address"},
            {"indexed": False, "internalType": "uint256", "name": "value", "type": "uint256"},
        ],
        "name": "Transfer",
        "type": "event",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "owner", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "spender", "type": "address"},
            {"indexed": False, "internalType": "uint256", "name": "value", "type": "uint256"},
        ],
        "name": "Approval",
        "type": "event",
    },
    {
        "inputs": [{"internalType": "uint8", "name": "_decimals", "type": "uint8"}],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

TRANSFER_TOPIC0 = bytes.fromhex("ddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef")
APPROVAL_TOPIC0 = bytes.fromhex("8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925")


@pytest.fixture
def dog_abi_path(tmp_path: Path) -> Path:
    path = tmp_path / "dog.abi.json"
    path.write_text(json.dumps(DOG_ABI), encoding="utf-8")
    return path


@pytest.fixture
def erc20_artifact_path(tmp_path: Path) -> Path:
    path = tmp_path / "ERC20.json"
    path.write_text(json.dumps({"contractName": "ERC20", "abi": ERC20_EVENTS_ABI}), encoding="utf-8")
    return path
