from __future__ import annotations

from Crypto.Hash import keccak as crypto_keccak
from eth_utils import keccak

from abi_engine.app.domain.ports.out import Keccak256Hasher


class EthUtilsKeccak(Keccak256Hasher):
    """Keccak-256 through eth_utils (eth-hash with whichever backend is installed)."""

    def __call__(self, data: bytes) -> bytes:
        return keccak(primitive=bytes(data))


class PycryptodomeKeccak(Keccak256Hasher):
    """Keccak-256 straight from pycryptodome, bypassing eth-hash backend discovery."""

    def __call__(self, data: bytes) -> bytes:
        h = crypto_keccak.new(digest_bits=256)
        h.update(bytes(data))
        return h.digest()
