from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict

from abi_engine.app.config import settings
from abi_engine.app.domain.ports.out import Keccak256Hasher
from abi_engine.app.infrastructure.hashing.keccak import EthUtilsKeccak, PycryptodomeKeccak

KeccakHasherFactory = Callable[[], Keccak256Hasher]

_KECCAK_HASHER_REGISTRY: Dict[str, KeccakHasherFactory] = {
    "eth_utils": EthUtilsKeccak,
    "pycryptodome": PycryptodomeKeccak,
}


def keccak_hasher_factory(backend: str) -> Keccak256Hasher:
    try:
        factory = _KECCAK_HASHER_REGISTRY[backend]
    except KeyError:
        raise ValueError(f"Unsupported Keccak-256 backend: {backend!r}")
    return factory()


@lru_cache(maxsize=1)
def default_hasher() -> Keccak256Hasher:
    """Hasher selected by KECCAK_BACKEND, built once per process."""
    return keccak_hasher_factory(settings.keccak_backend)
