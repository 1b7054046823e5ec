from __future__ import annotations

from typing import Any, Protocol, Sequence


class Keccak256Hasher(Protocol):
    """
    Port for the Keccak-256 primitive.

    Implementations take raw bytes and return the 32-byte digest. The codec
    treats the hash as opaque; selectors only depend on this port so tests
    can inject an instrumented hasher.
    """

    def __call__(self, data: bytes) -> bytes:
        ...


class EvmEventDecoder(Protocol):
    def decode_log(
        self,
        *,
        topics: Sequence[bytes],
        data: bytes,
    ) -> Any | None:
        """
        Decode an EVM log (topics + data).

        Return:
          - the decoded event for logs this decoder knows
          - None if the log is not decodable / not an expected event
        """
        ...
