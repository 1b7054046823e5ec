from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence, overload

from abi_engine.app.domain.abi_types import AbiType
from abi_engine.app.domain.canonical import signature
from abi_engine.app.domain.errors import SignatureMismatchError
from abi_engine.app.domain.once import OnceCell
from abi_engine.app.domain.ports.out import Keccak256Hasher
from abi_engine.app.domain.type_parser import parse_signature
from abi_engine.app.infrastructure.codec import decoder, encoder
from abi_engine.app.infrastructure.codec.decoder import Captures
from abi_engine.app.infrastructure.factories.keccak_factory import default_hasher

METHOD_ID_SIZE = 4


@dataclass(frozen=True)
class FunctionSelector:
    """
    A function entry: name, input types and an optional return type.

    name=None is the fallback function (no inputs, no method id).
    """

    name: str | None
    types: tuple[AbiType, ...] = ()
    returns: AbiType | None = None
    hasher: Keccak256Hasher | None = field(default=None, compare=False, repr=False)
    _signature: OnceCell[str] = field(
        init=False, default_factory=OnceCell, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))

    @classmethod
    def parse(cls, text: str, *, hasher: Keccak256Hasher | None = None) -> FunctionSelector:
        name, types = parse_signature(text)
        return cls(name=name, types=tuple(types), hasher=hasher)

    def _hash(self, data: bytes) -> bytes:
        return (self.hasher or default_hasher())(data)

    def signature(self) -> str:
        return self._signature.get_or_init(lambda: signature(self.name, self.types))

    def method_id(self) -> bytes:
        if self.name is None:
            return b""
        return self._hash(self.signature().encode("ascii"))[:METHOD_ID_SIZE]

    def encode(self, values: Sequence[Any]) -> bytes:
        return encoder.encode(self.types, values)

    def encode_call(self, values: Sequence[Any]) -> bytes:
        return self.method_id() + self.encode(values)

    @overload
    def decode(self, data: bytes, *, capture_names: Literal[False] = ...) -> list[Any]: ...

    @overload
    def decode(self, data: bytes, *, capture_names: Literal[True]) -> tuple[list[Any], Captures]: ...

    def decode(self, data: bytes, *, capture_names: bool = False) -> Any:
        return decoder.decode(data, self.types, capture_names=capture_names)

    def decode_call(self, calldata: bytes) -> list[Any]:
        method_id = self.method_id()
        if bytes(calldata[: len(method_id)]) != method_id:
            raise SignatureMismatchError(
                f"Calldata method id 0x{bytes(calldata[:METHOD_ID_SIZE]).hex()} "
                f"does not match {self.signature()} (0x{method_id.hex()})"
            )
        return self.decode(bytes(calldata[len(method_id) :]))

    def decode_output(self, data: bytes) -> Any | None:
        if self.returns is None:
            return None
        return decoder.decode(data, [self.returns])[0]
