from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from abi_engine.app.domain.errors import AbiTypeError


class AbiKind(str, Enum):
    UINT = "uint"
    INT = "int"
    BOOL = "bool"
    ADDRESS = "address"
    FIXED_BYTES = "bytes_fixed"
    UFIXED = "ufixed"
    FIXED = "fixed"
    BYTES = "bytes"
    STRING = "string"
    ARRAY = "array"
    TUPLE = "tuple"


SCALAR_KINDS = frozenset(
    {
        AbiKind.UINT,
        AbiKind.INT,
        AbiKind.BOOL,
        AbiKind.ADDRESS,
        AbiKind.FIXED_BYTES,
        AbiKind.UFIXED,
        AbiKind.FIXED,
    }
)


@dataclass(frozen=True)
class Annotation:
    """
    Side-channel metadata attached to a type node.

    Never part of the wire shape:
      - name          parameter / tuple member name (a "binding")
      - indexed       event topic membership
      - internal_type Solidity-level type from JSON ABI ("struct Pool.Key", ...)
    """

    name: str | None = None
    indexed: bool = False
    internal_type: str | None = None


@dataclass(frozen=True)
class AbiType:
    """
    One node of the recursive ABI type tree.

    Which fields are meaningful depends on `kind`:
      - UINT / INT          bits
      - FIXED_BYTES         size (1..32)
      - FIXED / UFIXED      bits, precision
      - ARRAY               element, length (None = dynamic-length)
      - TUPLE               members
    """

    kind: AbiKind
    bits: int | None = None
    size: int | None = None
    precision: int | None = None
    element: AbiType | None = None
    length: int | None = None
    members: tuple[AbiType, ...] = ()
    annotation: Annotation | None = None

    @property
    def name(self) -> str | None:
        return self.annotation.name if self.annotation else None

    @property
    def indexed(self) -> bool:
        return bool(self.annotation and self.annotation.indexed)

    # Non-optional views of the kind-specific fields.

    @property
    def element_type(self) -> AbiType:
        if self.element is None:
            raise AbiTypeError(f"{self.kind.value} type has no element type")
        return self.element

    @property
    def width(self) -> int:
        if self.bits is None:
            raise AbiTypeError(f"{self.kind.value} type has no bit width")
        return self.bits

    @property
    def byte_size(self) -> int:
        if self.size is None:
            raise AbiTypeError(f"{self.kind.value} type has no byte size")
        return self.size

    @property
    def decimals(self) -> int:
        if self.precision is None:
            raise AbiTypeError(f"{self.kind.value} type has no precision")
        return self.precision

    def annotate(
        self,
        *,
        name: str | None = None,
        indexed: bool = False,
        internal_type: str | None = None,
    ) -> AbiType:
        if name is None and not indexed and internal_type is None:
            return replace(self, annotation=None)
        return replace(
            self,
            annotation=Annotation(name=name, indexed=indexed, internal_type=internal_type),
        )

    def effective(self) -> AbiType:
        """Annotation-stripped copy of the whole tree."""
        if self.kind is AbiKind.ARRAY:
            return replace(self, element=self.element_type.effective(), annotation=None)
        if self.kind is AbiKind.TUPLE:
            return replace(
                self,
                members=tuple(m.effective() for m in self.members),
                annotation=None,
            )
        if self.annotation is None:
            return self
        return replace(self, annotation=None)


# -----------------------------------------------------------------------------
# Constructors
# -----------------------------------------------------------------------------


def _check_int_bits(bits: int) -> int:
    if bits < 8 or bits > 256 or bits % 8 != 0:
        raise AbiTypeError(f"Invalid integer width: {bits} (must be a multiple of 8 in 8..256)")
    return bits


def uint(bits: int = 256) -> AbiType:
    return AbiType(AbiKind.UINT, bits=_check_int_bits(bits))


def int_(bits: int = 256) -> AbiType:
    return AbiType(AbiKind.INT, bits=_check_int_bits(bits))


def bool_() -> AbiType:
    return AbiType(AbiKind.BOOL)


def address() -> AbiType:
    return AbiType(AbiKind.ADDRESS)


def fixed_bytes(size: int) -> AbiType:
    if size < 1 or size > 32:
        raise AbiTypeError(f"Invalid fixed bytes size: {size} (must be 1..32)")
    return AbiType(AbiKind.FIXED_BYTES, size=size)


def fixed(bits: int = 128, precision: int = 18, *, signed: bool = True) -> AbiType:
    _check_int_bits(bits)
    if precision < 0 or precision > 80:
        raise AbiTypeError(f"Invalid fixed-point precision: {precision} (must be 0..80)")
    kind = AbiKind.FIXED if signed else AbiKind.UFIXED
    return AbiType(kind, bits=bits, precision=precision)


def ufixed(bits: int = 128, precision: int = 18) -> AbiType:
    return fixed(bits, precision, signed=False)


def bytes_() -> AbiType:
    return AbiType(AbiKind.BYTES)


def string() -> AbiType:
    return AbiType(AbiKind.STRING)


def array(element: AbiType, length: int | None = None) -> AbiType:
    if length is not None and length < 0:
        raise AbiTypeError(f"Invalid array length: {length}")
    return AbiType(AbiKind.ARRAY, element=element, length=length)


def tuple_(*members: AbiType) -> AbiType:
    return AbiType(AbiKind.TUPLE, members=tuple(members))
