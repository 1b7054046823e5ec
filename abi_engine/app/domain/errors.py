from __future__ import annotations


class AbiError(Exception):
    """Base class for every failure raised by the ABI codec."""


class AbiTypeError(AbiError, ValueError):
    """Malformed type string, invalid width, or a type used where it is not allowed."""


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


class AbiEncodingError(AbiError, ValueError):
    pass


class ArityError(AbiEncodingError):
    """Number of values (or topics) does not match the number of types."""


class AbiOverflowError(AbiEncodingError, OverflowError):
    """Numeric value outside the declared bit-width or sign domain."""


class ShapeError(AbiEncodingError):
    """Value is structurally incompatible with its declared type."""


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


class AbiDecodingError(AbiError, ValueError):
    pass


class BufferTooShortError(AbiDecodingError):
    pass


class OffsetOutOfRangeError(AbiDecodingError):
    pass


# -----------------------------------------------------------------------------
# Selectors
# -----------------------------------------------------------------------------


class SignatureMismatchError(AbiError, ValueError):
    """topics[0] (or a call's method id) does not belong to the selector."""
