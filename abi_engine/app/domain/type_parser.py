from __future__ import annotations

import re
from typing import Any, Mapping

from abi_engine.app.domain.abi_types import (
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
from abi_engine.app.domain.errors import AbiTypeError

_ARRAY_SUFFIX_RE = re.compile(r"^(?P<inner>.+)\[(?P<length>\d*)\]$", re.DOTALL)
_INT_RE = re.compile(r"^(?P<kind>u?int)(?P<bits>\d*)$")
_BYTES_RE = re.compile(r"^bytes(?P<size>\d+)$")
_FIXED_RE = re.compile(r"^(?P<kind>u?fixed)(?:(?P<bits>\d+)x(?P<precision>\d+))?$")
_SIGNATURE_RE = re.compile(r"^\s*(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)?\s*\((?P<args>.*)\)\s*$", re.DOTALL)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_DATA_LOCATIONS = frozenset({"memory", "calldata", "storage"})


def split_top_level(text: str) -> list[str]:
    """Split a comma-separated list, ignoring commas nested in parentheses."""
    text = text.strip()
    if not text:
        return []
    out: list[str] = []
    depth = 0
    start = 0
    for idx, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise AbiTypeError(f"Unbalanced parentheses in {text!r}")
        elif ch == "," and depth == 0:
            out.append(text[start:idx].strip())
            start = idx + 1
    if depth != 0:
        raise AbiTypeError(f"Unbalanced parentheses in {text!r}")
    out.append(text[start:].strip())
    if any(not item for item in out):
        raise AbiTypeError(f"Empty entry in type list {text!r}")
    return out


def parse_type(text: str) -> AbiType:
    """
    Parse a type expression: elementary names, `(T1,T2)` tuples (members may
    carry names) and any number of `[]` / `[k]` suffixes.
    """
    t = text.strip()
    if not t:
        raise AbiTypeError("Type cannot be empty")

    m = _ARRAY_SUFFIX_RE.match(t)
    if m:
        length = m.group("length")
        return array(parse_type(m.group("inner")), int(length) if length else None)

    if t.startswith("(") and t.endswith(")"):
        return tuple_(*(parse_param(p) for p in split_top_level(t[1:-1])))

    return _parse_elementary(t)


def _parse_elementary(t: str) -> AbiType:
    if t == "address":
        return address()
    if t == "bool":
        return bool_()
    if t == "string":
        return string()
    if t == "bytes":
        return bytes_()
    if t == "byte":
        return fixed_bytes(1)

    m = _INT_RE.match(t)
    if m:
        bits = int(m.group("bits") or "256")
        return uint(bits) if m.group("kind") == "uint" else int_(bits)

    m = _BYTES_RE.match(t)
    if m:
        return fixed_bytes(int(m.group("size")))

    m = _FIXED_RE.match(t)
    if m:
        bits = int(m.group("bits") or "128")
        precision = int(m.group("precision") or "18")
        return fixed(bits, precision, signed=m.group("kind") == "fixed")

    raise AbiTypeError(f"Unsupported ABI type: {t!r}")


def _split_type_token(text: str) -> tuple[str, str]:
    """Separate the leading type expression from trailing `indexed` / name words."""
    if text.startswith("("):
        depth = 0
        for idx, ch in enumerate(text):
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    end = idx + 1
                    break
        else:
            raise AbiTypeError(f"Unbalanced parentheses in {text!r}")
        while end < len(text) and text[end] == "[":
            close = text.find("]", end)
            if close < 0:
                raise AbiTypeError(f"Unterminated array suffix in {text!r}")
            end = close + 1
        return text[:end], text[end:]

    parts = text.split(None, 1)
    return parts[0], parts[1] if len(parts) > 1 else ""


def parse_param(text: str) -> AbiType:
    """Parse `type [indexed] [name]`, keeping the name and indexed flag as an annotation."""
    text = text.strip()
    type_text, rest = _split_type_token(text)
    t = parse_type(type_text)

    name: str | None = None
    indexed = False
    for word in rest.split():
        if word == "indexed":
            indexed = True
        elif word in _DATA_LOCATIONS:
            continue
        elif name is None and _IDENTIFIER_RE.match(word):
            name = word
        else:
            raise AbiTypeError(f"Unexpected token {word!r} in parameter {text!r}")

    if name is None and not indexed:
        return t
    return t.annotate(name=name, indexed=indexed)


def parse_signature(text: str) -> tuple[str | None, list[AbiType]]:
    """
    Parse `name(p1,p2,...)` or an anonymous `(p1,...)`.

    Returns the name (None when anonymous) and the parameter types.
    """
    m = _SIGNATURE_RE.match(text)
    if not m:
        raise AbiTypeError(f"Signature must look like name(type1,type2,...): {text!r}")
    return m.group("name"), [parse_param(p) for p in split_top_level(m.group("args"))]


def from_abi_param(param: Mapping[str, Any], *, bindings: bool = True) -> AbiType:
    """
    Map one JSON ABI input/output object into the type model.

    `tuple` types (with any array suffix) take their members from
    `components`. With bindings=False every annotation is dropped.
    """
    if not isinstance(param, Mapping) or not isinstance(param.get("type"), str):
        raise AbiTypeError(f"Invalid ABI parameter: {param!r}")

    type_text: str = param["type"].strip()
    if type_text.startswith("tuple"):
        components = param.get("components")
        if not isinstance(components, list):
            raise AbiTypeError(f"Tuple parameter without components: {param!r}")
        t = tuple_(*(from_abi_param(c, bindings=bindings) for c in components))
        for length in re.findall(r"\[(\d*)\]", type_text[len("tuple"):]):
            t = array(t, int(length) if length else None)
    else:
        t = parse_type(type_text)

    if not bindings:
        return t

    name = param.get("name") or None
    internal_type = param.get("internalType") or None
    return t.annotate(
        name=name,
        indexed=param.get("indexed") is True,
        internal_type=internal_type,
    )
