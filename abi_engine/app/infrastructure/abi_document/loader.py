from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

from abi_engine.app.application.services.event_selector import EventSelector
from abi_engine.app.application.services.function_selector import FunctionSelector
from abi_engine.app.domain.errors import AbiTypeError
from abi_engine.app.domain.ports.out import Keccak256Hasher
from abi_engine.app.domain.type_parser import from_abi_param

AbiDocument = Sequence[Mapping[str, Any]]


def load_abi(abi_path: Path) -> list[dict[str, Any]]:
    """
    Read an ABI JSON file.

    Common formats:
    - [ ... ] (ABI list)
    - { "abi": [ ... ] } (compiler / hardhat artifact)
    """
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI file not found: {abi_path}")
    data = json.loads(abi_path.read_text(encoding="utf-8"))

    if isinstance(data, list):
        abi = data
    elif isinstance(data, dict) and "abi" in data and isinstance(data["abi"], list):
        abi = data["abi"]
    else:
        raise AbiTypeError(
            f"Unsupported ABI JSON format in {abi_path}. Expected list or dict with 'abi' list."
        )

    return [x for x in abi if isinstance(x, dict)]


def parse_specification_item(
    item: Mapping[str, Any],
    *,
    bindings: bool = False,
    hasher: Keccak256Hasher | None = None,
) -> FunctionSelector | None:
    """Map one function or fallback entry; every other entry type yields None."""
    entry_type = item.get("type", "function")

    if entry_type == "fallback":
        return FunctionSelector(name=None, types=(), returns=None, hasher=hasher)

    if entry_type != "function":
        return None

    name = item.get("name")
    if not isinstance(name, str) or not name:
        raise AbiTypeError(f"Function entry without a name: {item!r}")

    inputs = [from_abi_param(p, bindings=bindings) for p in item.get("inputs", [])]
    outputs = [from_abi_param(p, bindings=bindings) for p in item.get("outputs", [])]

    return FunctionSelector(
        name=name,
        types=tuple(inputs),
        returns=outputs[0] if outputs else None,
        hasher=hasher,
    )


def parse_specification(
    doc: AbiDocument,
    *,
    bindings: bool = False,
    hasher: Keccak256Hasher | None = None,
) -> list[FunctionSelector]:
    """
    Function selectors of an ABI document, in document order.

    Constructors, events, receive and error entries are skipped; the fallback
    entry maps to a selector with name=None.
    """
    selectors = (
        parse_specification_item(item, bindings=bindings, hasher=hasher) for item in doc
    )
    return [s for s in selectors if s is not None]


def event_selector_from_item(
    item: Mapping[str, Any],
    *,
    hasher: Keccak256Hasher | None = None,
) -> EventSelector:
    name = item.get("name")
    inputs = item.get("inputs", [])
    if not isinstance(name, str) or not isinstance(inputs, list):
        raise AbiTypeError("Invalid event ABI: missing name/inputs")
    params = tuple(from_abi_param(p, bindings=True) for p in inputs)
    return EventSelector(name=name, params=params, hasher=hasher)


def parse_events(
    doc: AbiDocument,
    *,
    hasher: Keccak256Hasher | None = None,
) -> list[EventSelector]:
    """Event selectors of an ABI document; anonymous events carry no topic-0 and are skipped."""
    return [
        event_selector_from_item(item, hasher=hasher)
        for item in doc
        if item.get("type") == "event" and not item.get("anonymous", False)
    ]


def find_event(
    doc: AbiDocument,
    event_name: str,
    *,
    hasher: Keccak256Hasher | None = None,
) -> EventSelector:
    events = [x for x in doc if x.get("type") == "event" and x.get("name") == event_name]
    if not events:
        names = sorted({str(x.get("name")) for x in doc if x.get("type") == "event"})
        raise AbiTypeError(f"Event {event_name!r} not found in ABI. Available events: {names}")
    if len(events) > 1:
        raise AbiTypeError(
            f"Multiple events named {event_name!r} found in ABI. "
            "Disambiguation by full signature is required."
        )
    return event_selector_from_item(events[0], hasher=hasher)
