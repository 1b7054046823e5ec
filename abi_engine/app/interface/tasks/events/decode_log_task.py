from __future__ import annotations

import logging
from typing import Any

from eth_utils import decode_hex

from abi_engine.app.config import settings
from abi_engine.app.infrastructure.abi_document.loader import load_abi
from abi_engine.app.infrastructure.registry.event_registry import EventRegistry
from abi_engine.app.interface.cli.json_values import to_json

logger = logging.getLogger(__name__)


def decode_log_task(*, abi_path: str, topics: list[str], data: str) -> dict[str, Any] | None:
    """
    Task: decode one EVM log against the events of an ABI file.

    - topics are 0x-hex, topics[0] selects the event,
    - returns the event name, canonical signature and named fields,
    - returns None when no event in the ABI has that topic-0.
    """
    path = settings.resolve_abi_path(abi_path)
    registry = EventRegistry.from_abi(load_abi(path))

    raw_topics = [decode_hex(t) for t in topics]
    decoded = registry.decode_log(
        topics=raw_topics,
        data=decode_hex(data) if data else b"",
    )
    if decoded is None:
        logger.info("No event matches log: topic0=%s", topics[0] if topics else None)
        return None

    event, *values = decoded.values
    params = list(event.topic_params) + list(event.data_params)
    fields = [to_json(p, v) for p, v in zip(params, values)]

    logger.info("Decoded log: event=%s, fields=%s", event.name, len(fields))
    return {
        "event_name": event.name,
        "event_signature": event.canonical_signature(),
        "values": fields,
        "named": {
            p.name: f for p, f in zip(params, fields) if p.name is not None
        },
    }
