from __future__ import annotations

import logging

from abi_engine.app.config import settings
from abi_engine.app.infrastructure.abi_document.loader import load_abi
from abi_engine.app.infrastructure.registry.event_registry import EventRegistry

logger = logging.getLogger(__name__)


def event_signatures_task(*, abi_path: str) -> list[dict[str, str]]:
    """
    Task: list topic-0 hashes of every event in an ABI file.

    Relative paths resolve against ABI_DIR when it is set.
    """
    path = settings.resolve_abi_path(abi_path)
    registry = EventRegistry.from_abi(load_abi(path))

    rows = [
        {
            "topic0": "0x" + row.topic0.hex(),
            "event_name": row.event_name,
            "event_signature": row.event_signature,
        }
        for row in registry.signatures()
    ]
    logger.info("Collected event signatures: abi_path=%s, events=%s", path, len(rows))
    return rows
