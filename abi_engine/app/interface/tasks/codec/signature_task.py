from __future__ import annotations

import logging
from typing import Any

from abi_engine.app.application.services.event_selector import EventSelector
from abi_engine.app.application.services.function_selector import FunctionSelector

logger = logging.getLogger(__name__)


def signature_task(*, signature: str) -> dict[str, Any]:
    """
    Task: canonicalize a signature.

    - parses `name(type1,type2,...)` (names / indexed markers allowed),
    - returns the canonical form, the 4-byte method id and the topic-0 hash.
    """
    selector = FunctionSelector.parse(signature)
    canonical = selector.signature()
    out: dict[str, Any] = {"signature": canonical}

    if selector.name is not None:
        event = EventSelector.from_function_selector(selector, with_signature=True)
        out["method_id"] = "0x" + selector.method_id().hex()
        out["topic0"] = "0x" + event.signature().hex()

    logger.info("Canonicalized signature: input=%r, canonical=%s", signature, canonical)
    return out
