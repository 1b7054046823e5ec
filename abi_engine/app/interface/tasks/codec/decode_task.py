from __future__ import annotations

import logging
from typing import Any

from eth_utils import decode_hex

from abi_engine.app.application.services.function_selector import FunctionSelector
from abi_engine.app.interface.cli.json_values import to_json

logger = logging.getLogger(__name__)


def decode_task(*, signature: str, data: str, call: bool = False) -> dict[str, Any]:
    """
    Task: decode 0x-hex data against a signature.

    With call=True the data must start with the signature's method id.
    Named top-level parameters are also reported by name.
    """
    selector = FunctionSelector.parse(signature)
    raw = decode_hex(data)
    values = selector.decode_call(raw) if call else selector.decode(raw)

    logger.info(
        "Decoded data: signature=%s, bytes=%s",
        selector.signature(),
        len(raw),
    )

    rendered = [to_json(t, v) for t, v in zip(selector.types, values)]
    return {
        "values": rendered,
        "named": {
            t.name: r for t, r in zip(selector.types, rendered) if t.name is not None
        },
    }
