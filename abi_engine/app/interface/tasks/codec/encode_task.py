from __future__ import annotations

import json
import logging

from abi_engine.app.application.services.function_selector import FunctionSelector
from abi_engine.app.domain.errors import ShapeError
from abi_engine.app.interface.cli.json_values import from_json

logger = logging.getLogger(__name__)


def encode_task(*, signature: str, values: str, call: bool = False) -> str:
    """
    Task: ABI-encode JSON values against a signature.

    `values` is a JSON array with one entry per parameter. With call=True the
    4-byte method id is prepended. Returns 0x-hex.
    """
    selector = FunctionSelector.parse(signature)
    raw = json.loads(values)
    if not isinstance(raw, list):
        raise ShapeError("Values must be a JSON array with one entry per parameter")
    if len(raw) != len(selector.types):
        # let the encoder report the arity mismatch
        typed = raw
    else:
        typed = [from_json(t, v) for t, v in zip(selector.types, raw)]

    encoded = selector.encode_call(typed) if call else selector.encode(typed)

    logger.info(
        "Encoded values: signature=%s, params=%s, bytes=%s",
        selector.signature(),
        len(selector.types),
        len(encoded),
    )
    return "0x" + encoded.hex()
