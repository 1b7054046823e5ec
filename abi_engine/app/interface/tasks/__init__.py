from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .codec.signature_task import signature_task as codec__signature_task
from .codec.encode_task import encode_task as codec__encode_task
from .codec.decode_task import decode_task as codec__decode_task
from .events.event_signatures_task import event_signatures_task as events__event_signatures_task
from .events.decode_log_task import decode_log_task as events__decode_log_task

TaskFn = Callable[..., Any]

TASKS: dict[str, TaskFn] = {
    "codec__signature_task": codec__signature_task,
    "codec__encode_task": codec__encode_task,
    "codec__decode_task": codec__decode_task,
    "events__event_signatures_task": events__event_signatures_task,
    "events__decode_log_task": events__decode_log_task,
}
