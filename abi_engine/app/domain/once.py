from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET = object()


class OnceCell(Generic[T]):
    """
    Write-once cell. The first `get_or_init` call runs the factory under a
    lock; concurrent first callers wait and all observe the same value.
    """

    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: object = _UNSET

    def get(self) -> T | None:
        value = self._value
        return None if value is _UNSET else value  # type: ignore[return-value]

    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get_or_init(self, factory: Callable[[], T]) -> T:
        value = self._value
        if value is not _UNSET:
            return value  # type: ignore[return-value]
        with self._lock:
            if self._value is _UNSET:
                self._value = factory()
            return self._value  # type: ignore[return-value]
