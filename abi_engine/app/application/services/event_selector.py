from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Sequence

from abi_engine.app.application.services.function_selector import FunctionSelector
from abi_engine.app.config import settings
from abi_engine.app.domain.abi_types import AbiType
from abi_engine.app.domain.bindings import find_bindings
from abi_engine.app.domain.canonical import signature
from abi_engine.app.domain.errors import (
    AbiDecodingError,
    AbiTypeError,
    ArityError,
    SignatureMismatchError,
)
from abi_engine.app.domain.once import OnceCell
from abi_engine.app.domain.ports.out import Keccak256Hasher
from abi_engine.app.domain.type_parser import parse_signature
from abi_engine.app.infrastructure.codec import decoder, encoder
from abi_engine.app.infrastructure.codec.decoder import Captures
from abi_engine.app.infrastructure.codec.topics import HashedTopic, encode_topic, is_hashed_topic
from abi_engine.app.infrastructure.factories.keccak_factory import default_hasher

logger = logging.getLogger(__name__)

TOPIC_SIZE = 32


class DecodedEvent(NamedTuple):
    values: list[Any]
    data: list[Any]
    captures: Captures | None = None


@dataclass(frozen=True)
class EventSelector:
    """
    Event entry: name and the full ordered parameter list.

    Parameters are split by their `indexed` annotation into topic_params and
    data_params, relative order preserved. topics[0] of every log emitted by
    the event is signature() = keccak256("Name(type1,type2,...)"), computed
    once per instance.
    """

    name: str
    params: tuple[AbiType, ...] = ()
    hasher: Keccak256Hasher | None = field(default=None, compare=False, repr=False)
    topic_params: tuple[AbiType, ...] = field(init=False)
    data_params: tuple[AbiType, ...] = field(init=False)
    _canonical: OnceCell[str] = field(
        init=False, default_factory=OnceCell, compare=False, repr=False
    )
    _signature: OnceCell[bytes] = field(
        init=False, default_factory=OnceCell, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        params = tuple(self.params)
        object.__setattr__(self, "params", params)
        object.__setattr__(self, "topic_params", tuple(p for p in params if p.indexed))
        object.__setattr__(self, "data_params", tuple(p for p in params if not p.indexed))

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str, *, hasher: Keccak256Hasher | None = None) -> EventSelector:
        name, params = parse_signature(text)
        if name is None:
            raise AbiTypeError(f"Event signature needs a name: {text!r}")
        return cls(name=name, params=tuple(params), hasher=hasher)

    @classmethod
    def from_function_selector(
        cls,
        selector: FunctionSelector,
        *,
        with_signature: bool = False,
    ) -> EventSelector:
        if selector.returns is not None:
            raise AbiTypeError("An event selector cannot have a return type")
        if selector.name is None:
            raise AbiTypeError("An event selector needs a name")
        event = cls(name=selector.name, params=selector.types, hasher=selector.hasher)
        return event.with_signature() if with_signature else event

    def to_function_selector(self) -> FunctionSelector:
        return FunctionSelector(name=self.name, types=self.params, hasher=self.hasher)

    # ---------------------------------------------------------------------
    # Signature
    # ---------------------------------------------------------------------

    def canonical_signature(self) -> str:
        return self._canonical.get_or_init(lambda: signature(self.name, self.params))

    def signature(self) -> bytes:
        """topic-0 hash; the hasher runs at most once per instance."""
        return self._signature.get_or_init(self._compute_signature)

    def _compute_signature(self) -> bytes:
        hasher = self.hasher or default_hasher()
        return hasher(self.canonical_signature().encode("ascii"))

    def with_signature(self) -> EventSelector:
        """Materialize the topic-0 hash now, e.g. before decoding many logs."""
        self.signature()
        return self

    # ---------------------------------------------------------------------
    # Bindings
    # ---------------------------------------------------------------------

    def bindings(self, *, with_types: bool = False) -> list[tuple[Any, ...]]:
        found = find_bindings(self.params)
        if with_types:
            return [tuple(b) for b in found]
        return [(b.name, b.depth) for b in found]

    def named_parameters(self, *, with_types: bool = False) -> list[Any]:
        top = [b for b in find_bindings(self.params) if b.depth == 0]
        if with_types:
            return [(b.name, b.type) for b in top]
        return [b.name for b in top]

    # ---------------------------------------------------------------------
    # Encode / decode
    # ---------------------------------------------------------------------

    def encode_event(self, values: Sequence[Any]) -> tuple[list[bytes], bytes]:
        """Build (topics, data) for a log carrying `values` in parameter order."""
        if len(values) != len(self.params):
            raise ArityError(f"Expected {len(self.params)} values, got {len(values)}")
        hasher = self.hasher or default_hasher()
        topics = [self.signature()]
        data_values: list[Any] = []
        for param, value in zip(self.params, values):
            if param.indexed:
                topics.append(encode_topic(param, value, hasher=hasher))
            else:
                data_values.append(value)
        return topics, encoder.encode(self.data_params, data_values)

    def decode_event(
        self,
        topics: Sequence[bytes],
        data: bytes,
        *,
        check_signature: bool | None = None,
        capture_names: bool = False,
    ) -> DecodedEvent:
        """
        Decode a log emitted by this event.

        values is [self, *topic values, *data values]; data holds the data
        values alone. Indexed reference types come back as HashedTopic.
        """
        if not topics:
            raise ArityError("Log has no topics; topics[0] must be the event signature")
        if check_signature is None:
            check_signature = settings.check_event_signature

        event_signature, *indexed_topics = topics
        if check_signature and bytes(event_signature) != self.signature():
            raise SignatureMismatchError(
                f"Event/selector signature mismatch: topic0=0x{bytes(event_signature).hex()}, "
                f"expected 0x{self.signature().hex()} for {self.canonical_signature()}"
            )
        if len(indexed_topics) != len(self.topic_params):
            raise ArityError(
                f"Expected {len(self.topic_params)} indexed topics for "
                f"{self.canonical_signature()}, got {len(indexed_topics)}"
            )

        topic_values: list[Any] = []
        topic_captures: Captures = []
        for topic, param in zip(indexed_topics, self.topic_params):
            value, captures = self._decode_topic(bytes(topic), param)
            topic_values.append(value)
            topic_captures.extend(captures)

        data_values, data_captures = decoder.decode(data, self.data_params, capture_names=True)

        logger.debug(
            "Decoded event: name=%s, topics=%s, data_bytes=%s",
            self.name,
            len(topics),
            len(data),
        )

        return DecodedEvent(
            values=[self, *topic_values, *data_values],
            data=data_values,
            captures=topic_captures + data_captures if capture_names else None,
        )

    @staticmethod
    def _decode_topic(topic: bytes, param: AbiType) -> tuple[Any, Captures]:
        if len(topic) != TOPIC_SIZE:
            raise AbiDecodingError(f"Topic must be {TOPIC_SIZE} bytes, got {len(topic)}")
        if is_hashed_topic(param):
            value = HashedTopic(topic)
            # Nested values are not recoverable from the hash; every binding
            # under the parameter reports the topic itself.
            return value, [(b.name, value) for b in find_bindings([param])]
        values, captures = decoder.decode(topic, [param], capture_names=True)
        return values[0], captures
