from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Sequence

from abi_engine.app.application.services.event_selector import DecodedEvent, EventSelector
from abi_engine.app.domain.ports.out import EvmEventDecoder, Keccak256Hasher
from abi_engine.app.infrastructure.abi_document.loader import AbiDocument, parse_events

logger = logging.getLogger(__name__)


class EventSignatureRow(NamedTuple):
    """
    One known event signature:
    - topic0            keccak("EventName(type1,type2,...)") as raw bytes32
    - event_name        e.g. "Swap"
    - event_signature   e.g. "Swap(address,address,int256,int256,uint160,uint128,int24)"
    """

    topic0: bytes
    event_name: str
    event_signature: str


class EventRegistry(EvmEventDecoder):
    """
    topic0 -> EventSelector lookup for decoding arbitrary logs.

    Logs whose topic0 is unknown decode to None. Registering two events with
    the same topic0 keeps the first one.
    """

    def __init__(self, events: Iterable[EventSelector] = ()) -> None:
        self._by_topic0: dict[bytes, EventSelector] = {}
        for event in events:
            self.register(event)

    @classmethod
    def from_abi(
        cls,
        doc: AbiDocument,
        *,
        hasher: Keccak256Hasher | None = None,
    ) -> EventRegistry:
        return cls(parse_events(doc, hasher=hasher))

    def register(self, event: EventSelector) -> None:
        topic0 = event.with_signature().signature()
        if topic0 in self._by_topic0:
            logger.debug(
                "Skipping duplicate event signature: topic0=0x%s, signature=%s",
                topic0.hex(),
                event.canonical_signature(),
            )
            return
        self._by_topic0[topic0] = event

    def __len__(self) -> int:
        return len(self._by_topic0)

    def get(self, topic0: bytes) -> EventSelector | None:
        return self._by_topic0.get(bytes(topic0))

    def signatures(self) -> list[EventSignatureRow]:
        return [
            EventSignatureRow(
                topic0=topic0,
                event_name=event.name,
                event_signature=event.canonical_signature(),
            )
            for topic0, event in self._by_topic0.items()
        ]

    def decode_log(
        self,
        *,
        topics: Sequence[bytes],
        data: bytes,
        capture_names: bool = False,
    ) -> DecodedEvent | None:
        if not topics:
            return None
        event = self.get(topics[0])
        if event is None:
            return None
        # topic0 already matched by lookup
        return event.decode_event(
            topics,
            data,
            check_signature=False,
            capture_names=capture_names,
        )
