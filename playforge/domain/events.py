"""Domain event dispatch."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Iterable, Mapping

logger = logging.getLogger(__name__)

EventPayload = Mapping[str, Any]
EventListener = Callable[[EventPayload], Awaitable[None]]

PLAYER_CREATED = "player.created"
REFERRAL_CREDITED = "player.referral.credited"
ENERGY_SPENT = "player.energy.spent"
LEVEL_COMPLETED = "player.level.completed"
ASSET_PURCHASED = "player.asset.purchased"
ENERGY_REFILLED = "player.energy.refilled"
BOOST_ACTIVATED = "player.boost.activated"
REDEMPTION_CREDITED = "player.redemption.credited"
WALLET_LINKED = "player.wallet.linked"


class EventBus:
    """Async pub-sub for economy events."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> Callable[[], None]:
        self._listeners[event_name].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners.get(event_name, ()):
                self._listeners[event_name].remove(listener)

        return unsubscribe

    async def publish(self, event_name: str, payload: EventPayload) -> None:
        listeners = list(self._listeners.get(event_name, ()))
        logger.debug("Publishing %s to %d listener(s)", event_name, len(listeners))
        for listener in listeners:
            await listener(payload)

    def clear(self) -> None:
        self._listeners.clear()

    def listeners(self, event_name: str) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_name, ()))
