"""Session events and the in-process bus that delivers them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from battleships.game.core.models import AttackResult

if TYPE_CHECKING:
    from battleships.game.core.grid import SeaGrid
    from battleships.game.core.player import Player

TEvent = TypeVar("TEvent")
EventHandler = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class AttackCompleted:
    """Published by the session once a shot has been resolved."""

    attacker: Player
    result: AttackResult


@dataclass(frozen=True, slots=True)
class GridChanged:
    """Published whenever a player's grid mutates."""

    owner: Player
    grid: SeaGrid


@dataclass(frozen=True, slots=True)
class Subscription:
    """Opaque subscription token."""

    id: int


class EventBus:
    """Simple typed pub/sub owned by one session."""

    def __init__(self) -> None:
        self._next_id = 1
        self._subscriptions: dict[int, tuple[type[object], EventHandler]] = {}

    def subscribe(
        self,
        event_type: type[TEvent],
        handler: Callable[[TEvent], None],
    ) -> Subscription:
        """Subscribe handler for an event type."""
        sub_id = self._next_id
        self._next_id += 1
        self._subscriptions[sub_id] = (event_type, handler)
        return Subscription(sub_id)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns whether it was still live."""
        return self._subscriptions.pop(subscription.id, None) is not None

    def publish(self, event: object) -> int:
        """Publish one event and return number of invoked handlers."""
        invoked = 0
        for subscribed_type, handler in tuple(self._subscriptions.values()):
            if isinstance(event, subscribed_type):
                handler(event)
                invoked += 1
        return invoked

    def subscriber_count(self) -> int:
        return len(self._subscriptions)


@dataclass(slots=True)
class SubscriptionSet:
    """Subscriptions taken on one bus, revoked together exactly once."""

    bus: EventBus
    subscriptions: list[Subscription] = field(default_factory=list)

    def subscribe(self, event_type: type[TEvent], handler: Callable[[TEvent], None]) -> None:
        self.subscriptions.append(self.bus.subscribe(event_type, handler))

    def revoke(self) -> int:
        """Unsubscribe everything still held and return how many were removed."""
        removed = sum(1 for sub in self.subscriptions if self.bus.unsubscribe(sub))
        self.subscriptions.clear()
        return removed

    @property
    def active(self) -> bool:
        return bool(self.subscriptions)
