"""
Change Notifier Interface

Typed publish/subscribe contract between the booking state machine and
presentation code.
"""

from typing import Callable, Protocol

from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.domain.enum.change_kind import ChangeKind


ChangeHandler = Callable[[ChangeEvent], None]


class IChangeNotifier(Protocol):
    def subscribe(self, kind: ChangeKind, handler: ChangeHandler) -> Subscription:
        """
        Register a handler for one change kind

        Handlers of the same kind are called in subscription order.
        """
        ...

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Safe to call more than once."""
        ...

    def emit(self, event: ChangeEvent) -> None:
        """Deliver an event synchronously to every current subscriber of its kind"""
        ...

    @property
    def is_delivering(self) -> bool: ...

    def defer(self, job: Callable[[], None]) -> None:
        """Run job now, or after the delivery in progress when called from a handler"""
        ...
