from typing import Any

from src.service.cinema.app.booking_state_machine import BookingStateMachine
from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.domain.enum.change_kind import ChangeKind


class OrderScreen:
    """Contact form pre-filled from the stored contact, then the order confirmation"""

    def __init__(self, *, booking: BookingStateMachine) -> None:
        self.booking = booking
        self.completed_order_ids: list[str] = []
        self._subscription: Subscription | None = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def open(self) -> None:
        if self._subscription is None:
            self._subscription = self.booking.notifier.subscribe(
                ChangeKind.ORDER_COMPLETED, self._on_order_completed
            )

    def close(self) -> None:
        if self._subscription is not None:
            self.booking.notifier.unsubscribe(self._subscription)
            self._subscription = None

    def render(self) -> dict[str, Any]:
        contact = self.booking.contact_defaults
        order = self.booking.last_order
        return {
            'state': str(self.booking.state),
            'contact': {
                'name': contact.name if contact else '',
                'email': contact.email if contact else '',
                'phone': contact.phone if contact else '',
            },
            'order': (
                {
                    'order_id': order.order_id,
                    'confirmed': order.confirmed,
                    'seats': list(order.seat_ids),
                }
                if order
                else None
            ),
        }

    def _on_order_completed(self, event: ChangeEvent) -> None:
        if event.snapshot.last_order is not None:
            self.completed_order_ids.append(event.snapshot.last_order.order_id)
