from typing import Any

from src.service.cinema.app.booking_state_machine import BookingStateMachine
from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.domain.enum.change_kind import ChangeKind


class SeatMapScreen:
    """Seat grid of the session being selected, with live status and price"""

    def __init__(self, *, booking: BookingStateMachine) -> None:
        self.booking = booking
        self.render_count = 0
        self._subscriptions: list[Subscription] = []

    @property
    def is_open(self) -> bool:
        return bool(self._subscriptions)

    def open(self) -> None:
        if self.is_open:
            return
        self._subscriptions = [
            self.booking.notifier.subscribe(kind, self._on_change)
            for kind in (ChangeKind.SELECTION_CHANGED, ChangeKind.CATALOGUE_CHANGED)
        ]

    def close(self) -> None:
        for subscription in self._subscriptions:
            self.booking.notifier.unsubscribe(subscription)
        self._subscriptions = []

    def render(self) -> dict[str, Any]:
        snapshot = self.booking.snapshot()
        if self.booking.selection is None:
            return {'state': str(snapshot.state), 'session_id': snapshot.session_id, 'rows': []}

        layout = self.booking.catalogue_store.get_layout(self.booking.selection.session_id)
        rows = [
            [
                {'seat_id': seat.seat_id, 'status': str(snapshot.seat_statuses[seat.seat_id])}
                for seat in row
            ]
            for row in layout.rows
        ]
        return {
            'state': str(snapshot.state),
            'session_id': snapshot.session_id,
            'hall': layout.name,
            'rows': rows,
            'selected': list(snapshot.selected_seat_ids),
            'price': snapshot.selection_price,
        }

    def _on_change(self, event: ChangeEvent) -> None:
        self.render_count += 1
