from typing import Any

from src.service.cinema.app.booking_state_machine import BookingStateMachine
from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.domain.enum.change_kind import ChangeKind


class CartScreen:
    def __init__(self, *, booking: BookingStateMachine) -> None:
        self.booking = booking
        self.last_event: ChangeEvent | None = None
        self._subscription: Subscription | None = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def open(self) -> None:
        if self._subscription is None:
            self._subscription = self.booking.notifier.subscribe(
                ChangeKind.CART_CHANGED, self._on_cart_changed
            )

    def close(self) -> None:
        if self._subscription is not None:
            self.booking.notifier.unsubscribe(self._subscription)
            self._subscription = None

    def render(self) -> dict[str, Any]:
        cart = self.booking.cart
        if cart is None:
            return {'state': str(self.booking.state), 'cart': None}

        # A cart hydrated from another day's listing renders from its own record
        title, starts_at = None, None
        store = self.booking.catalogue_store
        if store.has_session(cart.session_id):
            session = store.get_session(cart.session_id)
            starts_at = session.starts_at.isoformat()
            movie = store.catalogue.movies.get(session.movie_id)
            title = movie.title if movie is not None else None

        return {
            'state': str(self.booking.state),
            'cart': {
                'movie': title,
                'session_id': cart.session_id,
                'starts_at': starts_at,
                'seats': list(cart.seat_ids),
                'total_price': cart.total_price,
            },
        }

    def _on_cart_changed(self, event: ChangeEvent) -> None:
        self.last_event = event
