from datetime import date

import attrs

from src.service.cinema.domain.enum.booking_state import BookingState
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.cart_entry import CartEntry
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult


@attrs.define(frozen=True)
class BookingSnapshot:
    """
    Read-only view of the booking state machine at one instant.

    selected_seat_ids and seat_statuses follow row-major hall order.
    """

    state: BookingState
    session_id: str | None = None
    selected_seat_ids: tuple[str, ...] = ()
    seat_statuses: dict[str, SeatStatus] = attrs.field(factory=dict, eq=False)
    selection_price: int = 0
    cart: CartEntry | None = None
    contact_defaults: ContactInfo | None = None
    last_order: OrderResult | None = None
    catalogue_date: date | None = None
