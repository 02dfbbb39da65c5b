"""
Booking Flow State Enum

States of the single user booking flow, initial state IDLE:

    IDLE -> BROWSING_SESSION -> SELECTING_SEATS -> CART_PENDING -> ORDERING -> ORDER_COMPLETE

BROWSING_SESSION and ORDERING are the states in which a provider request is in flight.
"""

from enum import StrEnum


class BookingState(StrEnum):
    IDLE = 'idle'
    BROWSING_SESSION = 'browsing-session'
    SELECTING_SEATS = 'selecting-seats'
    CART_PENDING = 'cart-pending'
    ORDERING = 'ordering'
    ORDER_COMPLETE = 'order-complete'

    @property
    def has_request_in_flight(self) -> bool:
        return self in (BookingState.BROWSING_SESSION, BookingState.ORDERING)
