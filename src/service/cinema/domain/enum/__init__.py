"""Cinema Domain Enums"""

from src.service.cinema.domain.enum.booking_state import BookingState
from src.service.cinema.domain.enum.change_kind import ChangeKind
from src.service.cinema.domain.enum.seat_status import SeatStatus

__all__ = ['BookingState', 'ChangeKind', 'SeatStatus']
