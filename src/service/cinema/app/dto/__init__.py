from src.service.cinema.app.dto.booking_config import BookingConfig
from src.service.cinema.app.dto.booking_snapshot import BookingSnapshot

__all__ = ['BookingConfig', 'BookingSnapshot']
