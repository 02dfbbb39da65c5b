import attrs

from src.platform.config.core_setting import Settings


@attrs.define(frozen=True)
class BookingConfig:
    """Explicit configuration handed to the booking state machine at construction"""

    max_seats_per_booking: int = attrs.field(default=6, validator=attrs.validators.ge(1))

    @classmethod
    def from_settings(cls, settings: Settings) -> 'BookingConfig':
        return cls(max_seats_per_booking=settings.MAX_SEATS_PER_BOOKING)
