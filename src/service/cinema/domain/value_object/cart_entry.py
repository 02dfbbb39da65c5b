from datetime import datetime

import attrs


@attrs.define(frozen=True)
class CartEntry:
    """
    A committed selection waiting for order submission (Value Object)

    seat_ids are stored in row-major layout order.
    """

    session_id: str
    seat_ids: tuple[str, ...] = attrs.field(converter=tuple)
    total_price: int
    created_at: datetime
