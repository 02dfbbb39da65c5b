from datetime import datetime

import attrs


@attrs.define(frozen=True)
class OrderResult:
    order_id: str
    confirmed: bool
    session_id: str
    seat_ids: tuple[str, ...] = attrs.field(converter=tuple)
    submitted_at: datetime
