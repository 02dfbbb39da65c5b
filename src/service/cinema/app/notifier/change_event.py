from typing import Callable

import attrs

from src.service.cinema.app.dto.booking_snapshot import BookingSnapshot
from src.service.cinema.domain.enum.change_kind import ChangeKind


@attrs.define(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    snapshot: BookingSnapshot


@attrs.define(eq=False)
class Subscription:
    """Handle returned by subscribe(); identity-compared"""

    kind: ChangeKind
    handler: Callable[[ChangeEvent], None]
    active: bool = True
