from enum import StrEnum


class SeatStatus(StrEnum):
    """Per-session, per-seat status as seen by this client"""

    FREE = 'free'
    HELD_BY_OTHERS = 'held-by-others'
    HELD_BY_ME = 'held-by-me'
