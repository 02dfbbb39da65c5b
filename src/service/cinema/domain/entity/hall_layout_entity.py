from typing import Iterable

import attrs


def _row_major(seats: Iterable['Seat']) -> tuple['Seat', ...]:
    return tuple(sorted(seats, key=lambda s: (s.row, s.column)))


@attrs.define(frozen=True)
class Seat:
    row: int
    column: int
    seat_id: str


@attrs.define(frozen=True)
class HallLayout:
    """
    Seat grid of a hall (Entity, read-only)

    Seats are kept in row-major order regardless of the order they were loaded in,
    so every consumer iterates them the same way. Shared by all sessions in the hall.
    """

    id: str
    name: str
    seats: tuple[Seat, ...] = attrs.field(converter=_row_major)
    _index: dict[str, int] = attrs.field(init=False, eq=False, repr=False)

    def __attrs_post_init__(self) -> None:
        object.__setattr__(
            self, '_index', {seat.seat_id: position for position, seat in enumerate(self.seats)}
        )

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self._index

    @property
    def seat_ids(self) -> tuple[str, ...]:
        return tuple(seat.seat_id for seat in self.seats)

    @property
    def rows(self) -> list[list[Seat]]:
        grouped: dict[int, list[Seat]] = {}
        for seat in self.seats:
            grouped.setdefault(seat.row, []).append(seat)
        return [grouped[row] for row in sorted(grouped)]

    def order_seat_ids(self, seat_ids: Iterable[str]) -> tuple[str, ...]:
        """Return the given seat ids in row-major layout order"""
        return tuple(sorted(seat_ids, key=self._index.__getitem__))
