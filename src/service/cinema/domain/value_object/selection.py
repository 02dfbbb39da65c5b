import attrs


@attrs.define(frozen=True)
class Selection:
    """In-progress seat choice for one session (Value Object)"""

    session_id: str
    seat_ids: frozenset[str] = attrs.field(factory=frozenset, converter=frozenset)

    def __len__(self) -> int:
        return len(self.seat_ids)

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self.seat_ids

    def toggled(self, seat_id: str) -> 'Selection':
        if seat_id in self.seat_ids:
            return attrs.evolve(self, seat_ids=self.seat_ids - {seat_id})
        return attrs.evolve(self, seat_ids=self.seat_ids | {seat_id})
