from datetime import datetime

import attrs


@attrs.define(frozen=True)
class Session:
    """A single screening of a movie in a hall. movie_id and hall_id are weak references."""

    id: str
    movie_id: str
    starts_at: datetime
    hall_id: str
    price: int
