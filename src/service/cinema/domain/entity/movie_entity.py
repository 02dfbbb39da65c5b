import attrs


@attrs.define(frozen=True)
class Movie:
    id: str
    title: str
    duration_minutes: int = 0
    rating: str = ''
    genres: tuple[str, ...] = attrs.field(default=(), converter=tuple)
    synopsis: str = ''
    session_ids: tuple[str, ...] = attrs.field(default=(), converter=tuple)
