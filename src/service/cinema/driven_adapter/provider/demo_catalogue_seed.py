"""
Demo catalogue used by the mock data provider

Any requested day gets the same listing, with session ids and start times
derived from that day.
"""

from datetime import date, datetime, time, timezone
from string import ascii_uppercase

from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout, Seat
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.session_entity import Session


# hall_id -> (name, rows, seats per row)
DEMO_HALLS = {
    'hall-1': ('Hall 1', 6, 10),
    'hall-2': ('Hall 2', 4, 8),
    'vip': ('VIP Hall', 2, 6),
}

# movie_id -> (title, minutes, rating, genres, [(hall_id, 'HH:MM', price)])
DEMO_MOVIES = {
    'true-romance': (
        'True Romance',
        120,
        'R',
        ('crime', 'romance'),
        [('hall-1', '12:00', 900), ('hall-2', '16:30', 900), ('hall-1', '21:00', 1100)],
    ),
    'the-godfather': (
        'The Godfather',
        175,
        'R',
        ('crime', 'drama'),
        [('hall-2', '13:00', 900), ('vip', '20:30', 1800)],
    ),
    'pulp-fiction': (
        'Pulp Fiction',
        154,
        'R',
        ('crime',),
        [('hall-1', '17:00', 1000), ('hall-2', '22:15', 1000)],
    ),
}


def build_hall(hall_id: str, name: str, rows: int, seats_per_row: int) -> HallLayout:
    seats = [
        Seat(row=row, column=column, seat_id=f'{ascii_uppercase[row - 1]}{column}')
        for row in range(1, rows + 1)
        for column in range(1, seats_per_row + 1)
    ]
    return HallLayout(id=hall_id, name=name, seats=seats)


def build_demo_catalogue(day: date) -> Catalogue:
    halls = [build_hall(hall_id, *layout) for hall_id, layout in DEMO_HALLS.items()]

    movies: list[Movie] = []
    sessions: list[Session] = []
    for movie_id, (title, minutes, rating, genres, showtimes) in DEMO_MOVIES.items():
        session_ids = []
        for hall_id, hhmm, price in showtimes:
            session_id = f'{day:%Y%m%d}-{movie_id}-{hhmm.replace(":", "")}'
            starts_at = datetime.combine(day, time.fromisoformat(hhmm), tzinfo=timezone.utc)
            sessions.append(
                Session(
                    id=session_id,
                    movie_id=movie_id,
                    starts_at=starts_at,
                    hall_id=hall_id,
                    price=price,
                )
            )
            session_ids.append(session_id)
        movies.append(
            Movie(
                id=movie_id,
                title=title,
                duration_minutes=minutes,
                rating=rating,
                genres=genres,
                session_ids=session_ids,
            )
        )

    return Catalogue.create(date=day, movies=movies, sessions=sessions, halls=halls)
