"""
Catalogue Entity

The full set of movies and sessions available for one day, together with the hall
layouts those sessions reference. Built completely before being published and never
mutated afterwards; a reload produces a new instance.
"""

from datetime import date
from typing import Iterable

import attrs

from src.platform.exception.exceptions import NotFoundError
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.session_entity import Session


@attrs.define(frozen=True)
class Catalogue:
    date: date
    movies: dict[str, Movie]
    sessions: dict[str, Session]
    halls: dict[str, HallLayout]

    @classmethod
    def create(
        cls,
        *,
        date: date,
        movies: Iterable[Movie],
        sessions: Iterable[Session],
        halls: Iterable[HallLayout],
    ) -> 'Catalogue':
        return cls(
            date=date,
            movies={movie.id: movie for movie in movies},
            sessions={session.id: session for session in sessions},
            halls={hall.id: hall for hall in halls},
        )

    def get_movie(self, movie_id: str) -> Movie:
        try:
            return self.movies[movie_id]
        except KeyError:
            raise NotFoundError(f'Movie {movie_id} not found in catalogue for {self.date}')

    def get_session(self, session_id: str) -> Session:
        try:
            return self.sessions[session_id]
        except KeyError:
            raise NotFoundError(f'Session {session_id} not found in catalogue for {self.date}')

    def get_layout(self, session_id: str) -> HallLayout:
        session = self.get_session(session_id)
        try:
            return self.halls[session.hall_id]
        except KeyError:
            raise NotFoundError(f'Hall {session.hall_id} of session {session_id} not found')

    def sessions_for_movie(self, movie_id: str) -> list[Session]:
        self.get_movie(movie_id)
        return sorted(
            (s for s in self.sessions.values() if s.movie_id == movie_id),
            key=lambda s: s.starts_at,
        )
