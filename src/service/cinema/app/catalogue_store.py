"""
Catalogue Store

Holds the daily movie/session listing fetched from the data provider and the
most recent occupancy snapshot per session. Read-only for the rest of the system.
"""

from datetime import date

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.session_entity import Session
from src.service.cinema.domain.enum.seat_status import SeatStatus


class CatalogueStore:
    def __init__(self, *, data_provider: IDataProvider) -> None:
        self.data_provider = data_provider
        self._catalogue: Catalogue | None = None
        self._occupancy: dict[str, dict[str, SeatStatus]] = {}

    @property
    def catalogue(self) -> Catalogue:
        if self._catalogue is None:
            raise NotFoundError('Catalogue has not been loaded')
        return self._catalogue

    @property
    def catalogue_date(self) -> date | None:
        return self._catalogue.date if self._catalogue else None

    @property
    def is_loaded(self) -> bool:
        return self._catalogue is not None

    @Logger.io
    async def load(self, *, day: date) -> Catalogue:
        """
        Load the catalogue of a day, replacing the cached one wholesale

        The new catalogue is fully built by the provider before the swap, so readers
        see either the old or the new listing. Occupancy snapshots belong to the old
        listing and are dropped with it.

        Raises:
            ProviderError: When the data source fails (the previous catalogue is kept)
        """
        catalogue = await self.data_provider.get_catalogue(day=day)

        self._catalogue, self._occupancy = catalogue, {}

        Logger.base.info(
            f'🎬 [CATALOGUE] Loaded {day}: {len(catalogue.movies)} movies, '
            f'{len(catalogue.sessions)} sessions'
        )
        return catalogue

    @Logger.io
    async def session_occupancy(self, *, session_id: str) -> dict[str, SeatStatus]:
        """
        Query the provider for the current held/free state of every seat in a session

        Returns:
            seat_id -> SeatStatus for every seat in the hall, row-major

        Raises:
            NotFoundError: When the session is not part of the loaded catalogue
            ProviderError: When the data source fails
        """
        catalogue = self.catalogue
        layout = catalogue.get_layout(session_id)
        reported = await self.data_provider.get_session_occupancy(session_id=session_id)

        occupancy = {
            seat_id: (
                SeatStatus.HELD_BY_OTHERS
                if reported.get(seat_id) == SeatStatus.HELD_BY_OTHERS
                else SeatStatus.FREE
            )
            for seat_id in layout.seat_ids
        }
        # A reload during the request replaced the listing this snapshot belongs to
        if self._catalogue is catalogue:
            self._occupancy[session_id] = occupancy

        held = sum(1 for status in occupancy.values() if status == SeatStatus.HELD_BY_OTHERS)
        Logger.base.info(f'💺 [CATALOGUE] Occupancy {session_id}: {held}/{len(occupancy)} held')
        return dict(occupancy)

    def last_occupancy(self, session_id: str) -> dict[str, SeatStatus] | None:
        occupancy = self._occupancy.get(session_id)
        return dict(occupancy) if occupancy is not None else None

    def has_session(self, session_id: str) -> bool:
        return self._catalogue is not None and session_id in self._catalogue.sessions

    def get_session(self, session_id: str) -> Session:
        return self.catalogue.get_session(session_id)

    def get_movie(self, movie_id: str) -> Movie:
        return self.catalogue.get_movie(movie_id)

    def get_layout(self, session_id: str) -> HallLayout:
        return self.catalogue.get_layout(session_id)

    def sessions_for_movie(self, movie_id: str) -> list[Session]:
        return self.catalogue.sessions_for_movie(movie_id)
