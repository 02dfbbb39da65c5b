"""
Data Provider Interface

Abstract source of the catalogue, seat occupancy and order submission.
Seat holds are provider-authoritative: occupancy must be queried fresh, the
client never computes hold expiry itself.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult


class IDataProvider(ABC):
    @abstractmethod
    async def get_catalogue(self, *, day: date) -> Catalogue:
        """
        Fetch all movies, sessions and hall layouts for a day

        Raises:
            ProviderError: When the data source fails
        """
        pass

    @abstractmethod
    async def get_session_occupancy(self, *, session_id: str) -> dict[str, SeatStatus]:
        """
        Fetch the current held/free snapshot of a session

        Returns:
            seat_id -> FREE or HELD_BY_OTHERS; seats that are not listed are free

        Raises:
            NotFoundError: When the session is unknown to the provider
            ProviderError: When the data source fails
        """
        pass

    @abstractmethod
    async def post_order(
        self, *, session_id: str, seat_ids: Sequence[str], contact: ContactInfo
    ) -> OrderResult:
        """
        Submit an order for the given seats

        Raises:
            ConflictError: When one of the seats is already held
            NotFoundError: When the session is unknown to the provider
            ProviderError: When the data source fails
        """
        pass
