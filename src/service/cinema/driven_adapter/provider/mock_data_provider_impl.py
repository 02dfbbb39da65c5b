"""
In-memory Data Provider

Stands in for the remote data source:
- Serves catalogues per day (explicitly seeded, otherwise built by the catalogue factory)
- Holds the seats of every successful order for `hold_window` from submission;
  an expired hold reverts to free on the next query
- Optional latency, awaited before each request, to exercise in-flight behaviour
"""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Mapping, Sequence

import anyio
import uuid_utils

from src.platform.exception.exceptions import ConflictError, NotFoundError, ProviderError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult
from src.service.cinema.driven_adapter.provider.demo_catalogue_seed import build_demo_catalogue


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MockDataProviderImpl(IDataProvider):
    def __init__(
        self,
        *,
        catalogues: Iterable[Catalogue] = (),
        catalogue_factory: Callable[[date], Catalogue] | None = build_demo_catalogue,
        hold_window: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utc_now,
        latency_seconds: float = 0.0,
    ) -> None:
        self._catalogues: dict[date, Catalogue] = {c.date: c for c in catalogues}
        self._catalogue_factory = catalogue_factory
        self._hold_window = hold_window
        self._clock = clock
        self._latency_seconds = latency_seconds
        # session_id -> seat_id -> hold start
        self._holds: dict[str, dict[str, datetime]] = {}
        self.orders: list[OrderResult] = []

    def add_catalogue(self, catalogue: Catalogue) -> None:
        self._catalogues[catalogue.date] = catalogue

    def hold_seats(
        self, *, session_id: str, seat_ids: Iterable[str], held_at: datetime | None = None
    ) -> None:
        """Record seats as held by another party, as if they had ordered them"""
        held_at = held_at or self._clock()
        self._holds.setdefault(session_id, {}).update({seat_id: held_at for seat_id in seat_ids})

    @Logger.io
    async def get_catalogue(self, *, day: date) -> Catalogue:
        await anyio.sleep(self._latency_seconds)

        catalogue = self._catalogues.get(day)
        if catalogue is None and self._catalogue_factory is not None:
            catalogue = self._catalogues[day] = self._catalogue_factory(day)
        if catalogue is None:
            raise ProviderError(f'No catalogue published for {day}', retryable=False)
        return catalogue

    @Logger.io
    async def get_session_occupancy(self, *, session_id: str) -> dict[str, SeatStatus]:
        await anyio.sleep(self._latency_seconds)

        self._find_layout(session_id)
        return {seat_id: SeatStatus.HELD_BY_OTHERS for seat_id in self._active_holds(session_id)}

    @Logger.io
    async def post_order(
        self, *, session_id: str, seat_ids: Sequence[str], contact: ContactInfo
    ) -> OrderResult:
        await anyio.sleep(self._latency_seconds)

        layout = self._find_layout(session_id)
        if not seat_ids:
            raise ProviderError('Order contains no seats', retryable=False)
        if unknown := [seat_id for seat_id in seat_ids if seat_id not in layout]:
            raise NotFoundError(f'Seats {unknown} do not exist in session {session_id}')

        active = self._active_holds(session_id)
        if taken := [seat_id for seat_id in seat_ids if seat_id in active]:
            raise ConflictError(f'Seats {taken} are already held in session {session_id}')

        submitted_at = self._clock()
        self.hold_seats(session_id=session_id, seat_ids=seat_ids, held_at=submitted_at)

        result = OrderResult(
            order_id=str(uuid_utils.uuid7()),
            confirmed=True,
            session_id=session_id,
            seat_ids=seat_ids,
            submitted_at=submitted_at,
        )
        self.orders.append(result)

        Logger.base.info(
            f'📨 [MOCK-PROVIDER] Order {result.order_id}: {len(seat_ids)} seats held in '
            f'{session_id} until {submitted_at + self._hold_window}'
        )
        return result

    def _active_holds(self, session_id: str) -> Mapping[str, datetime]:
        """Drop expired holds of a session and return the remaining ones"""
        now = self._clock()
        holds = self._holds.get(session_id, {})
        expired = [
            seat_id for seat_id, held_at in holds.items() if now - held_at >= self._hold_window
        ]
        for seat_id in expired:
            del holds[seat_id]
        if expired:
            Logger.base.info(
                f'⌛ [MOCK-PROVIDER] Released {len(expired)} expired holds in {session_id}'
            )
        return holds

    def _find_layout(self, session_id: str) -> HallLayout:
        for catalogue in self._catalogues.values():
            if session_id in catalogue.sessions:
                return catalogue.get_layout(session_id)
        raise NotFoundError(f'Session {session_id} not found')
