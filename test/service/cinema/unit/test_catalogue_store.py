"""
Unit tests for CatalogueStore

Tests wholesale catalogue replacement, lookups and full-hall occupancy snapshots.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import NotFoundError, ProviderError
from src.service.cinema.app.catalogue_store import CatalogueStore
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.driven_adapter.provider.mock_data_provider_impl import (
    MockDataProviderImpl,
)


@pytest.mark.unit
class TestCatalogueStore:
    def test_catalogue_before_load_raises(self, catalogue_store: CatalogueStore) -> None:
        assert catalogue_store.is_loaded is False
        assert catalogue_store.catalogue_date is None
        with pytest.raises(NotFoundError):
            _ = catalogue_store.catalogue

    @pytest.mark.asyncio
    async def test_load_publishes_catalogue(
        self, catalogue_store: CatalogueStore, show_day: date
    ) -> None:
        catalogue = await catalogue_store.load(day=show_day)

        assert catalogue_store.catalogue is catalogue
        assert catalogue_store.catalogue_date == show_day
        assert catalogue_store.has_session('S1')
        assert catalogue_store.get_movie('m1').title == 'True Romance'
        assert [s.id for s in catalogue_store.sessions_for_movie('m1')] == ['S1', 'S2']

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_catalogue(
        self, catalogue_store: CatalogueStore, show_day: date
    ) -> None:
        catalogue = await catalogue_store.load(day=show_day)

        with pytest.raises(ProviderError):
            await catalogue_store.load(day=date(2030, 1, 1))

        assert catalogue_store.catalogue is catalogue

    @pytest.mark.asyncio
    async def test_lookup_of_unknown_ids_raises_not_found(
        self, catalogue_store: CatalogueStore, show_day: date
    ) -> None:
        await catalogue_store.load(day=show_day)

        with pytest.raises(NotFoundError):
            catalogue_store.get_session('nope')
        with pytest.raises(NotFoundError):
            catalogue_store.get_movie('nope')
        with pytest.raises(NotFoundError):
            catalogue_store.get_layout('nope')

    @pytest.mark.asyncio
    async def test_session_occupancy_covers_every_seat_row_major(
        self,
        catalogue_store: CatalogueStore,
        data_provider: MockDataProviderImpl,
        show_day: date,
    ) -> None:
        await catalogue_store.load(day=show_day)
        data_provider.hold_seats(session_id='S1', seat_ids=['B1'])

        occupancy = await catalogue_store.session_occupancy(session_id='S1')

        assert list(occupancy) == ['A1', 'A2', 'B1']
        assert occupancy['B1'] is SeatStatus.HELD_BY_OTHERS
        assert occupancy['A1'] is SeatStatus.FREE
        assert catalogue_store.last_occupancy('S1') == occupancy

    @pytest.mark.asyncio
    async def test_reload_drops_occupancy_snapshots(
        self, catalogue_store: CatalogueStore, show_day: date
    ) -> None:
        await catalogue_store.load(day=show_day)
        await catalogue_store.session_occupancy(session_id='S1')

        await catalogue_store.load(day=show_day)

        assert catalogue_store.last_occupancy('S1') is None

    @pytest.mark.asyncio
    async def test_unknown_provider_statuses_are_ignored(self, catalogue: Catalogue) -> None:
        provider = AsyncMock()
        provider.get_catalogue = AsyncMock(return_value=catalogue)
        provider.get_session_occupancy = AsyncMock(
            return_value={'A1': SeatStatus.HELD_BY_OTHERS, 'Z9': SeatStatus.HELD_BY_OTHERS}
        )
        store = CatalogueStore(data_provider=provider)
        await store.load(day=catalogue.date)

        occupancy = await store.session_occupancy(session_id='S1')

        assert 'Z9' not in occupancy
        assert occupancy['A1'] is SeatStatus.HELD_BY_OTHERS
