"""
Unit tests for the presentation screens

Each screen subscribes on open(), unsubscribes on close() and renders a plain
view-model from the booking state machine's read-only accessors.
"""

from datetime import date

import pytest

from src.service.cinema.app.booking_state_machine import BookingStateMachine
from src.service.cinema.app.catalogue_store import CatalogueStore
from src.service.cinema.app.dto.booking_config import BookingConfig
from src.service.cinema.app.notifier.change_notifier import ChangeNotifier
from src.service.cinema.domain.enum.change_kind import ChangeKind
from src.service.cinema.driven_adapter.provider.demo_catalogue_seed import build_demo_catalogue
from src.service.cinema.driven_adapter.provider.mock_data_provider_impl import (
    MockDataProviderImpl,
)
from src.service.cinema.driven_adapter.storage.json_file_storage_impl import (
    JsonFileStorageImpl,
)
from src.service.cinema.driving_adapter.screen.cart_screen import CartScreen
from src.service.cinema.driving_adapter.screen.i_screen import IScreen
from src.service.cinema.driving_adapter.screen.order_screen import OrderScreen
from src.service.cinema.driving_adapter.screen.seat_map_screen import SeatMapScreen


@pytest.mark.unit
class TestSeatMapScreen:
    @pytest.fixture
    def screen(self, loaded_booking: BookingStateMachine) -> SeatMapScreen:
        return SeatMapScreen(booking=loaded_booking)

    @pytest.mark.asyncio
    async def test_satisfies_screen_interface(self, screen: SeatMapScreen) -> None:
        screen_protocol: IScreen = screen
        assert screen_protocol.is_open is False

    @pytest.mark.asyncio
    async def test_render_without_selection_has_no_rows(self, screen: SeatMapScreen) -> None:
        assert screen.render() == {'state': 'idle', 'session_id': None, 'rows': []}

    @pytest.mark.asyncio
    async def test_open_screen_rerenders_on_selection_changes(
        self,
        screen: SeatMapScreen,
        loaded_booking: BookingStateMachine,
        data_provider: MockDataProviderImpl,
    ) -> None:
        data_provider.hold_seats(session_id='S1', seat_ids=['B1'])
        screen.open()

        await loaded_booking.select_session(session_id='S1')
        loaded_booking.toggle_seat('A2')

        assert screen.render_count == 2
        view = screen.render()
        assert view['hall'] == 'Small Hall'
        assert view['selected'] == ['A2']
        assert view['price'] == 900
        assert view['rows'] == [
            [{'seat_id': 'A1', 'status': 'free'}, {'seat_id': 'A2', 'status': 'held-by-me'}],
            [{'seat_id': 'B1', 'status': 'held-by-others'}],
        ]

    @pytest.mark.asyncio
    async def test_closed_screen_stops_listening(
        self, screen: SeatMapScreen, loaded_booking: BookingStateMachine, notifier: ChangeNotifier
    ) -> None:
        screen.open()
        screen.open()
        assert notifier.subscriber_count(ChangeKind.SELECTION_CHANGED) == 1

        screen.close()
        screen.close()
        await loaded_booking.select_session(session_id='S1')

        assert screen.is_open is False
        assert screen.render_count == 0
        assert notifier.subscriber_count(ChangeKind.SELECTION_CHANGED) == 0
        assert notifier.subscriber_count(ChangeKind.CATALOGUE_CHANGED) == 0


@pytest.mark.unit
class TestCartScreen:
    @pytest.mark.asyncio
    async def test_render_empty_cart(self, loaded_booking: BookingStateMachine) -> None:
        assert CartScreen(booking=loaded_booking).render() == {'state': 'idle', 'cart': None}

    @pytest.mark.asyncio
    async def test_render_committed_cart(self, loaded_booking: BookingStateMachine) -> None:
        screen = CartScreen(booking=loaded_booking)
        screen.open()
        await loaded_booking.select_session(session_id='S1')
        loaded_booking.toggle_seat('B1')
        loaded_booking.toggle_seat('A1')
        loaded_booking.commit_to_cart()

        view = screen.render()

        assert screen.last_event.kind is ChangeKind.CART_CHANGED
        assert view['state'] == 'cart-pending'
        assert view['cart'] == {
            'movie': 'True Romance',
            'session_id': 'S1',
            'starts_at': '2026-10-18T19:00:00+00:00',
            'seats': ['A1', 'B1'],
            'total_price': 1800,
        }
        screen.close()
        assert screen.is_open is False

    @pytest.mark.asyncio
    async def test_render_cart_kept_from_previous_day_after_restart(
        self,
        loaded_booking: BookingStateMachine,
        data_provider: MockDataProviderImpl,
        local_storage: JsonFileStorageImpl,
        booking_config: BookingConfig,
    ) -> None:
        await loaded_booking.select_session(session_id='S1')
        loaded_booking.toggle_seat('A2')
        loaded_booking.toggle_seat('A1')
        loaded_booking.commit_to_cart()
        next_day = date(2026, 10, 19)
        data_provider.add_catalogue(build_demo_catalogue(next_day))

        restarted = BookingStateMachine(
            catalogue_store=CatalogueStore(data_provider=data_provider),
            data_provider=data_provider,
            local_storage=local_storage,
            config=booking_config,
        )
        await restarted.reload_catalogue(day=next_day)

        assert CartScreen(booking=restarted).render() == {
            'state': 'cart-pending',
            'cart': {
                'movie': None,
                'session_id': 'S1',
                'starts_at': None,
                'seats': ['A1', 'A2'],
                'total_price': 1800,
            },
        }


@pytest.mark.unit
class TestOrderScreen:
    @pytest.mark.asyncio
    async def test_prefills_contact_and_shows_confirmation(
        self, loaded_booking: BookingStateMachine, valid_contact: dict[str, str]
    ) -> None:
        screen = OrderScreen(booking=loaded_booking)
        screen.open()
        assert screen.render()['contact'] == {'name': '', 'email': '', 'phone': ''}
        assert screen.render()['order'] is None

        await loaded_booking.select_session(session_id='S1')
        loaded_booking.toggle_seat('A1')
        loaded_booking.commit_to_cart()
        result = await loaded_booking.submit_order(contact=valid_contact)

        view = screen.render()
        assert screen.completed_order_ids == [result.order_id]
        assert view['state'] == 'order-complete'
        assert view['contact'] == valid_contact
        assert view['order'] == {'order_id': result.order_id, 'confirmed': True, 'seats': ['A1']}
