"""
Test Configuration and Fixtures

This module provides:
- Log directory isolation (TEST_LOG_DIR) set before any application import
- A small two-session catalogue and the mock data provider serving it
- A booking state machine wired to a temporary storage directory
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Logging config reads TEST_LOG_DIR at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ['DATA_PROVIDER'] = 'mock'
    os.environ['MOCK_PROVIDER_LATENCY_SECONDS'] = '0'


_early_setup_test_environment()

from datetime import date, datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from src.service.cinema.app.booking_state_machine import BookingStateMachine  # noqa: E402
from src.service.cinema.app.catalogue_store import CatalogueStore  # noqa: E402
from src.service.cinema.app.dto.booking_config import BookingConfig  # noqa: E402
from src.service.cinema.app.notifier.change_event import ChangeEvent  # noqa: E402
from src.service.cinema.app.notifier.change_notifier import (  # noqa: E402
    ChangeNotifier,
    HandlerFailure,
)
from src.service.cinema.domain.entity.catalogue_entity import Catalogue  # noqa: E402
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout, Seat  # noqa: E402
from src.service.cinema.domain.entity.movie_entity import Movie  # noqa: E402
from src.service.cinema.domain.entity.session_entity import Session  # noqa: E402
from src.service.cinema.domain.enum.change_kind import ChangeKind  # noqa: E402
from src.service.cinema.driven_adapter.provider.mock_data_provider_impl import (  # noqa: E402
    MockDataProviderImpl,
)
from src.service.cinema.driven_adapter.storage.json_file_storage_impl import (  # noqa: E402
    JsonFileStorageImpl,
)


SHOW_DAY = date(2026, 10, 18)
SESSION_ID = 'S1'
OTHER_SESSION_ID = 'S2'
SESSION_PRICE = 900
VALID_CONTACT = {'name': 'Ada Lovelace', 'email': 'ada@example.com', 'phone': '+44 20 7946 0000'}


def build_small_hall() -> HallLayout:
    # Deliberately out of order: the layout sorts row-major
    return HallLayout(
        id='hall-small',
        name='Small Hall',
        seats=[
            Seat(row=2, column=1, seat_id='B1'),
            Seat(row=1, column=2, seat_id='A2'),
            Seat(row=1, column=1, seat_id='A1'),
        ],
    )


def build_test_catalogue(day: date = SHOW_DAY) -> Catalogue:
    return Catalogue.create(
        date=day,
        movies=[
            Movie(id='m1', title='True Romance', session_ids=[SESSION_ID, OTHER_SESSION_ID]),
        ],
        sessions=[
            Session(
                id=SESSION_ID,
                movie_id='m1',
                starts_at=datetime(2026, 10, 18, 19, 0, tzinfo=timezone.utc),
                hall_id='hall-small',
                price=SESSION_PRICE,
            ),
            Session(
                id=OTHER_SESSION_ID,
                movie_id='m1',
                starts_at=datetime(2026, 10, 18, 22, 0, tzinfo=timezone.utc),
                hall_id='hall-small',
                price=1100,
            ),
        ],
        halls=[build_small_hall()],
    )


@pytest.fixture
def catalogue() -> Catalogue:
    return build_test_catalogue()


@pytest.fixture
def data_provider(catalogue: Catalogue) -> MockDataProviderImpl:
    return MockDataProviderImpl(catalogues=[catalogue], catalogue_factory=None)


@pytest.fixture
def local_storage(tmp_path: Path) -> JsonFileStorageImpl:
    return JsonFileStorageImpl(directory=tmp_path / 'storage')


@pytest.fixture
def booking_config() -> BookingConfig:
    return BookingConfig(max_seats_per_booking=2)


@pytest.fixture
def handler_failures() -> list[HandlerFailure]:
    return []


@pytest.fixture
def notifier(handler_failures: list[HandlerFailure]) -> ChangeNotifier:
    return ChangeNotifier(on_handler_error=handler_failures.append)


@pytest.fixture
def catalogue_store(data_provider: MockDataProviderImpl) -> CatalogueStore:
    return CatalogueStore(data_provider=data_provider)


@pytest.fixture
def booking(
    catalogue_store: CatalogueStore,
    data_provider: MockDataProviderImpl,
    local_storage: JsonFileStorageImpl,
    booking_config: BookingConfig,
    notifier: ChangeNotifier,
) -> BookingStateMachine:
    return BookingStateMachine(
        catalogue_store=catalogue_store,
        data_provider=data_provider,
        local_storage=local_storage,
        config=booking_config,
        notifier=notifier,
    )


@pytest.fixture
async def loaded_booking(booking: BookingStateMachine) -> BookingStateMachine:
    await booking.reload_catalogue(day=SHOW_DAY)
    return booking


@pytest.fixture
def events(notifier: ChangeNotifier) -> list[ChangeEvent]:
    """Every event the notifier delivers, in delivery order"""
    received: list[ChangeEvent] = []
    for kind in ChangeKind:
        notifier.subscribe(kind, received.append)
    return received


@pytest.fixture
def show_day() -> date:
    return SHOW_DAY


@pytest.fixture
def valid_contact() -> dict[str, str]:
    return dict(VALID_CONTACT)
