"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from datetime import timedelta

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.cinema.app.booking_state_machine import BookingStateMachine
from src.service.cinema.app.catalogue_store import CatalogueStore
from src.service.cinema.app.dto.booking_config import BookingConfig
from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.app.notifier.change_notifier import ChangeNotifier
from src.service.cinema.driven_adapter.provider.http_data_provider_impl import (
    HttpDataProviderImpl,
)
from src.service.cinema.driven_adapter.provider.mock_data_provider_impl import (
    MockDataProviderImpl,
)
from src.service.cinema.driven_adapter.storage.json_file_storage_impl import JsonFileStorageImpl


def build_data_provider(settings: Settings) -> IDataProvider:
    if settings.DATA_PROVIDER == 'http':
        return HttpDataProviderImpl(
            base_url=settings.PROVIDER_BASE_URL,
            timeout_seconds=settings.PROVIDER_TIMEOUT_SECONDS,
        )
    return MockDataProviderImpl(
        hold_window=timedelta(hours=settings.SEAT_HOLD_HOURS),
        latency_seconds=settings.MOCK_PROVIDER_LATENCY_SECONDS,
    )


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)
    booking_config = providers.Singleton(BookingConfig.from_settings, config_service)

    # Driven adapters
    data_provider = providers.Singleton(build_data_provider, config_service)
    local_storage = providers.Singleton(
        JsonFileStorageImpl, directory=config_service.provided.STORAGE_DIR
    )

    # Core
    catalogue_store = providers.Singleton(CatalogueStore, data_provider=data_provider)
    change_notifier = providers.Factory(ChangeNotifier)
    booking_state_machine = providers.Singleton(
        BookingStateMachine,
        catalogue_store=catalogue_store,
        data_provider=data_provider,
        local_storage=local_storage,
        config=booking_config,
        notifier=change_notifier,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
