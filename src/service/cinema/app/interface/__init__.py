from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.app.interface.i_local_storage import ILocalStorage

__all__ = ['IDataProvider', 'ILocalStorage']
