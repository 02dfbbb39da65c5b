from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import STORAGE_DIR


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Cinema Booking Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Booking rules
    MAX_SEATS_PER_BOOKING: int = 6
    SEAT_HOLD_HOURS: int = 24  # Mock provider hold window

    # Data provider
    DATA_PROVIDER: Literal['mock', 'http'] = 'mock'
    PROVIDER_BASE_URL: str = 'http://localhost:8000/api'
    PROVIDER_TIMEOUT_SECONDS: float = 10.0
    MOCK_PROVIDER_LATENCY_SECONDS: float = 0.0

    # Local storage (cart + contact records)
    STORAGE_DIR: Path = STORAGE_DIR

    @field_validator('MAX_SEATS_PER_BOOKING')
    @classmethod
    def validate_max_seats(cls, v: int) -> int:
        if v < 1:
            raise ValueError('MAX_SEATS_PER_BOOKING must be at least 1')
        return v

    @field_validator('PROVIDER_BASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip('/')
        return v


settings = Settings()  # type: ignore
