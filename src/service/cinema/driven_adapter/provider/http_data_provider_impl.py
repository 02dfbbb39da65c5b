"""
HTTP Data Provider

Talks to the remote cinema API:
- GET  /catalogue?date=YYYY-MM-DD
- GET  /sessions/{session_id}/occupancy
- POST /orders
"""

from datetime import date
from typing import Any, Sequence

import httpx
import orjson

from src.platform.exception.exceptions import (
    ConflictError,
    NotFoundError,
    ProviderError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult
from src.service.cinema.driven_adapter.provider.provider_payload_codec import (
    decode_catalogue,
    decode_occupancy,
    decode_order_result,
    encode_order,
)


class HttpDataProviderImpl(IDataProvider):
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)

    async def aclose(self) -> None:
        await self._client.aclose()

    @Logger.io
    async def get_catalogue(self, *, day: date) -> Catalogue:
        payload = await self._request('GET', '/catalogue', params={'date': day.isoformat()})
        return decode_catalogue(day=day, payload=payload)

    @Logger.io
    async def get_session_occupancy(self, *, session_id: str) -> dict[str, SeatStatus]:
        payload = await self._request('GET', f'/sessions/{session_id}/occupancy')
        return decode_occupancy(payload)

    @Logger.io
    async def post_order(
        self, *, session_id: str, seat_ids: Sequence[str], contact: ContactInfo
    ) -> OrderResult:
        payload = await self._request(
            'POST',
            '/orders',
            content=orjson.dumps(
                encode_order(session_id=session_id, seat_ids=seat_ids, contact=contact)
            ),
            headers={'Content-Type': 'application/json'},
        )
        return decode_order_result(payload=payload, session_id=session_id, seat_ids=seat_ids)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderError(f'{method} {path} timed out: {e}')
        except httpx.HTTPError as e:
            raise ProviderError(f'{method} {path} failed: {e}')

        if response.is_error:
            detail = self._error_detail(response)
            if response.status_code == 404:
                raise NotFoundError(detail)
            if response.status_code == 409:
                raise ConflictError(detail)
            if response.status_code == 422:
                raise ValidationError(detail)
            raise ProviderError(
                f'{method} {path} returned {response.status_code}: {detail}',
                retryable=response.status_code >= 500 or response.status_code == 429,
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ProviderError(f'{method} {path} returned invalid JSON: {e}')

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            return str(body.get('detail') or body.get('message') or body)
        return str(body)
