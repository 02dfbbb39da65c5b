"""
Wire payload codec for the HTTP data provider

Payloads use the remote API's camelCase keys:
- catalogue: {movies: [...], sessions: [...], halls: [...]}
- occupancy: {seatId: status} or [{seatId, status}, ...]
- order request: {sessionId, seatIds, contact: {name, email, phone}}
- order response: {orderId, confirmed}
"""

from datetime import date, datetime, timezone
from typing import Any, Mapping, Sequence

from src.platform.exception.exceptions import ProviderError
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout, Seat
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.session_entity import Session
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult


def decode_catalogue(*, day: date, payload: Mapping[str, Any]) -> Catalogue:
    try:
        halls = [
            HallLayout(
                id=hall['id'],
                name=hall.get('name', hall['id']),
                seats=[
                    Seat(row=int(seat['row']), column=int(seat['column']), seat_id=seat['seatId'])
                    for seat in hall['seats']
                ],
            )
            for hall in payload.get('halls', [])
        ]
        sessions = [
            Session(
                id=session['id'],
                movie_id=session['movieId'],
                starts_at=datetime.fromisoformat(session['startsAt']),
                hall_id=session['hallId'],
                price=int(session['price']),
            )
            for session in payload['sessions']
        ]
        movies = [
            Movie(
                id=movie['id'],
                title=movie['title'],
                duration_minutes=int(movie.get('durationMinutes', 0)),
                rating=movie.get('rating', ''),
                genres=movie.get('genres', ()),
                synopsis=movie.get('synopsis', ''),
                session_ids=movie.get('sessionIds')
                or [s.id for s in sessions if s.movie_id == movie['id']],
            )
            for movie in payload['movies']
        ]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ProviderError(f'Malformed catalogue payload for {day}: {e!r}')

    return Catalogue.create(date=day, movies=movies, sessions=sessions, halls=halls)


def _decode_status(raw: Any) -> SeatStatus:
    return SeatStatus.FREE if raw == SeatStatus.FREE else SeatStatus.HELD_BY_OTHERS


def decode_occupancy(payload: Any) -> dict[str, SeatStatus]:
    try:
        if isinstance(payload, Mapping):
            return {str(seat_id): _decode_status(status) for seat_id, status in payload.items()}

        occupancy: dict[str, SeatStatus] = {}
        for item in payload:
            if 'seatId' in item:
                occupancy[str(item['seatId'])] = _decode_status(item.get('status'))
            else:
                occupancy.update({str(k): _decode_status(v) for k, v in item.items()})
        return occupancy
    except (AttributeError, KeyError, TypeError) as e:
        raise ProviderError(f'Malformed occupancy payload: {e!r}')


def encode_order(
    *, session_id: str, seat_ids: Sequence[str], contact: ContactInfo
) -> dict[str, Any]:
    return {
        'sessionId': session_id,
        'seatIds': list(seat_ids),
        'contact': {'name': contact.name, 'email': contact.email, 'phone': contact.phone},
    }


def decode_order_result(
    *, payload: Mapping[str, Any], session_id: str, seat_ids: Sequence[str]
) -> OrderResult:
    try:
        return OrderResult(
            order_id=str(payload['orderId']),
            confirmed=bool(payload['confirmed']),
            session_id=session_id,
            seat_ids=seat_ids,
            submitted_at=datetime.now(timezone.utc),
        )
    except (KeyError, TypeError) as e:
        raise ProviderError(f'Malformed order response: {e!r}')
