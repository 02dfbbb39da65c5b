"""
Cinema Booking - console walkthrough

Runs one booking flow against the configured data provider:
load today's catalogue, open the first session, pick the first free seats,
commit them to the cart and submit an order.

    python -m src.service.cinema.main --name "Ada" --email ada@example.com --phone 5550100
"""

import argparse
from datetime import date

import anyio

from src.platform.config.di import cleanup, container, setup
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.domain.enum.change_kind import ChangeKind
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.driving_adapter.screen.cart_screen import CartScreen
from src.service.cinema.driving_adapter.screen.order_screen import OrderScreen
from src.service.cinema.driving_adapter.screen.seat_map_screen import SeatMapScreen


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Walk through one cinema booking')
    parser.add_argument('--seats', type=int, default=2)
    parser.add_argument('--name', default='')
    parser.add_argument('--email', default='')
    parser.add_argument('--phone', default='')
    return parser.parse_args()


async def run(args: argparse.Namespace) -> None:
    booking = container.booking_state_machine()
    for kind in ChangeKind:
        booking.notifier.subscribe(
            kind, lambda event: Logger.base.info(f'🔔 {event.kind} -> {event.snapshot.state}')
        )

    await booking.reload_catalogue(day=date.today())

    if booking.cart is None:
        session = next(iter(booking.catalogue_store.catalogue.sessions.values()))
        seat_map = SeatMapScreen(booking=booking)
        seat_map.open()
        await booking.select_session(session_id=session.id)

        free = [s for s, status in booking.seat_statuses().items() if status == SeatStatus.FREE]
        wanted = min(args.seats, booking.config.max_seats_per_booking)
        for seat_id in free[:wanted]:
            booking.toggle_seat(seat_id)
        Logger.base.info(f'💺 Seat map: {seat_map.render()}')
        seat_map.close()
        booking.commit_to_cart()
    else:
        booking.open_cart()

    cart_screen = CartScreen(booking=booking)
    Logger.base.info(f'🛒 Cart: {cart_screen.render()}')

    order_screen = OrderScreen(booking=booking)
    order_screen.open()
    defaults = order_screen.render()['contact']
    contact = {
        'name': args.name or defaults['name'],
        'email': args.email or defaults['email'],
        'phone': args.phone or defaults['phone'],
    }
    await booking.submit_order(contact=contact)
    Logger.base.info(f'✅ Order: {order_screen.render()["order"]}')
    order_screen.close()
    booking.acknowledge_order()


def main() -> None:
    args = _parse_args()
    setup()
    try:
        anyio.run(run, args)
    except CustomBaseError as e:
        Logger.base.error(f'❌ Booking failed: {type(e).__name__}: {e.message}')
        raise SystemExit(1)
    finally:
        cleanup()


if __name__ == '__main__':
    main()
