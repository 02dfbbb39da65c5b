"""
Booking State Machine

Sole owner of the in-progress selection, the cart entry and the contact info.

Flow:
    idle -> browsing-session -> selecting-seats -> cart-pending -> ordering -> order-complete

- cancel() returns to idle from any state except ordering and order-complete
- acknowledge_order() returns from order-complete to idle
- At most one cart entry exists; select_session() is rejected until it is cleared

Every operation either applies completely and then notifies, or fails and leaves the
previous state untouched. Provider I/O (occupancy, catalogue re-fetch, order) is the only
suspension point; a response that arrives for a flow which has since been cancelled or
superseded is discarded.
"""

from collections.abc import Mapping
from datetime import date, datetime, timezone
from functools import wraps
from typing import Any, Callable, TypeVar, cast

import attrs
import uuid_utils

from src.platform.exception.exceptions import (
    CapacityError,
    ConflictError,
    NotFoundError,
    ProviderError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.catalogue_store import CatalogueStore
from src.service.cinema.app.dto.booking_config import BookingConfig
from src.service.cinema.app.dto.booking_snapshot import BookingSnapshot
from src.service.cinema.app.interface.i_data_provider import IDataProvider
from src.service.cinema.app.interface.i_local_storage import ILocalStorage
from src.service.cinema.app.notifier.change_event import ChangeEvent
from src.service.cinema.app.notifier.change_notifier import ChangeNotifier
from src.service.cinema.app.notifier.i_change_notifier import IChangeNotifier
from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.enum.booking_state import BookingState
from src.service.cinema.domain.enum.change_kind import ChangeKind
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.cart_entry import CartEntry
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult
from src.service.cinema.domain.value_object.selection import Selection


_F = TypeVar('_F', bound=Callable[..., Any])


def top_level_command(func: _F) -> _F:
    """
    Queue a mutating call made from inside a change handler

    The call then runs after the current notification round as a fresh top-level
    command and returns None to the handler.
    """

    @wraps(func)
    def wrapper(self: 'BookingStateMachine', *args: Any, **kwargs: Any) -> Any:
        if self.notifier.is_delivering:
            Logger.base.debug(f'⏳ [BOOKING] Deferring {func.__name__} issued during notification')
            self.notifier.defer(lambda: func(self, *args, **kwargs))
            return None
        return func(self, *args, **kwargs)

    return cast(_F, wrapper)


@attrs.define(frozen=True)
class _Checkpoint:
    state: BookingState
    session_id: str | None
    selection: Selection | None
    occupancy: dict[str, SeatStatus]


class BookingStateMachine:
    def __init__(
        self,
        *,
        catalogue_store: CatalogueStore,
        data_provider: IDataProvider,
        local_storage: ILocalStorage,
        config: BookingConfig,
        notifier: IChangeNotifier | None = None,
    ) -> None:
        self.catalogue_store = catalogue_store
        self.data_provider = data_provider
        self.local_storage = local_storage
        self.config = config
        self.notifier: IChangeNotifier = notifier or ChangeNotifier()

        self._state = BookingState.IDLE
        self._flow_id = uuid_utils.uuid7()
        self._session_id: str | None = None
        self._selection: Selection | None = None
        self._occupancy: dict[str, SeatStatus] = {}
        self._cart: CartEntry | None = None
        self._contact: ContactInfo | None = None
        self._last_order: OrderResult | None = None

        self._hydrate()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> BookingState:
        return self._state

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def cart(self) -> CartEntry | None:
        return self._cart

    @property
    def contact_defaults(self) -> ContactInfo | None:
        return self._contact

    @property
    def last_order(self) -> OrderResult | None:
        return self._last_order

    def seat_statuses(self) -> dict[str, SeatStatus]:
        """Status of every seat of the selected session in row-major order"""
        if self._selection is None:
            return {}
        layout = self.catalogue_store.get_layout(self._selection.session_id)
        return {
            seat_id: (
                SeatStatus.HELD_BY_ME
                if seat_id in self._selection
                else self._occupancy.get(seat_id, SeatStatus.FREE)
            )
            for seat_id in layout.seat_ids
        }

    def selection_price(self) -> int:
        if not self._selection:
            return 0
        session = self.catalogue_store.get_session(self._selection.session_id)
        return session.price * len(self._selection)

    def snapshot(self) -> BookingSnapshot:
        selected: tuple[str, ...] = ()
        if self._selection:
            layout = self.catalogue_store.get_layout(self._selection.session_id)
            selected = layout.order_seat_ids(self._selection.seat_ids)

        return BookingSnapshot(
            state=self._state,
            session_id=self._session_id or (self._cart.session_id if self._cart else None),
            selected_seat_ids=selected,
            seat_statuses=self.seat_statuses(),
            selection_price=self.selection_price(),
            cart=self._cart,
            contact_defaults=self._contact,
            last_order=self._last_order,
            catalogue_date=self.catalogue_store.catalogue_date,
        )

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    @Logger.io
    async def reload_catalogue(self, *, day: date) -> Catalogue:
        """
        Replace the catalogue and notify catalogue-changed

        A selection (or a session being opened) whose session is missing from the new
        listing, or whose hall no longer has every selected seat, is abandoned and the
        flow returns to idle.

        Raises:
            ProviderError: When the data source fails (nothing changes)
        """
        catalogue = await self.catalogue_store.load(day=day)

        abandoned = self._state in (
            BookingState.BROWSING_SESSION,
            BookingState.SELECTING_SEATS,
        ) and not self._still_listed(session_id=self._session_id, selection=self._selection)
        if abandoned:
            Logger.base.warning(
                f'🎬 [BOOKING] Session {self._session_id} or its selected seats no longer listed, '
                'abandoning selection'
            )
            self._reset_to_idle()
        elif self._selection is not None:
            layout = catalogue.get_layout(self._selection.session_id)
            self._occupancy = {
                seat_id: status for seat_id, status in self._occupancy.items() if seat_id in layout
            }

        self._emit(ChangeKind.CATALOGUE_CHANGED)
        if abandoned:
            self._emit(ChangeKind.SELECTION_CHANGED)
        return catalogue

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @Logger.io
    async def select_session(self, *, session_id: str) -> BookingSnapshot:
        """
        Open a session for seat choice

        Flow:
        1. Reject while a cart entry exists or a provider request is in flight
        2. Unknown session: re-fetch the catalogue of the loaded day once
        3. Fetch fresh occupancy, then enter selecting-seats with no seats chosen

        Raises:
            ConflictError: Cart entry present, request in flight, or order not acknowledged
            NotFoundError: Session missing even after the catalogue re-fetch
            ProviderError: Data source failure (previous state restored)

        A failure that arrives after the flow was cancelled or superseded is discarded
        like a late response.
        """
        self._ensure_can_select()

        checkpoint = self._checkpoint()
        flow_id = self._begin_flow()
        self._state = BookingState.BROWSING_SESSION
        self._session_id = session_id
        self._selection = None
        self._occupancy = {}

        refetched = False
        try:
            if not self.catalogue_store.has_session(session_id):
                await self._refetch_catalogue()
                refetched = True
                if flow_id != self._flow_id:
                    return self._discard_stale(session_id=session_id)
                if not self.catalogue_store.has_session(session_id):
                    raise NotFoundError(f'Session {session_id} not found')

            occupancy = await self.catalogue_store.session_occupancy(session_id=session_id)
        except Exception as e:
            if flow_id != self._flow_id:
                return self._discard_stale(session_id=session_id, error=e)
            self._restore(checkpoint)
            # Subscribers last saw browsing-session through catalogue-changed
            if refetched:
                self._emit(ChangeKind.SELECTION_CHANGED)
            raise

        if flow_id != self._flow_id:
            return self._discard_stale(session_id=session_id)

        self._state = BookingState.SELECTING_SEATS
        self._selection = Selection(session_id=session_id)
        self._occupancy = occupancy

        Logger.base.info(f'🎟️ [BOOKING] Selecting seats for session {session_id}')
        self._emit(ChangeKind.SELECTION_CHANGED)
        return self.snapshot()

    @top_level_command
    @Logger.io
    def toggle_seat(self, seat_id: str) -> BookingSnapshot:
        """
        Add a seat to the selection, or remove it when already selected

        Raises:
            ConflictError: Not selecting seats, or the seat is held by someone else
            ValidationError: The seat is not part of the session's hall
            CapacityError: Adding the seat would exceed the per-booking maximum
        """
        if self._state != BookingState.SELECTING_SEATS or self._selection is None:
            raise ConflictError(f'Cannot toggle seats in state {self._state}')

        selection = self._selection
        layout = self.catalogue_store.get_layout(selection.session_id)
        if seat_id not in layout:
            raise ValidationError(f'Seat {seat_id} is not part of hall {layout.name}')

        if seat_id not in selection:
            if self._occupancy.get(seat_id) == SeatStatus.HELD_BY_OTHERS:
                raise ConflictError(f'Seat {seat_id} is already held')
            if len(selection) >= self.config.max_seats_per_booking:
                raise CapacityError(
                    f'Maximum {self.config.max_seats_per_booking} seats per booking'
                )

        self._selection = selection.toggled(seat_id)
        self._emit(ChangeKind.SELECTION_CHANGED)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    @top_level_command
    @Logger.io
    def commit_to_cart(self) -> CartEntry:
        """
        Move the current selection into the cart and persist the cart record

        Raises:
            ConflictError: Not selecting seats, or a cart entry already exists
            ValidationError: No seat selected
        """
        if self._state != BookingState.SELECTING_SEATS or self._selection is None:
            raise ConflictError(f'Cannot commit to cart in state {self._state}')
        if not self._selection:
            raise ValidationError('Select at least one seat before adding to cart')
        if self._cart is not None:
            raise ConflictError('A cart entry already exists')

        session = self.catalogue_store.get_session(self._selection.session_id)
        layout = self.catalogue_store.get_layout(session.id)
        cart = CartEntry(
            session_id=session.id,
            seat_ids=layout.order_seat_ids(self._selection.seat_ids),
            total_price=session.price * len(self._selection),
            created_at=datetime.now(timezone.utc),
        )

        # Persist first: a storage failure leaves the selection untouched
        self.local_storage.save_cart(cart=cart)

        self._reset_to_idle()
        self._cart = cart
        self._state = BookingState.CART_PENDING

        Logger.base.info(
            f'🛒 [BOOKING] Cart: session {cart.session_id}, seats {list(cart.seat_ids)}, '
            f'total {cart.total_price}'
        )
        self._emit(ChangeKind.CART_CHANGED)
        return cart

    @top_level_command
    @Logger.io
    def clear_cart(self) -> None:
        """
        Raises:
            ConflictError: No cart entry, or its order submission is in flight
        """
        if self._cart is None:
            raise ConflictError('There is no cart entry to clear')
        if self._state == BookingState.ORDERING:
            raise ConflictError('Cannot clear the cart while its order is being submitted')

        self.local_storage.delete_cart()

        self._cart = None
        self._reset_to_idle()

        Logger.base.info('🛒 [BOOKING] Cart cleared')
        self._emit(ChangeKind.CART_CHANGED)

    @top_level_command
    @Logger.io
    def open_cart(self) -> CartEntry:
        """Return to cart-pending with the existing cart entry (after cancel or restart)"""
        if self._cart is None:
            raise ConflictError('There is no cart entry to open')
        if self._state == BookingState.CART_PENDING:
            return self._cart
        if self._state != BookingState.IDLE:
            raise ConflictError(f'Cannot open the cart in state {self._state}')

        self._state = BookingState.CART_PENDING
        self._emit(ChangeKind.CART_CHANGED)
        return self._cart

    # ------------------------------------------------------------------
    # Order
    # ------------------------------------------------------------------

    @Logger.io
    async def submit_order(self, *, contact: ContactInfo | Mapping[str, str]) -> OrderResult:
        """
        Submit the cart entry with contact details

        Flow:
        1. Validate contact (no state change on failure)
        2. Enter ordering and post the order to the provider
        3. Confirmed: persist contact, drop cart record, enter order-complete, notify
        4. Failed or unconfirmed: back to cart-pending, error surfaced for retry

        Raises:
            ConflictError: Not cart-pending (including a submission already in flight),
                or the provider reports a seat as taken
            ValidationError: Contact details missing or malformed
            ProviderError: Data source failure or unconfirmed order
        """
        if self._state == BookingState.ORDERING:
            raise ConflictError('An order submission is already in flight')
        if self._state != BookingState.CART_PENDING or self._cart is None:
            raise ConflictError(f'Cannot submit an order in state {self._state}')

        validated = self._validate_contact(contact)
        cart = self._cart

        self._state = BookingState.ORDERING
        try:
            result = await self.data_provider.post_order(
                session_id=cart.session_id, seat_ids=cart.seat_ids, contact=validated
            )
            if not result.confirmed:
                raise ProviderError(f'Order {result.order_id} was not confirmed')
        except Exception:
            self._state = BookingState.CART_PENDING
            raise

        self._cart = None
        self._contact = validated
        self._last_order = result
        self._state = BookingState.ORDER_COMPLETE
        self._persist_completed_order(contact=validated)

        Logger.base.info(
            f'✅ [BOOKING] Order {result.order_id} confirmed for session {result.session_id}'
        )
        self._emit(ChangeKind.ORDER_COMPLETED)
        return result

    @top_level_command
    @Logger.io
    def acknowledge_order(self) -> None:
        if self._state != BookingState.ORDER_COMPLETE:
            raise ConflictError(f'No completed order to acknowledge in state {self._state}')
        self._state = BookingState.IDLE

    # ------------------------------------------------------------------
    # Escape / contact maintenance
    # ------------------------------------------------------------------

    @top_level_command
    @Logger.io
    def cancel(self) -> None:
        """
        Abandon the current flow and return to idle

        An in-flight occupancy request is not aborted; its response is discarded.
        The cart entry, if any, is kept.

        Raises:
            ConflictError: An order is being submitted, or a completed order awaits acknowledgement
        """
        if self._state == BookingState.ORDERING:
            raise ConflictError('An order submission in flight cannot be cancelled')
        if self._state == BookingState.ORDER_COMPLETE:
            raise ConflictError('Acknowledge the completed order instead of cancelling')

        had_selection = self._state in (
            BookingState.BROWSING_SESSION,
            BookingState.SELECTING_SEATS,
        )
        self._reset_to_idle()

        if had_selection:
            self._emit(ChangeKind.SELECTION_CHANGED)

    @top_level_command
    @Logger.io
    def clear_contact(self) -> None:
        self.local_storage.delete_contact()
        self._contact = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _hydrate(self) -> None:
        """Read the persisted cart and contact records once, at construction"""
        self._cart = self.local_storage.load_cart()
        self._contact = self.local_storage.load_contact()
        if self._cart is not None:
            self._state = BookingState.CART_PENDING

        Logger.base.info(
            f'💾 [BOOKING] Hydrated: cart={"yes" if self._cart else "no"}, '
            f'contact={"yes" if self._contact else "no"}, state={self._state}'
        )

    def _ensure_can_select(self) -> None:
        if self._cart is not None:
            raise ConflictError(
                'A cart entry already exists; clear the cart before selecting another session'
            )
        if self._state.has_request_in_flight:
            raise ConflictError(f'A provider request is in flight (state {self._state})')
        if self._state == BookingState.ORDER_COMPLETE:
            raise ConflictError('Acknowledge the completed order before starting a new one')

    async def _refetch_catalogue(self) -> None:
        day = self.catalogue_store.catalogue_date
        if day is None:
            raise NotFoundError('Catalogue has not been loaded')

        Logger.base.warning(f'🎬 [BOOKING] Unknown session, re-fetching catalogue for {day}')
        await self.catalogue_store.load(day=day)
        self._emit(ChangeKind.CATALOGUE_CHANGED)

    def _validate_contact(self, contact: ContactInfo | Mapping[str, str]) -> ContactInfo:
        if isinstance(contact, ContactInfo):
            return ContactInfo.create(name=contact.name, email=contact.email, phone=contact.phone)
        if isinstance(contact, Mapping):
            return ContactInfo.create(
                name=contact.get('name', ''),
                email=contact.get('email', ''),
                phone=contact.get('phone', ''),
            )
        raise ValidationError('Contact details are required')

    def _persist_completed_order(self, *, contact: ContactInfo) -> None:
        # The order is already confirmed by the provider; storage only mirrors memory
        try:
            self.local_storage.save_contact(contact=contact)
            self.local_storage.delete_cart()
        except OSError as e:
            Logger.base.error(f'💾 [BOOKING] Failed to mirror completed order to storage: {e}')

    def _begin_flow(self) -> uuid_utils.UUID:
        self._flow_id = uuid_utils.uuid7()
        return self._flow_id

    def _reset_to_idle(self) -> None:
        self._begin_flow()
        self._state = BookingState.IDLE
        self._session_id = None
        self._selection = None
        self._occupancy = {}

    def _checkpoint(self) -> _Checkpoint:
        return _Checkpoint(
            state=self._state,
            session_id=self._session_id,
            selection=self._selection,
            occupancy=self._occupancy,
        )

    def _still_listed(self, *, session_id: str | None, selection: Selection | None) -> bool:
        """The session is in the catalogue and its hall holds every selected seat"""
        if session_id is None:
            return True
        if not self.catalogue_store.has_session(session_id):
            return False
        try:
            layout = self.catalogue_store.get_layout(session_id)
        except NotFoundError:
            return False
        return selection is None or all(seat_id in layout for seat_id in selection.seat_ids)

    def _restore(self, checkpoint: _Checkpoint) -> None:
        if not self._still_listed(
            session_id=checkpoint.session_id, selection=checkpoint.selection
        ):
            self._reset_to_idle()
            return
        self._state = checkpoint.state
        self._session_id = checkpoint.session_id
        self._selection = checkpoint.selection
        self._occupancy = checkpoint.occupancy

    def _discard_stale(
        self, *, session_id: str, error: Exception | None = None
    ) -> BookingSnapshot:
        outcome = f'failure ({error!r})' if error is not None else 'response'
        Logger.base.info(
            f'🗑️ [BOOKING] Discarding {outcome} for session {session_id}: flow moved on '
            f'(state={self._state})'
        )
        return self.snapshot()

    def _emit(self, kind: ChangeKind) -> None:
        self.notifier.emit(ChangeEvent(kind=kind, snapshot=self.snapshot()))
