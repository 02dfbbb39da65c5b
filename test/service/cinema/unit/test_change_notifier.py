"""
Unit tests for ChangeNotifier

Tests the synchronous typed pub/sub used by the booking state machine:
subscription order, handler isolation, unsubscribe during delivery and
FIFO queueing of re-entrant emits.
"""

import pytest

from src.service.cinema.app.dto.booking_snapshot import BookingSnapshot
from src.service.cinema.app.notifier.change_event import ChangeEvent
from src.service.cinema.app.notifier.change_notifier import ChangeNotifier, HandlerFailure
from src.service.cinema.domain.enum.booking_state import BookingState
from src.service.cinema.domain.enum.change_kind import ChangeKind


def _event(kind: ChangeKind, state: BookingState = BookingState.IDLE) -> ChangeEvent:
    return ChangeEvent(kind=kind, snapshot=BookingSnapshot(state=state))


@pytest.mark.unit
class TestChangeNotifier:
    @pytest.fixture
    def failures(self) -> list[HandlerFailure]:
        return []

    @pytest.fixture
    def notifier(self, failures: list[HandlerFailure]) -> ChangeNotifier:
        return ChangeNotifier(on_handler_error=failures.append)

    def test_handlers_run_in_subscription_order(self, notifier: ChangeNotifier) -> None:
        calls: list[str] = []
        notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: calls.append('first'))
        notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: calls.append('second'))

        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert calls == ['first', 'second']

    def test_only_handlers_of_the_emitted_kind_are_called(self, notifier: ChangeNotifier) -> None:
        cart_events: list[ChangeEvent] = []
        order_events: list[ChangeEvent] = []
        notifier.subscribe(ChangeKind.CART_CHANGED, cart_events.append)
        notifier.subscribe(ChangeKind.ORDER_COMPLETED, order_events.append)

        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert len(cart_events) == 1
        assert order_events == []

    def test_subscribe_accepts_kind_value(self, notifier: ChangeNotifier) -> None:
        subscription = notifier.subscribe('selection-changed', lambda e: None)

        assert subscription.kind is ChangeKind.SELECTION_CHANGED
        assert notifier.subscriber_count(ChangeKind.SELECTION_CHANGED) == 1

    def test_subscribe_unknown_kind_raises(self, notifier: ChangeNotifier) -> None:
        with pytest.raises(ValueError):
            notifier.subscribe('seat-exploded', lambda e: None)

    def test_failing_handler_does_not_block_others(
        self, notifier: ChangeNotifier, failures: list[HandlerFailure]
    ) -> None:
        received: list[ChangeEvent] = []

        def broken(event: ChangeEvent) -> None:
            raise RuntimeError('screen crashed')

        notifier.subscribe(ChangeKind.SELECTION_CHANGED, broken)
        notifier.subscribe(ChangeKind.SELECTION_CHANGED, received.append)

        notifier.emit(_event(ChangeKind.SELECTION_CHANGED))

        assert len(received) == 1
        assert len(failures) == 1
        assert failures[0].kind is ChangeKind.SELECTION_CHANGED
        assert isinstance(failures[0].error, RuntimeError)
        assert notifier.is_delivering is False

    def test_failing_error_reporter_is_contained(self) -> None:
        def broken_reporter(failure: HandlerFailure) -> None:
            raise RuntimeError('reporter down')

        notifier = ChangeNotifier(on_handler_error=broken_reporter)
        notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: 1 / 0)

        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert notifier.is_delivering is False

    def test_unsubscribe_stops_delivery_and_is_idempotent(self, notifier: ChangeNotifier) -> None:
        received: list[ChangeEvent] = []
        subscription = notifier.subscribe(ChangeKind.CART_CHANGED, received.append)

        notifier.unsubscribe(subscription)
        notifier.unsubscribe(subscription)
        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert received == []
        assert notifier.subscriber_count(ChangeKind.CART_CHANGED) == 0

    def test_same_handler_subscribed_twice_gets_two_subscriptions(
        self, notifier: ChangeNotifier
    ) -> None:
        received: list[ChangeEvent] = []
        first = notifier.subscribe(ChangeKind.CART_CHANGED, received.append)
        notifier.subscribe(ChangeKind.CART_CHANGED, received.append)

        notifier.emit(_event(ChangeKind.CART_CHANGED))
        notifier.unsubscribe(first)
        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert len(received) == 3

    def test_handler_unsubscribed_mid_delivery_is_skipped(self, notifier: ChangeNotifier) -> None:
        calls: list[str] = []
        later = None

        def first(event: ChangeEvent) -> None:
            calls.append('first')
            notifier.unsubscribe(later)

        notifier.subscribe(ChangeKind.CART_CHANGED, first)
        later = notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: calls.append('later'))

        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert calls == ['first']

    def test_emit_during_delivery_is_queued_until_delivery_completes(
        self, notifier: ChangeNotifier
    ) -> None:
        calls: list[str] = []

        def on_selection(event: ChangeEvent) -> None:
            calls.append('selection:start')
            notifier.emit(_event(ChangeKind.CART_CHANGED))
            calls.append('selection:end')

        notifier.subscribe(ChangeKind.SELECTION_CHANGED, on_selection)
        notifier.subscribe(ChangeKind.SELECTION_CHANGED, lambda e: calls.append('selection:2'))
        notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: calls.append('cart'))

        notifier.emit(_event(ChangeKind.SELECTION_CHANGED))

        assert calls == ['selection:start', 'selection:end', 'selection:2', 'cart']

    def test_defer_runs_immediately_when_idle(self, notifier: ChangeNotifier) -> None:
        calls: list[str] = []

        notifier.defer(lambda: calls.append('job'))

        assert calls == ['job']

    def test_deferred_job_failure_is_reported_without_kind(
        self, notifier: ChangeNotifier, failures: list[HandlerFailure]
    ) -> None:
        def job() -> None:
            raise ValueError('bad command')

        notifier.subscribe(ChangeKind.CART_CHANGED, lambda e: notifier.defer(job))

        notifier.emit(_event(ChangeKind.CART_CHANGED))

        assert len(failures) == 1
        assert failures[0].kind is None
        assert isinstance(failures[0].error, ValueError)

    def test_event_carries_snapshot(self, notifier: ChangeNotifier) -> None:
        received: list[ChangeEvent] = []
        notifier.subscribe(ChangeKind.ORDER_COMPLETED, received.append)

        notifier.emit(_event(ChangeKind.ORDER_COMPLETED, BookingState.ORDER_COMPLETE))

        assert received[0].snapshot.state is BookingState.ORDER_COMPLETE
