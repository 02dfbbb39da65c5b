"""
Change Notifier Implementation

Synchronous, typed pub/sub owned by one booking state machine.

Delivery rules:
- Handlers of a kind run in subscription order
- A failing handler is logged and reported; the remaining handlers still run
- Anything emitted or deferred while a delivery is running is queued (FIFO) and
  processed after the current delivery completes, never interleaved with it
"""

from collections import deque
from typing import Callable

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.app.notifier.i_change_notifier import ChangeHandler
from src.service.cinema.domain.enum.change_kind import ChangeKind


@attrs.define(frozen=True)
class HandlerFailure:
    """A handler or deferred job that raised during delivery"""

    kind: ChangeKind | None
    error: Exception


class ChangeNotifier:
    def __init__(self, *, on_handler_error: Callable[[HandlerFailure], None] | None = None):
        self._subscribers: dict[ChangeKind, list[Subscription]] = {kind: [] for kind in ChangeKind}
        self._queue: deque[Callable[[], None]] = deque()
        self._delivering = False
        self._on_handler_error = on_handler_error

    @property
    def is_delivering(self) -> bool:
        return self._delivering

    def subscriber_count(self, kind: ChangeKind) -> int:
        return len(self._subscribers[kind])

    def subscribe(self, kind: ChangeKind, handler: ChangeHandler) -> Subscription:
        subscription = Subscription(kind=ChangeKind(kind), handler=handler)
        self._subscribers[subscription.kind].append(subscription)
        Logger.base.debug(
            f'📡 [NOTIFIER] Subscribed to {subscription.kind} '
            f'(total subscribers: {len(self._subscribers[subscription.kind])})'
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        subscribers = self._subscribers[subscription.kind]
        if subscription in subscribers:
            subscribers.remove(subscription)
            Logger.base.debug(
                f'📡 [NOTIFIER] Unsubscribed from {subscription.kind} '
                f'(remaining: {len(subscribers)})'
            )

    def emit(self, event: ChangeEvent) -> None:
        self._queue.append(lambda: self._deliver(event))
        self._drain()

    def defer(self, job: Callable[[], None]) -> None:
        """
        Run job as a fresh top-level call

        Runs immediately when no delivery is in progress, otherwise after the
        current delivery (and anything queued before it) has finished.
        """
        self._queue.append(job)
        self._drain()

    def _drain(self) -> None:
        if self._delivering:
            return

        self._delivering = True
        try:
            while self._queue:
                job = self._queue.popleft()
                try:
                    job()
                except Exception as e:
                    # Deferred commands have no caller left to receive the error
                    self._report(kind=None, error=e)
        finally:
            self._delivering = False

    def _deliver(self, event: ChangeEvent) -> None:
        subscribers = list(self._subscribers[event.kind])
        delivered = 0
        failed = 0

        for subscription in subscribers:
            # Unsubscribed by an earlier handler of this same delivery
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
                delivered += 1
            except Exception as e:
                failed += 1
                self._report(kind=event.kind, error=e)

        Logger.base.info(
            f'📡 [NOTIFIER] {event.kind} (state={event.snapshot.state}): '
            f'delivered={delivered}, failed={failed}'
        )

    def _report(self, *, kind: ChangeKind | None, error: Exception) -> None:
        Logger.base.opt(exception=error).error(
            f'⚠️ [NOTIFIER] Handler failed for {kind or "deferred job"}: '
            f'{type(error).__name__}: {error}'
        )
        if self._on_handler_error is not None:
            try:
                self._on_handler_error(HandlerFailure(kind=kind, error=error))
            except Exception as reporter_error:
                Logger.base.error(f'⚠️ [NOTIFIER] Error reporter failed: {reporter_error}')
