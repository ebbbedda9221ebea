"""
New-payment notifications by polling.

The backend offers no push channel, so the payment list is re-fetched on an
interval and ids that were not there before are published to subscribers.

Usage:
    hub = NotificationHub()
    subscription = hub.subscribe(lambda event: print(event.payment.id))

    watcher = NewPaymentWatcher(payments, hub)
    with PaymentPoller(watcher, interval=30):
        ...

    subscription.cancel()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from estate_admin.models import PaymentRecord
from estate_admin.resources import PaymentList

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentNotification:
    payment: PaymentRecord
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def title(self) -> str:
        return "New Subsequent Payment Received!"

    @property
    def text(self) -> str:
        who = self.payment.user_name or self.payment.user_contact or "A user"
        return f"{who} has made a new subsequent payment. Check the payments list for details."


Listener = Callable[[PaymentNotification], None]


class Subscription:
    """Handle returned by ``NotificationHub.subscribe``."""

    def __init__(self, hub: NotificationHub, listener: Listener) -> None:
        self._hub = hub
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._hub._remove(self)
            self.active = False


class NotificationHub:
    """Minimal thread-safe publish/subscribe for payment notifications."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Subscription:
        subscription = Subscription(self, listener)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def publish(self, event: PaymentNotification) -> int:
        """Deliver ``event`` to every subscriber; returns how many received it."""
        with self._lock:
            subscriptions = list(self._subscriptions)

        delivered = 0
        for subscription in subscriptions:
            try:
                subscription.listener(event)
            except Exception:
                logger.exception("Notification listener failed")
                continue
            delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)


class NewPaymentWatcher:
    """
    Detects payments that appeared since the previous poll.

    The first successful poll only records what exists; later polls publish
    one notification per unseen payment id.
    """

    def __init__(self, payments: PaymentList, hub: NotificationHub) -> None:
        self.payments = payments
        self.hub = hub
        self._seen: set[str] | None = None
        self._lock = threading.Lock()

    @property
    def primed(self) -> bool:
        return self._seen is not None

    def prime(self) -> None:
        """Mark the currently loaded payments as already seen."""
        with self._lock:
            self._seen = {str(p.id) for p in self.payments.records}

    def poll(self) -> list[PaymentNotification]:
        if not self.payments.fetch():
            logger.debug("Payment poll skipped: %s", self.payments.error)
            return []

        current = self.payments.records
        with self._lock:
            if self._seen is None:
                self._seen = {str(p.id) for p in current}
                return []
            fresh = [p for p in current if str(p.id) not in self._seen]
            self._seen.update(str(p.id) for p in fresh)

        events = [PaymentNotification(payment) for payment in fresh]
        for event in events:
            self.hub.publish(event)
        if events:
            logger.info("%d new payment(s) received", len(events))
        return events


class PaymentPoller:
    """
    Background thread that calls ``watcher.poll()`` every ``interval`` seconds.

    ``stop()`` wakes the thread immediately and joins it.
    """

    def __init__(self, watcher: NewPaymentWatcher, *, interval: float = 30.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.watcher = watcher
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> PaymentPoller:
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="payment-poller", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.watcher.poll()
            except Exception:
                logger.exception("Payment poll failed")

    def __enter__(self) -> PaymentPoller:
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
