"""
Remote record lists with confirmation-gated status transitions.

``RemoteResourceList`` owns the fetch → confirm → mutate → patch → re-fetch
flow once; ``PaymentList`` and ``RegistrationList`` only say which endpoint
to call and which transitions a record allows.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from estate_admin.client import ApiClient
from estate_admin.domain import compute_payment_stats, filter_by_status
from estate_admin.exceptions import (
    EstateAdminError,
    InvalidStatusError,
    InvalidTransitionError,
    RecordNotFoundError,
    user_message,
)
from estate_admin.logging_config import log_event
from estate_admin.models import AggregateStats, PaymentRecord, RecordStatus, UserRegistration

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ConfirmFn = Callable[[Any, RecordStatus], bool]


class TransitionOutcome(str, Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class TransitionResult:
    """What happened to a status change request, ready to show to the admin."""

    outcome: TransitionOutcome
    record_id: Any
    target: RecordStatus | None
    message: str

    @property
    def ok(self) -> bool:
        return self.outcome == TransitionOutcome.APPLIED


class RemoteResourceList(ABC, Generic[T]):
    """
    In-memory copy of a backend list plus the operations the panels need.

    A failed fetch keeps the last list that loaded successfully and records
    an error message instead of raising.
    """

    #: Singular noun used in messages ("payment", "user")
    noun: str = "record"

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self._records: list[T] = []
        self._loading = False
        self._error: str | None = None
        self._loaded_at: datetime | None = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Endpoint hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _load(self) -> list[T]:
        """Fetch the full list from the backend."""

    @abstractmethod
    def _send_status(self, record_id: Any, target: RecordStatus) -> None:
        """Ask the backend to move one record to ``target``."""

    @abstractmethod
    def allowed_targets(self, record: T) -> frozenset[RecordStatus]:
        """Statuses ``record`` may move to from where it is now."""

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def records(self) -> list[T]:
        with self._lock:
            return list(self._records)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def loaded_at(self) -> datetime | None:
        return self._loaded_at

    def get(self, record_id: Any) -> T | None:
        key = str(record_id)
        with self._lock:
            for record in self._records:
                if str(record.id) == key:
                    return record
        return None

    def filtered(self, status: str | RecordStatus = "all") -> list[T]:
        return filter_by_status(self.records, status)

    def clear_error(self) -> None:
        self._error = None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def fetch(self) -> bool:
        """
        Reload the list from the backend.

        Returns:
            True when the list was replaced, False when the fetch failed and
            the previous list was kept.
        """
        self._loading = True
        try:
            records = self._load()
        except EstateAdminError as exc:
            exc.log(logging.WARNING)
            self._error = f"Failed to fetch {self.noun}s. {exc.message}"
            return False
        except Exception as exc:
            self._error = f"Failed to fetch {self.noun}s. {user_message(exc)}"
            return False
        finally:
            self._loading = False

        with self._lock:
            self._records = list(records)
            self._loaded_at = datetime.now(timezone.utc)
        self._error = None
        logger.debug("Loaded %d %ss", len(records), self.noun)
        return True

    def transition(self, record_id: Any, target: RecordStatus | str, confirm: ConfirmFn) -> TransitionResult:
        """
        Move one record to ``target`` after the admin confirms.

        ``confirm(record, target)`` is asked first; when it returns False no
        request is sent and nothing changes. On success the record is patched
        locally and the list is re-fetched. Failures come back as a FAILED
        result, never as an exception.
        """
        try:
            status = RecordStatus.parse(target)
        except InvalidStatusError as exc:
            return self._failed(record_id, None, exc.message)

        record = self.get(record_id)
        if record is None:
            exc = RecordNotFoundError(self.noun.title(), record_id)
            return self._failed(record_id, status, exc.message)

        if status not in self.allowed_targets(record):
            exc = InvalidTransitionError(record_id, record.status.value, status.value)
            return self._failed(record_id, status, str(exc))

        if not confirm(record, status):
            logger.debug("Status change of %s %s to %s cancelled", self.noun, record_id, status.value)
            return TransitionResult(TransitionOutcome.CANCELLED, record_id, status, "Cancelled")

        try:
            self._send_status(record.id, status)
        except EstateAdminError as exc:
            exc.log(logging.WARNING)
            return self._failed(record_id, status, f"Failed to update {self.noun} status. {exc.message}")
        except Exception as exc:
            return self._failed(record_id, status, f"Failed to update {self.noun} status. {user_message(exc)}")

        self._patch(record.id, status)
        log_event(f"{self.noun}_status_changed", record_id=str(record.id), status=status.value)

        # The patch keeps the row right while the re-fetch is in flight
        self.fetch()
        return TransitionResult(
            TransitionOutcome.APPLIED,
            record_id,
            status,
            f"{self.noun.title()} status updated to {status.value}",
        )

    def _patch(self, record_id: Any, status: RecordStatus) -> None:
        key = str(record_id)
        with self._lock:
            self._records = [
                r.model_copy(update={"status": status}) if str(r.id) == key else r
                for r in self._records
            ]

    def _failed(self, record_id: Any, target: RecordStatus | None, message: str) -> TransitionResult:
        logger.warning("Status change of %s %s failed: %s", self.noun, record_id, message)
        return TransitionResult(TransitionOutcome.FAILED, record_id, target, message)


class PaymentList(RemoteResourceList[PaymentRecord]):
    """Subsequent payments awaiting approval."""

    noun = "payment"

    def _load(self) -> list[PaymentRecord]:
        return self.client.list_payments()

    def _send_status(self, record_id: Any, target: RecordStatus) -> None:
        self.client.update_payment_status(record_id, target)

    def allowed_targets(self, record: PaymentRecord) -> frozenset[RecordStatus]:
        if record.status == RecordStatus.PENDING:
            return frozenset({RecordStatus.APPROVED, RecordStatus.REJECTED})
        return frozenset()

    @property
    def stats(self) -> AggregateStats:
        return compute_payment_stats(self.records)


class RegistrationList(RemoteResourceList[UserRegistration]):
    """Subscription registrations; either decision can be revisited."""

    noun = "user"

    def _load(self) -> list[UserRegistration]:
        return self.client.list_registrations()

    def _send_status(self, record_id: Any, target: RecordStatus) -> None:
        self.client.set_registration_status(record_id, target)

    def allowed_targets(self, record: UserRegistration) -> frozenset[RecordStatus]:
        return frozenset({RecordStatus.APPROVED, RecordStatus.REJECTED}) - {record.status}
