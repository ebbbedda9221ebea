"""
Pydantic models for backend records and response envelopes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator
from pydantic.config import ConfigDict

from estate_admin.exceptions import InvalidStatusError

_DATETIME = TypeAdapter(datetime)


class RecordStatus(str, Enum):
    """Review status shared by payments and registrations."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: Any) -> RecordStatus:
        """Read a backend status; empty means pending, case is ignored."""
        if isinstance(value, cls):
            return value
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.PENDING
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidStatusError(value)


def _coerce_status(value: Any) -> RecordStatus:
    try:
        return RecordStatus.parse(value)
    except InvalidStatusError as exc:
        # pydantic only wraps ValueError/AssertionError into a ValidationError
        raise ValueError(str(exc)) from exc


def parse_amount(value: Any) -> Decimal:
    """Parse a currency amount; missing or unparseable values read as 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


# =============================================================================
# Records
# =============================================================================


class PaymentRecord(BaseModel):
    """A subsequent payment submitted by a subscriber."""

    model_config = ConfigDict(
        extra="allow",
        coerce_numbers_to_str=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "amount": "5000",
                    "status": "pending",
                    "payment_method": "bank_transfer",
                    "transaction_reference": "TRX-0001",
                    "user_id": 7,
                    "user_contact": "08030000000",
                    "user_name": "Amina Bello",
                    "note": "Second installment",
                    "receipt_file": "receipt-1.jpg",
                    "created_at": "2024-05-01T10:00:00Z",
                }
            ]
        },
    )

    id: int | str
    amount: Decimal = Field(default=Decimal("0"), description="Amount in naira")
    status: RecordStatus = RecordStatus.PENDING
    payment_method: str | None = None
    transaction_reference: str | None = None
    user_id: int | str | None = None
    user_contact: str | None = None
    user_name: str | None = None
    note: str | None = None
    receipt_file: str | None = None
    created_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> RecordStatus:
        return _coerce_status(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _normalize_amount(cls, value: Any) -> Decimal:
        return parse_amount(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> datetime | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            return _DATETIME.validate_python(value)
        except ValidationError:
            return None

    @property
    def user_key(self) -> str | None:
        """Key used to count distinct payers: user id, else contact."""
        if self.user_id not in (None, ""):
            return f"id:{self.user_id}"
        if self.user_contact:
            return f"contact:{self.user_contact}"
        return None


class UserRegistration(BaseModel):
    """A subscription (plot purchase) registration awaiting review."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: int | str
    name: str | None = None
    email: str | None = None
    telephone: str | None = None
    occupation: str | None = None
    estate_name: str | None = None
    number_of_plots: int = 0
    status: RecordStatus = RecordStatus.PENDING
    passport_photo: str | None = None
    identification_file: str | None = None
    utility_bill_file: str | None = None
    signature_file: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> RecordStatus:
        return _coerce_status(value)

    @field_validator("number_of_plots", mode="before")
    @classmethod
    def _plots(cls, value: Any) -> int:
        if value in (None, ""):
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0


DOCUMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("passport_photo", "📸 Passport Photo"),
    ("identification_file", "🪪 Identification"),
    ("utility_bill_file", "💡 Utility Bill"),
    ("signature_file", "✍️ Signature"),
)


# =============================================================================
# Derived
# =============================================================================


class AggregateStats(BaseModel):
    """Totals derived from the full payment list."""

    model_config = ConfigDict(frozen=True)

    total_deposited: Decimal = Decimal("0")
    pending_payments: int = 0
    approved_payments: int = 0
    total_users: int = 0


# =============================================================================
# Envelopes
# =============================================================================


class ApiEnvelope(BaseModel):
    """`{success, error?, message?, ...}` wrapper returned by every endpoint."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: str | None = None
    message: str | None = None

    @property
    def failure_reason(self) -> str | None:
        return self.error or self.message

    def records(self, key: str) -> list[dict[str, Any]]:
        """Return the record list stored under ``key`` (``payments`` or ``data``)."""
        extra = self.model_extra or {}
        value = extra.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError(f"Expected a list under {key!r}, got {type(value).__name__}")
        return value
