from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, TypeVar
from urllib.parse import quote, urlsplit

from estate_admin.models import (
    DOCUMENT_FIELDS,
    AggregateStats,
    PaymentRecord,
    RecordStatus,
    UserRegistration,
    parse_amount,
)

R = TypeVar("R")

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def compute_payment_stats(payments: Iterable[PaymentRecord]) -> AggregateStats:
    """Derive dashboard totals from the full payment list.

    Args:
        payments: Every payment currently loaded.

    Returns:
        AggregateStats with the sum of approved amounts, pending/approved
        counts and the number of distinct payers (user id, else contact).
    """
    total = Decimal("0")
    pending = 0
    approved = 0
    users: set[str] = set()

    for payment in payments:
        if payment.status == RecordStatus.APPROVED:
            total += payment.amount
            approved += 1
        elif payment.status == RecordStatus.PENDING:
            pending += 1

        key = payment.user_key
        if key is not None:
            users.add(key)

    return AggregateStats(
        total_deposited=total,
        pending_payments=pending,
        approved_payments=approved,
        total_users=len(users),
    )


def format_currency(value: Any, *, symbol: str = "₦") -> str:
    """Format an amount as naira with two decimals; blanks and junk show as 0."""
    amount = parse_amount(value)
    if amount == 0:
        return f"{symbol}0"
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def filter_by_status(records: Sequence[R], status: str | RecordStatus) -> list[R]:
    """Return records whose status matches; ``"all"`` keeps everything."""
    if status == "all":
        return list(records)
    wanted = RecordStatus.parse(status)
    return [r for r in records if getattr(r, "status", None) == wanted]


def pluralize_results(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'} found"


def resolve_file_url(file_path: str | None, asset_host: str, *, folder: str = "uploads") -> str | None:
    """
    Turn a stored upload path into a URL on the asset host.

    Fully qualified URLs are returned unchanged. Anything else (a bare
    filename, a Unix path or a Windows path) is reduced to its final segment,
    percent-encoded and placed under ``{asset_host}/{folder}/``.
    """
    if not file_path:
        return None
    if urlsplit(file_path).scheme.lower() in ("http", "https"):
        return file_path

    filename = file_path.replace("\\", "/").rstrip("/").split("/")[-1]
    if not filename:
        return None
    host = asset_host.rstrip("/")
    folder = folder.strip("/")
    return f"{host}/{folder}/{quote(filename, safe=_URI_COMPONENT_SAFE)}"


def receipt_url(payment: PaymentRecord, asset_host: str) -> str | None:
    return resolve_file_url(payment.receipt_file, asset_host, folder="uploads/receipts")


def document_links(registration: UserRegistration, asset_host: str) -> list[tuple[str, str]]:
    """List (label, url) pairs for the uploaded documents that are present."""
    links = []
    for field_name, label in DOCUMENT_FIELDS:
        url = resolve_file_url(getattr(registration, field_name, None), asset_host)
        if url:
            links.append((label, url))
    return links


def record_details(record: UserRegistration | PaymentRecord) -> list[tuple[str, str]]:
    """Every field of a record as display strings, ``-`` for empty values."""
    rows = []
    for key, value in record.model_dump(mode="json").items():
        display = "-" if value is None or value == "" else str(value)
        rows.append((key, display))
    return rows


def display_or(value: Any, fallback: str = "N/A") -> str:
    if value is None or value == "":
        return fallback
    return str(value)


def format_date(record: PaymentRecord) -> str:
    if record.created_at is None:
        return "N/A"
    return record.created_at.strftime("%Y-%m-%d")
