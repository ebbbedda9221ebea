"""
Tests for estate_admin.domain module.

Covers:
- Aggregate payment statistics
- File URL resolution for uploads and receipts
- Currency formatting
- Status filtering and result counts
- Document links and record details
"""

from decimal import Decimal

import pytest

from estate_admin import domain
from estate_admin.models import PaymentRecord, RecordStatus, UserRegistration

HOST = "https://assets.test"


def _payments(rows):
    return [PaymentRecord.model_validate(row) for row in rows]


class TestComputePaymentStats:
    """Tests for aggregate statistics over a payment list."""

    def test_example_scenario(self):
        payments = _payments(
            [
                {"id": 1, "amount": "5000", "status": "approved"},
                {"id": 2, "amount": "3000", "status": "pending"},
            ]
        )
        stats = domain.compute_payment_stats(payments)

        assert stats.total_deposited == Decimal("5000")
        assert stats.pending_payments == 1
        assert stats.approved_payments == 1

    def test_matches_independent_recomputation(self, sample_payments):
        payments = _payments(sample_payments)
        stats = domain.compute_payment_stats(payments)

        approved = [p for p in sample_payments if p["status"] == "approved"]
        assert stats.total_deposited == sum(Decimal(p["amount"]) for p in approved)
        assert stats.approved_payments == len(approved)
        assert stats.pending_payments == sum(1 for p in sample_payments if p["status"] == "pending")
        keys = {p["user_id"] if p["user_id"] is not None else p["user_contact"] for p in sample_payments}
        assert stats.total_users == len(keys)

    def test_empty_list(self):
        stats = domain.compute_payment_stats([])
        assert stats.total_deposited == 0
        assert stats.pending_payments == 0
        assert stats.approved_payments == 0
        assert stats.total_users == 0

    def test_rejected_amounts_are_not_deposited(self):
        payments = _payments([{"id": 1, "amount": "900", "status": "rejected", "user_id": 1}])
        stats = domain.compute_payment_stats(payments)
        assert stats.total_deposited == 0
        assert stats.total_users == 1

    def test_unparseable_amount_counts_as_zero(self):
        payments = _payments(
            [
                {"id": 1, "amount": "abc", "status": "approved"},
                {"id": 2, "amount": "250.25", "status": "approved"},
            ]
        )
        stats = domain.compute_payment_stats(payments)
        assert stats.total_deposited == Decimal("250.25")
        assert stats.approved_payments == 2

    def test_distinct_users_by_id_then_contact(self):
        payments = _payments(
            [
                {"id": 1, "user_id": 7, "user_contact": "0801"},
                {"id": 2, "user_id": 7, "user_contact": "0802"},
                {"id": 3, "user_contact": "0803"},
                {"id": 4, "user_contact": "0803"},
                {"id": 5},
            ]
        )
        assert domain.compute_payment_stats(payments).total_users == 2


class TestResolveFileUrl:
    """Tests for upload path to URL resolution."""

    @pytest.mark.parametrize(
        "path",
        ["C:\\docs\\id.png", "/docs/id.png", "docs/id.png", "id.png"],
    )
    def test_paths_resolve_to_upload_url(self, path):
        assert domain.resolve_file_url(path, HOST) == f"{HOST}/uploads/id.png"

    @pytest.mark.parametrize(
        "url",
        [
            "https://cdn.test/uploads/id.png",
            "http://cdn.test/a%20b.png",
            "HTTPS://cdn.test/files/id.png",
            "Http://cdn.test/id.png",
        ],
    )
    def test_qualified_url_is_unchanged(self, url):
        assert domain.resolve_file_url(url, HOST) == url

    def test_idempotent(self):
        once = domain.resolve_file_url("C:\\uploads\\passport 21.jpg", HOST)
        assert domain.resolve_file_url(once, HOST) == once

    def test_filename_is_percent_encoded(self):
        url = domain.resolve_file_url("C:\\uploads\\passport 21 (1).jpg", HOST)
        assert url == f"{HOST}/uploads/passport%2021%20(1).jpg"

    @pytest.mark.parametrize("path", [None, "", "/", "\\"])
    def test_empty_paths(self, path):
        assert domain.resolve_file_url(path, HOST) is None

    def test_trailing_slash_on_host(self):
        assert domain.resolve_file_url("a.png", HOST + "/") == f"{HOST}/uploads/a.png"

    def test_receipt_url(self):
        payment = PaymentRecord(id=1, receipt_file="r-1.jpg")
        assert domain.receipt_url(payment, HOST) == f"{HOST}/uploads/receipts/r-1.jpg"

    def test_receipt_url_missing(self):
        assert domain.receipt_url(PaymentRecord(id=1), HOST) is None


class TestFormatCurrency:
    """Tests for naira formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("5000", "₦5,000.00"),
            (1234567.5, "₦1,234,567.50"),
            (Decimal("0.5"), "₦0.50"),
            (None, "₦0"),
            ("", "₦0"),
            ("not a number", "₦0"),
            (0, "₦0"),
            ("-20", "-₦20.00"),
        ],
    )
    def test_format_currency(self, value, expected):
        assert domain.format_currency(value) == expected

    def test_custom_symbol(self):
        assert domain.format_currency("10", symbol="NGN ") == "NGN 10.00"


class TestFilterByStatus:
    """Tests for status filtering."""

    def test_all_returns_everything(self, sample_payments):
        payments = _payments(sample_payments)
        assert domain.filter_by_status(payments, "all") == payments

    @pytest.mark.parametrize("status", ["pending", "approved", "rejected", RecordStatus.PENDING])
    def test_single_status(self, sample_payments, status):
        payments = _payments(sample_payments)
        result = domain.filter_by_status(payments, status)
        assert len(result) == 1
        assert result[0].status == RecordStatus.parse(status)

    def test_pluralize_results(self):
        assert domain.pluralize_results(0, "payment") == "0 payments found"
        assert domain.pluralize_results(1, "payment") == "1 payment found"
        assert domain.pluralize_results(2, "payment") == "2 payments found"


class TestDocumentsAndDetails:
    """Tests for registration document links and the details listing."""

    def test_document_links_skip_missing(self, sample_registrations):
        registration = UserRegistration.model_validate(sample_registrations[0])
        links = domain.document_links(registration, HOST)

        assert [label for label, _ in links] == ["📸 Passport Photo", "🪪 Identification", "✍️ Signature"]
        assert links[0][1] == f"{HOST}/uploads/passport%2021.jpg"
        assert links[1][1] == f"{HOST}/uploads/id-21.png"
        assert links[2][1] == f"{HOST}/uploads/sig-21.png"

    def test_no_documents(self, sample_registrations):
        registration = UserRegistration.model_validate(sample_registrations[1])
        assert domain.document_links(registration, HOST) == []

    def test_record_details_lists_every_field(self, sample_registrations):
        registration = UserRegistration.model_validate({**sample_registrations[1], "referral": "agent-7"})
        details = dict(domain.record_details(registration))

        assert details["name"] == "Ibrahim Sani"
        assert details["status"] == "approved"
        assert details["passport_photo"] == "-"
        assert details["referral"] == "agent-7"

    def test_record_details_keeps_zero(self):
        registration = UserRegistration.model_validate({"id": 5, "name": "", "number_of_plots": 0})
        details = dict(domain.record_details(registration))

        assert details["number_of_plots"] == "0"
        assert details["name"] == "-"

    def test_display_helpers(self):
        assert domain.display_or(None) == "N/A"
        assert domain.display_or("", "-") == "-"
        assert domain.display_or("cash") == "cash"
        assert domain.format_date(PaymentRecord(id=1)) == "N/A"
        assert domain.format_date(PaymentRecord(id=1, created_at="2024-05-01T10:00:00Z")) == "2024-05-01"
