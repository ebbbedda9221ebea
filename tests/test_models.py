"""Tests for estate_admin.models"""

from decimal import Decimal

import pydantic
import pytest

from estate_admin.exceptions import InvalidStatusError
from estate_admin.models import ApiEnvelope, PaymentRecord, RecordStatus, UserRegistration, parse_amount


class TestRecordStatus:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("pending", RecordStatus.PENDING),
            ("APPROVED", RecordStatus.APPROVED),
            (" rejected ", RecordStatus.REJECTED),
            (None, RecordStatus.PENDING),
            ("", RecordStatus.PENDING),
            (RecordStatus.APPROVED, RecordStatus.APPROVED),
        ],
    )
    def test_parse(self, value, expected):
        assert RecordStatus.parse(value) is expected

    @pytest.mark.parametrize("value", ["cancelled", "done", 3])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(InvalidStatusError):
            RecordStatus.parse(value)

    def test_exactly_three_values(self):
        assert {s.value for s in RecordStatus} == {"pending", "approved", "rejected"}

    def test_compares_equal_to_plain_string(self):
        assert RecordStatus.APPROVED == "approved"


class TestPaymentRecord:
    def test_parses_backend_row(self, sample_payments):
        payment = PaymentRecord.model_validate(sample_payments[0])
        assert payment.id == 1
        assert payment.amount == Decimal("5000")
        assert payment.status is RecordStatus.APPROVED
        assert payment.created_at.year == 2024

    def test_defaults(self):
        payment = PaymentRecord.model_validate({"id": 9})
        assert payment.amount == 0
        assert payment.status is RecordStatus.PENDING
        assert payment.created_at is None

    def test_unknown_status_is_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            PaymentRecord.model_validate({"id": 1, "status": "refunded"})

    def test_numeric_contact_is_kept_as_text(self):
        payment = PaymentRecord.model_validate({"id": 1, "user_contact": 8030000000})
        assert payment.user_contact == "8030000000"

    @pytest.mark.parametrize("value", ["", "  ", "not-a-date", "2024-13-45"])
    def test_unparseable_created_at_is_none(self, value):
        assert PaymentRecord.model_validate({"id": 1, "created_at": value}).created_at is None

    def test_user_key(self):
        assert PaymentRecord(id=1, user_id=5, user_contact="080").user_key == "id:5"
        assert PaymentRecord(id=1, user_contact="080").user_key == "contact:080"
        assert PaymentRecord(id=1).user_key is None

    def test_extra_fields_are_kept(self):
        payment = PaymentRecord.model_validate({"id": 1, "plot_id": 44})
        assert payment.model_extra == {"plot_id": 44}


class TestUserRegistration:
    def test_parses_backend_row(self, sample_registrations):
        registration = UserRegistration.model_validate(sample_registrations[0])
        assert registration.number_of_plots == 2
        assert registration.status is RecordStatus.PENDING
        assert registration.utility_bill_file is None

    @pytest.mark.parametrize(("value", "expected"), [(None, 0), ("", 0), ("3", 3), ("many", 0)])
    def test_number_of_plots(self, value, expected):
        assert UserRegistration.model_validate({"id": 1, "number_of_plots": value}).number_of_plots == expected


class TestParseAmount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("5000", Decimal("5000")),
            (" 12.5 ", Decimal("12.5")),
            (7, Decimal("7")),
            (None, Decimal("0")),
            (True, Decimal("0")),
            ("NaN", Decimal("0")),
            ("Infinity", Decimal("0")),
            ("₦500", Decimal("0")),
        ],
    )
    def test_parse_amount(self, value, expected):
        assert parse_amount(value) == expected


class TestApiEnvelope:
    def test_records(self):
        envelope = ApiEnvelope.model_validate({"success": True, "payments": [{"id": 1}]})
        assert envelope.records("payments") == [{"id": 1}]
        assert envelope.records("data") == []

    def test_records_must_be_a_list(self):
        envelope = ApiEnvelope.model_validate({"success": True, "data": {"id": 1}})
        with pytest.raises(ValueError):
            envelope.records("data")

    def test_failure_reason(self):
        assert ApiEnvelope(success=False, error="boom").failure_reason == "boom"
        assert ApiEnvelope(success=False, message="nope").failure_reason == "nope"
        assert ApiEnvelope(success=True).failure_reason is None
