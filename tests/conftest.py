"""
Pytest configuration and shared fixtures for estate-admin tests.
"""

import copy
import re
from pathlib import Path
from typing import Any, Dict
from unittest import mock

import pytest
import requests


# Add repo root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from estate_admin.client import AdminCredentials, ApiClient  # noqa: E402


BASE_URL = "https://api.test/api"
ASSET_HOST = "https://api.test"
TOKEN = "secret-admin-token"


def make_response(status_code: int = 200, body: Any = None, *, invalid_json: bool = False) -> mock.Mock:
    """Build a stand-in for ``requests.Response``."""
    response = mock.Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = body
    return response


class FakeBackend:
    """
    In-memory version of the estate API, driven through a mocked session.

    ``overrides[(method, path)]`` can hold a response or an exception to
    return instead of the normal behaviour.
    """

    def __init__(self, payments: list[Dict[str, Any]], registrations: list[Dict[str, Any]]) -> None:
        self.payments = copy.deepcopy(payments)
        self.registrations = copy.deepcopy(registrations)
        self.calls: list[tuple[str, str, Any, Dict[str, str]]] = []
        self.overrides: Dict[tuple[str, str], Any] = {}

    def calls_for(self, method: str) -> list[tuple[str, str, Any, Dict[str, str]]]:
        return [call for call in self.calls if call[0] == method]

    def request(self, method, url, headers=None, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append((method, path, json, headers or {}))

        override = self.overrides.get((method, path))
        if isinstance(override, BaseException):
            raise override
        if override is not None:
            return override

        if method == "GET" and path == "/user-subsequent-payments":
            return make_response(200, {"success": True, "payments": copy.deepcopy(self.payments)})

        if match := re.fullmatch(r"/user-subsequent-payments/([^/]+)/status", path):
            for payment in self.payments:
                if str(payment["id"]) == match.group(1):
                    payment["status"] = json["status"]
                    return make_response(200, {"success": True})
            return make_response(404, {"success": False, "error": "Payment not found"})

        if path.startswith("/subscriptions") and (headers or {}).get("Authorization") != f"Bearer {TOKEN}":
            return make_response(401, {"success": False, "message": "Unauthorized"})

        if method == "GET" and path == "/subscriptions/all":
            return make_response(200, {"success": True, "data": copy.deepcopy(self.registrations)})

        if match := re.fullmatch(r"/subscriptions/([^/]+)/(approve|reject)", path):
            for registration in self.registrations:
                if str(registration["id"]) == match.group(1):
                    registration["status"] = "approved" if match.group(2) == "approve" else "rejected"
                    return make_response(200, {"success": True})
            return make_response(404, {"success": False, "message": "Subscription not found"})

        return make_response(404, {"success": False, "error": f"No route for {method} {path}"})


@pytest.fixture
def sample_payments() -> list[Dict[str, Any]]:
    """Sample payment records as the backend returns them."""
    return [
        {
            "id": 1,
            "amount": "5000",
            "status": "approved",
            "payment_method": "bank_transfer",
            "transaction_reference": "TRX-0001",
            "user_id": 10,
            "user_contact": "08030000001",
            "user_name": "Amina Bello",
            "note": None,
            "receipt_file": "receipt-1.jpg",
            "created_at": "2024-05-01T10:00:00Z",
        },
        {
            "id": 2,
            "amount": "3000",
            "status": "pending",
            "payment_method": "cash",
            "transaction_reference": "TRX-0002",
            "user_id": 11,
            "user_contact": "08030000002",
            "user_name": "Chidi Okafor",
            "note": "Second installment",
            "receipt_file": None,
            "created_at": "2024-05-02T09:30:00Z",
        },
        {
            "id": 3,
            "amount": "1500.50",
            "status": "rejected",
            "payment_method": "pos",
            "transaction_reference": "TRX-0003",
            "user_id": None,
            "user_contact": "08030000003",
            "user_name": "Tunde Ade",
            "note": None,
            "receipt_file": "uploads\\receipts\\r3.png",
            "created_at": "2024-05-03T08:00:00Z",
        },
    ]


@pytest.fixture
def sample_registrations() -> list[Dict[str, Any]]:
    """Sample subscription registrations as the backend returns them."""
    return [
        {
            "id": 21,
            "name": "Fatima Musa",
            "email": "fatima@example.com",
            "telephone": "08031111111",
            "occupation": "Teacher",
            "estate_name": "Musabaha Gardens",
            "number_of_plots": 2,
            "status": "pending",
            "passport_photo": "C:\\uploads\\passport 21.jpg",
            "identification_file": "/var/app/uploads/id-21.png",
            "utility_bill_file": None,
            "signature_file": "sig-21.png",
        },
        {
            "id": 22,
            "name": "Ibrahim Sani",
            "email": "ibrahim@example.com",
            "telephone": "08032222222",
            "occupation": "Engineer",
            "estate_name": "Musabaha Heights",
            "number_of_plots": 1,
            "status": "approved",
        },
    ]


@pytest.fixture
def backend(sample_payments, sample_registrations) -> FakeBackend:
    return FakeBackend(sample_payments, sample_registrations)


@pytest.fixture
def mock_session(backend: FakeBackend) -> mock.Mock:
    session = mock.Mock(spec=requests.Session)
    session.request.side_effect = backend.request
    return session


@pytest.fixture
def client(mock_session: mock.Mock) -> ApiClient:
    return ApiClient(BASE_URL, credentials=AdminCredentials(TOKEN), timeout=5, session=mock_session)


@pytest.fixture
def anonymous_client(mock_session: mock.Mock) -> ApiClient:
    return ApiClient(BASE_URL, timeout=5, session=mock_session)
