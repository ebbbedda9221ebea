"""
HTTP client for the estate backend.

Wraps every endpoint the admin panels use and converts transport and
envelope failures into the exceptions in ``estate_admin.exceptions``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import pydantic
import requests

from estate_admin.config import Settings, get_settings
from estate_admin.exceptions import (
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    ExternalAPIError,
    MalformedResponseError,
    MissingCredentialsError,
    OperationFailedError,
)
from estate_admin.logging_config import PerformanceTracker
from estate_admin.models import ApiEnvelope, PaymentRecord, RecordStatus, UserRegistration

logger = logging.getLogger(__name__)


PAYMENTS_PATH = "/user-subsequent-payments"
REGISTRATIONS_PATH = "/subscriptions/all"


@dataclass(frozen=True)
class AdminCredentials:
    """Bearer token for the admin-only endpoints."""

    token: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> AdminCredentials:
        settings = settings or get_settings()
        return cls(token=settings.admin_token)

    def __bool__(self) -> bool:
        return bool(self.token)

    def __repr__(self) -> str:
        return f"AdminCredentials(token={'***' if self.token else None})"


class ApiClient:
    """
    Thin wrapper over ``requests.Session`` for the estate REST API.

    Args:
        base_url: API root, e.g. ``https://host/api``.
        credentials: Admin token used for the subscription endpoints.
        timeout: Per-request timeout in seconds.
        session: Optional session (tests pass a mock).
    """

    def __init__(
        self,
        base_url: str,
        *,
        credentials: AdminCredentials | None = None,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials or AdminCredentials()
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        credentials: AdminCredentials | None = None,
        session: requests.Session | None = None,
    ) -> ApiClient:
        settings = settings or get_settings()
        return cls(
            settings.api_base_url,
            credentials=credentials if credentials is not None else AdminCredentials.from_settings(settings),
            timeout=settings.request_timeout_seconds,
            session=session,
        )

    def with_credentials(self, credentials: AdminCredentials) -> ApiClient:
        """Return a client sharing this session but using other credentials."""
        return ApiClient(self.base_url, credentials=credentials, timeout=self.timeout, session=self.session)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def list_payments(self) -> list[PaymentRecord]:
        envelope = self._request("GET", PAYMENTS_PATH)
        return self._parse_records(envelope, "payments", PaymentRecord, PAYMENTS_PATH)

    def update_payment_status(self, payment_id: Any, status: RecordStatus | str) -> None:
        status = RecordStatus.parse(status)
        path = f"{PAYMENTS_PATH}/{payment_id}/status"
        self._request("PATCH", path, json={"status": status.value})

    # ------------------------------------------------------------------
    # Registrations
    # ------------------------------------------------------------------

    def list_registrations(self) -> list[UserRegistration]:
        envelope = self._request("GET", REGISTRATIONS_PATH, auth=True)
        return self._parse_records(envelope, "data", UserRegistration, REGISTRATIONS_PATH)

    def approve_registration(self, registration_id: Any) -> None:
        self._request("PUT", f"/subscriptions/{registration_id}/approve", auth=True)

    def reject_registration(self, registration_id: Any) -> None:
        self._request("PUT", f"/subscriptions/{registration_id}/reject", auth=True)

    def set_registration_status(self, registration_id: Any, status: RecordStatus | str) -> None:
        status = RecordStatus.parse(status)
        if status == RecordStatus.APPROVED:
            self.approve_registration(registration_id)
        elif status == RecordStatus.REJECTED:
            self.reject_registration(registration_id)
        else:
            raise ValueError("Registrations can only be approved or rejected")

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def file_exists(self, url: str) -> bool:
        """HEAD-check an asset URL. Never raises."""
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            logger.debug("HEAD %s failed: %s", url, exc)
            return False
        logger.debug("HEAD %s -> %s", url, response.status_code)
        return bool(response.ok)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _headers(self, path: str, auth: bool) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if auth:
            if not self.credentials:
                raise MissingCredentialsError(path)
            headers["Authorization"] = f"Bearer {self.credentials.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = False,
        json: dict[str, Any] | None = None,
    ) -> ApiEnvelope:
        headers = self._headers(path, auth)
        url = f"{self.base_url}{path}"

        with PerformanceTracker("api_call", method=method, endpoint=path):
            try:
                response = self.session.request(method, url, headers=headers, json=json, timeout=self.timeout)
            except requests.Timeout as exc:
                logger.warning("%s %s timed out: %s", method, path, exc)
                raise APITimeoutError(path, timeout_seconds=self.timeout) from exc
            except requests.RequestException as exc:
                logger.warning("%s %s failed: %s", method, path, exc)
                raise APIConnectionError(path, reason=str(exc)) from exc

        status_code = response.status_code
        if status_code in (401, 403):
            raise AuthenticationError(path, status_code=status_code)

        try:
            body = response.json()
        except ValueError as exc:
            if status_code >= 400:
                raise ExternalAPIError("Request failed", endpoint=path, status_code=status_code) from exc
            raise MalformedResponseError(path, reason="Body is not valid JSON", status_code=status_code) from exc

        if not isinstance(body, dict):
            raise MalformedResponseError(
                path,
                reason=f"Expected a JSON object, got {type(body).__name__}",
                status_code=status_code,
            )

        try:
            envelope = ApiEnvelope.model_validate(body)
        except pydantic.ValidationError as exc:
            raise MalformedResponseError(path, reason=str(exc), status_code=status_code) from exc

        if status_code >= 400:
            raise ExternalAPIError(
                envelope.failure_reason or "Request failed",
                endpoint=path,
                status_code=status_code,
            )
        if not envelope.success:
            raise OperationFailedError(path, reason=envelope.failure_reason)

        logger.debug("%s %s -> %s", method, path, status_code)
        return envelope

    @staticmethod
    def _parse_records(envelope: ApiEnvelope, key: str, model: type[pydantic.BaseModel], path: str) -> list:
        """Validate each row on its own; rows that fail are logged and skipped."""
        try:
            items = envelope.records(key)
        except ValueError as exc:
            raise MalformedResponseError(path, reason=str(exc)) from exc

        records = []
        for index, item in enumerate(items):
            try:
                records.append(model.model_validate(item))
            except pydantic.ValidationError as exc:
                row_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    "Skipping invalid %s row",
                    model.__name__,
                    extra={"endpoint": path, "row_index": index, "row_id": row_id, "errors": exc.error_count()},
                )
        return records
