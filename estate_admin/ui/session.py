"""
Session state helpers for the Streamlit UI.

Every browser session gets its own API client, resource lists and
notification hub; nothing is shared between admins.
"""

from __future__ import annotations

import time
import uuid
import streamlit as st

from estate_admin.client import AdminCredentials, ApiClient
from estate_admin.config import get_settings
from estate_admin.notifications import NewPaymentWatcher, NotificationHub, PaymentNotification
from estate_admin.resources import PaymentList, RegistrationList, TransitionResult

_RECENT_NOTIFICATIONS_LIMIT = 10


def init_session_state() -> None:
    settings = get_settings()
    if "_session_id" not in st.session_state:
        st.session_state["_session_id"] = str(uuid.uuid4())
    if "_admin_token" not in st.session_state:
        st.session_state["_admin_token"] = settings.admin_token or ""
    if "_client" not in st.session_state:
        st.session_state["_client"] = ApiClient.from_settings(
            settings,
            credentials=AdminCredentials(st.session_state["_admin_token"] or None),
        )
    if "_payments" not in st.session_state:
        st.session_state["_payments"] = PaymentList(st.session_state["_client"])
    if "_registrations" not in st.session_state:
        st.session_state["_registrations"] = RegistrationList(st.session_state["_client"])
    if "_flashes" not in st.session_state:
        st.session_state["_flashes"] = []
    if "_notifications" not in st.session_state:
        _init_notifications()


def _init_notifications() -> None:
    received: list[PaymentNotification] = []

    def remember(event: PaymentNotification) -> None:
        received.insert(0, event)
        del received[_RECENT_NOTIFICATIONS_LIMIT:]

    hub = NotificationHub()
    st.session_state["_notification_subscription"] = hub.subscribe(remember)
    st.session_state["_notifications"] = received
    st.session_state["_watcher"] = NewPaymentWatcher(st.session_state["_payments"], hub)
    st.session_state["_last_poll"] = 0.0


def get_session_id() -> str:
    return st.session_state.get("_session_id", "default")


def get_payments() -> PaymentList:
    return st.session_state["_payments"]


def get_registrations() -> RegistrationList:
    return st.session_state["_registrations"]


def get_client() -> ApiClient:
    return st.session_state["_client"]


def get_admin_token() -> str:
    return st.session_state.get("_admin_token", "")


def set_admin_token(token: str) -> None:
    """Swap the credentials used by the registration endpoints."""
    token = (token or "").strip()
    if token == get_admin_token():
        return
    st.session_state["_admin_token"] = token
    client = get_client().with_credentials(AdminCredentials(token or None))
    st.session_state["_client"] = client
    get_payments().client = client
    registrations = get_registrations()
    registrations.client = client
    registrations.clear_error()


# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------


def get_watcher() -> NewPaymentWatcher:
    return st.session_state["_watcher"]


def get_recent_notifications() -> list[PaymentNotification]:
    return list(st.session_state.get("_notifications", []))


def poll_due(interval: float) -> bool:
    """True when at least ``interval`` seconds passed since the last poll."""
    now = time.monotonic()
    if now - st.session_state.get("_last_poll", 0.0) < interval:
        return False
    st.session_state["_last_poll"] = now
    return True


# -----------------------------------------------------------------------------
# Flash messages
# -----------------------------------------------------------------------------


def push_flash(result: TransitionResult) -> None:
    st.session_state.setdefault("_flashes", []).append(result)


def pop_flashes() -> list[TransitionResult]:
    flashes = st.session_state.get("_flashes", [])
    st.session_state["_flashes"] = []
    return flashes


def queue_toasts(texts) -> None:
    st.session_state.setdefault("_toasts", []).extend(texts)


def pop_toasts() -> list[str]:
    toasts = st.session_state.get("_toasts", [])
    st.session_state["_toasts"] = []
    return toasts
