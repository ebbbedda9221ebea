"""
Page renderers for Streamlit UI.
"""

from __future__ import annotations

import html
import logging

import streamlit as st

from estate_admin.config import get_settings
from estate_admin.domain import display_or, format_currency, format_date, pluralize_results, receipt_url
from estate_admin.models import PaymentRecord, RecordStatus, UserRegistration
from estate_admin.resources import PaymentList, RegistrationList
from estate_admin.ui.components import (
    confirm_status_dialog,
    details_dialog,
    documents_dialog,
    render_empty_state,
    render_flashes,
    render_page_header,
    render_payment_notifications,
    render_stat_cards,
    render_table_header,
    status_badge,
)
from estate_admin.ui.session import (
    get_admin_token,
    get_payments,
    get_recent_notifications,
    get_registrations,
    set_admin_token,
)

logger = logging.getLogger(__name__)

PANELS = {
    "payments": "💳 Payment Approval",
    "users": "👥 Registered Users",
}

STATUS_FILTERS = ("all", "pending", "approved", "rejected")

STATUS_FILTER_LABELS = {
    "all": "All Payments",
    "pending": "Pending Approval",
    "approved": "Approved",
    "rejected": "Rejected",
}

_PAYMENT_COLUMNS = ["#", "User Name", "Contact", "Amount", "Method", "Reference", "Date", "Status", "Actions"]
_PAYMENT_WIDTHS = [0.4, 1.6, 1.2, 1.1, 1.0, 1.3, 0.9, 0.9, 1.6]

_USER_COLUMNS = ["#", "Name", "Email", "Telephone", "Occupation", "Estate", "Plots", "Status", "Actions"]
_USER_WIDTHS = [0.4, 1.3, 1.7, 1.1, 1.1, 1.2, 0.5, 0.9, 2.0]


def render_sidebar() -> str:
    st.sidebar.title(get_settings().app_title)

    panel = st.sidebar.radio(
        "Panel",
        list(PANELS),
        format_func=lambda key: PANELS[key],
        label_visibility="collapsed",
    )

    st.sidebar.divider()
    token = st.sidebar.text_input(
        "Admin token",
        value=get_admin_token(),
        type="password",
        help="Bearer token for the registration endpoints. Defaults to ESTATE_ADMIN_TOKEN.",
    )
    set_admin_token(token)

    notifications = get_recent_notifications()
    if notifications:
        st.sidebar.divider()
        st.sidebar.markdown("### 🔔 Recent Payments")
        for event in notifications[:5]:
            st.sidebar.caption(
                f"{display_or(event.payment.user_name)} · "
                f"{format_currency(event.payment.amount, symbol=get_settings().currency_symbol)} · "
                f"{event.received_at.strftime('%H:%M')}"
            )

    st.sidebar.divider()
    st.sidebar.caption(f"API: {get_settings().api_base_url}")
    return panel


def _ensure_loaded(resource: PaymentList | RegistrationList, label: str) -> None:
    if resource.loaded_at is None and resource.error is None:
        with st.spinner(f"Loading {label}..."):
            resource.fetch()


def _refresh_button(resource: PaymentList | RegistrationList, key: str) -> None:
    if st.button("🔄 Refresh", key=key):
        with st.spinner("Refreshing..."):
            resource.fetch()
        st.rerun()


# -----------------------------------------------------------------------------
# Payments
# -----------------------------------------------------------------------------


def render_payments_page() -> None:
    settings = get_settings()
    payments = get_payments()

    render_page_header("Payment Approval Dashboard", "Manage and approve user payments")
    _ensure_loaded(payments, "payments")
    render_flashes()
    render_payment_notifications()

    if payments.error:
        st.error(payments.error)

    render_stat_cards(payments.stats)
    st.write("")

    with st.container(border=True):
        st.markdown("**🔍 Filter Payments**")
        col1, col2, col3 = st.columns([2, 3, 1])
        with col1:
            status_filter = st.selectbox(
                "Status",
                STATUS_FILTERS,
                format_func=lambda key: STATUS_FILTER_LABELS[key],
                label_visibility="collapsed",
            )
        rows = payments.filtered(status_filter)
        with col2:
            st.caption(pluralize_results(len(rows), "payment"))
        with col3:
            _refresh_button(payments, "refresh_payments")

    if not rows:
        render_empty_state("💸 No payments found", "There are no payments matching your current filter criteria.")
        return

    render_table_header(_PAYMENT_COLUMNS, _PAYMENT_WIDTHS)
    for index, payment in enumerate(rows, start=1):
        _render_payment_row(index, payment, payments, settings.asset_host, settings.currency_symbol)


def _render_payment_row(
    index: int,
    payment: PaymentRecord,
    payments: PaymentList,
    asset_host: str,
    currency_symbol: str,
) -> None:
    cols = st.columns(_PAYMENT_WIDTHS)
    cols[0].write(index)
    with cols[1]:
        st.write(display_or(payment.user_name))
        if payment.note:
            st.markdown(f'<span class="user-note">{html.escape(payment.note)}</span>', unsafe_allow_html=True)
    cols[2].write(display_or(payment.user_contact))
    cols[3].markdown(f"**{format_currency(payment.amount, symbol=currency_symbol)}**")
    cols[4].write(display_or(payment.payment_method))
    cols[5].markdown(
        f'<span class="reference-cell">{html.escape(display_or(payment.transaction_reference))}</span>',
        unsafe_allow_html=True,
    )
    cols[6].write(format_date(payment))
    cols[7].markdown(status_badge(payment.status), unsafe_allow_html=True)

    with cols[8]:
        actions = st.columns(3)
        url = receipt_url(payment, asset_host)
        if url:
            actions[0].link_button("👁", url, help="View Receipt")

        if payment.status == RecordStatus.PENDING:
            if actions[1].button("✔", key=f"approve_payment_{payment.id}", help="Approve Payment"):
                confirm_status_dialog(payments, payment.id, RecordStatus.APPROVED.value)
            if actions[2].button("✖", key=f"reject_payment_{payment.id}", help="Reject Payment"):
                confirm_status_dialog(payments, payment.id, RecordStatus.REJECTED.value)
        else:
            actions[1].markdown('<span class="action-complete">Processed</span>', unsafe_allow_html=True)


# -----------------------------------------------------------------------------
# Registered users
# -----------------------------------------------------------------------------


def render_users_page() -> None:
    registrations = get_registrations()

    render_page_header("Registered Users")
    if not get_admin_token():
        st.warning("Enter an admin token in the sidebar to load registrations.")
    _ensure_loaded(registrations, "registered users")
    render_flashes()

    if registrations.error:
        st.error(f"⚠️ {registrations.error}")

    _refresh_button(registrations, "refresh_users")

    rows = registrations.records
    render_table_header(_USER_COLUMNS, _USER_WIDTHS)
    if not rows:
        st.caption("No registered users found.")
        return

    for index, user in enumerate(rows, start=1):
        _render_user_row(index, user, registrations)


def _render_user_row(index: int, user: UserRegistration, registrations: RegistrationList) -> None:
    cols = st.columns(_USER_WIDTHS)
    cols[0].write(index)
    cols[1].write(display_or(user.name, "-"))
    cols[2].write(display_or(user.email, "-"))
    cols[3].write(display_or(user.telephone, "-"))
    cols[4].write(display_or(user.occupation, "-"))
    cols[5].write(display_or(user.estate_name, "-"))
    cols[6].write(user.number_of_plots)
    cols[7].markdown(status_badge(user.status), unsafe_allow_html=True)

    with cols[8]:
        actions = st.columns(4)
        if actions[0].button("📄", key=f"docs_{user.id}", help="View Documents"):
            documents_dialog(user)
        if actions[1].button("👁", key=f"details_{user.id}", help="View Details"):
            details_dialog(user)
        targets = registrations.allowed_targets(user)
        if RecordStatus.APPROVED in targets:
            if actions[2].button("✔", key=f"approve_user_{user.id}", help="Approve User"):
                confirm_status_dialog(registrations, user.id, RecordStatus.APPROVED.value)
        if RecordStatus.REJECTED in targets:
            if actions[3].button("✖", key=f"reject_user_{user.id}", help="Reject User"):
                confirm_status_dialog(registrations, user.id, RecordStatus.REJECTED.value)
