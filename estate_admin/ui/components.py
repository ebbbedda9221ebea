"""
Reusable UI components (stat cards, badges, dialogs, notifications).
"""

from __future__ import annotations

import html
import logging
from typing import Any

import streamlit as st

from estate_admin.config import get_settings
from estate_admin.domain import document_links, format_currency, record_details
from estate_admin.models import AggregateStats, RecordStatus, UserRegistration
from estate_admin.resources import RemoteResourceList, TransitionOutcome, TransitionResult
from estate_admin.ui.session import (
    get_client,
    get_watcher,
    poll_due,
    pop_flashes,
    pop_toasts,
    push_flash,
    queue_toasts,
)

logger = logging.getLogger(__name__)

_settings = get_settings()


def status_badge(status: RecordStatus | str | None) -> str:
    value = RecordStatus.parse(status).value
    return f'<span class="status-badge {value}">{value}</span>'


def render_page_header(title: str, subtitle: str | None = None) -> None:
    st.title(title)
    if subtitle:
        st.markdown(f'<p class="page-subtitle">{html.escape(subtitle)}</p>', unsafe_allow_html=True)


def render_stat_cards(stats: AggregateStats) -> None:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("💰 Total Deposited", format_currency(stats.total_deposited, symbol=_settings.currency_symbol))
    col2.metric("⏳ Pending Payments", stats.pending_payments)
    col3.metric("📈 Approved Payments", stats.approved_payments)
    col4.metric("👥 Total Users", stats.total_users)


def render_table_header(labels: list[str], widths: list[float]) -> None:
    for col, label in zip(st.columns(widths), labels):
        col.markdown(f'<div class="table-header">{html.escape(label)}</div>', unsafe_allow_html=True)


def render_empty_state(title: str, text: str) -> None:
    with st.container(border=True):
        st.markdown(f"### {title}")
        st.caption(text)


def render_flashes() -> None:
    for text in pop_toasts():
        st.toast(text, icon="🔔")
    for result in pop_flashes():
        if result.outcome == TransitionOutcome.APPLIED:
            st.toast(result.message, icon="✅")
        elif result.outcome == TransitionOutcome.FAILED:
            st.error(result.message)


@st.dialog("Are you sure?")
def confirm_status_dialog(resource: RemoteResourceList, record_id: Any, target: str) -> None:
    st.write(f'Do you want to mark this {resource.noun} as "{target}"?')
    col1, col2 = st.columns(2)
    with col1:
        if st.button(f"Yes, {target}!", type="primary", use_container_width=True):
            push_flash(answer_confirmation(resource, record_id, target, confirmed=True))
            st.rerun()
    with col2:
        if st.button("Cancel", use_container_width=True):
            answer_confirmation(resource, record_id, target, confirmed=False)
            st.rerun()


def answer_confirmation(
    resource: RemoteResourceList,
    record_id: Any,
    target: str,
    *,
    confirmed: bool,
) -> TransitionResult | None:
    """Run the status change the admin confirmed; a cancel touches nothing."""
    if not confirmed:
        logger.debug("Status change of %s %s to %s cancelled", resource.noun, record_id, target)
        return None
    return resource.transition(record_id, target, confirm=lambda *_: True)


@st.dialog("Uploaded Documents")
def documents_dialog(registration: UserRegistration) -> None:
    links = document_links(registration, _settings.asset_host)
    if not links:
        st.info("No documents uploaded.")
        return

    if _settings.debug_mode:
        # Reachability is logged only; links are always shown
        client = get_client()
        for label, url in links:
            logger.debug("%s reachable=%s url=%s", label, client.file_exists(url), url)

    for label, url in links:
        col1, col2 = st.columns([3, 1])
        col1.write(label)
        col2.link_button("👁 View", url, use_container_width=True)


@st.dialog("User Details")
def details_dialog(registration: UserRegistration) -> None:
    for key, value in record_details(registration):
        st.markdown(f"**{key}:** {value}")


@st.fragment(run_every=_settings.notification_poll_seconds or None)
def render_payment_notifications() -> None:
    interval = _settings.notification_poll_seconds
    if not interval:
        return

    watcher = get_watcher()
    if not watcher.primed:
        # Wait for the page to load payments so existing rows are not announced
        if watcher.payments.loaded_at is not None:
            watcher.prime()
            poll_due(interval)
        return
    if not poll_due(interval):
        return

    events = watcher.poll()
    if events:
        # Shown by render_flashes once the whole page reruns with the new rows
        queue_toasts(f"**{event.title}** {event.text}" for event in events)
        st.rerun()
