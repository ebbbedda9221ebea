"""
Streamlit UI entrypoint.
"""

from __future__ import annotations

import streamlit as st

from estate_admin.config import get_settings
from estate_admin.logging_config import LogContextManager, get_logger
from estate_admin.ui.pages import render_payments_page, render_sidebar, render_users_page
from estate_admin.ui.session import get_session_id, init_session_state
from estate_admin.ui.styles import apply_styles

logger = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    st.set_page_config(
        page_title=settings.app_title,
        page_icon="🏡",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    apply_styles()
    init_session_state()

    panel = render_sidebar()
    with LogContextManager(request_id=get_session_id(), panel=panel):
        if panel == "users":
            render_users_page()
        else:
            render_payments_page()


if __name__ == "__main__":
    main()
