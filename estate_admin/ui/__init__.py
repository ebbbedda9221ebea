"""
Streamlit admin UI package.

Launch with `streamlit run estate_admin/app.py`.
"""

from __future__ import annotations
