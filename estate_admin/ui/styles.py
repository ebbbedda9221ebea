"""
UI styling (CSS injected via st.markdown).
"""

from __future__ import annotations

import streamlit as st

ADMIN_CSS = """
<style>
  :root {
    --text-primary: #1F2937;
    --text-secondary: #6B7280;
    --border-color: #E5E7EB;
    --pending-bg: #FFFBEB;
    --pending-fg: #D97706;
    --approved-bg: #ECFDF5;
    --approved-fg: #059669;
    --rejected-bg: #FEF2F2;
    --rejected-fg: #DC2626;
  }

  .page-subtitle {
    color: var(--text-secondary);
    margin-top: -0.75rem;
    margin-bottom: 1.5rem;
  }

  div[data-testid="stMetric"] {
    background: white;
    border-radius: 16px;
    padding: 16px 20px;
    box-shadow: 0 4px 6px rgba(0, 0, 0, 0.05);
  }

  .table-header {
    font-size: 12px;
    font-weight: 600;
    color: #374151;
    text-transform: uppercase;
    letter-spacing: 0.5px;
    border-bottom: 2px solid var(--border-color);
    padding-bottom: 6px;
  }

  .status-badge {
    padding: 4px 10px;
    border-radius: 20px;
    font-size: 12px;
    font-weight: 600;
    text-transform: uppercase;
    letter-spacing: 0.5px;
    display: inline-block;
  }
  .status-badge.pending { background: var(--pending-bg); color: var(--pending-fg); border: 1px solid #FCD34D; }
  .status-badge.approved { background: var(--approved-bg); color: var(--approved-fg); border: 1px solid #34D399; }
  .status-badge.rejected { background: var(--rejected-bg); color: var(--rejected-fg); border: 1px solid #FCA5A5; }

  .user-note {
    font-size: 12px;
    color: var(--text-secondary);
    font-style: italic;
  }

  .reference-cell {
    font-family: 'Monaco', 'Menlo', 'Ubuntu Mono', monospace;
    font-size: 13px;
    color: var(--text-secondary);
  }

  .action-complete {
    font-size: 12px;
    color: var(--text-secondary);
    font-style: italic;
  }
</style>
"""


def apply_styles() -> None:
    st.markdown(ADMIN_CSS, unsafe_allow_html=True)
