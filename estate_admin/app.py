"""
Streamlit entrypoint.

Usage:
  streamlit run estate_admin/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    # `streamlit run estate_admin/app.py` sets sys.path[0] == "estate_admin", which breaks `import estate_admin.*`.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_s = str(repo_root)
    if repo_root_s not in sys.path:
        sys.path.insert(0, repo_root_s)


_ensure_repo_root_on_path()

from estate_admin.ui.app import main  # noqa: E402

if __name__ == "__main__":
    main()
