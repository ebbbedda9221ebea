"""
CLI entrypoint for the admin UI.

Usage:
  estate-admin --port 8501
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def build_argv(args: argparse.Namespace) -> list[str]:
    app_path = Path(__file__).resolve().parent / "app.py"
    argv = ["streamlit", "run", str(app_path), "--server.address", args.host, "--server.port", str(args.port)]
    if args.headless:
        argv += ["--server.headless", "true"]
    return argv


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Estate Admin panels")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8501)
    parser.add_argument("--headless", action="store_true")
    args = parser.parse_args()

    from streamlit.web import cli as stcli

    sys.argv = build_argv(args)
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
