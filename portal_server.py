"""Launcher for the portal HTTP server.

Server code lives under ``server/``.
"""

from pathlib import Path
import sys

_SERVER_DIR = Path(__file__).resolve().parent / "server"
if str(_SERVER_DIR) not in sys.path:
    sys.path.insert(0, str(_SERVER_DIR))

from portal.server_http import main  # type: ignore  # resolved from server/portal


if __name__ == "__main__":
    main()
