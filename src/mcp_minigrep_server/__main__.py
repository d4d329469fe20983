"""Module entrypoint.

Allows:
    python -m mcp_minigrep_server
"""

from __future__ import annotations

from mcp_minigrep_server.server.grep_server import main

if __name__ == "__main__":
    main()
