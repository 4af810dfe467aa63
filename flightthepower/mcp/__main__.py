"""CLI entry point: python -m flightthepower.mcp [data_dir]"""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def main() -> None:
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    from flightthepower.errors import ConfigurationError
    from flightthepower.persistence import PersistenceGateway

    try:
        if len(sys.argv) > 1:
            gateway = PersistenceGateway(Path(sys.argv[1]))
        else:
            gateway = PersistenceGateway.for_platform()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    from flightthepower.mcp.server import create_server, shutdown
    from flightthepower.session import GameSession

    server, holder = create_server(GameSession.start(gateway))
    try:
        server.run(transport="stdio")
    finally:
        shutdown(holder)


if __name__ == "__main__":
    main()
