"""Entry point for the web API: python -m clicker.web"""

import argparse
from pathlib import Path

from clicker.engine.save import LOG_FILE, SAVE_FILE
from clicker.logging_config import configure_logging
from clicker.web.server import app, run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Clicker — Web API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    parser.add_argument("--save", type=Path, default=SAVE_FILE, help=f"Save file (default: {SAVE_FILE})")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.debug else None, LOG_FILE)
    app.config["SAVE_PATH"] = args.save

    print("\n  Clicker (Web API)")
    print(f"  ➜ http://{args.host}:{args.port}/api/state\n")

    run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
