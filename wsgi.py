"""WSGI entry point for the Horizon projection engine.

Serve ``wsgi:app`` with a WSGI server, or run this file for a local API:
``python wsgi.py --port 8080``.
"""

import argparse
import os

from horizon import create_app

app = create_app()


def main() -> None:
    """Run the development server on the configured host and port."""
    parser = argparse.ArgumentParser(description="Run the Horizon projection API")
    parser.add_argument("--host", default=os.environ.get("HOST", "127.0.0.1"))
    parser.add_argument(
        "--port", type=int, default=int(os.environ.get("PORT", "5000"))
    )
    args = parser.parse_args()

    # DEBUG follows APP_ENV via the settings
    app.run(host=args.host, port=args.port, debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
