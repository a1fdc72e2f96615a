"""
Start the FormFlow API with uvicorn

Host and port default to API_BASE_URL, so the server listens where the
scripts/ tooling expects to find it.

Usage:
    python run.py
    python run.py --reload
    python run.py --port 8080 --workers 4
"""
import argparse
from urllib.parse import urlparse

import uvicorn

from formflow.config.settings import settings


def build_parser() -> argparse.ArgumentParser:
    base = urlparse(settings.api_base_url)
    parser = argparse.ArgumentParser(description="Run the FormFlow workflow API server")
    parser.add_argument("--host", default=base.hostname or "127.0.0.1",
                        help="Interface to bind (default: host of API_BASE_URL)")
    parser.add_argument("--port", type=int, default=base.port or 8000,
                        help="Port to bind (default: port of API_BASE_URL)")
    parser.add_argument("--reload", action="store_true",
                        help="Restart on code changes (development only)")
    parser.add_argument("--workers", type=int, default=1,
                        help="Worker processes; forced to 1 with --reload")
    return parser


def main():
    args = build_parser().parse_args()
    workers = 1 if args.reload else args.workers

    print(f"FormFlow API on http://{args.host}:{args.port} "
          f"(environment={settings.environment}, workers={workers}, reload={args.reload})")

    uvicorn.run(
        "formflow.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
