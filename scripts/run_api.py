#!/usr/bin/env python3
"""
Start the session credential API.

Usage:
  python scripts/run_api.py
  python scripts/run_api.py --port 8001 --host 0.0.0.0
  python scripts/run_api.py --workers 2
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def main() -> None:
    from config.settings import settings
    parser = argparse.ArgumentParser(description="Run the sessiongate API")
    parser.add_argument("--host", default=settings.api.host, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.api.port, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Enable reload (dev)")
    parser.add_argument("--workers", type=int, default=1, help="Number of workers (ignored with --reload)")
    args = parser.parse_args()

    import uvicorn

    kwargs = {"host": args.host, "port": args.port, "reload": args.reload}
    if not args.reload and args.workers > 1:
        kwargs["workers"] = args.workers
    uvicorn.run("sessiongate.api.server:app", **kwargs)


if __name__ == "__main__":
    main()
