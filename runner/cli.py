from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="faststatus smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument(
        "--name",
        action="append",
        dest="names",
        help="Friendly name of a resource to create (repeatable)",
    )
    parser.add_argument("--timeout", type=float, default=20.0, help="Health wait in seconds")
    parser.add_argument("--keep", action="store_true", help="Do not delete created resources")
    return parser.parse_args(argv)
