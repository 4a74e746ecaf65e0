"""sockpoll - wait for a TCP port to open or close."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Any

from sockpoll.config import DEFAULT_INTERVAL
from sockpoll.errors import ConfigurationError
from sockpoll.poller import SocketPoller

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "run", "main"]

EXIT_REACHED = 0
EXIT_TIMEOUT = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sockpoll",
        description="Wait until a TCP port accepts connections (or stops accepting them).",
    )
    parser.add_argument("host", help="Hostname or IP address")
    parser.add_argument("port", help="TCP port")
    parser.add_argument("-t", "--timeout", default="0", help="Seconds to keep polling (default: 0)")
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL,
        help=f"Seconds between probes (default: {DEFAULT_INTERVAL})",
    )
    parser.add_argument(
        "--closed", action="store_true", help="Wait for the port to stop listening instead"
    )
    parser.add_argument("--debug", action="store_true", help="Log every failed probe")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def run(argv: list[str] | None = None) -> int:
    """Run the command line and return its exit status.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        0 if the requested state was reached, 1 on timeout, 2 on bad arguments
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        poller = SocketPoller(
            args.host, args.port, args.timeout, args.interval, debug=args.debug
        )
    except ConfigurationError as e:
        logger.error(e.message)
        if args.json:
            print(json.dumps(e.to_dict(), ensure_ascii=False))
        return EXIT_CONFIG_ERROR

    state = "closed" if args.closed else "open"
    started = time.monotonic()
    reached = poller.is_closed() if args.closed else poller.is_open()
    elapsed = time.monotonic() - started

    if reached:
        logger.info(f"{poller.target} is {state} after {elapsed:.2f}s")
    else:
        logger.warning(
            f"{poller.target} not {state} within {poller.config.timeout}s"
        )

    if args.json:
        result: dict[str, Any] = {
            "host": poller.target.host,
            "port": poller.target.port,
            "state": state,
            "reached": reached,
            "elapsed": round(elapsed, 3),
        }
        print(json.dumps(result, ensure_ascii=False))

    return EXIT_REACHED if reached else EXIT_TIMEOUT


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
