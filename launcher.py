#!/usr/bin/env python3
"""
C2S Events Launcher
Reports a session start, a couple of in-app events and install-age checks, then stops
"""

import argparse
import sys
from concurrent.futures import wait

from c2s_events import configure_logging, get_client
from c2s_events.config import is_debug_enabled

# Application version - single source of truth
VERSION = "1.0.0"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send C2S reporting requests for this machine")
    parser.add_argument("--customer-user-id", default=None,
                        help="Customer user id to attach before starting")
    parser.add_argument("--skip-first-open", action="store_true",
                        help="Report a session even if no first-open has been confirmed")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logging and debug log file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = configure_logging(debug=args.debug or is_debug_enabled())

    client = get_client(VERSION)
    if client is None:
        logger.error("Reporting not configured - copy reporting_config.example.py to reporting_config.py")
        return 1

    if args.customer_user_id:
        client.set_customer_user_id(args.customer_user_id)

    pending = [client.start(skip_first_open=args.skip_first_open)]

    event_parameters = {
        "af_currency": "USD",
        "af_price": 6.66,
        "af_revenue": 12.12,
    }
    pending.append(client.log_event("af_purchase", event_parameters))
    pending.append(client.log_event("af_purchase", event_parameters, {"goodsName": "新人邀约购物日"}))

    logger.info("Installed before 2023-06-13: %s", client.is_install_older_than("2023-06-13T10:00:00+00:00"))
    logger.info("Installed before 2023-02-11: %s", client.is_install_older_than("2023-02-11T10:00:00+00:00"))

    client.stop()

    # Let in-flight requests finish before the process exits
    futures = [f for f in pending if f is not None]
    wait(futures)
    client.shutdown()

    failed = [f.result() for f in futures if not f.result().success]
    for outcome in failed:
        logger.warning("%s request not accepted: %s", outcome.kind.name, outcome.error)
    logger.info("Device id: %s | info: %s", client.get_client_id(), client.get_user_info())
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
