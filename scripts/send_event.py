#!/usr/bin/env python3
"""Send a single event to the SAP Alert Notification Service.

Usage::

    # Send the configured template as-is
    python scripts/send_event.py --config config/settings.yaml

    # Merge extra fields onto the template
    python scripts/send_event.py --event '{"subject": "Deploy failed", "severity": "ERROR"}'

    # Override log level
    python scripts/send_event.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
import time

import structlog

from ans_notify.ans.exceptions import ANSError
from ans_notify.ans.factory import create_ans_client, load_event_template
from ans_notify.core.config import load_settings
from ans_notify.core.logging import setup_logging

logger = structlog.get_logger(__name__)


def run(args: argparse.Namespace) -> int:
    """Build the event from config and CLI, send it, return an exit code."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    try:
        event = load_event_template(settings.ans)
        if args.event:
            event.merge_with_json(args.event)
        if not event.event_timestamp:
            event.event_timestamp = int(time.time())

        with create_ans_client(settings.ans) as client:
            client.send(event)
    except ANSError as exc:
        logger.error("send_event_failed", error=str(exc))
        return 1

    logger.info(
        "send_event_done",
        event_type=event.event_type,
        severity=event.severity,
        subject=event.subject,
    )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Send an event to SAP Alert Notification Service")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--event",
        default="",
        help="Event JSON merged onto the configured template",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
