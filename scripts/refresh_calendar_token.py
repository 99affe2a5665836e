#!/usr/bin/env python3
"""
Mint a new Google Calendar refresh token.

Usage:
  python3 scripts/refresh_calendar_token.py url
  python3 scripts/refresh_calendar_token.py exchange <authorization-code>

Reads GOOGLE_CALENDAR_CLIENT_ID / GOOGLE_CALENDAR_CLIENT_SECRET /
GOOGLE_CALENDAR_REDIRECT_URI from the environment (or .env). Put the printed
token into GOOGLE_CALENDAR_REFRESH_TOKEN.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from service_booking.application.exceptions import CalendarUnavailableError
from service_booking.core.config import settings
from service_booking.infrastructure.calendar.google_calendar_client import GoogleCalendarClient


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("url", help="print the consent URL")
    exchange = sub.add_parser("exchange", help="trade an authorization code for tokens")
    exchange.add_argument("code")
    args = parser.parse_args(argv)

    config = settings.calendar_config()
    missing = [
        name
        for name, value in (
            ("GOOGLE_CALENDAR_CLIENT_ID", config.client_id),
            ("GOOGLE_CALENDAR_CLIENT_SECRET", config.client_secret),
        )
        if not value
    ]
    if missing:
        print("ERROR: Missing required environment variables:", ", ".join(missing), file=sys.stderr)
        return 1

    client = GoogleCalendarClient(config)
    if args.command == "url":
        print("Open this URL, approve access, then run the 'exchange' command with the returned code:\n")
        print(client.authorization_url())
        return 0

    try:
        tokens = client.exchange_code(args.code)
    except CalendarUnavailableError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    refresh_token = tokens.get("refresh_token")
    if not refresh_token:
        print("No refresh token was issued. Revoke the app at https://myaccount.google.com/permissions and retry.")
        return 1
    print("GOOGLE_CALENDAR_REFRESH_TOKEN=" + refresh_token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
