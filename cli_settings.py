"""
cli_settings.py
CLI entrypoint for the insights API settings.

Usage:
    python cli_settings.py show
    python cli_settings.py set-api-key <key>
"""

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from config.settings import API_KEY, SETTINGS_COLLECTION, SettingsStore  # noqa: E402


def mask(value):
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def main(argv=None, session_factory=None, bind=None):
    parser = argparse.ArgumentParser(description="Manage IDP Insights settings")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("show", help="Show the configured API key (masked)")
    set_key = sub.add_parser("set-api-key", help="Store the shared API key")
    set_key.add_argument("key", help="Value callers send in the idp-token header")
    args = parser.parse_args(argv)

    from db import SessionLocal, engine, init_db

    init_db(bind=bind or engine)
    store = SettingsStore(session_factory or SessionLocal)

    if args.command == "show":
        print(f"{SETTINGS_COLLECTION}:{API_KEY} = {mask(store.get(API_KEY))}")
        return 0

    key = args.key
    if not key.strip():
        print("API key is required.", file=sys.stderr)
        return 1
    store.set(API_KEY, key)
    print(f"{SETTINGS_COLLECTION}:{API_KEY} saved.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
