"""Bookstore database management CLI.

Creates and drops the key-value table the SQL store persists carts, orders
and notifications in.

Usage:
    python src/manage.py setup-db                          # Create the table
    python src/manage.py drop-db                           # Drop the table
    python src/manage.py setup-db --database-uri sqlite:///other.db
"""

import argparse
import sys

from storefront.config import load_settings
from storefront.persistence.sql import SqlKeyValueStore


def _store(database_uri=None):
    settings = load_settings()
    return SqlKeyValueStore(database_uri or settings.database_uri, timeout=settings.db_timeout)


def setup_database(database_uri=None):
    store = _store(database_uri)
    print(f"Creating key-value table in {store.database_uri}...")
    store.setup()
    print("Done.")


def drop_database(database_uri=None):
    store = _store(database_uri)
    print(f"Dropping key-value table in {store.database_uri}...")
    store.drop()
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bookstore database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create the key-value table")
    setup_parser.add_argument("--database-uri", help="SQLAlchemy URL (default: STOREFRONT_DATABASE_URI)")

    drop_parser = subparsers.add_parser("drop-db", help="Drop the key-value table")
    drop_parser.add_argument("--database-uri", help="SQLAlchemy URL (default: STOREFRONT_DATABASE_URI)")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database(args.database_uri)
    elif args.command == "drop-db":
        drop_database(args.database_uri)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
