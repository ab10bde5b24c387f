"""Storefront management CLI.

Usage:
    python src/manage.py setup-db                  # Create all tables
    python src/manage.py drop-db                   # Drop all tables
    python src/manage.py reconcile-notifications   # Store missing "order placed" notifications
"""

import argparse
import sys


def setup_database():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    setup_db(storefront)
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    drop_db(storefront)
    print("Done.")


def reconcile_notifications(batch_size=100):
    from storefront.channel import build_push_adapter
    from storefront.checkout.reconciliation import ReconcileOrderNotifications
    from storefront.config import get_settings
    from storefront.domain import storefront
    from storefront.notification.sink import NotificationSink, install_sink

    storefront.init()
    settings = get_settings()
    install_sink(NotificationSink.from_settings(settings, build_push_adapter(settings)))

    with storefront.domain_context():
        recorded = storefront.process(ReconcileOrderNotifications(batch_size=batch_size), asynchronous=False)
    print(f"Recorded {recorded} missing notification(s).")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    reconcile_parser = subparsers.add_parser(
        "reconcile-notifications",
        help="Record the 'order placed' notification for orders missing one",
    )
    reconcile_parser.add_argument("--batch-size", type=int, default=100)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "reconcile-notifications":
        reconcile_notifications(args.batch_size)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
