"""Interview Experiences management CLI.

Provides commands to create and drop the database schema and to load the
fixed tag catalog.

Usage:
    python src/manage.py setup-db    # Create all tables
    python src/manage.py drop-db     # Drop all tables
    python src/manage.py seed-tags   # Load the tag catalog
"""

import argparse
import sys


def _domain():
    from experiences.domain import experiences

    experiences.init()
    return experiences


def setup_database():
    from experiences.utils.db import setup_db

    domain = _domain()
    print("Creating experiences database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from experiences.utils.db import drop_db

    domain = _domain()
    print("Dropping experiences database schema...")
    drop_db(domain)
    print("Done.")


def seed_tags():
    from experiences.tag.tag import seed_tag_catalog

    domain = _domain()
    with domain.domain_context():
        created = seed_tag_catalog()
    print(f"Seeded {created} tag(s).")


def main():
    parser = argparse.ArgumentParser(description="Interview Experiences management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-tags", help="Load the fixed tag catalog")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-tags":
        seed_tags()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
