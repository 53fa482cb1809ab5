import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

import psycopg

from services.database import Database, describe_database_error


def main():
    """Create the dashboard tables (DCF, valuations, links, DDM, monthly picks, watchlist) if missing."""
    db = Database()
    print("Creating tables...")

    try:
        db.ensure_schema()
    except psycopg.Error as e:
        error = describe_database_error(e)
        print(f"❌ Schema setup failed: {error['details']} (code {error['code']})")
        print(f"   Hint: {error['hint']}")
        sys.exit(1)

    rows = db.query(
        "SELECT table_name FROM information_schema.tables "
        "WHERE table_schema = 'public' ORDER BY table_name"
    )
    print("✅ Tables ready:")
    for row in rows:
        print(f"   {row['table_name']}")


if __name__ == "__main__":
    main()
