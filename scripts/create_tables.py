#!/usr/bin/env python3
"""
Create all tables in the database pointed to by DATABASE_URL.
Existing tables are left untouched.

Usage: python scripts/create_tables.py
"""
from harmony.db.postgres import get_engine
from harmony.db.tables import Base, create_tables


def main():
    engine = get_engine()
    create_tables(engine)
    print(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    main()
