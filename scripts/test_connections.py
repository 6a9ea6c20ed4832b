#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database and OpenAI connections are working.
Usage: python scripts/test_connections.py
"""
from sqlalchemy.engine import make_url

from harmony.core.config import get_settings
from harmony.db.postgres import test_database_connection
from harmony.services.llm_client import get_llm_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("HARMONY - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing database...")
    if settings.database_url:
        print(f"    URL: {make_url(settings.database_url).render_as_string(hide_password=True)}")
        if test_database_connection():
            print("    ✅ Database: CONNECTED")
        else:
            print("    ❌ Database: FAILED")
    else:
        print("    ⚠️  DATABASE_URL not set (in-memory storage will be used)")

    print("\n[2] Testing OpenAI API...")
    client = get_llm_client()
    if client.is_configured():
        print(f"    Model: {client.model}")
        if client.test_connection():
            print("    ✅ OpenAI: CONNECTED")
        else:
            print("    ❌ OpenAI: FAILED")
    else:
        print("    ⚠️  OpenAI: API key not configured (static fallbacks will be used)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
