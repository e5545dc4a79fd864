#!/usr/bin/env python3
"""
Store Setup Script

Verifies both database connections, creates the accounts table and the
unique account_id index on profiles, and makes sure the upload directory
exists.
Usage: python scripts/init_stores.py
"""
import sys
sys.path.insert(0, '.')

from hirehub.db.postgres import test_postgres_connection
from hirehub.db.mongodb import test_mongo_connection
from hirehub.core.config import get_settings
from hirehub.services.mongo_service import ProfileRepository
from hirehub.services.object_store import LocalObjectStore
from hirehub.services.postgres_service import AccountRepository


def main():
    settings = get_settings()
    print("=" * 50)
    print("HIREHUB PROFILE ASSETS - STORE SETUP")
    print("=" * 50)

    # PostgreSQL
    print("\n[1] PostgreSQL...")
    print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        AccountRepository().create_table()
        print("    ✅ PostgreSQL: CONNECTED, accounts table ready")
    else:
        print("    ❌ PostgreSQL: FAILED")

    # MongoDB
    print("\n[2] MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        ProfileRepository().ensure_indexes()
        print("    ✅ MongoDB: CONNECTED, profile indexes ready")
    else:
        print("    ❌ MongoDB: FAILED")

    # Object store
    print("\n[3] Object store...")
    store = LocalObjectStore.from_settings(settings)
    store.root.mkdir(parents=True, exist_ok=True)
    print(f"    Root: {store.root}")
    print(f"    Served at: {settings.uploads_base_url}")

    print("\n" + "=" * 50)
    print("Store setup complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
