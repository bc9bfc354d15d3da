#!/usr/bin/env python3
"""
Database Initialization Script for EventHub

This script:
1. Tests database connectivity
2. Creates any missing tables
3. Seeds clubs and demo students if requested

Usage:
    python scripts/init_db.py              # Check + create tables
    python scripts/init_db.py --check      # Only check connectivity
    python scripts/init_db.py --seed       # Also seed clubs and demo students
"""

import asyncio
import sys
import argparse
from pathlib import Path

# Add backend directory to path so the script runs without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


async def test_connection() -> bool:
    """Test database connectivity"""
    print("\n[InitDB] Testing database connection...")

    try:
        from sqlalchemy import text
        from eventhub.core.config import settings
        from eventhub.core.database import get_engine

        db_url = settings.DATABASE_URL
        print(f"[InitDB] Connecting to: {db_url.split('@')[1] if '@' in db_url else db_url}")

        async with get_engine().connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.fetchone()

        print("[InitDB] Database connection successful!")
        return True

    except Exception as e:
        print(f"[InitDB] ERROR: Database connection failed: {e}")
        return False


async def create_tables() -> bool:
    """Create database tables using SQLAlchemy"""
    print("\n[InitDB] Creating/verifying database tables...")

    try:
        from eventhub.core.database import init_db
        await init_db()
        print("[InitDB] Database tables created/verified!")
        return True

    except Exception as e:
        print(f"[InitDB] ERROR: Table creation failed: {e}")
        import traceback
        traceback.print_exc()
        return False


async def show_table_status():
    """Show current table status"""
    print("\n[InitDB] Database Table Status:")
    print("-" * 50)

    from sqlalchemy import inspect
    from eventhub.core.database import get_engine

    def _describe(sync_conn):
        inspector = inspect(sync_conn)
        return {table: len(inspector.get_columns(table)) for table in inspector.get_table_names()}

    async with get_engine().connect() as conn:
        tables = await conn.run_sync(_describe)

    print(f"Total tables: {len(tables)}")
    for table in sorted(tables):
        print(f"  - {table} ({tables[table]} columns)")


async def main(args) -> int:
    try:
        if not await test_connection():
            return 1
        if args.check:
            return 0

        if not await create_tables():
            return 1

        if args.seed:
            from eventhub.db.seed_data import seed_all
            await seed_all()

        await show_table_status()
        print("\n[InitDB] Database initialization complete!")
        return 0
    finally:
        from eventhub.core.database import close_db
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize EventHub database")
    parser.add_argument("--check", action="store_true", help="Only check connectivity")
    parser.add_argument("--seed", action="store_true", help="Seed clubs and demo students")
    sys.exit(asyncio.run(main(parser.parse_args())))
