"""
Database Setup Script
Validates configuration and creates the database tables
"""

import argparse
import asyncio
import sys

from vidtube.app.config import get_config, setup_logging, validate_config
from vidtube.app.database import DatabaseManager


async def setup(reset: bool) -> None:
    config = get_config()
    print(f"\n📦 Using database: {config.database.url}")

    manager = DatabaseManager(config.database)
    try:
        print("\n🔌 Testing database connection...")
        if not await manager.ping():
            raise RuntimeError("database did not answer SELECT 1")
        print("✅ Database connection successful")

        if reset:
            print("\n🗑️  Dropping existing tables...")
            await manager.drop_tables()

        print("\n📊 Creating database tables...")
        await manager.create_tables()
    finally:
        await manager.close()


def main():
    """Initialize database and validate configuration"""
    parser = argparse.ArgumentParser(description="Create the VidTube database schema")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args()

    print("=" * 60)
    print("🔧 VidTube - Database Setup")
    print("=" * 60)

    setup_logging()

    print("\n🔍 Validating Configuration...")
    validation = validate_config()

    if not validation["valid"]:
        print("\n❌ Configuration validation failed:")
        for error in validation["errors"]:
            print(f"  - {error}")
        sys.exit(1)

    if validation["warnings"]:
        print("\n⚠️  Configuration warnings:")
        for warning in validation["warnings"]:
            print(f"  - {warning}")

    try:
        asyncio.run(setup(args.reset))
    except Exception as e:
        print(f"\n❌ Database setup failed: {e}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("✅ Database setup complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
