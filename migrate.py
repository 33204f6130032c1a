#!/usr/bin/env python3
"""
Database management script.
Creates and drops the schema and seeds the bootstrap admin account.
"""

import asyncio
import sys
import argparse
import logging

from marketplace.config import settings
from marketplace.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from marketplace.repositories.admin import AdminRepository

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Schema and seed management for the configured database."""

    async def create(self) -> None:
        await create_tables()

    async def drop(self) -> None:
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def seed_database(self) -> None:
        """
        Upsert the bootstrap admin from settings. This is the only way an
        admin is created without an existing active admin.
        """
        logger.info("Seeding bootstrap admin")

        async with AsyncSessionLocal() as session:
            admin = await AdminRepository(session).upsert_bootstrap_admin(
                settings.bootstrap_admin_email,
                settings.bootstrap_admin_name,
                settings.bootstrap_admin_password,
            )

        logger.info(f"Bootstrap admin ready: {admin.email}")
        if settings.bootstrap_admin_password == "changeme123":
            logger.warning("The bootstrap admin uses the default password. Change it before going live!")

    async def reset_database(self) -> None:
        """Drop, recreate and seed. Development and test only."""
        if not settings.is_development and not settings.is_testing:
            raise RuntimeError("Database reset is only allowed in development or test mode")

        await self.drop()
        await self.create()
        await self.seed_database()
        logger.info("Database reset completed")


async def run(command: str) -> None:
    manager = MigrationManager()
    try:
        if command == "create":
            await manager.create()
        elif command == "drop":
            await manager.drop()
        elif command == "seed":
            await manager.seed_database()
        elif command == "reset":
            await manager.reset_database()
    finally:
        await close_db_connection()


def main():
    parser = argparse.ArgumentParser(description="Database management for the Property Marketplace API")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    drop_parser = subparsers.add_parser("drop", help="Drop all tables (development only)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping all tables")
    subparsers.add_parser("seed", help="Create or reset the bootstrap admin")
    reset_parser = subparsers.add_parser("reset", help="Drop, create and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command in ("drop", "reset") and not args.confirm:
        print(f"'{args.command}' requires the --confirm flag")
        return

    try:
        asyncio.run(run(args.command))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
