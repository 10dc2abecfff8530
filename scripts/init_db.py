"""
Database initialization script

Run once (or after restoring a dump) to create indexes and seed the
natural-ID counters from existing data:
    python scripts/init_db.py
    python scripts/init_db.py --reset-indexes
"""

import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

from app.core.logging import setup_logging, get_logger
from app.db.indexes import create_indexes, drop_all_indexes
from app.db.mongo import Database
from app.models.user import User
from app.services.common_service import last_allocated_number

setup_logging()
logger = get_logger("scripts.init_db")

KINDS = (User,)


async def seed_counters(database: Database):
    """Raise each kind's counter to the highest natural ID already stored."""
    for kind in KINDS:
        model = database.model(kind)
        last_number = await last_allocated_number(model)
        await model.raise_counter_floor(last_number)
        counter = await model.get_counter()
        logger.info(f"  ✅ {kind.id_field} counter at {counter} (highest stored: {last_number})")


async def main(reset_indexes: bool):
    logger.info("=" * 60)
    logger.info("  devserve Database Setup")
    logger.info("=" * 60)

    database = Database()
    await database.connect()

    try:
        if reset_indexes:
            await drop_all_indexes(database)

        await create_indexes(database)

        logger.info("🔢 Seeding ID counters...")
        await seed_counters(database)

        for kind in KINDS:
            count = await database.model(kind).count({})
            logger.info(f"📊 {kind.collection}: {count} documents")

        logger.info("✅ Database initialization complete!")

    finally:
        await database.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create indexes and seed ID counters")
    parser.add_argument("--reset-indexes", action="store_true", help="drop existing indexes first")
    args = parser.parse_args()

    asyncio.run(main(args.reset_indexes))
