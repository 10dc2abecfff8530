"""
app/db/indexes.py

Purpose: Database index management

- Unique index on each kind's natural ID (duplicate-ID backstop)
- Unique email index (one account per email, also used by login)
- Lookup index for filtering
"""

from pymongo import ASCENDING

from app.db.mongo import Database
from app.models.user import User
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(database: Database):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = database.db[User.collection]

        logger.info("Creating database indexes...")

        # Unique index on userId (natural identifier)
        await users.create_index(
            [(User.id_field, ASCENDING)],
            unique=True,
            name="userId_unique"
        )
        logger.debug("Created unique index on users.userId")

        # One account per email; users created without an email are exempt
        await users.create_index(
            [("email", ASCENDING)],
            unique=True,
            partialFilterExpression={"email": {"$type": "string"}},
            name="email_unique"
        )
        logger.debug("Created unique partial index on users.email")

        # Exact-match filters
        await users.create_index([("role", ASCENDING), ("status", ASCENDING)], name="role_status_idx")
        logger.debug("Created compound index on users.role + status")

        user_indexes = await users.index_information()
        logger.info(f"✅ Database indexes ready: Users={len(user_indexes)}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes(database: Database):
    """
    Drops all custom indexes (keeps _id index).
    Use with caution! Only for maintenance/migration.
    """
    try:
        logger.warning("Dropping all database indexes...")
        await database.db[User.collection].drop_indexes()
        logger.info("✅ All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise
