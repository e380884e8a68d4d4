"""
app/db/indexes.py

Purpose: Database index management

- Unique index on auth account emails
- Lookup indexes for organization roll-ups, scan and revenue analytics
- Payout request status and ordering
"""

from app.db.mongo import Database
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(database: Database):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        logger.info("Creating database indexes...")

        # ==============================================
        # AUTH ACCOUNTS
        # ==============================================

        await database.auth_accounts.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on auth_accounts.email")

        # ==============================================
        # USERS
        # ==============================================

        # Organization roll-ups and bulk delete
        await database.users.create_index("Organization", name="organization_idx")
        await database.users.create_index("Email", name="email_idx")
        # Push token pruning
        await database.users.create_index("FCMToken", name="fcm_token_idx")
        logger.debug("Created indexes on users")

        # ==============================================
        # QR SCANS
        # ==============================================

        await database.scans.create_index("Time", name="scan_time_idx")
        await database.scans.create_index("UserID", name="scan_user_idx")
        await database.scans.create_index("gymName", name="scan_gym_idx")
        logger.debug("Created indexes on scans")

        # ==============================================
        # TRANSACTIONS
        # ==============================================

        await database.transactions.create_index("UpdatedAt", name="txn_updated_idx")
        await database.transactions.create_index("UserId", name="txn_user_idx")
        await database.transactions.create_index("Status", name="txn_status_idx")
        logger.debug("Created indexes on transactions")

        # ==============================================
        # PAYOUT REQUESTS
        # ==============================================

        await database.payout_requests.create_index("status", name="payout_status_idx")
        await database.payout_requests.create_index(
            [("createdAt", -1)],
            name="payout_created_idx"
        )
        logger.debug("Created indexes on payout requests")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio

    async def main():
        database = Database()
        await database.connect()
        await create_indexes(database)
        await database.close()

    asyncio.run(main())
