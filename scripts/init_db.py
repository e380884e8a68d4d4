"""
Database initialization script - Gym Visa admin API

Run once to create indexes and the default subscription plans:
    python scripts/init_db.py

Existing plans are never overwritten; prices and durations are then edited
from the dashboard.
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from app.db.indexes import create_indexes
from app.db.mongo import Database
from utils.constants import SUBSCRIPTION_PREMIUM, SUBSCRIPTION_STANDARD

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_PLANS = [
    {"SubscriptionID": SUBSCRIPTION_STANDARD, "name": SUBSCRIPTION_STANDARD, "price": "3000", "SubscriptionDays": "30"},
    {"SubscriptionID": SUBSCRIPTION_PREMIUM, "name": SUBSCRIPTION_PREMIUM, "price": "5000", "SubscriptionDays": "30"},
]


async def seed_plans(database: Database) -> int:
    """Inserts missing default plans. Returns how many were created."""
    created = 0
    for plan in DEFAULT_PLANS:
        result = await database.subscriptions.update_one(
            {"_id": plan["SubscriptionID"]},
            {"$setOnInsert": plan},
            upsert=True
        )
        if result.upserted_id:
            logger.info(f"  ✅ {plan['name']} plan created")
            created += 1
        else:
            logger.info(f"  ℹ️  {plan['name']} plan already exists")
    return created


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  Gym Visa Database Setup")
    logger.info("=" * 60 + "\n")

    database = Database()
    await database.connect()

    try:
        await create_indexes(database)

        logger.info("\n📋 Seeding subscription plans...")
        await seed_plans(database)

        logger.info("\n🔍 Verifying indexes...")
        for name, collection in [
            ("auth accounts", database.auth_accounts),
            ("users", database.users),
            ("scans", database.scans),
            ("transactions", database.transactions),
            ("payout requests", database.payout_requests),
        ]:
            indexes = await collection.index_information()
            logger.info(f"\n  {name}:")
            for idx_name in indexes.keys():
                if idx_name != "_id_":
                    logger.info(f"    ✅ {idx_name}")

        logger.info(f"\n📊 Current documents:")
        logger.info(f"  Users: {await database.users.count_documents({})}")
        logger.info(f"  Gyms: {await database.gyms.count_documents({})}")
        logger.info(f"  Subscription plans: {await database.subscriptions.count_documents({})}")

        logger.info("\n✅ Database initialization complete!")

    except Exception as e:
        logger.error(f"\n❌ Error: {e}")
        raise

    finally:
        await database.close()

    logger.info("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
