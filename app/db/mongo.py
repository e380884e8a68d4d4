"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Wraps the Motor client in an explicitly constructed Database object
- One instance per process, created at startup and passed to services
- Health checks and retry logic
- Collection accessors for every dashboard collection
- GridFS bucket for gym images
"""

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
    AsyncIOMotorGridFSBucket,
)
from bson import ObjectId
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.config import Settings, settings as default_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """
    Handle on the document store.

    Constructed once in the application lifespan and stored on
    ``app.state.database``; services receive collections from it.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self, max_retries: int = 3, retry_delay: float = 2):
        """
        Establishes connection to MongoDB with retry logic.
        Called during application startup.
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
                )

                client = AsyncIOMotorClient(
                    self.config.MONGODB_URL,
                    maxPoolSize=50,
                    minPoolSize=5,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    retryWrites=True,
                    retryReads=True,
                )

                # Verify connection
                await client.admin.command("ping")

                self._client = client
                self._database = client[self.config.MONGODB_DB_NAME]
                logger.info(
                    f"✅ Successfully connected to MongoDB: {self.config.MONGODB_DB_NAME}"
                )
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
                )

                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2  # Exponential backoff
                else:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    async def check_health(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if self._client is None:
                logger.error("MongoDB client not initialized")
                return False

            await self._client.admin.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self._database

    def collection(self, name: str) -> AsyncIOMotorCollection:
        return self.db[name]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.USERS_COLLECTION)

    @property
    def gyms(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.GYMS_COLLECTION)

    @property
    def scans(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.SCANS_COLLECTION)

    @property
    def transactions(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.TRANSACTIONS_COLLECTION)

    @property
    def subscriptions(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.SUBSCRIPTIONS_COLLECTION)

    @property
    def payout_requests(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.PAYOUTS_COLLECTION)

    @property
    def auth_accounts(self) -> AsyncIOMotorCollection:
        return self.collection(self.config.AUTH_COLLECTION)

    def images_bucket(self) -> AsyncIOMotorGridFSBucket:
        return AsyncIOMotorGridFSBucket(self.db, bucket_name=self.config.IMAGES_BUCKET)


def document_filter(document_id: str) -> dict:
    """
    Filter matching a document by ``_id``.

    Ids arrive as strings; documents created by other tools may hold an
    ObjectId instead, so both forms are matched when the string is a valid one.
    """
    if ObjectId.is_valid(document_id):
        return {"_id": {"$in": [document_id, ObjectId(document_id)]}}
    return {"_id": document_id}
