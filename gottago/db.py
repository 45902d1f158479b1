import logging
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from gottago import settings

logger = logging.getLogger(__name__)

# Global client and database handle
_client: Optional[AsyncIOMotorClient] = None
db = None


async def connect(*args, **kwargs):
    """
    Connect to MongoDB and keep the client and database handle in module globals.

    A missing MONGO_URI is not fatal: the API keeps serving the built-in
    sample bathrooms and rejects writes.
    """
    global _client, db
    uri = settings.mongo_uri()
    if not uri:
        logger.warning(
            "MONGO_URI is not set (looked for .env at %s, exists=%s); running on sample data",
            settings.env_path,
            settings.env_path.exists(),
        )
        return

    try:
        # Atlas (mongodb+srv) needs the certifi CA bundle; local servers run without TLS
        if uri.startswith("mongodb+srv://"):
            _client = AsyncIOMotorClient(uri, tlsCAFile=certifi.where())
        else:
            _client = AsyncIOMotorClient(uri)
        db = _client[settings.db_name()]

        # connection check
        await db.command("ping")
        logger.info("Connected to MongoDB database %s", settings.db_name())
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        _client = None
        db = None


async def close():
    """Close the MongoDB connection."""
    global _client, db
    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None
    db = None
