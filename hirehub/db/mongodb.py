"""
MongoDB Connection Utility

MongoDB stores:
- Profile aggregates (one document per account holding CVs, photos and
  projects with their files)

WHY MongoDB for these?
- The whole aggregate is read and written as one document
- A single replace_one is atomic, so primary flags, avatarUrl and the
  asset lists never land half-written
- No joins needed: each profile is self-contained
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from hirehub.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        # tz_aware so stored datetimes compare with freshly created ones
        _client = MongoClient(get_settings().mongodb_uri, tz_aware=True)
    return _client


def get_mongo_db() -> Database:
    """Get the profile documents database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we'll use:
    - profiles: Profile aggregates keyed by account_id
    """
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "profiles": "profiles",
}
