"""
MongoDB Service - persistence for Profile aggregates.

Collection in this database:
1. profiles - one document per account with CVs, photos and projects embedded

WHY one document?
- Every lifecycle operation reads the aggregate, changes it, and writes it
  back with a single replace_one, which MongoDB applies atomically
- A ``version`` field turns that write into a compare-and-swap so two
  processes editing the same profile cannot both win
"""

import logging
from typing import Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from hirehub.core.errors import ConcurrentUpdateError
from hirehub.db.mongodb import get_collection, COLLECTIONS
from hirehub.models.profile import Profile

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert between Mongo documents and the aggregate model
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to a dict the Profile model accepts."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def to_document(profile: Profile) -> dict:
    """Convert a Profile to a MongoDB document (without _id)."""
    return profile.model_dump(exclude={"id"})


# ============================================================
# PROFILES COLLECTION
# ============================================================

class ProfileRepository:
    """
    Handles profile aggregate storage.
    Reads and writes whole documents; never patches embedded arrays in place.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self.collection: Collection = (
            collection if collection is not None else get_collection(COLLECTIONS["profiles"])
        )

    def ensure_indexes(self) -> None:
        """One profile per account."""
        self.collection.create_index("account_id", unique=True)

    def find_by_account(self, account_id: str) -> Optional[Profile]:
        doc = self.collection.find_one({"account_id": account_id})
        return Profile.model_validate(serialize_doc(doc)) if doc else None

    def insert(self, profile: Profile) -> Profile:
        """
        Insert a new profile and return it with its id set.

        If another request created the profile first, the stored one is
        returned instead.
        """
        profile.version = 0
        try:
            result = self.collection.insert_one(to_document(profile))
        except DuplicateKeyError:
            logger.info("Profile already created concurrently account_id=%s", profile.account_id)
            existing = self.find_by_account(profile.account_id)
            if existing is None:
                raise
            return existing
        profile.id = str(result.inserted_id)
        logger.info("Created profile id=%s account_id=%s", profile.id, profile.account_id)
        return profile

    def save(self, profile: Profile) -> Profile:
        """
        Replace the stored document if nobody else saved since it was read.

        Raises:
            ConcurrentUpdateError: the stored version no longer matches
        """
        if profile.id is None:
            return self.insert(profile)

        expected = profile.version
        doc = to_document(profile)
        doc["version"] = expected + 1
        result = self.collection.replace_one(
            {"_id": ObjectId(profile.id), "version": expected},
            doc,
        )
        if result.matched_count == 0:
            raise ConcurrentUpdateError()
        profile.version = expected + 1
        return profile
