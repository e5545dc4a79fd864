"""
Asset Lifecycle Manager - CVs and profile photos.

Every operation follows the same shape:
1. read the profile aggregate
2. zero or more object store calls
3. one aggregate write

Ordering between the two stores:
- create: object first, record second. A failure in between leaves an
  orphaned object (logged for offline reconciliation), never a record
  pointing at a missing object.
- delete: record first, object second. The object delete is best effort;
  its failure is logged and the caller still sees success.

Writes for one account are serialized by an in-process lock, and the
aggregate's version check rejects writes that raced with another process;
those are re-read and re-applied up to ``profile_write_attempts`` times.
"""

import asyncio
import logging
import weakref
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from hirehub.core.config import Settings, get_settings
from hirehub.core.errors import ConcurrentUpdateError, NotFound, SyncWarning, Unauthorized
from hirehub.models.profile import CVAsset, PhotoAsset, Profile
from hirehub.schemas.schemas import AvatarUploadResponse, CVView, PhotoView, ProfileView
from hirehub.services.mongo_service import ProfileRepository
from hirehub.services.object_store import LocalObjectStore, ObjectStore, StoredObject
from hirehub.services.postgres_service import AccountRepository
from hirehub.services.primary_resolver import apply_photos, resolve_primary
from hirehub.services.views import cv_view, photo_view, profile_view
from hirehub.utils.file_upload import IncomingFile, validate_cv_file, validate_photo_file

logger = logging.getLogger(__name__)

T = TypeVar("T")

CV_CATEGORY = "cv"
PHOTO_CATEGORY = "photos"


class ProfileLocks:
    """One asyncio.Lock per account, dropped once nobody holds or awaits it."""

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def for_account(self, account_id: str) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[account_id] = lock
        return lock


class ProfileAssetManager:
    """Owns every mutation of a profile's CVs and photos."""

    def __init__(
        self,
        profiles: ProfileRepository,
        accounts: AccountRepository,
        store: ObjectStore,
        settings: Optional[Settings] = None,
        locks: Optional[ProfileLocks] = None,
    ):
        self.profiles = profiles
        self.accounts = accounts
        self.store = store
        self.settings = settings or get_settings()
        self.locks = locks or ProfileLocks()

    def url_for(self, key: str) -> str:
        return self.store.url_for(key)

    # ============================================================
    # Aggregate helpers (shared with ProjectService and ProfileSyncService)
    # ============================================================

    def _seed_profile(self, account_id: str) -> Profile:
        """Create the profile lazily from the account's name and email."""
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise Unauthorized()
        return self.profiles.insert(
            Profile(account_id=account_id, display_name=account.display_name, email=account.email)
        )

    def require_profile(self, account_id: str) -> Profile:
        profile = self.profiles.find_by_account(account_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    async def ensure_profile(self, account_id: str) -> Profile:
        async with self.locks.for_account(account_id):
            profile = self.profiles.find_by_account(account_id)
            if profile is None:
                profile = self._seed_profile(account_id)
            return profile

    async def mutate_profile(
        self,
        account_id: str,
        mutation: Callable[[Profile], T],
        *,
        create_missing: bool = False,
    ) -> Tuple[Profile, T]:
        """
        Apply ``mutation`` to a freshly read profile and save it.

        The mutation may raise (e.g. NotFound) to abort without writing. It
        must not do I/O: on a version conflict it runs again on a re-read
        profile.
        """
        attempts = self.settings.profile_write_attempts
        async with self.locks.for_account(account_id):
            for attempt in range(1, attempts + 1):
                profile = self.profiles.find_by_account(account_id)
                if profile is None:
                    if not create_missing:
                        raise NotFound("Profile not found")
                    profile = self._seed_profile(account_id)

                result = mutation(profile)
                try:
                    self.profiles.save(profile)
                except ConcurrentUpdateError:
                    if attempt >= attempts:
                        raise
                    logger.info(
                        "Profile version conflict account_id=%s attempt=%d, retrying", account_id, attempt
                    )
                    continue
                return profile, result
        raise ConcurrentUpdateError()

    async def store_files(
        self, account_id: str, files: List[IncomingFile], category: str
    ) -> List[StoredObject]:
        """
        Write each file to the object store, in order.

        If one write fails, the objects already written for this call are
        discarded and the error propagates; no record is created.
        """
        stored: List[StoredObject] = []
        try:
            for file in files:
                stored.append(
                    await self.store.put(
                        file.stream(),
                        file.content_type,
                        category=category,
                        owner_id=account_id,
                        original_filename=file.filename,
                    )
                )
        except BaseException:
            if stored:
                await asyncio.shield(self.discard_objects(account_id, [s.key for s in stored]))
            raise
        return stored

    async def commit_upload(
        self,
        account_id: str,
        keys: List[str],
        mutation: Callable[[Profile], T],
        *,
        create_missing: bool = True,
    ) -> Tuple[Profile, T]:
        """Record freshly stored objects; log them as orphans if the write fails."""
        try:
            return await self.mutate_profile(account_id, mutation, create_missing=create_missing)
        except BaseException as exc:
            logger.error(
                "Profile write failed after object write account_id=%s orphaned_keys=%s "
                "(left for offline reconciliation): %r",
                account_id, keys, exc,
            )
            raise

    async def discard_objects(self, account_id: str, keys: Iterable[str]) -> None:
        """
        Best-effort delete. Each key is attempted independently; failures
        are logged and never raised.
        """
        for key in keys:
            if not key:
                continue
            try:
                await self.store.delete(self.store.key_from_url(key))
            except Exception as exc:
                logger.warning(
                    "%s: object delete failed account_id=%s key=%s: %s",
                    SyncWarning.__name__, account_id, key, exc,
                )

    # ============================================================
    # Profile
    # ============================================================

    async def get_profile(self, account_id: str) -> ProfileView:
        return profile_view(self.require_profile(account_id), self.url_for)

    # ============================================================
    # CVs
    # ============================================================

    async def list_cvs(self, account_id: str) -> List[CVView]:
        profile = self.profiles.find_by_account(account_id)
        if profile is None:
            return []
        return [cv_view(cv, self.url_for) for cv in profile.cvs]

    async def upload_cv(
        self,
        account_id: str,
        file: IncomingFile,
        display_name: Optional[str] = None,
        set_primary: bool = False,
    ) -> CVView:
        validate_cv_file(file, self.settings)
        await self.ensure_profile(account_id)

        stored = (await self.store_files(account_id, [file], CV_CATEGORY))[0]
        name = (display_name or "").strip() or file.filename

        def add_cv(profile: Profile) -> CVAsset:
            cv = CVAsset(
                display_name=name,
                original_file_name=file.filename,
                storage_key=stored.key,
                size_bytes=stored.size_bytes,
                is_primary=not profile.cvs or set_primary,
            )
            cvs = profile.cvs + [cv]
            profile.cvs = resolve_primary(cvs, promote_id=cv.id) if cv.is_primary else cvs
            return cv

        _, cv = await self.commit_upload(account_id, [stored.key], add_cv)
        logger.info("Uploaded CV account_id=%s cv_id=%s primary=%s", account_id, cv.id, cv.is_primary)
        return cv_view(cv, self.url_for)

    async def set_primary_cv(self, account_id: str, cv_id: str) -> None:
        def promote_cv(profile: Profile) -> None:
            if profile.find_cv(cv_id) is None:
                raise NotFound("CV not found")
            profile.cvs = resolve_primary(profile.cvs, promote_id=cv_id)

        await self.mutate_profile(account_id, promote_cv)

    async def delete_cv(self, account_id: str, cv_id: str) -> None:
        def remove_cv(profile: Profile) -> CVAsset:
            removed = profile.find_cv(cv_id)
            if removed is None:
                raise NotFound("CV not found")
            remaining = [cv for cv in profile.cvs if cv.id != cv_id]
            profile.cvs = resolve_primary(remaining, removed=removed)
            return removed

        _, removed = await self.mutate_profile(account_id, remove_cv)
        logger.info("Deleted CV account_id=%s cv_id=%s", account_id, cv_id)
        await self.discard_objects(account_id, [removed.storage_key])

    # ============================================================
    # Profile photos
    # ============================================================

    async def list_photos(self, account_id: str) -> List[PhotoView]:
        profile = self.profiles.find_by_account(account_id)
        if profile is None:
            return []
        return [photo_view(photo, self.url_for) for photo in profile.photos]

    async def upload_photo(
        self,
        account_id: str,
        file: IncomingFile,
        set_primary: bool = False,
        display_name: Optional[str] = None,
    ) -> AvatarUploadResponse:
        validate_photo_file(file, self.settings)
        await self.ensure_profile(account_id)

        stored = (await self.store_files(account_id, [file], PHOTO_CATEGORY))[0]
        name = (display_name or "").strip() or file.filename

        def add_photo(profile: Profile) -> PhotoAsset:
            photo = PhotoAsset(
                display_name=name,
                original_file_name=file.filename,
                storage_key=stored.key,
                size_bytes=stored.size_bytes,
                is_primary=not profile.photos or set_primary,
            )
            photos = profile.photos + [photo]
            if photo.is_primary:
                photos = resolve_primary(photos, promote_id=photo.id)
            apply_photos(profile, photos, self.url_for)
            return photo

        profile, photo = await self.commit_upload(account_id, [stored.key], add_photo)
        logger.info(
            "Uploaded photo account_id=%s photo_id=%s primary=%s", account_id, photo.id, photo.is_primary
        )
        return AvatarUploadResponse(
            avatar_url=profile.avatar_url,
            photo=photo_view(photo, self.url_for),
            profile=profile_view(profile, self.url_for),
        )

    async def set_primary_photo(self, account_id: str, photo_id: str) -> None:
        def promote_photo(profile: Profile) -> None:
            if profile.find_photo(photo_id) is None:
                raise NotFound("Profile photo not found")
            apply_photos(profile, resolve_primary(profile.photos, promote_id=photo_id), self.url_for)

        await self.mutate_profile(account_id, promote_photo)

    async def delete_photo(self, account_id: str, photo_id: str) -> None:
        def remove_photo(profile: Profile) -> PhotoAsset:
            removed = profile.find_photo(photo_id)
            if removed is None:
                raise NotFound("Profile photo not found")
            remaining = [p for p in profile.photos if p.id != photo_id]
            if apply_photos(profile, resolve_primary(remaining, removed=removed), self.url_for):
                logger.info("Avatar changed account_id=%s avatar_url=%r", account_id, profile.avatar_url)
            return removed

        _, removed = await self.mutate_profile(account_id, remove_photo)
        logger.info("Deleted photo account_id=%s photo_id=%s", account_id, photo_id)
        await self.discard_objects(account_id, [removed.storage_key])


# Singleton instance (the lock registry must be shared by all requests)
_asset_manager: ProfileAssetManager = None


def get_asset_manager() -> ProfileAssetManager:
    """Get or create the asset manager (singleton pattern)"""
    global _asset_manager
    if _asset_manager is None:
        settings = get_settings()
        _asset_manager = ProfileAssetManager(
            profiles=ProfileRepository(),
            accounts=AccountRepository(),
            store=LocalObjectStore.from_settings(settings),
            settings=settings,
        )
    return _asset_manager
