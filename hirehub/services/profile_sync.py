"""
Profile Sync Service - keeps Account and Profile identity fields aligned.

display_name and email exist in both stores. Whichever side the user edits
is the primary write and must succeed; the copy on the other side is best
effort and a failure there is logged, not surfaced.
"""

import logging
from typing import Dict, Optional, Union

from fastapi import Depends

from hirehub.core.errors import NotFound, SyncWarning, Unauthorized
from hirehub.models.account import Account
from hirehub.models.profile import Profile
from hirehub.schemas.schemas import AccountUpdate, AccountView, ProfileUpdate, ProfileView
from hirehub.services.asset_manager import ProfileAssetManager, get_asset_manager
from hirehub.services.views import profile_view

logger = logging.getLogger(__name__)

SYNCED_FIELDS = ("display_name", "email")


def sync_identity(source: Union[Account, Profile], target: Union[Account, Profile]) -> Dict[str, str]:
    """Copy the synced fields from source onto target; return what changed."""
    changed = {}
    for field in SYNCED_FIELDS:
        value = getattr(source, field)
        if getattr(target, field) != value:
            setattr(target, field, value)
            changed[field] = value
    return changed


class ProfileSyncService:
    def __init__(self, assets: ProfileAssetManager):
        self.assets = assets

    @property
    def accounts(self):
        return self.assets.accounts

    async def update_account(self, account_id: str, update: AccountUpdate) -> AccountView:
        """Account-management path: account write first, profile copy second."""
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise Unauthorized()

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(account, field, str(value))
        self.accounts.save(account)

        if changes:
            try:
                await self.assets.mutate_profile(account_id, lambda profile: sync_identity(account, profile))
            except NotFound:
                # no profile yet, it is seeded from the account when created
                pass
            except Exception as exc:
                logger.warning(
                    "%s: profile sync after account update failed account_id=%s: %s",
                    SyncWarning.__name__, account_id, exc,
                )

        logger.info("Updated account account_id=%s fields=%s", account_id, sorted(changes))
        return AccountView(id=account.id, display_name=account.display_name, email=account.email)

    async def update_profile_details(self, account_id: str, update: ProfileUpdate) -> ProfileView:
        """Profile-management path: profile write first, account copy second."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)

        def apply_details(profile: Profile) -> bool:
            identity_before = {field: getattr(profile, field) for field in SYNCED_FIELDS}
            for field, value in changes.items():
                setattr(profile, field, str(value))
            return any(getattr(profile, field) != identity_before[field] for field in SYNCED_FIELDS)

        profile, identity_changed = await self.assets.mutate_profile(
            account_id, apply_details, create_missing=True
        )
        logger.info("Updated profile account_id=%s fields=%s", account_id, sorted(changes))

        if identity_changed:
            self._copy_to_account(account_id, profile)
        return profile_view(profile, self.assets.url_for)

    def _copy_to_account(self, account_id: str, profile: Profile) -> None:
        try:
            account: Optional[Account] = self.accounts.find_by_id(account_id)
            if account is None:
                raise NotFound("Account not found")
            if sync_identity(profile, account):
                self.accounts.save(account)
        except Exception as exc:
            logger.warning(
                "%s: account sync after profile update failed account_id=%s: %s",
                SyncWarning.__name__, account_id, exc,
            )


def get_sync_service(assets: ProfileAssetManager = Depends(get_asset_manager)) -> ProfileSyncService:
    """FastAPI dependency - shares the asset manager singleton."""
    return ProfileSyncService(assets)
