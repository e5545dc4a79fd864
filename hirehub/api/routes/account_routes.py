"""
Account Routes

PUT /accounts/me - Update own account (name/email synced to the profile)
"""

from fastapi import APIRouter, Depends

from hirehub.core.auth import get_current_account_id
from hirehub.schemas.schemas import AccountUpdate, AccountView
from hirehub.services.profile_sync import ProfileSyncService, get_sync_service

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.put("/me", response_model=AccountView)
async def update_account(
    data: AccountUpdate,
    account_id: str = Depends(get_current_account_id),
    sync: ProfileSyncService = Depends(get_sync_service),
):
    return await sync.update_account(account_id, data)
