"""
Profile Routes

GET /profile - Get own profile with CVs, photos and projects
PUT /profile - Update profile details (name/email synced to the account)
GET /profile/cvs - List CVs
GET /profile/cvs/formats - Get supported CV formats
POST /profile/cvs - Upload CV (PDF/DOC/DOCX)
POST /profile/cvs/{cv_id}/primary - Make a CV primary
DELETE /profile/cvs/{cv_id} - Delete CV
GET /profile/photos - List profile photos
POST /profile/photos - Upload profile photo
POST /profile/photos/{photo_id}/primary - Make a photo primary (updates avatar)
DELETE /profile/photos/{photo_id} - Delete profile photo
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from hirehub.core.auth import get_current_account_id
from hirehub.core.config import get_settings
from hirehub.schemas.schemas import (
    AvatarUploadResponse, CVView, MessageResponse, PhotoView, ProfileUpdate, ProfileView
)
from hirehub.services.asset_manager import ProfileAssetManager, get_asset_manager
from hirehub.services.profile_sync import ProfileSyncService, get_sync_service
from hirehub.utils.file_upload import get_supported_formats, read_upload

router = APIRouter(prefix="/profile", tags=["Profile"])


# ============================================================
# PROFILE
# ============================================================

@router.get("", response_model=ProfileView)
async def get_profile(
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    return await assets.get_profile(account_id)


@router.put("", response_model=ProfileView)
async def update_profile(
    data: ProfileUpdate,
    account_id: str = Depends(get_current_account_id),
    sync: ProfileSyncService = Depends(get_sync_service),
):
    """Update profile details. Only provided fields are updated."""
    return await sync.update_profile_details(account_id, data)


# ============================================================
# CVs
# ============================================================

@router.get("/cvs", response_model=List[CVView])
async def list_cvs(
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    return await assets.list_cvs(account_id)


@router.get("/cvs/formats")
async def get_cv_formats():
    """Get supported CV file formats."""
    return get_supported_formats(get_settings())


@router.post("/cvs", response_model=CVView, status_code=201)
async def upload_cv(
    file: UploadFile = File(..., description="CV file (PDF, DOC or DOCX)"),
    name: Optional[str] = Form(None),
    set_primary: bool = Form(False),
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    """
    Upload a CV.

    The first CV of a profile becomes primary automatically; later ones
    only when set_primary=true.
    """
    incoming = await read_upload(file)
    return await assets.upload_cv(account_id, incoming, display_name=name, set_primary=set_primary)


@router.post("/cvs/{cv_id}/primary", response_model=MessageResponse)
async def set_primary_cv(
    cv_id: str,
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    await assets.set_primary_cv(account_id, cv_id)
    return MessageResponse(message="Primary CV updated")


@router.delete("/cvs/{cv_id}", response_model=MessageResponse)
async def delete_cv(
    cv_id: str,
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    await assets.delete_cv(account_id, cv_id)
    return MessageResponse(message="CV deleted successfully")


# ============================================================
# PHOTOS
# ============================================================

@router.get("/photos", response_model=List[PhotoView])
async def list_photos(
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    return await assets.list_photos(account_id)


@router.post("/photos", response_model=AvatarUploadResponse, status_code=201)
async def upload_photo(
    file: UploadFile = File(..., description="Profile photo (any image type)"),
    set_primary: bool = Form(False),
    name: Optional[str] = Form(None),
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    """Upload a profile photo. The first photo (or set_primary=true) becomes the avatar."""
    incoming = await read_upload(file)
    return await assets.upload_photo(account_id, incoming, set_primary=set_primary, display_name=name)


@router.post("/photos/{photo_id}/primary", response_model=MessageResponse)
async def set_primary_photo(
    photo_id: str,
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    await assets.set_primary_photo(account_id, photo_id)
    return MessageResponse(message="Primary photo updated")


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
async def delete_photo(
    photo_id: str,
    account_id: str = Depends(get_current_account_id),
    assets: ProfileAssetManager = Depends(get_asset_manager),
):
    await assets.delete_photo(account_id, photo_id)
    return MessageResponse(message="Photo deleted successfully")
