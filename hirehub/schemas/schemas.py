"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Every view carries absolute URLs (never bare storage keys) and
human-readable sizes.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import date, datetime

from hirehub.models.profile import ProjectPlatform


# ============================================================
# CV SCHEMAS
# ============================================================

class CVView(BaseModel):
    id: str
    name: str
    file_name: str
    uploaded_date: date
    file_size: str
    size_bytes: int
    is_primary: bool
    format: str
    download_url: str


# ============================================================
# PHOTO SCHEMAS
# ============================================================

class PhotoView(BaseModel):
    id: str
    name: str
    file_name: str
    uploaded_at: datetime
    file_size: str
    size_bytes: int
    is_primary: bool
    url: str


# ============================================================
# PROJECT SCHEMAS
# ============================================================

class ProjectFileView(BaseModel):
    id: str
    file_name: str
    file_type: str
    uploaded_at: datetime
    file_size: str
    size_bytes: int
    url: str


class ProjectView(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str = ""
    platform: str
    is_featured: bool = False
    project_link: Optional[str] = None
    files: List[ProjectFileView] = []
    created_at: datetime


class ProjectMetadata(BaseModel):
    """Scalar fields supplied when creating a project."""
    title: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    platform: Optional[ProjectPlatform] = None
    is_featured: bool = False
    project_link: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Partial update - only keys present in the request are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    platform: Optional[ProjectPlatform] = None
    is_featured: Optional[bool] = None
    project_link: Optional[str] = None


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileView(BaseModel):
    id: str
    account_id: str
    display_name: str
    email: str
    phone: str = ""
    headline: str = ""
    location: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    date_of_birth: str = ""
    nationality: str = ""
    avatar_url: str = ""
    cv_uploaded: bool = False
    cvs: List[CVView] = []
    photos: List[PhotoView] = []
    projects: List[ProjectView] = []


class ProfileUpdate(BaseModel):
    """Profile-management path. display_name/email changes sync to the account."""
    display_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    date_of_birth: Optional[str] = None
    nationality: Optional[str] = None


class AvatarUploadResponse(BaseModel):
    avatar_url: str
    photo: PhotoView
    profile: ProfileView


# ============================================================
# ACCOUNT SCHEMAS
# ============================================================

class AccountUpdate(BaseModel):
    """Account-management path. Changes sync to the profile."""
    display_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None


class AccountView(BaseModel):
    id: str
    display_name: str
    email: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorBody(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
