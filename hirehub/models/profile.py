"""
Profile aggregate - the document stored once per account in MongoDB.

The aggregate owns three ordered asset collections:
- cvs:      uploaded CVs, exactly one primary when non-empty
- photos:   profile photos, exactly one primary when non-empty; the primary
            photo's URL is mirrored into avatar_url
- projects: portfolio items, each holding its own ordered list of files

List order is upload order. Re-election after a delete relies on it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_asset_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


class ProjectPlatform(str, Enum):
    github = "GitHub"
    behance = "Behance"
    dribbble = "Dribbble"
    personal_website = "Personal Website"
    other = "Other"
    file_upload = "File Upload"


class ProjectFileKind(str, Enum):
    image = "Project Image"
    document = "Project Document"


class StoredAsset(BaseModel):
    """Fields shared by every record backed by one stored object."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    original_file_name: str
    storage_key: str
    size_bytes: int = Field(ge=0)
    uploaded_at: datetime = Field(default_factory=utcnow)


class CVAsset(StoredAsset):
    id: str = Field(default_factory=lambda: new_asset_id("cv"))
    display_name: str
    is_primary: bool = False


class PhotoAsset(StoredAsset):
    id: str = Field(default_factory=lambda: new_asset_id("photo"))
    display_name: str
    is_primary: bool = False


class ProjectFile(StoredAsset):
    id: str = Field(default_factory=lambda: new_asset_id("file"))
    kind: ProjectFileKind


class Project(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: str = Field(default_factory=lambda: new_asset_id("project"))
    title: str
    description: str = ""
    category: str = ""
    platform: ProjectPlatform = ProjectPlatform.file_upload
    is_featured: bool = False
    external_link: Optional[str] = None
    files: List[ProjectFile] = []
    created_at: datetime = Field(default_factory=utcnow)

    def find_file(self, file_id: str) -> Optional[ProjectFile]:
        return next((f for f in self.files if f.id == file_id), None)


class Profile(BaseModel):
    # id is the Mongo _id (as string), None until first inserted
    id: Optional[str] = None
    account_id: str

    # Denormalized copies of the Account fields (kept in sync by profile_sync)
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

    # Derived from the primary photo, never edited directly
    avatar_url: str = ""

    cvs: List[CVAsset] = []
    photos: List[PhotoAsset] = []
    projects: List[Project] = []

    # Optimistic concurrency counter, bumped on every successful save
    version: int = 0

    @property
    def cv_uploaded(self) -> bool:
        return len(self.cvs) > 0

    def find_cv(self, cv_id: str) -> Optional[CVAsset]:
        return next((cv for cv in self.cvs if cv.id == cv_id), None)

    def find_photo(self, photo_id: str) -> Optional[PhotoAsset]:
        return next((p for p in self.photos if p.id == photo_id), None)

    def find_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)
