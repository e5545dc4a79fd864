"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (what is persisted)
- Schemas: API contract (what client sends/receives)
"""

from hirehub.schemas.schemas import (
    AccountUpdate,
    AccountView,
    AvatarUploadResponse,
    CVView,
    ErrorResponse,
    MessageResponse,
    PhotoView,
    ProfileUpdate,
    ProfileView,
    ProjectFileView,
    ProjectMetadata,
    ProjectUpdate,
    ProjectView,
)

__all__ = [
    "AccountUpdate",
    "AccountView",
    "AvatarUploadResponse",
    "CVView",
    "ErrorResponse",
    "MessageResponse",
    "PhotoView",
    "ProfileUpdate",
    "ProfileView",
    "ProjectFileView",
    "ProjectMetadata",
    "ProjectUpdate",
    "ProjectView",
]
