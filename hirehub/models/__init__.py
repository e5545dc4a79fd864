"""
Models module - internal data structures.

Difference from schemas:
- Models: what is persisted (Profile aggregate in MongoDB, Account in PostgreSQL)
- Schemas: API contract (views with resolved URLs and readable sizes)
"""

from hirehub.models.account import Account
from hirehub.models.profile import (
    CVAsset,
    PhotoAsset,
    Profile,
    Project,
    ProjectFile,
    ProjectFileKind,
    ProjectPlatform,
)

__all__ = [
    "Account",
    "CVAsset",
    "PhotoAsset",
    "Profile",
    "Project",
    "ProjectFile",
    "ProjectFileKind",
    "ProjectPlatform",
]
