"""
View transformation - turn persisted records into API views.

Storage keys never leave this module: every view gets an absolute URL from
the object store and a human-readable size string.
"""

from typing import Callable, List

from hirehub.models.profile import CVAsset, PhotoAsset, Profile, Project, ProjectFile
from hirehub.schemas.schemas import (
    CVView,
    PhotoView,
    ProfileView,
    ProjectFileView,
    ProjectView,
)
from hirehub.services.primary_resolver import avatar_url_for
from hirehub.utils.file_upload import get_file_extension

UrlFor = Callable[[str], str]

KB = 1024
MB = 1024 * 1024


def human_size(size_bytes: int) -> str:
    """
    Examples:
        512       -> "512 B"
        2048      -> "2 KB"
        2202010   -> "2.10 MB"
    """
    if size_bytes < KB:
        return f"{size_bytes} B"
    if size_bytes < MB:
        return f"{round(size_bytes / KB)} KB"
    return f"{size_bytes / MB:.2f} MB"


def file_format(filename: str) -> str:
    """Upper-cased extension used as the CV format label, PDF when unknown."""
    ext = get_file_extension(filename).lstrip(".").upper()
    return ext or "PDF"


def cv_view(cv: CVAsset, url_for: UrlFor) -> CVView:
    return CVView(
        id=cv.id,
        name=cv.display_name or cv.original_file_name,
        file_name=cv.original_file_name,
        uploaded_date=cv.uploaded_at.date(),
        file_size=human_size(cv.size_bytes),
        size_bytes=cv.size_bytes,
        is_primary=cv.is_primary,
        format=file_format(cv.original_file_name),
        download_url=url_for(cv.storage_key),
    )


def photo_view(photo: PhotoAsset, url_for: UrlFor) -> PhotoView:
    return PhotoView(
        id=photo.id,
        name=photo.display_name or photo.original_file_name,
        file_name=photo.original_file_name,
        uploaded_at=photo.uploaded_at,
        file_size=human_size(photo.size_bytes),
        size_bytes=photo.size_bytes,
        is_primary=photo.is_primary,
        url=url_for(photo.storage_key),
    )


def project_file_view(file: ProjectFile, url_for: UrlFor) -> ProjectFileView:
    return ProjectFileView(
        id=file.id,
        file_name=file.original_file_name,
        file_type=file.kind,
        uploaded_at=file.uploaded_at,
        file_size=human_size(file.size_bytes),
        size_bytes=file.size_bytes,
        url=url_for(file.storage_key),
    )


def project_view(project: Project, url_for: UrlFor) -> ProjectView:
    return ProjectView(
        id=project.id,
        title=project.title,
        description=project.description or "",
        category=project.category or "",
        platform=project.platform,
        is_featured=project.is_featured,
        project_link=project.external_link or None,
        files=[project_file_view(f, url_for) for f in project.files],
        created_at=project.created_at,
    )


def projects_newest_first(projects: List[Project]) -> List[Project]:
    return sorted(projects, key=lambda p: p.created_at, reverse=True)


def profile_view(profile: Profile, url_for: UrlFor) -> ProfileView:
    return ProfileView(
        id=profile.id or "",
        account_id=profile.account_id,
        display_name=profile.display_name,
        email=profile.email,
        phone=profile.phone,
        headline=profile.headline,
        location=profile.location,
        address=profile.address,
        city=profile.city,
        state=profile.state,
        zip_code=profile.zip_code,
        country=profile.country,
        date_of_birth=profile.date_of_birth,
        nationality=profile.nationality,
        avatar_url=avatar_url_for(profile.photos, url_for),
        cv_uploaded=profile.cv_uploaded,
        cvs=[cv_view(cv, url_for) for cv in profile.cvs],
        photos=[photo_view(p, url_for) for p in profile.photos],
        projects=[project_view(p, url_for) for p in projects_newest_first(profile.projects)],
    )
