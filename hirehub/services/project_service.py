"""
Project Service - portfolio projects and their files.

Projects live inside the profile aggregate and are addressed by their
generated id. A project needs either at least one file or an external
link; the platform is inferred from the link when not given.
"""

import logging
from typing import List, Optional
from urllib.parse import urlparse

from fastapi import Depends

from hirehub.core.errors import NotFound, ValidationError
from hirehub.models.profile import Profile, Project, ProjectFile, ProjectPlatform
from hirehub.schemas.schemas import ProjectMetadata, ProjectUpdate, ProjectView
from hirehub.services.asset_manager import ProfileAssetManager, get_asset_manager
from hirehub.services.views import project_view, projects_newest_first
from hirehub.utils.file_upload import IncomingFile, classify_project_file, validate_project_files

logger = logging.getLogger(__name__)

PROJECT_CATEGORY = "projects"

# Host suffix -> platform
PLATFORM_HOSTS = {
    "github.com": ProjectPlatform.github,
    "behance.net": ProjectPlatform.behance,
    "dribbble.com": ProjectPlatform.dribbble,
}


def _clean_link(link: Optional[str]) -> Optional[str]:
    link = (link or "").strip()
    return link or None


def infer_platform(link: Optional[str], explicit: Optional[ProjectPlatform] = None) -> ProjectPlatform:
    """
    Pick the platform for a project.

    An explicit choice always wins. Otherwise known hosts (and their
    subdomains) map to their platform, any other link is a personal
    website and no link at all means the project is a file upload.
    """
    if explicit is not None:
        return ProjectPlatform(explicit)
    link = _clean_link(link)
    if link is None:
        return ProjectPlatform.file_upload

    parsed = urlparse(link if "://" in link else f"https://{link}")
    host = (parsed.hostname or "").lower()
    for suffix, platform in PLATFORM_HOSTS.items():
        if host == suffix or host.endswith("." + suffix):
            return platform
    return ProjectPlatform.personal_website


class ProjectService:
    """Create, edit and delete projects, reusing the asset manager's plumbing."""

    def __init__(self, assets: ProfileAssetManager):
        self.assets = assets

    @property
    def settings(self):
        return self.assets.settings

    def _require_project(self, profile: Profile, project_id: str) -> Project:
        project = profile.find_project(project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    def _build_files(self, files: List[IncomingFile], stored) -> List[ProjectFile]:
        return [
            ProjectFile(
                original_file_name=file.filename,
                storage_key=obj.key,
                size_bytes=obj.size_bytes,
                kind=classify_project_file(file.content_type),
            )
            for file, obj in zip(files, stored)
        ]

    # ============================================================
    # Reads
    # ============================================================

    async def list_projects(self, account_id: str) -> List[ProjectView]:
        profile = self.assets.profiles.find_by_account(account_id)
        if profile is None:
            return []
        return [project_view(p, self.assets.url_for) for p in projects_newest_first(profile.projects)]

    async def get_project(self, account_id: str, project_id: str) -> ProjectView:
        profile = self.assets.require_profile(account_id)
        return project_view(self._require_project(profile, project_id), self.assets.url_for)

    # ============================================================
    # Writes
    # ============================================================

    async def create_project(
        self, account_id: str, metadata: ProjectMetadata, files: List[IncomingFile]
    ) -> ProjectView:
        title = (metadata.title or "").strip()
        if not title:
            raise ValidationError("Project title is required")
        link = _clean_link(metadata.project_link)
        if not files and link is None:
            raise ValidationError("Please add either a project link or upload files")

        validate_project_files(files, self.settings)
        await self.assets.ensure_profile(account_id)

        stored = await self.assets.store_files(account_id, files, PROJECT_CATEGORY)
        project_files = self._build_files(files, stored)

        def add_project(profile: Profile) -> Project:
            project = Project(
                title=title,
                description=(metadata.description or "").strip(),
                category=(metadata.category or "").strip(),
                platform=infer_platform(link, metadata.platform).value,
                is_featured=metadata.is_featured,
                external_link=link,
                files=project_files,
            )
            profile.projects = profile.projects + [project]
            return project

        _, project = await self.assets.commit_upload(account_id, [s.key for s in stored], add_project)
        logger.info(
            "Created project account_id=%s project_id=%s files=%d", account_id, project.id, len(project_files)
        )
        return project_view(project, self.assets.url_for)

    async def update_project(self, account_id: str, project_id: str, update: ProjectUpdate) -> ProjectView:
        changes = update.model_dump(exclude_unset=True)
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Project title cannot be empty")

        def edit_project(profile: Profile) -> Project:
            project = self._require_project(profile, project_id)
            if changes.get("title") is not None:
                project.title = changes["title"].strip()
            if "description" in changes:
                project.description = (changes["description"] or "").strip()
            if "category" in changes:
                project.category = (changes["category"] or "").strip()
            if changes.get("is_featured") is not None:
                project.is_featured = changes["is_featured"]
            if "project_link" in changes:
                project.external_link = _clean_link(changes["project_link"])
            if "platform" in changes:
                # null asks for re-inference from the (possibly new) link
                project.platform = infer_platform(project.external_link, changes["platform"]).value
            return project

        _, project = await self.assets.mutate_profile(account_id, edit_project)
        logger.info("Updated project account_id=%s project_id=%s fields=%s", account_id, project_id, sorted(changes))
        return project_view(project, self.assets.url_for)

    async def add_files_to_project(
        self, account_id: str, project_id: str, files: List[IncomingFile]
    ) -> ProjectView:
        if not files:
            raise ValidationError("No files uploaded")
        validate_project_files(files, self.settings)

        # Fail before touching the store when the project does not exist
        self._require_project(self.assets.require_profile(account_id), project_id)

        stored = await self.assets.store_files(account_id, files, PROJECT_CATEGORY)
        project_files = self._build_files(files, stored)

        def attach(profile: Profile) -> Project:
            project = self._require_project(profile, project_id)
            project.files = project.files + project_files
            return project

        _, project = await self.assets.commit_upload(
            account_id, [s.key for s in stored], attach, create_missing=False
        )
        logger.info(
            "Added files account_id=%s project_id=%s count=%d", account_id, project_id, len(project_files)
        )
        return project_view(project, self.assets.url_for)

    async def delete_project_file(self, account_id: str, project_id: str, file_id: str) -> None:
        def detach(profile: Profile) -> ProjectFile:
            project = self._require_project(profile, project_id)
            removed = project.find_file(file_id)
            if removed is None:
                raise NotFound("File not found")
            project.files = [f for f in project.files if f.id != file_id]
            return removed

        _, removed = await self.assets.mutate_profile(account_id, detach)
        logger.info("Deleted project file account_id=%s project_id=%s file_id=%s", account_id, project_id, file_id)
        await self.assets.discard_objects(account_id, [removed.storage_key])

    async def delete_project(self, account_id: str, project_id: str) -> None:
        def remove_project(profile: Profile) -> Project:
            removed = self._require_project(profile, project_id)
            profile.projects = [p for p in profile.projects if p.id != project_id]
            return removed

        _, removed = await self.assets.mutate_profile(account_id, remove_project)
        logger.info(
            "Deleted project account_id=%s project_id=%s files=%d", account_id, project_id, len(removed.files)
        )
        await self.assets.discard_objects(account_id, [f.storage_key for f in removed.files])


def get_project_service(assets: ProfileAssetManager = Depends(get_asset_manager)) -> ProjectService:
    """FastAPI dependency - shares the asset manager singleton."""
    return ProjectService(assets)
