"""
Project Routes

GET /projects - List projects (newest first)
POST /projects - Create project (multipart: metadata fields + files)
GET /projects/{project_id} - Get project
PUT /projects/{project_id} - Update project metadata
DELETE /projects/{project_id} - Delete project and its files
POST /projects/{project_id}/files - Add files to a project
DELETE /projects/{project_id}/files/{file_id} - Remove one file
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from hirehub.core.auth import get_current_account_id
from hirehub.models.profile import ProjectPlatform
from hirehub.schemas.schemas import MessageResponse, ProjectMetadata, ProjectUpdate, ProjectView
from hirehub.services.project_service import ProjectService, get_project_service
from hirehub.utils.file_upload import read_uploads

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectView])
async def list_projects(
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.list_projects(account_id)


@router.post("", response_model=ProjectView, status_code=201)
async def create_project(
    title: str = Form(""),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    platform: Optional[ProjectPlatform] = Form(None),
    is_featured: bool = Form(False),
    project_link: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None, description="Images or documents, max 10"),
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    """
    Create a project.

    Needs a title and either a project link or at least one file. The
    platform is inferred from the link when not given.
    """
    metadata = ProjectMetadata(
        title=title,
        description=description,
        category=category,
        platform=platform,
        is_featured=is_featured,
        project_link=project_link,
    )
    incoming = await read_uploads(files)
    return await projects.create_project(account_id, metadata, incoming)


@router.get("/{project_id}", response_model=ProjectView)
async def get_project(
    project_id: str,
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    return await projects.get_project(account_id, project_id)


@router.put("/{project_id}", response_model=ProjectView)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    """Update project metadata. Only provided fields are updated; files are untouched."""
    return await projects.update_project(account_id, project_id, data)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    await projects.delete_project(account_id, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post("/{project_id}/files", response_model=ProjectView)
async def add_project_files(
    project_id: str,
    files: List[UploadFile] = File(...),
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    incoming = await read_uploads(files)
    return await projects.add_files_to_project(account_id, project_id, incoming)


@router.delete("/{project_id}/files/{file_id}", response_model=MessageResponse)
async def delete_project_file(
    project_id: str,
    file_id: str,
    account_id: str = Depends(get_current_account_id),
    projects: ProjectService = Depends(get_project_service),
):
    await projects.delete_project_file(account_id, project_id, file_id)
    return MessageResponse(message="File deleted successfully")
