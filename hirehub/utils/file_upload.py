"""
File Upload Utility - read and validate uploaded asset files.

Rules:
- CVs: PDF, DOC or DOCX, max 10MB
- Profile photos: any image/* type, max 5MB
- Project files: images and office documents, max 10MB each, 10 per request

All checks run before anything is written to the object store.
"""

import io
from typing import Iterable, List, Optional

from fastapi import UploadFile
from pydantic import BaseModel

from hirehub.core.config import Settings
from hirehub.core.errors import FileTooLarge, InvalidFileType, ValidationError
from hirehub.models.profile import ProjectFileKind


class IncomingFile(BaseModel):
    """An upload fully read into memory, detached from the HTTP request."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def stream(self) -> io.BytesIO:
        return io.BytesIO(self.data)


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_upload(file: UploadFile) -> IncomingFile:
    """
    Read a FastAPI UploadFile.

    Raises:
        ValidationError if no filename was sent
    """
    if not file.filename:
        raise ValidationError("No file uploaded")

    content = await file.read()
    return IncomingFile(
        filename=file.filename,
        content_type=(file.content_type or "application/octet-stream").lower(),
        data=content,
    )


async def read_uploads(files: Optional[Iterable[UploadFile]]) -> List[IncomingFile]:
    """Read every non-empty part of a multi-file field."""
    result = []
    for file in files or []:
        if file is None or not file.filename:
            continue
        result.append(await read_upload(file))
    return result


def _mb(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):g}MB"


def validate_cv_file(file: IncomingFile, settings: Settings) -> None:
    if file.content_type not in settings.cv_allowed_mime_types:
        raise InvalidFileType("Only PDF, DOC, and DOCX files are allowed for CVs")
    if file.size > settings.cv_max_bytes:
        raise FileTooLarge(f"File too large. Maximum size: {_mb(settings.cv_max_bytes)}")


def validate_photo_file(file: IncomingFile, settings: Settings) -> None:
    if not file.content_type.startswith("image/"):
        raise InvalidFileType("Only image files are allowed for profile photos")
    if file.size > settings.photo_max_bytes:
        raise FileTooLarge(f"File too large. Maximum size: {_mb(settings.photo_max_bytes)}")


def validate_project_files(files: List[IncomingFile], settings: Settings) -> None:
    if len(files) > settings.max_project_files:
        raise ValidationError(f"At most {settings.max_project_files} files can be uploaded at once")
    for file in files:
        if file.content_type not in settings.project_allowed_mime_types:
            raise InvalidFileType(
                f"Invalid file type '{file.content_type}'. Only images and documents are allowed."
            )
        if file.size > settings.project_file_max_bytes:
            raise FileTooLarge(
                f"File '{file.filename}' too large. Maximum size: {_mb(settings.project_file_max_bytes)}"
            )


def classify_project_file(content_type: str) -> ProjectFileKind:
    """Images are shown inline, everything else is a document."""
    if content_type.startswith("image/"):
        return ProjectFileKind.image
    return ProjectFileKind.document


def get_supported_formats(settings: Settings) -> dict:
    """Get info about supported CV file formats."""
    return {
        "supported_formats": [
            {"extension": ".pdf", "name": "PDF"},
            {"extension": ".doc", "name": "Word 97-2003 Document"},
            {"extension": ".docx", "name": "Word Document"},
        ],
        "max_size_mb": settings.cv_max_bytes // (1024 * 1024)
    }
